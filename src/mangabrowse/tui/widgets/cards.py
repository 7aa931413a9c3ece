"""Manga card widgets.

MangaCardWidget renders one MangaCard as a styled tile. MangaGrid is the
scrollable grid the feed appends tiles to.
"""

from __future__ import annotations

from typing import Sequence

from rich.text import Text
from textual import events
from textual.containers import VerticalScroll
from textual.widgets import Static

from mangabrowse.models import MangaCard
from mangabrowse.telemetry import get_telemetry
from mangabrowse.tui.messages import CardSelected


def card_text(card: MangaCard) -> Text:
    """Build the Rich text shown inside a card tile."""
    text = Text()
    text.append(f"★ {card.score}", style="bold yellow")
    text.append("\n")
    text.append(card.title, style="bold")
    text.append("\n")
    text.append(f"{card.type} · {card.volumes}", style="dim")
    return text


class MangaCardWidget(Static):
    """A single manga tile. Posts CardSelected on click or Enter."""

    DEFAULT_CSS = """
    MangaCardWidget {
        height: 6;
        padding: 0 1;
        background: $surface;
        border: round $primary-background;
    }
    MangaCardWidget:hover {
        background: $primary-background;
    }
    MangaCardWidget:focus {
        border: round $accent;
    }
    """

    can_focus = True

    def __init__(self, card: MangaCard) -> None:
        self.card = card
        super().__init__(card_text(card), classes="manga-card")
        self.tooltip = card.title

    def on_click(self, event: events.Click) -> None:
        event.stop()
        get_telemetry().log.info(f"card clicked mal_id={self.card.mal_id} title={self.card.title!r}")
        self.post_message(CardSelected(self.card))

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            self.post_message(CardSelected(self.card))


class MangaGrid(VerticalScroll):
    """Grid container for card tiles. Appending never clears existing tiles."""

    DEFAULT_CSS = """
    MangaGrid {
        layout: grid;
        grid-size: 4;
        grid-gutter: 1 2;
        grid-rows: 6;
        height: 1fr;
    }
    MangaGrid.-error {
        layout: vertical;
    }
    MangaGrid .error-message {
        color: $error;
        text-style: bold;
        padding: 1 2;
    }
    """

    def append_cards(self, cards: Sequence[MangaCard]) -> None:
        self.remove_class("-error")
        if cards:
            self.mount_all([MangaCardWidget(card) for card in cards])

    def clear_cards(self) -> None:
        self.remove_class("-error")
        self.remove_children()

    def show_error(self, message: str) -> None:
        self.remove_children()
        self.add_class("-error")
        self.mount(Static(message, classes="error-message"))
