"""Detail pane showing the full record behind the selected card."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from mangabrowse.models import MangaCard


class DetailPane(Static):
    """Right-hand pane. Shows a placeholder until a card is selected."""

    DEFAULT_CSS = """
    DetailPane {
        width: 1fr;
        min-width: 30;
        max-width: 50;
        height: 1fr;
        padding: 1 2;
        border-left: solid $accent;
        overflow-y: auto;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="detail-pane")
        self.card: MangaCard | None = None

    def on_mount(self) -> None:
        self.show_placeholder()

    def show_placeholder(self) -> None:
        self.card = None
        self.update(Text("Select a manga to see its details.", style="dim italic"))

    def show_card(self, card: MangaCard) -> None:
        self.card = card
        text = Text()
        text.append(card.title, style="bold")
        text.append("\n\n")
        rows = [
            ("Score", card.score),
            ("Type", card.type),
            ("Volumes", card.volumes),
            ("Chapters", card.chapters),
            ("Status", card.status),
            ("MAL id", str(card.mal_id)),
        ]
        for label, value in rows:
            if value:
                text.append(f"{label:<9}", style="cyan")
                text.append(f"{value}\n")
        if card.url:
            text.append("\n")
            text.append(card.url, style=f"link {card.url}")
            text.append("\n")
        if card.synopsis:
            text.append("\n")
            text.append(card.synopsis, style="dim")
        self.update(text)
