"""Rich console rendering for the non-interactive CLI commands.

``ConsoleSink`` is a RenderSink that prints each page of cards as a Rich
table, so the CLI drives the same FeedController as the TUI.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.status import Status
from rich.table import Table

from mangabrowse.models import MangaCard


def truncate_text(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text at a word boundary.

    Args:
        text: Input text to potentially truncate.
        max_len: Maximum allowed length of the result.
        suffix: String to append when truncating.

    Returns:
        Original or truncated text.
    """
    if len(text) <= max_len:
        return text

    cutoff = max_len - len(suffix)
    if cutoff <= 0:
        return suffix[:max_len]

    space_idx = text.rfind(" ", 0, cutoff)
    if space_idx > 0:
        return text[:space_idx] + suffix
    return text[:cutoff] + suffix


class ConsoleSink:
    """Prints cards as numbered table rows, page by page."""

    def __init__(self, console: Console | None = None, title_width: int = 50) -> None:
        self.console = console or Console()
        self.title_width = title_width
        self.cards: list[MangaCard] = []
        self.count: int | None = None
        self.load_more_visible = False
        self.error: str | None = None
        self._status: Status | None = None

    def present(self, cards: Sequence[MangaCard]) -> None:
        start = len(self.cards)
        self.cards.extend(cards)
        if not cards:
            self.console.print("[dim]No manga found.[/dim]")
            return

        table = Table(show_header=start == 0, header_style="bold", expand=False)
        table.add_column("#", justify="right", style="dim", width=4)
        table.add_column("Title", style="bold", min_width=20)
        table.add_column("Score", justify="right", style="yellow", width=6)
        table.add_column("Type", width=12)
        table.add_column("Volumes", width=16)
        table.add_column("MAL id", justify="right", style="dim", width=7)
        for offset, card in enumerate(cards, start=start + 1):
            table.add_row(
                str(offset),
                truncate_text(card.title, self.title_width),
                card.score,
                card.type,
                card.volumes,
                str(card.mal_id),
            )
        self.console.print(table)

    def clear(self) -> None:
        self.cards = []
        self.error = None

    def set_load_more_visible(self, visible: bool) -> None:
        self.load_more_visible = visible

    def set_count(self, count: int) -> None:
        self.count = count

    def show_error(self, message: str) -> None:
        self.cards = []
        self.error = message
        self.console.print(f"[red]{message}[/red]")

    def set_loading(self, loading: bool) -> None:
        if loading and self._status is None:
            self._status = self.console.status("Loading manga...")
            self._status.start()
        elif not loading and self._status is not None:
            self._status.stop()
            self._status = None

    def summary(self) -> str:
        """One-line footer describing what was shown and what remains."""
        shown = len(self.cards)
        parts = [f"{shown} shown"]
        if self.count is not None:
            parts.append(f"{self.count:,} total")
        if self.load_more_visible:
            parts.append("more available (use --pages)")
        return " | ".join(parts)
