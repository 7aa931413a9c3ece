"""One tab's worth of feed UI, usable as a RenderSink.

FeedView stacks the feed's filter controls, a result count (browse only),
a loading indicator, the card grid, and a load-more button. The App hands
the view to a FeedController, which drives it through the RenderSink
methods below.
"""

from __future__ import annotations

from typing import Sequence

from textual.containers import Vertical
from textual.widgets import Button, LoadingIndicator, Static

from mangabrowse.models import MangaCard
from mangabrowse.query import FeedSpec
from mangabrowse.tui.messages import LoadMoreRequested
from mangabrowse.tui.widgets.cards import MangaGrid
from mangabrowse.tui.widgets.filter_panel import BrowseFilterPanel, TopSortSelect


class FeedView(Vertical):
    """Container for one feed's grid, controls, and status widgets."""

    DEFAULT_CSS = """
    FeedView {
        height: 1fr;
    }
    FeedView .result-count {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    FeedView LoadingIndicator {
        height: 3;
    }
    FeedView .load-more {
        width: 100%;
        margin: 1 0 0 0;
    }
    """

    def __init__(self, feed: FeedSpec) -> None:
        super().__init__(id=f"{feed.name}-view")
        self.feed = feed
        self.result_count: int = 0
        self.is_loading: bool = False

    def compose(self):
        if self.feed.reports_total:
            yield BrowseFilterPanel()
            yield Static("0 results", id="count-number", classes="result-count")
        else:
            yield TopSortSelect()
        yield LoadingIndicator(id=f"{self.feed.name}-loading")
        yield MangaGrid(id=f"{self.feed.name}-grid")
        yield Button(
            "Load More",
            id=f"{self.feed.name}-load-more",
            classes="load-more",
        )

    def on_mount(self) -> None:
        self._indicator.display = False
        self._load_more.display = False

    @property
    def card_grid(self) -> MangaGrid:
        return self.query_one(f"#{self.feed.name}-grid", MangaGrid)

    @property
    def _indicator(self) -> LoadingIndicator:
        return self.query_one(f"#{self.feed.name}-loading", LoadingIndicator)

    @property
    def _load_more(self) -> Button:
        return self.query_one(f"#{self.feed.name}-load-more", Button)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != f"{self.feed.name}-load-more":
            return
        event.stop()
        self.post_message(LoadMoreRequested(feed=self.feed.name))

    # ------------------------------------------------------------------
    # RenderSink
    # ------------------------------------------------------------------

    def present(self, cards: Sequence[MangaCard]) -> None:
        self.card_grid.append_cards(cards)

    def clear(self) -> None:
        self.card_grid.clear_cards()

    def set_load_more_visible(self, visible: bool) -> None:
        self._load_more.display = visible

    def set_count(self, count: int) -> None:
        self.result_count = count
        if self.feed.reports_total:
            self.query_one("#count-number", Static).update(f"{count:,} results")

    def show_error(self, message: str) -> None:
        self.card_grid.show_error(message)

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading
        self._indicator.display = loading
        self.card_grid.display = not loading
        self._load_more.disabled = loading
