"""Manga browser TUI application.

Main Textual App subclass: one tab per feed plus a detail pane. Owns one
FeedController per feed and routes widget messages to the matching
controller. Fetch cycles run as Textual workers so a rate-limit wait
never blocks the message loop.
"""

from __future__ import annotations

from typing import Awaitable

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Header, TabbedContent, TabPane

from mangabrowse.config import BrowserConfig
from mangabrowse.feed import FeedController, PageFetcher
from mangabrowse.query import BROWSE_FEED, TOP_FEED
from mangabrowse.telemetry import Telemetry, set_telemetry
from mangabrowse.tui.messages import (
    CardSelected,
    FiltersApplied,
    FiltersReset,
    LoadMoreRequested,
    SearchRequested,
)
from mangabrowse.tui.providers import MangaBrowseCommands
from mangabrowse.tui.widgets import BrowseFilterPanel, DetailPane, FeedView, SearchBar


class MangaBrowseApp(App):
    """Interactive catalog browser with a top-ranked tab and a browse tab."""

    TITLE = "MangaBrowse"
    SUB_TITLE = "Jikan Manga Catalog"
    COMMANDS = App.COMMANDS | {MangaBrowseCommands}

    CSS = """
    #main {
        layout: horizontal;
        height: 1fr;
    }

    #feeds {
        width: 3fr;
    }
    """

    BINDINGS = [
        ("ctrl+p", "command_palette", "Commands"),
        ("ctrl+f", "focus_search", "Search"),
        ("ctrl+t", "show_top", "Top"),
        ("ctrl+b", "show_browse", "Browse"),
        ("ctrl+l", "load_more", "Load More"),
        ("ctrl+r", "reload", "Reload"),
    ]

    def __init__(
        self,
        client: PageFetcher | None = None,
        config: BrowserConfig | None = None,
        telemetry: Telemetry | None = None,
        initial_search: str | None = None,
        close_client: bool = False,
    ) -> None:
        """Initialize the app with its catalog client.

        Args:
            client: Page fetcher shared by both feeds. ``None`` starts the
                app without any network access (useful in tests).
            config: Base URL, page size, and retry policy.
            telemetry: OTel tracing facade. Defaults to no-op.
            initial_search: Query to run on the browse tab at startup.
            close_client: Whether to ``aclose()`` the client on unmount.
        """
        super().__init__()
        self.client = client
        self.config = config if config is not None else BrowserConfig()
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        set_telemetry(self.telemetry)
        self.initial_search = initial_search
        self._close_client = close_client
        self.controllers: dict[str, FeedController] = {}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield SearchBar()
        with Horizontal(id="main"):
            with TabbedContent(initial="top-tab", id="feeds"):
                with TabPane("Top Manga", id="top-tab"):
                    yield FeedView(TOP_FEED)
                with TabPane("Browse", id="browse-tab"):
                    yield FeedView(BROWSE_FEED)
            yield DetailPane()
        yield Footer()

    def on_mount(self) -> None:
        """Wire a controller to each feed view and start the first loads."""
        if self.client is None:
            self.telemetry.log.info("app mounted without a catalog client")
            return

        for feed in (TOP_FEED, BROWSE_FEED):
            view = self.query_one(f"#{feed.name}-view", FeedView)
            self.controllers[feed.name] = FeedController(
                feed,
                self.client,
                view,
                config=self.config,
                telemetry=self.telemetry,
            )
        self.telemetry.log.info("app mounted")

        self._dispatch("top", self.controllers["top"].load_initial())
        if self.initial_search:
            self.query_one(BrowseFilterPanel).set_search_text(self.initial_search)
            self._dispatch("browse", self.controllers["browse"].search(self.initial_search))
        else:
            self._dispatch("browse", self.controllers["browse"].load_initial())

    async def on_unmount(self) -> None:
        if self._close_client and self.client is not None:
            await self.client.aclose()  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, feed: str, work: Awaitable[None]) -> None:
        """Run a controller coroutine as a worker grouped by feed."""
        self.run_worker(self._guarded(work), group=feed, exit_on_error=False)

    async def _guarded(self, work: Awaitable[None]) -> None:
        try:
            await work
        except (ValueError, TypeError) as e:
            self.telemetry.log.error(f"filter rejected error={e!r}")
            self.notify(str(e), title="Invalid filter", severity="error")

    def _active_feed(self) -> str:
        active = self.query_one(TabbedContent).active
        return active.removesuffix("-tab")

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_search_requested(self, event: SearchRequested) -> None:
        """Run a browse search; header searches also switch to the browse tab."""
        controller = self.controllers.get("browse")
        if controller is None:
            return
        self.query_one(TabbedContent).active = "browse-tab"
        self.query_one(BrowseFilterPanel).set_search_text(event.query)
        self.telemetry.log.info(f"search requested query={event.query!r}")
        self._dispatch("browse", controller.search(event.query))

    def on_filters_applied(self, event: FiltersApplied) -> None:
        controller = self.controllers.get(event.feed)
        if controller is None:
            return
        self._dispatch(event.feed, controller.apply_filters(**event.changes))

    def on_filters_reset(self, event: FiltersReset) -> None:
        controller = self.controllers.get(event.feed)
        if controller is None:
            return
        self._dispatch(event.feed, controller.reset())

    def on_load_more_requested(self, event: LoadMoreRequested) -> None:
        controller = self.controllers.get(event.feed)
        if controller is None:
            return
        self._dispatch(event.feed, controller.load_more())

    def on_card_selected(self, event: CardSelected) -> None:
        self.query_one(DetailPane).show_card(event.card)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Key binding actions
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one(SearchBar).focus()

    def action_show_top(self) -> None:
        self.query_one(TabbedContent).active = "top-tab"

    def action_show_browse(self) -> None:
        self.query_one(TabbedContent).active = "browse-tab"

    def action_load_more(self) -> None:
        feed = self._active_feed()
        controller = self.controllers.get(feed)
        if controller is not None:
            self._dispatch(feed, controller.load_more())

    def action_reload(self) -> None:
        feed = self._active_feed()
        controller = self.controllers.get(feed)
        if controller is not None:
            self._dispatch(feed, controller.load_initial())

    def action_reset_filters(self) -> None:
        self.query_one(BrowseFilterPanel).reset_controls()
        controller = self.controllers.get("browse")
        if controller is not None:
            self._dispatch("browse", controller.reset())
