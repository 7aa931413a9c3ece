"""Feed controller: the fetch-and-render cycle behind each catalog view.

One ``FeedController`` exists per feed. It owns that feed's filter state,
page counter, loading guard, and generation number, and drives a
``RenderSink`` (the Textual view or the console table) without knowing
how the sink draws anything.

Cycle outline::

    trigger -> (reset page / clear sink) -> run()
        guard set?  -> drop
        build URL -> GET -> 429? wait fixed delay, same URL, again
        stale generation (page or error)? -> rebuild URL from current state, again
        success -> count (page 1), cards, load-more flag
        failure -> one error message in place of the cards
        finally -> release guard, hide loading UI
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol, Sequence

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)

from mangabrowse.client import RateLimitError
from mangabrowse.config import BrowserConfig
from mangabrowse.constants import ERROR_MESSAGE
from mangabrowse.models import FilterState, MangaCard, PageResult
from mangabrowse.query import FeedSpec, build_url, parse_year_filter
from mangabrowse.telemetry import FeedCycleSpan, Telemetry, get_telemetry

logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    """Everything a feed needs from the surface that displays it."""

    def present(self, cards: Sequence[MangaCard]) -> None:
        """Append *cards* after any already shown, in order."""

    def clear(self) -> None:
        """Remove every card and error message."""

    def set_load_more_visible(self, visible: bool) -> None: ...

    def set_count(self, count: int) -> None: ...

    def show_error(self, message: str) -> None:
        """Replace the contents with a single error message."""

    def set_loading(self, loading: bool) -> None: ...


class PageFetcher(Protocol):
    async def fetch_page(self, url: str) -> PageResult: ...


class FeedController:
    """Per-feed state holder and fetch cycle.

    Usage::

        controller = FeedController(BROWSE_FEED, client, view, config)
        await controller.load_initial()
        await controller.search("naruto")
        await controller.load_more()

    Args:
        feed: Which endpoint and filter mapping to use.
        client: Anything with ``async fetch_page(url) -> PageResult``.
        sink: Display surface.
        config: Base URL, page size, and rate-limit policy.
        telemetry: Tracing facade; defaults to the process singleton.
        sleep: Awaitable used between rate-limited attempts.
    """

    def __init__(
        self,
        feed: FeedSpec,
        client: PageFetcher,
        sink: RenderSink,
        config: BrowserConfig | None = None,
        telemetry: Telemetry | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.feed = feed
        self.config = config if config is not None else BrowserConfig()
        self._client = client
        self._sink = sink
        self._telemetry = telemetry if telemetry is not None else get_telemetry()
        self._sleep = sleep

        self.filters: FilterState = feed.default_filters()
        self.loading: bool = False
        self.has_next_page: bool = False
        self.total: int = 0
        self.generation: int = 0
        self.last_error: Exception | None = None
        self._loading_shown = False
        self._log_extra = {"feed": feed.name}

    @property
    def page(self) -> int:
        return self.filters.page

    def current_url(self) -> str:
        return build_url(
            self.config.base_url,
            self.feed,
            self.filters,
            self.filters.page,
            self.config.page_size,
        )

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------

    async def run(self, show_loading: bool = True) -> None:
        """Fetch the current page and render it.

        A call made while another cycle holds the guard returns at once
        without touching the network or any state.
        """
        if self.loading:
            logger.debug(
                "%s feed busy, dropping fetch request", self.feed.name, extra=self._log_extra
            )
            return

        self.loading = True
        self._loading_shown = show_loading
        if show_loading:
            self._sink.set_loading(True)

        try:
            with self._telemetry.feed_cycle(
                self.feed.name, self.filters.page, show_loading
            ) as cycle:
                try:
                    page = await self._fetch_current(cycle)
                except Exception as e:
                    cycle.failed(e)
                    self._fail(e)
                    return

                cycle.completed(self.filters.page, len(page.items))
                self._render(page)
        finally:
            self.loading = False
            if self._loading_shown:
                self._loading_shown = False
                self._sink.set_loading(False)

    async def _fetch_current(self, cycle: FeedCycleSpan) -> PageResult:
        """Fetch until a response (or failure) belongs to the current generation.

        Whatever a request produced, success or error, is dropped when the
        filters changed while it was in flight, and the current state is
        fetched instead.
        """
        while True:
            generation = self.generation
            url = self.current_url()
            cycle.requesting(url)
            try:
                page = await self._fetch_with_rate_limit_retry(url)
            except Exception as e:
                if generation == self.generation:
                    raise
                outcome = f"failure ({e})"
            else:
                if generation == self.generation:
                    return page
                outcome = "page"

            cycle.discarded_stale()
            logger.debug(
                "Discarding stale %s %s (generation %d, current %d)",
                self.feed.name,
                outcome,
                generation,
                self.generation,
                extra=self._log_extra,
            )

    def _retrying(self) -> AsyncRetrying:
        cap = self.config.max_rate_limit_retries
        return AsyncRetrying(
            sleep=self._sleep,
            retry=retry_if_exception_type(RateLimitError),
            wait=wait_fixed(self.config.rate_limit_delay),
            stop=stop_never if cap is None else stop_after_attempt(cap + 1),
            before_sleep=self._log_rate_limited,
            reraise=True,
        )

    async def _fetch_with_rate_limit_retry(self, url: str) -> PageResult:
        async for attempt in self._retrying():
            with attempt:
                page = await self._client.fetch_page(url)
        return page

    def _log_rate_limited(self, retry_state: RetryCallState) -> None:
        logger.info(
            "Rate limited on %s feed, retrying in %.1f second(s) (attempt %d)",
            self.feed.name,
            self.config.rate_limit_delay,
            retry_state.attempt_number,
            extra=self._log_extra,
        )

    def _render(self, page: PageResult) -> None:
        self.last_error = None
        if self.feed.reports_total and self.filters.page == 1:
            self.total = page.total or 0
            self._sink.set_count(self.total)
        self._sink.present([MangaCard.from_item(item) for item in page.items])
        self.has_next_page = page.has_next_page
        self._sink.set_load_more_visible(page.has_next_page)

    def _fail(self, error: Exception) -> None:
        self.last_error = error
        logger.error(
            "Error fetching %s feed: %s", self.feed.name, error, extra=self._log_extra
        )
        self._sink.show_error(ERROR_MESSAGE)
        if self.feed.reports_total:
            self.total = 0
            self._sink.set_count(0)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def _restart(self, filters: FilterState) -> None:
        self.generation += 1
        self.filters = filters.with_changes(page=1)
        self.total = 0
        self._sink.clear()
        if self.feed.reports_total:
            self._sink.set_count(0)
        if self.loading and not self._loading_shown:
            # A load-more cycle is in flight and will refetch this state;
            # its finally hides the indicator.
            self._loading_shown = True
            self._sink.set_loading(True)

    async def load_initial(self, show_loading: bool = True) -> None:
        """Fetch page 1 of the current filters into an empty view."""
        self._restart(self.filters)
        await self.run(show_loading)

    async def load_more(self) -> None:
        """Append the next page without clearing what is already shown."""
        if self.loading or not self.has_next_page:
            return
        self.filters = self.filters.with_changes(page=self.filters.page + 1)
        await self.run(show_loading=False)

    async def apply_filters(self, **changes: object) -> None:
        """Replace the given filter fields and reload from page 1.

        Raises:
            ValueError: If ``year`` is malformed (state is left unchanged).
            TypeError: If a change names an unknown filter field.
        """
        if "year" in changes:
            parse_year_filter(str(changes["year"] or ""))
        filters = self.filters.with_changes(**changes)
        logger.info(
            "%s filters applied: %s",
            self.feed.name,
            filters.active_filters(),
            extra=self._log_extra,
        )
        self._restart(filters)
        await self.run()

    async def search(self, text: str) -> None:
        """Run a free-text search from page 1."""
        await self.apply_filters(q=text.strip())

    async def reset(self) -> None:
        """Restore the feed's default filters and reload."""
        logger.info("%s filters reset", self.feed.name, extra=self._log_extra)
        self._restart(self.feed.default_filters())
        await self.run()
