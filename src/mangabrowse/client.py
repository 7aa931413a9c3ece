"""Jikan catalog HTTP client.

Each ``fetch_page()`` call is exactly one physical request. Retrying on
rate limits is the fetch cycle's job; the client only classifies the
outcome into a ``PageResult`` or one of the exceptions below.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from mangabrowse.config import BrowserConfig
from mangabrowse.models import PageResult
from mangabrowse.schemas import Envelope

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class CatalogError(Exception):
    """Base class for every failure of a single catalog request."""


class RateLimitError(CatalogError):
    """Raised when the catalog API returns a 429 rate-limit response."""


class CatalogHTTPError(CatalogError):
    """Raised on any other non-2xx response."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"API responded with status: {status_code}")


class CatalogTransportError(CatalogError):
    """Raised when the request never produced a response."""


class CatalogResponseError(CatalogError):
    """Raised when a 2xx body is not a valid JSON envelope."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class CatalogClient:
    """Async wrapper around ``httpx.AsyncClient`` for catalog page requests.

    Usage::

        async with CatalogClient(BrowserConfig()) as client:
            page = await client.fetch_page("https://api.jikan.moe/v4/manga?page=1")

    A pre-built ``http_client`` may be injected (tests pass one backed by
    ``httpx.MockTransport``); the caller then owns its lifetime.
    """

    def __init__(
        self,
        config: BrowserConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config if config is not None else BrowserConfig()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=self.config.request_timeout,
                headers={"User-Agent": self.config.user_agent},
                follow_redirects=True,
            )
        self._http = http_client

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def fetch_page(self, url: str) -> PageResult:
        """GET *url* and parse the envelope.

        Raises:
            RateLimitError: On HTTP 429.
            CatalogHTTPError: On any other non-2xx status.
            CatalogTransportError: On connection, timeout, or protocol failure.
            CatalogResponseError: When the body is not a valid envelope.
        """
        logger.debug("GET %s", url)
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as e:
            raise CatalogTransportError(f"Request to {url} failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitError(f"Rate limited by catalog API: {url}")
        if not response.is_success:
            raise CatalogHTTPError(response.status_code, url)

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogResponseError(f"Response body is not JSON: {e}") from e

        try:
            envelope = Envelope.model_validate(payload)
        except ValidationError as e:
            raise CatalogResponseError(
                f"Response body does not match the catalog envelope: {e.error_count()} errors"
            ) from e

        page = envelope.to_page()
        logger.debug(
            "Parsed %d items (has_next_page=%s, total=%s)",
            len(page.items),
            page.has_next_page,
            page.total,
        )
        return page
