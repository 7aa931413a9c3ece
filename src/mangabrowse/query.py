"""Query-string construction for the two catalog feeds.

A feed is described by a ``FeedSpec``: which endpoint it hits, the filter
state it starts from, and how that state maps onto query parameters.
Building is deterministic and never emits an empty parameter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import quote

from mangabrowse.constants import (
    BROWSE_DEFAULT_ORDER_BY,
    BROWSE_DEFAULT_SORT,
    TOP_DEFAULT_SORT,
    TOP_POPULARITY_FILTER,
)
from mangabrowse.models import FilterState

_YEAR_RE = re.compile(r"^(\d{4})(?:[-_](\d{4}))?$")

# Browse parameters serialized after page/limit, in this order.
BROWSE_FILTER_KEYS: tuple[str, ...] = (
    "genres",
    "start_date",
    "end_date",
    "season",
    "type",
    "status",
    "order_by",
    "sort",
)


def parse_year_filter(value: str) -> tuple[str, str]:
    """Expand a year selection into an inclusive ``(start_date, end_date)`` pair.

    ``"2004"`` covers the whole of 2004; ``"2000_2009"`` (or ``"2000-2009"``)
    runs from the first day of 2000 to the last day of 2009. An empty value
    means no date filter.

    Raises:
        ValueError: If *value* is neither a year nor a year range.
    """
    value = value.strip()
    if not value:
        return "", ""
    match = _YEAR_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid year filter {value!r}: expected YYYY or YYYY_YYYY")
    start_year = match.group(1)
    end_year = match.group(2) or start_year
    if int(end_year) < int(start_year):
        raise ValueError(f"Invalid year filter {value!r}: range ends before it starts")
    return f"{start_year}-01-01", f"{end_year}-12-31"


def _top_params(filters: FilterState) -> list[tuple[str, object]]:
    # Any sort other than popularity is left to the API's default ordering.
    if filters.order_by == TOP_POPULARITY_FILTER:
        return [("filter", TOP_POPULARITY_FILTER)]
    return []


def _browse_params(filters: FilterState) -> list[tuple[str, object]]:
    values = {key: getattr(filters, key) for key in BROWSE_FILTER_KEYS}
    if filters.year:
        values["start_date"], values["end_date"] = parse_year_filter(filters.year)
    return list(values.items())


@dataclass(frozen=True)
class FeedSpec:
    """Static description of one feed.

    Attributes:
        name: Short identifier used in logs and the UI.
        endpoint: Path below the API base URL.
        default_filters: Filter state a fresh or reset feed starts from.
        extra_params: Maps filter state to the feed's optional parameters.
        reports_total: Whether page 1 carries a total item count.
        leading_keys: Filter fields serialized before ``page``/``limit``.
    """

    name: str
    endpoint: str
    default_filters: Callable[[], FilterState]
    extra_params: Callable[[FilterState], list[tuple[str, object]]]
    reports_total: bool = False
    leading_keys: tuple[str, ...] = ()


TOP_FEED = FeedSpec(
    name="top",
    endpoint="top/manga",
    default_filters=lambda: FilterState(order_by=TOP_DEFAULT_SORT),
    extra_params=_top_params,
)

BROWSE_FEED = FeedSpec(
    name="browse",
    endpoint="manga",
    default_filters=lambda: FilterState(
        order_by=BROWSE_DEFAULT_ORDER_BY, sort=BROWSE_DEFAULT_SORT
    ),
    extra_params=_browse_params,
    reports_total=True,
    leading_keys=("q",),
)


def build_query(
    feed: FeedSpec,
    filters: FilterState,
    page: int,
    page_size: int,
) -> str:
    """Serialize *filters* for *feed* into a query string (no leading ``?``).

    Falsy values (``""``, ``0``, ``None``) are dropped so the API never
    receives ``key=``. Every value is percent-encoded.

    Raises:
        ValueError: If the year filter is malformed.
    """
    params: list[tuple[str, object]] = [
        (key, getattr(filters, key)) for key in feed.leading_keys
    ]
    params.append(("page", page))
    params.append(("limit", page_size))
    params.extend(feed.extra_params(filters))

    return "&".join(
        f"{key}={quote(str(value), safe='')}" for key, value in params if value
    )


def build_url(
    base_url: str,
    feed: FeedSpec,
    filters: FilterState,
    page: int,
    page_size: int,
) -> str:
    """Return the absolute request URL for one page of *feed*."""
    query = build_query(feed, filters, page, page_size)
    return f"{base_url.rstrip('/')}/{feed.endpoint}?{query}"
