"""Shared pytest fixtures for mangabrowse tests.

Provides canned Jikan payloads, a recording RenderSink, and a scripted
page fetcher so feed logic can be exercised without a network or a UI.
"""

from __future__ import annotations

import asyncio
from typing import Sequence
from unittest.mock import AsyncMock

import pytest

from mangabrowse.config import BrowserConfig
from mangabrowse.models import MangaCard, MangaItem, PageResult


def manga_payload(mal_id: int, **overrides: object) -> dict:
    """One entry of a Jikan ``data`` array with realistic defaults."""
    payload = {
        "mal_id": mal_id,
        "url": f"https://myanimelist.net/manga/{mal_id}",
        "images": {
            "jpg": {"image_url": f"https://cdn.myanimelist.net/images/manga/{mal_id}.jpg"},
            "webp": {"image_url": f"https://cdn.myanimelist.net/images/manga/{mal_id}.webp"},
        },
        "title": f"Manga {mal_id}",
        "type": "Manga",
        "volumes": 10,
        "chapters": 100,
        "status": "Finished",
        "score": 8.5,
        "synopsis": "A story.",
        "genres": [{"mal_id": 1, "name": "Action"}],
    }
    payload.update(overrides)
    return payload


def envelope(
    items: list[dict],
    has_next_page: bool = False,
    total: int | None = None,
) -> dict:
    """Jikan response envelope wrapping *items*."""
    pagination: dict = {
        "last_visible_page": 5,
        "has_next_page": has_next_page,
        "current_page": 1,
    }
    if total is not None:
        pagination["items"] = {"count": len(items), "total": total, "per_page": 24}
    return {"data": items, "pagination": pagination}


def make_page(
    count: int = 2,
    has_next_page: bool = False,
    total: int | None = None,
    start_id: int = 1,
) -> PageResult:
    return PageResult(
        items=[
            MangaItem(mal_id=i, title=f"Manga {i}", score=8.0, type="Manga", volumes=3)
            for i in range(start_id, start_id + count)
        ],
        has_next_page=has_next_page,
        total=total,
    )


class RecordingSink:
    """RenderSink that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.cards: list[MangaCard] = []
        self.errors: list[str] = []
        self.load_more_visible: bool | None = None
        self.count: int | None = None
        self.loading = False

    def present(self, cards: Sequence[MangaCard]) -> None:
        self.calls.append(("present", list(cards)))
        self.cards.extend(cards)

    def clear(self) -> None:
        self.calls.append(("clear", None))
        self.cards = []
        self.errors = []

    def set_load_more_visible(self, visible: bool) -> None:
        self.calls.append(("set_load_more_visible", visible))
        self.load_more_visible = visible

    def set_count(self, count: int) -> None:
        self.calls.append(("set_count", count))
        self.count = count

    def show_error(self, message: str) -> None:
        self.calls.append(("show_error", message))
        self.cards = []
        self.errors = [message]

    def set_loading(self, loading: bool) -> None:
        self.calls.append(("set_loading", loading))
        self.loading = loading

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class ScriptedFetcher:
    """Page fetcher that replays scripted outcomes and records URLs.

    Each outcome is a PageResult (returned) or an Exception (raised).
    When *gate* is set, every request waits on it before answering so a
    test can act while a request is in flight.
    """

    def __init__(self, outcomes: list[object], gate: asyncio.Event | None = None) -> None:
        self.outcomes = list(outcomes)
        self.urls: list[str] = []
        self.gate = gate
        self.started = asyncio.Event()

    async def fetch_page(self, url: str) -> PageResult:
        self.urls.append(url)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome  # type: ignore[return-value]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def config() -> BrowserConfig:
    """Default config pointed at a fake host so stray requests are obvious."""
    return BrowserConfig(base_url="https://jikan.test/v4")


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep that returns immediately."""
    return AsyncMock(return_value=None)
