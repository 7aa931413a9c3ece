"""Tests for the console RenderSink used by the top/browse commands."""

from __future__ import annotations

import io

from rich.console import Console

from conftest import make_page
from mangabrowse.console import ConsoleSink, truncate_text
from mangabrowse.models import MangaCard


def make_sink() -> tuple[ConsoleSink, io.StringIO]:
    buffer = io.StringIO()
    return ConsoleSink(Console(file=buffer, width=120)), buffer


def cards(count: int, start_id: int = 1) -> list[MangaCard]:
    page = make_page(count, start_id=start_id)
    return [MangaCard.from_item(item) for item in page.items]


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert truncate_text("Berserk", 20) == "Berserk"

    def test_cuts_at_word_boundary(self):
        assert truncate_text("The Promised Neverland", 16) == "The Promised..."

    def test_no_space_hard_cut(self):
        assert truncate_text("Yotsubatoyotsuba", 10) == "Yotsuba..."

    def test_tiny_limit(self):
        assert truncate_text("Monster", 2) == ".."


class TestConsoleSink:
    def test_pages_are_numbered_continuously(self):
        sink, buffer = make_sink()
        sink.present(cards(2))
        sink.present(cards(2, start_id=3))
        output = buffer.getvalue()
        assert "Manga 4" in output
        assert [card.mal_id for card in sink.cards] == [1, 2, 3, 4]

    def test_empty_page(self):
        sink, buffer = make_sink()
        sink.present([])
        assert "No manga found." in buffer.getvalue()

    def test_error_replaces_cards(self):
        sink, buffer = make_sink()
        sink.present(cards(2))
        sink.show_error("Failed to load manga. Please try again later.")
        assert sink.cards == []
        assert sink.error is not None
        assert "Failed to load manga" in buffer.getvalue()

    def test_clear_drops_error(self):
        sink, _ = make_sink()
        sink.show_error("boom")
        sink.clear()
        assert sink.error is None

    def test_summary(self):
        sink, _ = make_sink()
        sink.present(cards(3))
        sink.set_count(1234)
        sink.set_load_more_visible(True)
        assert sink.summary() == "3 shown | 1,234 total | more available (use --pages)"

    def test_summary_without_count(self):
        sink, _ = make_sink()
        sink.present(cards(1))
        assert sink.summary() == "1 shown"

    def test_loading_toggles_status(self):
        sink, _ = make_sink()
        sink.set_loading(True)
        assert sink._status is not None
        sink.set_loading(False)
        assert sink._status is None
