"""Tests for query-string construction and year-filter expansion."""

from __future__ import annotations

import pytest

from mangabrowse.models import FilterState
from mangabrowse.query import (
    BROWSE_FEED,
    TOP_FEED,
    build_query,
    build_url,
    parse_year_filter,
)


# ---------------------------------------------------------------------------
# parse_year_filter
# ---------------------------------------------------------------------------


class TestParseYearFilter:
    def test_empty_means_no_dates(self):
        assert parse_year_filter("") == ("", "")

    def test_single_year_covers_whole_year(self):
        assert parse_year_filter("2004") == ("2004-01-01", "2004-12-31")

    def test_underscore_range(self):
        assert parse_year_filter("2000_2009") == ("2000-01-01", "2009-12-31")

    def test_hyphen_range(self):
        assert parse_year_filter("1990-1999") == ("1990-01-01", "1999-12-31")

    def test_surrounding_whitespace_ignored(self):
        assert parse_year_filter(" 2010 ") == ("2010-01-01", "2010-12-31")

    @pytest.mark.parametrize("value", ["20", "abcd", "2000_", "2000__2009", "2000/2009"])
    def test_malformed_raises(self, value):
        with pytest.raises(ValueError, match="Invalid year filter"):
            parse_year_filter(value)

    def test_reversed_range_raises(self):
        with pytest.raises(ValueError, match="ends before it starts"):
            parse_year_filter("2009_2000")


# ---------------------------------------------------------------------------
# Browse feed
# ---------------------------------------------------------------------------


class TestBrowseQuery:
    def test_search_scenario_omits_everything_else(self):
        query = build_query(BROWSE_FEED, FilterState(q="naruto"), page=1, page_size=24)
        assert query == "q=naruto&page=1&limit=24"

    def test_default_filters_send_sort(self):
        query = build_query(BROWSE_FEED, BROWSE_FEED.default_filters(), 1, 24)
        assert query == "page=1&limit=24&order_by=score&sort=desc"

    def test_never_emits_empty_parameters(self):
        filters = FilterState(q="", genres="", season="", type="", status="", order_by="")
        query = build_query(BROWSE_FEED, filters, 3, 24)
        assert query == "page=3&limit=24"
        assert "=&" not in query
        assert not query.endswith("=")

    def test_zero_values_are_omitted(self):
        query = build_query(BROWSE_FEED, FilterState(), page=1, page_size=0)
        assert "limit" not in query

    def test_year_range_expands_to_dates(self):
        query = build_query(BROWSE_FEED, FilterState(year="2000_2009"), 1, 24)
        assert "start_date=2000-01-01&end_date=2009-12-31" in query

    def test_single_year_expands_to_dates(self):
        query = build_query(BROWSE_FEED, FilterState(year="2015"), 1, 24)
        assert "start_date=2015-01-01&end_date=2015-12-31" in query

    def test_no_year_means_no_dates(self):
        query = build_query(BROWSE_FEED, FilterState(genres="1"), 1, 24)
        assert "start_date" not in query
        assert "end_date" not in query

    def test_year_overrides_explicit_dates(self):
        filters = FilterState(year="2001", start_date="1990-01-01", end_date="1990-12-31")
        query = build_query(BROWSE_FEED, filters, 1, 24)
        assert "start_date=2001-01-01" in query
        assert "1990" not in query

    def test_explicit_dates_used_without_year(self):
        filters = FilterState(start_date="1990-01-01", end_date="1995-12-31")
        query = build_query(BROWSE_FEED, filters, 1, 24)
        assert "start_date=1990-01-01&end_date=1995-12-31" in query

    def test_user_values_are_percent_encoded(self):
        query = build_query(BROWSE_FEED, FilterState(q="one piece & co/2"), 1, 24)
        assert query.startswith("q=one%20piece%20%26%20co%2F2&")

    def test_full_parameter_order(self):
        filters = FilterState(
            q="berserk",
            genres="1",
            year="1989",
            season="winter",
            type="manga",
            status="publishing",
            order_by="popularity",
            sort="asc",
        )
        query = build_query(BROWSE_FEED, filters, 2, 24)
        assert query == (
            "q=berserk&page=2&limit=24&genres=1"
            "&start_date=1989-01-01&end_date=1989-12-31"
            "&season=winter&type=manga&status=publishing"
            "&order_by=popularity&sort=asc"
        )

    def test_malformed_year_raises(self):
        with pytest.raises(ValueError):
            build_query(BROWSE_FEED, FilterState(year="next year"), 1, 24)


# ---------------------------------------------------------------------------
# Top feed
# ---------------------------------------------------------------------------


class TestTopQuery:
    def test_popularity_sends_filter(self):
        query = build_query(TOP_FEED, FilterState(order_by="bypopularity"), 1, 24)
        assert query == "page=1&limit=24&filter=bypopularity"

    def test_other_sort_omits_filter(self):
        query = build_query(TOP_FEED, FilterState(order_by="score"), 1, 24)
        assert query == "page=1&limit=24"
        assert "filter" not in query

    def test_unknown_sort_omits_filter(self):
        query = build_query(TOP_FEED, FilterState(order_by="rank"), 4, 24)
        assert query == "page=4&limit=24"

    def test_browse_filters_are_ignored(self):
        filters = FilterState(q="naruto", genres="1", order_by="bypopularity")
        query = build_query(TOP_FEED, filters, 1, 24)
        assert "q=" not in query
        assert "genres" not in query

    def test_default_filters_request_popularity(self):
        query = build_query(TOP_FEED, TOP_FEED.default_filters(), 1, 24)
        assert query.endswith("&filter=bypopularity")


# ---------------------------------------------------------------------------
# build_url
# ---------------------------------------------------------------------------


def test_build_url_top_endpoint():
    url = build_url("https://api.jikan.moe/v4", TOP_FEED, FilterState(), 1, 24)
    assert url == "https://api.jikan.moe/v4/top/manga?page=1&limit=24"


def test_build_url_strips_trailing_slash():
    url = build_url("https://api.jikan.moe/v4/", BROWSE_FEED, FilterState(q="x"), 1, 24)
    assert url == "https://api.jikan.moe/v4/manga?q=x&page=1&limit=24"


def test_feeds_have_independent_default_state():
    first = BROWSE_FEED.default_filters()
    first.q = "mutated"
    assert BROWSE_FEED.default_filters().q == ""
