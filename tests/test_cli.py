"""Tests for the typer CLI commands.

Network access is replaced by patching ``mangabrowse.client.CatalogClient``
with a scripted fake; the commands import it at call time.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from conftest import ScriptedFetcher, make_page
from mangabrowse.cli import app
from mangabrowse.client import CatalogHTTPError
from mangabrowse.config import BASE_URL_ENV
from mangabrowse.constants import ERROR_MESSAGE

runner = CliRunner()


class FakeCatalogClient(ScriptedFetcher):
    """ScriptedFetcher usable as ``async with CatalogClient(config)``."""

    async def __aenter__(self) -> "FakeCatalogClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    """Path to a config file that does not exist, with no env override."""
    monkeypatch.delenv(BASE_URL_ENV, raising=False)
    return str(tmp_path / "missing.json")


def patched_client(outcomes):
    fake = FakeCatalogClient(outcomes)
    return fake, patch("mangabrowse.client.CatalogClient", MagicMock(return_value=fake))


class TestTop:
    def test_prints_cards_and_summary(self, no_config):
        fake, patcher = patched_client([make_page(2, has_next_page=True)])
        with patcher:
            result = runner.invoke(app, ["top", "--config", no_config])

        assert result.exit_code == 0, result.output
        assert "Manga 1" in result.output
        assert "Manga 2" in result.output
        assert "2 shown | more available (use --pages)" in result.output
        assert fake.urls == [
            "https://api.jikan.moe/v4/top/manga?page=1&limit=24&filter=bypopularity"
        ]

    def test_pages_option_fetches_more(self, no_config):
        fake, patcher = patched_client(
            [make_page(2, has_next_page=True), make_page(2, start_id=3)]
        )
        with patcher:
            result = runner.invoke(app, ["top", "--pages", "3", "--config", no_config])

        assert result.exit_code == 0, result.output
        assert len(fake.urls) == 2
        assert "4 shown" in result.output

    def test_score_sort_omits_filter(self, no_config):
        fake, patcher = patched_client([make_page(1)])
        with patcher:
            runner.invoke(app, ["top", "--sort", "score", "--config", no_config])
        assert fake.urls == ["https://api.jikan.moe/v4/top/manga?page=1&limit=24"]

    def test_failure_exits_nonzero(self, no_config):
        _, patcher = patched_client([CatalogHTTPError(500, "u")])
        with patcher:
            result = runner.invoke(app, ["top", "--config", no_config])
        assert result.exit_code == 1
        assert ERROR_MESSAGE in result.output


class TestBrowse:
    def test_query_and_filters_in_url(self, no_config):
        fake, patcher = patched_client([make_page(2, total=2)])
        with patcher:
            result = runner.invoke(
                app,
                ["browse", "naruto", "--year", "2004", "--genre", "1", "--config", no_config],
            )

        assert result.exit_code == 0, result.output
        url = fake.urls[0]
        assert url.startswith("https://api.jikan.moe/v4/manga?q=naruto&page=1&limit=24")
        assert "genres=1&start_date=2004-01-01&end_date=2004-12-31" in url
        assert url.endswith("order_by=score&sort=desc")
        assert "2 shown | 2 total" in result.output

    def test_ascending_flag(self, no_config):
        fake, patcher = patched_client([make_page(1, total=1)])
        with patcher:
            runner.invoke(app, ["browse", "--asc", "--config", no_config])
        assert fake.urls[0].endswith("sort=asc")

    def test_invalid_year_exits_before_fetching(self, no_config):
        fake, patcher = patched_client([])
        with patcher:
            result = runner.invoke(app, ["browse", "--year", "199x", "--config", no_config])
        assert result.exit_code == 1
        assert "Invalid year filter" in result.output
        assert fake.urls == []

    def test_empty_result(self, no_config):
        _, patcher = patched_client([make_page(0, total=0)])
        with patcher:
            result = runner.invoke(app, ["browse", "zzzz", "--config", no_config])
        assert result.exit_code == 0
        assert "No manga found." in result.output


class TestConfigShow:
    def test_shows_effective_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv(BASE_URL_ENV, raising=False)
        path = tmp_path / "browser_config.json"
        path.write_text(json.dumps({"page_size": 12}))
        result = runner.invoke(app, ["config", "show", "--config", str(path)])

        assert result.exit_code == 0, result.output
        assert "page_size" in result.output
        assert "12" in result.output
        assert "unlimited" in result.output

    def test_invalid_config_exits(self, tmp_path, monkeypatch):
        monkeypatch.delenv(BASE_URL_ENV, raising=False)
        path = tmp_path / "browser_config.json"
        path.write_text(json.dumps({"page_size": 0}))
        result = runner.invoke(app, ["config", "show", "--config", str(path)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestLogs:
    @pytest.fixture
    def log_dir(self, tmp_path):
        entries = [
            {"ts": "2026-01-01T10:00:00", "level": "DEBUG", "msg": "GET top"},
            {
                "ts": "2026-01-01T10:00:01",
                "level": "INFO",
                "feed": "top",
                "trace": "abcd" * 8,
                "msg": "top loaded",
            },
            {
                "ts": "2026-01-01T10:00:02",
                "level": "ERROR",
                "feed": "browse",
                "trace": "beef" * 8,
                "msg": "fetch failed",
            },
        ]
        path = tmp_path / "mangabrowse-20260101.log"
        path.write_text("\n".join(json.dumps(e) for e in entries) + "\nnot json\n")
        return tmp_path

    def test_level_filter(self, log_dir):
        result = runner.invoke(app, ["logs", "--log-dir", str(log_dir), "--level", "ERROR"])
        assert result.exit_code == 0, result.output
        assert "fetch failed" in result.output
        assert "top loaded" not in result.output
        assert "1 of 3 records" in result.output
        assert "1 unreadable line(s) skipped" in result.output

    def test_feed_filter(self, log_dir):
        result = runner.invoke(app, ["logs", "--log-dir", str(log_dir), "--feed", "top"])
        assert result.exit_code == 0, result.output
        assert "top loaded" in result.output
        assert "fetch failed" not in result.output

    def test_trace_prefix_isolates_one_cycle(self, log_dir):
        result = runner.invoke(app, ["logs", "--log-dir", str(log_dir), "--trace", "beef"])
        assert "fetch failed" in result.output
        assert "top loaded" not in result.output
        assert "GET top" not in result.output

    def test_tail(self, log_dir):
        result = runner.invoke(app, ["logs", "--log-dir", str(log_dir), "--tail", "1"])
        assert "fetch failed" in result.output
        assert "GET top" not in result.output

    def test_unknown_level(self, log_dir):
        result = runner.invoke(app, ["logs", "--log-dir", str(log_dir), "--level", "LOUD"])
        assert result.exit_code == 1

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["logs", "--log-dir", str(tmp_path / "nope")])
        assert result.exit_code == 0
        assert "No log files found" in result.output
