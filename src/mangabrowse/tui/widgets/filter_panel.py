"""Filter panels for the two feeds.

BrowseFilterPanel carries the search box plus genre, year, season,
format, status, and sort dropdowns with apply/reset buttons. TopSortSelect
is the top feed's single ordering dropdown. Both post messages for the
App to route; neither talks to a controller.
"""

from __future__ import annotations

from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Select, Static

from mangabrowse.constants import BROWSE_DEFAULT_ORDER_BY, TOP_DEFAULT_SORT
from mangabrowse.telemetry import get_telemetry
from mangabrowse.tui.messages import FiltersApplied, FiltersReset, SearchRequested

GENRE_OPTIONS: list[tuple[str, str]] = [
    ("Action", "1"),
    ("Adventure", "2"),
    ("Comedy", "4"),
    ("Mystery", "7"),
    ("Drama", "8"),
    ("Fantasy", "10"),
    ("Horror", "14"),
    ("Romance", "22"),
    ("Sci-Fi", "24"),
    ("Sports", "30"),
    ("Slice of Life", "36"),
    ("Supernatural", "37"),
]

YEAR_OPTIONS: list[tuple[str, str]] = [
    *[(str(year), str(year)) for year in range(2025, 2019, -1)],
    ("2010s", "2010_2019"),
    ("2000s", "2000_2009"),
    ("1990s", "1990_1999"),
    ("1980s", "1980_1989"),
]

SEASON_OPTIONS: list[tuple[str, str]] = [
    ("Winter", "winter"),
    ("Spring", "spring"),
    ("Summer", "summer"),
    ("Fall", "fall"),
]

FORMAT_OPTIONS: list[tuple[str, str]] = [
    ("Manga", "manga"),
    ("Novel", "novel"),
    ("Light Novel", "lightnovel"),
    ("One-shot", "oneshot"),
    ("Doujinshi", "doujin"),
    ("Manhwa", "manhwa"),
    ("Manhua", "manhua"),
]

STATUS_OPTIONS: list[tuple[str, str]] = [
    ("Publishing", "publishing"),
    ("Finished", "complete"),
    ("On Hiatus", "hiatus"),
    ("Discontinued", "discontinued"),
    ("Upcoming", "upcoming"),
]

SORT_OPTIONS: list[tuple[str, str]] = [
    ("Score", "score"),
    ("Popularity", "popularity"),
    ("Rank", "rank"),
    ("Title", "title"),
    ("Start Date", "start_date"),
    ("Favorites", "favorites"),
]

TOP_SORT_OPTIONS: list[tuple[str, str]] = [
    ("Most Popular", "bypopularity"),
    ("Highest Rated", "score"),
]

# Select id -> FilterState field
_SELECT_FIELDS: dict[str, str] = {
    "genre-filter": "genres",
    "year-filter": "year",
    "season-filter": "season",
    "format-filter": "type",
    "status-filter": "status",
}


def select_value(select: Select) -> str:
    """Return the Select's value, or ``""`` when nothing is chosen."""
    # Select.NULL is the sentinel for "no selection" in Textual 8.x
    value = select.value
    return "" if value is Select.NULL else str(value)


class BrowseFilterPanel(Vertical):
    """Search box and filter dropdowns for the browse feed."""

    DEFAULT_CSS = """
    BrowseFilterPanel {
        height: auto;
        padding: 0 1;
        border-bottom: solid $primary;
        background: $surface;
    }
    BrowseFilterPanel Horizontal {
        height: auto;
    }
    BrowseFilterPanel Select {
        width: 1fr;
    }
    BrowseFilterPanel #manga-search {
        width: 1fr;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="browse-filters")

    def compose(self):
        with Horizontal():
            yield Input(placeholder="Search by title...", id="manga-search")
            yield Button("Search", id="search-button", variant="primary")
        with Horizontal():
            yield Select(GENRE_OPTIONS, prompt="All genres", id="genre-filter")
            yield Select(YEAR_OPTIONS, prompt="Any year", id="year-filter")
            yield Select(SEASON_OPTIONS, prompt="Any season", id="season-filter")
        with Horizontal():
            yield Select(FORMAT_OPTIONS, prompt="All formats", id="format-filter")
            yield Select(STATUS_OPTIONS, prompt="Any status", id="status-filter")
            yield Select(
                SORT_OPTIONS,
                allow_blank=False,
                value=BROWSE_DEFAULT_ORDER_BY,
                id="sort-filter",
            )
        with Horizontal():
            yield Button("Apply Filters", id="apply-filters", variant="success")
            yield Button("Reset", id="reset-filters", variant="default")

    def search_text(self) -> str:
        return self.query_one("#manga-search", Input).value.strip()

    def set_search_text(self, text: str) -> None:
        self.query_one("#manga-search", Input).value = text

    def current_changes(self) -> dict[str, str]:
        """Read every control into FilterState field changes."""
        changes = {
            field_name: select_value(self.query_one(f"#{select_id}", Select))
            for select_id, field_name in _SELECT_FIELDS.items()
        }
        changes["q"] = self.search_text()
        changes["order_by"] = select_value(self.query_one("#sort-filter", Select))
        changes["sort"] = "desc"
        return changes

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "search-button":
            self.post_message(SearchRequested(query=self.search_text()))
        elif event.button.id == "apply-filters":
            changes = self.current_changes()
            get_telemetry().log.info(f"browse filters applied changes={changes}")
            self.post_message(FiltersApplied(feed="browse", changes=changes))
        elif event.button.id == "reset-filters":
            self.reset_controls()
            self.post_message(FiltersReset(feed="browse"))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "manga-search":
            return
        event.stop()
        self.post_message(SearchRequested(query=self.search_text()))

    def reset_controls(self) -> None:
        """Put every control back to its default without posting anything."""
        self.set_search_text("")
        for select_id in _SELECT_FIELDS:
            self.query_one(f"#{select_id}", Select).value = Select.NULL
        self.query_one("#sort-filter", Select).value = BROWSE_DEFAULT_ORDER_BY
        get_telemetry().log.info("browse filter controls reset")


class TopSortSelect(Horizontal):
    """Ordering dropdown for the top feed."""

    DEFAULT_CSS = """
    TopSortSelect {
        height: auto;
        padding: 0 1;
    }
    TopSortSelect Static {
        width: auto;
        padding: 1 1 0 0;
    }
    TopSortSelect Select {
        width: 30;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="top-sort")
        self._applied = TOP_DEFAULT_SORT

    def compose(self):
        yield Static("Sort by")
        yield Select(
            TOP_SORT_OPTIONS,
            allow_blank=False,
            value=TOP_DEFAULT_SORT,
            id="filter-type",
        )

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        value = select_value(event.select)
        if value == self._applied:
            return
        self._applied = value
        get_telemetry().log.info(f"top sort changed value={value!r}")
        self.post_message(FiltersApplied(feed="top", changes={"order_by": value}))
