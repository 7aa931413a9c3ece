"""TUI widget modules for the manga catalog browser."""

from .cards import MangaCardWidget, MangaGrid
from .detail import DetailPane
from .feed_view import FeedView
from .filter_panel import BrowseFilterPanel, TopSortSelect
from .search_bar import SearchBar

__all__ = [
    "BrowseFilterPanel",
    "DetailPane",
    "FeedView",
    "MangaCardWidget",
    "MangaGrid",
    "SearchBar",
    "TopSortSelect",
]
