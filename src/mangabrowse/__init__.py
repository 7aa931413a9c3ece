"""Terminal browser for the Jikan manga catalog."""

__version__ = "0.1.0"

from mangabrowse.models import FilterState, MangaCard, MangaItem, PageResult

__all__ = [
    "FilterState",
    "MangaCard",
    "MangaItem",
    "PageResult",
    "__version__",
]
