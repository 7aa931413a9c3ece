"""Data models for catalog queries, results, and display cards."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from mangabrowse.constants import (
    UNKNOWN_SCORE,
    UNKNOWN_TITLE,
    UNKNOWN_TYPE,
    UNKNOWN_VOLUMES,
)


@dataclass
class FilterState:
    """Current query parameters of one feed.

    Unset filters are empty strings. ``year`` holds the raw year selection
    (``"2004"`` or ``"2000_2009"``) and is expanded into the date pair when
    the query string is built.
    """

    q: str = ""
    genres: str = ""
    year: str = ""
    start_date: str = ""
    end_date: str = ""
    season: str = ""
    type: str = ""
    status: str = ""
    order_by: str = ""
    sort: str = ""
    page: int = 1

    def with_changes(self, **changes: object) -> FilterState:
        """Return a copy with *changes* applied (unknown keys raise TypeError)."""
        return replace(self, **changes)

    def active_filters(self) -> dict[str, str]:
        """Return the non-empty string filters, excluding the page counter."""
        return {
            name: value
            for name, value in self.__dict__.items()
            if name != "page" and value
        }


@dataclass(frozen=True, slots=True)
class MangaItem:
    """One catalog entry as returned by the API. Never mutated."""

    mal_id: int
    title: str | None
    image_url: str | None = None
    score: float | None = None
    type: str | None = None
    volumes: int | None = None
    chapters: int | None = None
    status: str | None = None
    url: str | None = None
    synopsis: str | None = None


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page of results plus the paging flags from the envelope."""

    items: list[MangaItem] = field(default_factory=list)
    has_next_page: bool = False
    total: int | None = None


@dataclass(frozen=True, slots=True)
class MangaCard:
    """Display projection of a MangaItem with placeholders filled in."""

    mal_id: int
    title: str
    image_url: str
    score: str
    type: str
    volumes: str
    chapters: str = ""
    status: str = ""
    url: str = ""
    synopsis: str = ""

    @classmethod
    def from_item(cls, item: MangaItem) -> MangaCard:
        """Project *item* onto display strings.

        A score of ``0`` is shown as unknown, matching how the catalog
        reports unscored entries.
        """
        return cls(
            mal_id=item.mal_id,
            title=item.title or UNKNOWN_TITLE,
            image_url=item.image_url or "",
            score=_format_score(item.score),
            type=item.type or UNKNOWN_TYPE,
            volumes=f"{item.volumes} vols" if item.volumes else UNKNOWN_VOLUMES,
            chapters=f"{item.chapters} chapters" if item.chapters else "",
            status=item.status or "",
            url=item.url or "",
            synopsis=item.synopsis or "",
        )


def _format_score(score: float | None) -> str:
    if not score:
        return UNKNOWN_SCORE
    return f"{score:g}"
