"""Pydantic models for the Jikan response envelope.

Only the fields the browser displays are declared; everything else in the
payload is ignored. Nullable catalog fields stay optional so a sparse
entry still validates.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mangabrowse.models import MangaItem, PageResult


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ImageVariant(_Lenient):
    image_url: str | None = None


class Images(_Lenient):
    jpg: ImageVariant = Field(default_factory=ImageVariant)


class MangaPayload(_Lenient):
    """One entry of the envelope's ``data`` array."""

    mal_id: int
    title: str | None = None
    url: str | None = None
    images: Images = Field(default_factory=Images)
    score: float | None = None
    type: str | None = None
    volumes: int | None = None
    chapters: int | None = None
    status: str | None = None
    synopsis: str | None = None

    def to_item(self) -> MangaItem:
        return MangaItem(
            mal_id=self.mal_id,
            title=self.title,
            image_url=self.images.jpg.image_url,
            score=self.score,
            type=self.type,
            volumes=self.volumes,
            chapters=self.chapters,
            status=self.status,
            url=self.url,
            synopsis=self.synopsis,
        )


class PaginationItems(_Lenient):
    count: int | None = None
    total: int | None = None
    per_page: int | None = None


class Pagination(_Lenient):
    last_visible_page: int | None = None
    has_next_page: bool
    current_page: int | None = None
    items: PaginationItems | None = None


class Envelope(_Lenient):
    """Top-level response object: result array plus pagination block."""

    data: list[MangaPayload]
    pagination: Pagination

    def to_page(self) -> PageResult:
        total = None
        if self.pagination.items is not None:
            total = self.pagination.items.total
        return PageResult(
            items=[entry.to_item() for entry in self.data],
            has_next_page=self.pagination.has_next_page,
            total=total,
        )
