"""Domain entities for the content catalog.

Pure value objects with no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

CatalogOrigin = Literal["cache", "network"]


class ContentKind(str, Enum):
    """Kind of a catalog entry (wire value is the enum value)."""

    SERIES = "series"
    MOVIE = "movie"


@dataclass(frozen=True)
class Episode:
    """A single playable episode of a series."""

    id: str
    title: str
    page_url: str
    poster_url: str | None = None


@dataclass(frozen=True)
class ContentEntry:
    """A movie or a series in the catalog.

    Exactly one of ``page_url`` (movies) and ``episodes`` (series) is set.
    """

    kind: ContentKind
    id: str
    title: str
    poster_url: str
    page_url: str | None = None
    episodes: tuple[Episode, ...] | None = None

    def __post_init__(self) -> None:
        if self.kind is ContentKind.MOVIE:
            if self.page_url is None or self.episodes is not None:
                raise ValueError(f"movie {self.id!r} needs page_url and no episodes")
        elif self.episodes is None or self.page_url is not None:
            raise ValueError(f"series {self.id!r} needs episodes and no page_url")

    @property
    def is_series(self) -> bool:
        return self.kind is ContentKind.SERIES


@dataclass(frozen=True)
class CatalogDescriptor:
    """One fetched catalog manifest."""

    version: float
    items: tuple[ContentEntry, ...] = ()
    apk_version: str | None = None  # carried as data only
    apk_url: str | None = None


@dataclass(frozen=True)
class CacheRecord:
    """Persisted last-known catalog plus its provenance."""

    raw_json: str
    source_url: str | None = None
    version: float | None = None


@dataclass(frozen=True)
class CatalogSnapshot:
    """A catalog surfaced to the caller together with where it came from."""

    catalog: CatalogDescriptor
    origin: CatalogOrigin
    source_url: str
