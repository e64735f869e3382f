"""Ports for catalog cache persistence and user settings."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamshelf.domain.entities.catalog import CacheRecord


@runtime_checkable
class CatalogCacheStore(Protocol):
    """Whole-value storage of the last fetched catalog and its provenance.

    ``load`` returns None when nothing is cached; absence is not an error.
    """

    async def load(self) -> CacheRecord | None: ...

    async def save(self, record: CacheRecord) -> None: ...

    async def clear(self) -> None: ...


@runtime_checkable
class SettingsPort(Protocol):
    """Key-value settings provider (only the catalog URL is needed)."""

    async def get_catalog_url(self) -> str: ...

    async def set_catalog_url(self, url: str) -> None: ...
