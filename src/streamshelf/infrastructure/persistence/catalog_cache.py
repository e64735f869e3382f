"""Catalog cache store backed by CachePort (diskcache/redis).

The record is kept as three scalar keys (raw JSON, source URL, version)
that are always written and deleted together in one transaction.
"""

from __future__ import annotations

import structlog

from streamshelf.domain.entities.catalog import CacheRecord
from streamshelf.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

KEY_JSON = "catalog:json"
KEY_SOURCE_URL = "catalog:source_url"
KEY_VERSION = "catalog:version"

_ALL_KEYS = (KEY_JSON, KEY_SOURCE_URL, KEY_VERSION)


class CacheCatalogStore:
    """Stores the last fetched catalog and its provenance via CachePort."""

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache

    async def load(self) -> CacheRecord | None:
        """Return the cached record, or None when no catalog JSON is stored."""
        raw_json = await self.cache.get(KEY_JSON)
        if not isinstance(raw_json, str):
            log.debug("catalog_cache_miss")
            return None

        source_url = await self.cache.get(KEY_SOURCE_URL)
        version = await self.cache.get(KEY_VERSION)
        record = CacheRecord(
            raw_json=raw_json,
            source_url=source_url if isinstance(source_url, str) else None,
            version=(
                float(version)
                if isinstance(version, (int, float)) and not isinstance(version, bool)
                else None
            ),
        )
        log.debug(
            "catalog_cache_loaded",
            source_url=record.source_url,
            version=record.version,
            size=len(raw_json),
        )
        return record

    async def save(self, record: CacheRecord) -> None:
        """Overwrite all three keys at once."""
        await self.cache.set_many(
            {
                KEY_JSON: record.raw_json,
                KEY_SOURCE_URL: record.source_url,
                KEY_VERSION: record.version,
            }
        )
        log.info(
            "catalog_cache_saved",
            source_url=record.source_url,
            version=record.version,
        )

    async def clear(self) -> None:
        """Delete the whole record."""
        deleted = await self.cache.delete_many(_ALL_KEYS)
        log.info("catalog_cache_cleared", deleted_keys=deleted)
