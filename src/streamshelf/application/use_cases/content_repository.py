"""Content repository: catalog fetch/cache reconciliation and video lookup.

Per catalog request:

1. Read the configured catalog URL.
2. Load the cache record.
3. Same source URL: parse the cached JSON and surface it. A corrupt
   record is cleared silently and treated as absent.
4. Different source URL: clear the cache before touching the network.
5. Fetch the remote catalog. On failure the cached catalog (if any) is
   the final answer; without one the error propagates.
6. Persist the remote catalog when there was no prior version, its
   version is strictly greater, or the source URL changed.
7. Surface the remote catalog unless the cached one was already
   surfaced and the remote version is not strictly greater.

Nothing here is kept between calls except what the cache store persists.
"""

from __future__ import annotations

import math
from typing import AsyncIterator

import structlog

from streamshelf.domain.entities.catalog import (
    CacheRecord,
    CatalogDescriptor,
    CatalogSnapshot,
)
from streamshelf.domain.entities.stream import ResolvedStream
from streamshelf.domain.errors import MalformedCatalogError, StreamshelfError
from streamshelf.domain.manifest import parse_catalog
from streamshelf.domain.ports.catalog_store import CatalogCacheStore, SettingsPort
from streamshelf.domain.ports.extractor import StreamResolverPort
from streamshelf.domain.ports.fetcher import PageFetcherPort

log = structlog.get_logger(__name__)


class ContentRepository:
    """Orchestrates settings, the catalog cache, the network and extractors."""

    def __init__(
        self,
        settings: SettingsPort,
        cache_store: CatalogCacheStore,
        fetcher: PageFetcherPort,
        resolver: StreamResolverPort,
    ) -> None:
        self._settings = settings
        self._cache_store = cache_store
        self._fetcher = fetcher
        self._resolver = resolver

    async def catalog_updates(self) -> AsyncIterator[CatalogSnapshot]:
        """Yield the usable cached catalog first, then a superseding remote one.

        Yields at most two snapshots. Raises the fetch/parse error only
        when nothing usable was cached.
        """
        source_url = await self._settings.get_catalog_url()
        record = await self._cache_store.load()

        cached: CatalogDescriptor | None = None
        cached_version: float | None = None
        source_changed = False

        if record is not None and record.source_url == source_url:
            try:
                cached = parse_catalog(record.raw_json)
            except MalformedCatalogError as exc:
                log.warning("catalog_cache_corrupt", source_url=source_url, error=str(exc))
                await self._cache_store.clear()
            else:
                cached_version = record.version
                if cached_version is not None and not math.isfinite(cached_version):
                    # older than any remote catalog, same as a missing version
                    cached_version = None
                log.info(
                    "catalog_cache_hit",
                    source_url=source_url,
                    version=cached_version,
                    items=len(cached.items),
                )
                yield CatalogSnapshot(catalog=cached, origin="cache", source_url=source_url)
        elif record is not None:
            log.info(
                "catalog_source_changed",
                cached_source_url=record.source_url,
                source_url=source_url,
            )
            source_changed = True
            await self._cache_store.clear()

        try:
            raw_json = await self._fetcher.get_text(source_url)
            remote = parse_catalog(raw_json)
        except StreamshelfError as exc:
            if cached is None:
                log.error(
                    "catalog_fetch_failed",
                    source_url=source_url,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise
            log.warning(
                "catalog_fetch_failed_using_cache",
                source_url=source_url,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return

        is_newer = cached_version is None or remote.version > cached_version

        if is_newer or source_changed:
            await self._cache_store.save(
                CacheRecord(raw_json=raw_json, source_url=source_url, version=remote.version)
            )
        else:
            log.debug(
                "catalog_cache_kept",
                cached_version=cached_version,
                remote_version=remote.version,
            )

        if cached is None or is_newer:
            log.info(
                "catalog_remote_loaded",
                source_url=source_url,
                version=remote.version,
                items=len(remote.items),
            )
            yield CatalogSnapshot(catalog=remote, origin="network", source_url=source_url)

    async def get_catalog(self) -> CatalogSnapshot:
        """Run the reconciliation and return the freshest surfaced snapshot."""
        latest: CatalogSnapshot | None = None
        async for snapshot in self.catalog_updates():
            latest = snapshot
        if latest is None:
            raise RuntimeError("catalog reconciliation produced no result")
        return latest

    async def resolve_video(self, page_url: str) -> ResolvedStream:
        """Resolve a hosting page to a playable stream. Never cached."""
        log.debug("resolve_video_requested", page_url=page_url)
        return await self._resolver.resolve(page_url)

    async def clear_cache(self) -> None:
        """Manual cache reset."""
        await self._cache_store.clear()

    async def get_catalog_url(self) -> str:
        return await self._settings.get_catalog_url()

    async def set_catalog_url(self, url: str) -> None:
        await self._settings.set_catalog_url(url)
