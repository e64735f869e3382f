"""Diskcache adapter - SQLite-based cache without daemon process."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheAdapter:
    """Async wrapper for diskcache.Cache (sync-only library).

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Semaphore prevents too many parallel disk writes (SQLite lock contention).
    - `set_many`/`delete_many` run inside one `Cache.transact()` block.
    - Implements context manager (`async with`).

    Args:
        directory: SQLite DB path (default: `./cache`).
        max_concurrent: Max parallel disk ops (default: 10, tunable).
    """

    def __init__(
        self,
        directory: str | Path = "./cache",
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.debug(
            "diskcache_adapter_init",
            directory=str(self.directory),
            max_concurrent=max_concurrent,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> DiskcacheAdapter:
        """Open SQLite cache (lazy, on first access)."""
        if self._cache is None:
            self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            log.debug("diskcache_opened", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Cleanup: close cache, release locks."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.debug("diskcache_closed", directory=str(self.directory))

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise RuntimeError(
                "Cache not initialized. Use 'async with cache:' or await cache.__aenter__()"
            )
        return self._cache

    # --- CachePort implementation ---
    async def get(self, key: str) -> Optional[Any]:
        """Read from cache (sync disk I/O -> to_thread)."""
        cache = self._require_open()
        async with self._semaphore:
            value = await asyncio.to_thread(cache.get, key, default=None)
            log.debug("cache_get", key=key, hit=value is not None)
            return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Write to cache; ``ttl=None`` stores without expiry."""
        cache = self._require_open()
        async with self._semaphore:
            await asyncio.to_thread(cache.set, key, value, expire=ttl)
            log.debug("cache_set", key=key, ttl=ttl)

    async def set_many(self, items: Mapping[str, Any]) -> None:
        """Write all items in one SQLite transaction."""
        cache = self._require_open()
        snapshot = dict(items)

        def _write() -> None:
            with cache.transact():
                for key, value in snapshot.items():
                    cache.set(key, value)

        async with self._semaphore:
            await asyncio.to_thread(_write)
            log.debug("cache_set_many", keys=sorted(snapshot))

    async def delete(self, key: str) -> bool:
        """Delete key. True = successfully deleted."""
        if self._cache is None:
            return False
        cache = self._cache
        async with self._semaphore:
            deleted = await asyncio.to_thread(cache.delete, key)
            log.debug("cache_delete", key=key, deleted=deleted)
            return bool(deleted)

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete keys in one SQLite transaction; returns count that existed."""
        if self._cache is None:
            return 0
        cache = self._cache
        key_list = list(keys)

        def _delete() -> int:
            with cache.transact():
                return sum(1 for key in key_list if cache.delete(key))

        async with self._semaphore:
            deleted = await asyncio.to_thread(_delete)
            log.debug("cache_delete_many", keys=key_list, deleted=deleted)
            return deleted
