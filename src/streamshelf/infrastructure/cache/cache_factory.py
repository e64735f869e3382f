"""Cache factory - builds the adapter selected in config."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from streamshelf.domain.ports.cache import CachePort
from streamshelf.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from streamshelf.infrastructure.cache.redis_adapter import RedisAdapter

log = structlog.get_logger(__name__)

CacheBackend = Literal["diskcache", "redis"]


def create_cache(
    backend: CacheBackend = "diskcache",
    *,
    directory: str | Path = "./cache",
    redis_url: str = "redis://localhost:6379/0",
    max_concurrent: int = 10,
) -> CachePort:
    """Create a cache adapter for *backend*.

    Args:
        backend: "diskcache" (SQLite) or "redis".
        directory: Diskcache path.
        redis_url: Redis connection string.
        max_concurrent: Semaphore limit (Redis adapter uses at least 50).

    Raises:
        ValueError: If `backend` is unknown.
    """
    if backend == "diskcache":
        log.debug("cache_factory_create", backend=backend, directory=str(directory))
        return DiskcacheAdapter(directory=directory, max_concurrent=max_concurrent)
    elif backend == "redis":
        log.debug("cache_factory_create", backend=backend, url=redis_url)
        return RedisAdapter(url=redis_url, max_concurrent=max(max_concurrent, 50))
    else:
        raise ValueError(
            f"Unknown cache backend: {backend!r}. Must be 'diskcache' or 'redis'."
        )
