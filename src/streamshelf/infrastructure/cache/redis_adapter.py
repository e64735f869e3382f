"""Redis-Adapter - Async Redis via redis.asyncio."""

from __future__ import annotations

import asyncio
import pickle
from typing import Any, Iterable, Mapping

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

log = structlog.get_logger(__name__)


class RedisAdapter:
    """Async Redis cache with concurrency limiting via semaphore.

    - Uses `redis.asyncio.Redis` (async-native, no to_thread needed).
    - Serialization via pickle (consistent with Diskcache adapter).
    - `set_many`/`delete_many` use a MULTI/EXEC pipeline (atomic).

    Unlike a throwaway result cache, the catalog store must not silently
    lose writes, so Redis errors propagate to the caller.

    Args:
        url: Redis URL (e.g. `redis://localhost:6379/0`).
        max_concurrent: Max parallel Redis ops (default: 50, tunable).
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        max_concurrent: int = 50,
        *,
        client: Redis | None = None,
    ) -> None:
        self.url = url
        self._client: Redis | None = client
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.debug("redis_adapter_init", url=url, max_concurrent=max_concurrent)

    # --- Context Manager ---
    async def __aenter__(self) -> RedisAdapter:
        """Initialize Redis client (connection pool)."""
        if self._client is None:
            self._client = Redis.from_url(self.url, decode_responses=False)
            try:
                await self._client.ping()
                log.debug("redis_connected", url=self.url)
            except RedisError as e:
                log.error("redis_connection_failed", url=self.url, error=str(e))
                raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cleanup: close Redis connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("redis_closed")

    def _require_open(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Use 'async with cache:'")
        return self._client

    # --- CachePort implementation ---
    async def get(self, key: str) -> Any | None:
        """GET with pickle deserialization; undecodable payloads raise."""
        client = self._require_open()
        async with self._semaphore:
            raw = await client.get(key)
        if raw is None:
            log.debug("cache_miss", key=key)
            return None
        value = pickle.loads(raw)
        log.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """SET with pickle serialization; ``ttl=None`` stores without expiry."""
        client = self._require_open()
        packed = pickle.dumps(value)
        async with self._semaphore:
            await client.set(key, packed, ex=ttl)
        log.debug("cache_set", key=key, ttl=ttl, size_bytes=len(packed))

    async def set_many(self, items: Mapping[str, Any]) -> None:
        """MSET inside MULTI/EXEC."""
        client = self._require_open()
        packed = {key: pickle.dumps(value) for key, value in items.items()}
        async with self._semaphore:
            async with client.pipeline(transaction=True) as pipe:
                pipe.mset(packed)
                await pipe.execute()
        log.debug("cache_set_many", keys=sorted(packed))

    async def delete(self, key: str) -> bool:
        """DEL Key."""
        if self._client is None:
            return False
        async with self._semaphore:
            deleted = await self._client.delete(key)
        log.debug("cache_delete", key=key, deleted=deleted > 0)
        return deleted > 0

    async def delete_many(self, keys: Iterable[str]) -> int:
        """DEL of several keys inside MULTI/EXEC."""
        key_list = list(keys)
        if self._client is None or not key_list:
            return 0
        async with self._semaphore:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(*key_list)
                (deleted,) = await pipe.execute()
        log.debug("cache_delete_many", keys=key_list, deleted=deleted)
        return int(deleted)
