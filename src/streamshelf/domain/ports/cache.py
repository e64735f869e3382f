"""Cache Port - Interface for backend-agnostic key-value storage."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol


class CachePort(Protocol):
    """Port for async key-value cache with optional TTL.

    Implementations:
      - DiskcacheAdapter (SQLite-based, no daemon)
      - RedisAdapter (Redis async client)

    ``ttl=None`` stores the value without expiry. ``set_many`` and
    ``delete_many`` are atomic: either every key changes or none does.

    Each adapter MUST support async context-manager semantics:
        async with cache:
            await cache.set("key", value)
    """

    async def get(self, key: str) -> Any:
        """Retrieve value. None = not found / expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Set value with optional TTL (seconds)."""
        ...

    async def set_many(self, items: Mapping[str, Any]) -> None:
        """Set several values in one transaction (no expiry)."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys in one transaction; returns how many existed."""
        ...

    async def aclose(self) -> None:
        """Cleanup hook (e.g. close Redis connection)."""
        ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
