"""Tests for the cache adapters and the cache factory."""

from __future__ import annotations

import pickle
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from streamshelf.infrastructure.cache import (
    DiskcacheAdapter,
    RedisAdapter,
    create_cache,
)


class TestDiskcacheAdapter:
    async def test_requires_open(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path / "c")
        with pytest.raises(RuntimeError, match="not initialized"):
            await adapter.get("k")

    async def test_closed_deletes_are_noops(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path / "c")
        assert await adapter.delete("k") is False
        assert await adapter.delete_many(["a", "b"]) == 0

    async def test_get_set_delete(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "c") as cache:
            assert await cache.get("k") is None
            await cache.set("k", {"a": 1})
            assert await cache.get("k") == {"a": 1}
            assert await cache.delete("k") is True
            assert await cache.delete("k") is False

    async def test_set_many_and_delete_many(self, tmp_path: Path) -> None:
        async with DiskcacheAdapter(directory=tmp_path / "c") as cache:
            await cache.set_many({"a": "1", "b": 2.0, "c": None})
            assert await cache.get("a") == "1"
            assert await cache.get("b") == 2.0
            await cache.set("d", "kept")

            assert await cache.delete_many(["a", "b", "c", "missing"]) == 3
            assert await cache.get("a") is None
            assert await cache.get("d") == "kept"

    async def test_values_survive_reopen(self, tmp_path: Path) -> None:
        directory = tmp_path / "c"
        async with DiskcacheAdapter(directory=directory) as cache:
            await cache.set("persisted", "yes")
        async with DiskcacheAdapter(directory=directory) as cache:
            assert await cache.get("persisted") == "yes"


def _mock_pipeline(execute_result: list[object]) -> MagicMock:
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=execute_result)
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=None)
    return pipe


def _mock_redis() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    return client


class TestRedisAdapter:
    async def test_requires_open(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            await RedisAdapter().get("k")

    async def test_get_unpickles(self) -> None:
        client = _mock_redis()
        client.get = AsyncMock(return_value=pickle.dumps({"a": 1}))
        assert await RedisAdapter(client=client).get("k") == {"a": 1}

    async def test_get_miss(self) -> None:
        assert await RedisAdapter(client=_mock_redis()).get("k") is None

    async def test_get_corrupt_payload_raises(self) -> None:
        client = _mock_redis()
        client.get = AsyncMock(return_value=b"")
        with pytest.raises(EOFError):
            await RedisAdapter(client=client).get("k")

    async def test_set_without_ttl(self) -> None:
        client = _mock_redis()
        await RedisAdapter(client=client).set("k", "v")
        client.set.assert_awaited_once_with("k", pickle.dumps("v"), ex=None)

    async def test_set_with_ttl(self) -> None:
        client = _mock_redis()
        await RedisAdapter(client=client).set("k", "v", ttl=60)
        assert client.set.call_args[1]["ex"] == 60

    async def test_set_many_uses_transaction(self) -> None:
        client = _mock_redis()
        pipe = _mock_pipeline([True])
        client.pipeline = MagicMock(return_value=pipe)

        await RedisAdapter(client=client).set_many({"a": "1", "b": 2.0})

        client.pipeline.assert_called_once_with(transaction=True)
        pipe.mset.assert_called_once_with(
            {"a": pickle.dumps("1"), "b": pickle.dumps(2.0)}
        )
        pipe.execute.assert_awaited_once()

    async def test_delete_many_uses_transaction(self) -> None:
        client = _mock_redis()
        pipe = _mock_pipeline([2])
        client.pipeline = MagicMock(return_value=pipe)

        deleted = await RedisAdapter(client=client).delete_many(["a", "b", "c"])

        assert deleted == 2
        pipe.delete.assert_called_once_with("a", "b", "c")

    async def test_delete_many_empty(self) -> None:
        client = _mock_redis()
        client.pipeline = MagicMock()
        assert await RedisAdapter(client=client).delete_many([]) == 0
        client.pipeline.assert_not_called()

    async def test_errors_propagate(self) -> None:
        client = _mock_redis()
        client.set = AsyncMock(side_effect=RedisConnectionError("down"))
        with pytest.raises(RedisConnectionError):
            await RedisAdapter(client=client).set("k", "v")

    async def test_aclose(self) -> None:
        client = _mock_redis()
        adapter = RedisAdapter(client=client)
        await adapter.aclose()
        client.aclose.assert_awaited_once()
        assert await adapter.delete("k") is False


class TestCreateCache:
    def test_diskcache(self, tmp_path: Path) -> None:
        cache = create_cache("diskcache", directory=tmp_path)
        assert isinstance(cache, DiskcacheAdapter)
        assert cache.directory == tmp_path

    def test_redis(self) -> None:
        cache = create_cache("redis", redis_url="redis://cache:6379/2")
        assert isinstance(cache, RedisAdapter)
        assert cache.url == "redis://cache:6379/2"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown cache backend"):
            create_cache("memcached")  # type: ignore[arg-type]
