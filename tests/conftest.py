"""Shared test fixtures for the streamshelf test suite."""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from streamshelf.domain.entities.catalog import CacheRecord

CATALOG_URL = "https://example.com/catalog.json"
OTHER_CATALOG_URL = "https://mirror.example.org/catalog.json"


def make_catalog_json(
    version: float = 1.0,
    *,
    movie_id: str = "m1",
    apk_version: str | None = None,
) -> str:
    """Manifest JSON with one movie and one two-episode series."""
    data: dict[str, Any] = {
        "version": version,
        "content": [
            {
                "type": "movie",
                "id": movie_id,
                "title": "The Movie",
                "posterUrl": "https://img.example.com/m1.jpg",
                "pageUrl": "https://ok.ru/video/111",
            },
            {
                "type": "series",
                "id": "s1",
                "title": "The Series",
                "posterUrl": "https://img.example.com/s1.jpg",
                "episodes": [
                    {
                        "id": "s1e1",
                        "title": "Pilot",
                        "pageUrl": "https://vkvideo.ru/video-1_1",
                        "posterUrl": "https://img.example.com/s1e1.jpg",
                    },
                    {
                        "id": "s1e2",
                        "title": "Second",
                        "pageUrl": "https://vkvideo.ru/video-1_2",
                    },
                ],
            },
        ],
    }
    if apk_version is not None:
        data["apkVersion"] = apk_version
    return json.dumps(data)


# ---------------------------------------------------------------------------
# In-memory fakes
# ---------------------------------------------------------------------------


class InMemoryCatalogStore:
    """CatalogCacheStore fake that records every call in ``calls``."""

    def __init__(
        self, record: CacheRecord | None = None, calls: list[str] | None = None
    ) -> None:
        self.record = record
        self.calls = calls if calls is not None else []
        self.saved: list[CacheRecord] = []

    async def load(self) -> CacheRecord | None:
        self.calls.append("load")
        return self.record

    async def save(self, record: CacheRecord) -> None:
        self.calls.append("save")
        self.saved.append(record)
        self.record = record

    async def clear(self) -> None:
        self.calls.append("clear")
        self.record = None


class InMemorySettings:
    """SettingsPort fake."""

    def __init__(self, catalog_url: str = CATALOG_URL) -> None:
        self.catalog_url = catalog_url

    async def get_catalog_url(self) -> str:
        return self.catalog_url

    async def set_catalog_url(self, url: str) -> None:
        self.catalog_url = url


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.set_many = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.delete_many = AsyncMock(return_value=3)
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_fetcher() -> AsyncMock:
    """Mock PageFetcherPort returning a version 1.0 catalog."""
    fetcher = AsyncMock()
    fetcher.get_text = AsyncMock(return_value=make_catalog_json(1.0))
    return fetcher


@pytest.fixture()
def mock_resolver() -> AsyncMock:
    """Mock StreamResolverPort."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock()
    return resolver


@pytest.fixture()
def call_log() -> list[str]:
    return []


@pytest.fixture()
def catalog_store(call_log: list[str]) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(calls=call_log)


@pytest.fixture()
def settings() -> InMemorySettings:
    return InMemorySettings()


# ---------------------------------------------------------------------------
# Helper fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog_url() -> str:
    return CATALOG_URL


@pytest.fixture()
def other_catalog_url() -> str:
    return OTHER_CATALOG_URL


@pytest.fixture()
def catalog_json() -> Callable[..., str]:
    """Factory for manifest JSON strings (see ``make_catalog_json``)."""
    return make_catalog_json
