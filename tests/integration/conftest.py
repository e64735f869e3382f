"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskcacheAdapter,
HttpFetcher, the extractor registry) with mocked HTTP via respx.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncIterator, Iterator

import httpx
import pytest
import respx

from streamshelf.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from streamshelf.infrastructure.config import AppConfig


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer STREAMSHELF_* variables out of integration runs."""
    for key in list(os.environ):
        if key.upper().startswith("STREAMSHELF_"):
            monkeypatch.delenv(key)


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
async def diskcache(tmp_path: Path) -> AsyncIterator[DiskcacheAdapter]:
    """Real DiskcacheAdapter backed by tmp_path (auto-cleaned)."""
    adapter = DiskcacheAdapter(directory=tmp_path / "cache", max_concurrent=5)
    async with adapter:
        yield adapter


@pytest.fixture()
def app_config(tmp_path: Path, catalog_url: str) -> AppConfig:
    """Config pointing at a throwaway cache directory and the test catalog."""
    return AppConfig(
        environment="test",
        cache_dir=tmp_path / "cache",
        catalog_default_url=catalog_url,
        http_user_agent="IntegrationAgent/1.0",
    )


@pytest.fixture()
def respx_mock() -> Iterator[respx.MockRouter]:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
