"""Composition root: wires ports to adapters for one process lifetime."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

from streamshelf.application.use_cases import ContentRepository
from streamshelf.infrastructure.cache import create_cache
from streamshelf.infrastructure.config import AppConfig
from streamshelf.infrastructure.extractors import ExtractorRegistry, default_extractors
from streamshelf.infrastructure.http import HttpFetcher, create_http_client
from streamshelf.infrastructure.persistence import (
    CacheCatalogStore,
    CacheSettingsStore,
)
from streamshelf.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(config: AppConfig) -> AsyncIterator[AppState]:
    """Open the cache and HTTP client, build services, close on exit."""
    cache = create_cache(
        config.cache_backend,
        directory=config.cache_dir,
        redis_url=config.cache_redis_url,
    )
    async with cache, create_http_client(config) as http_client:
        fetcher = HttpFetcher(http_client)
        registry = ExtractorRegistry(
            default_extractors(fetcher, user_agent=config.http_user_agent)
        )
        settings = CacheSettingsStore(cache, config.catalog_default_url)
        catalog_store = CacheCatalogStore(cache)

        state = AppState(
            config=config,
            cache=cache,
            http_client=http_client,
            fetcher=fetcher,
            settings=settings,
            catalog_store=catalog_store,
            extractor_registry=registry,
            content_repository=ContentRepository(
                settings=settings,
                cache_store=catalog_store,
                fetcher=fetcher,
                resolver=registry,
            ),
        )
        log.debug(
            "app_state_ready",
            cache_backend=config.cache_backend,
            providers=registry.supported_providers,
        )
        yield state
