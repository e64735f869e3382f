"""Application state container built by the composition root."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from streamshelf.application.use_cases import ContentRepository
from streamshelf.domain.ports import CachePort
from streamshelf.infrastructure.config import AppConfig
from streamshelf.infrastructure.extractors import ExtractorRegistry
from streamshelf.infrastructure.http import HttpFetcher
from streamshelf.infrastructure.persistence import (
    CacheCatalogStore,
    CacheSettingsStore,
)


@dataclass
class AppState:
    """All wired resources for one process.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient
    fetcher: HttpFetcher

    # Persistence
    settings: CacheSettingsStore
    catalog_store: CacheCatalogStore

    # Video resolution
    extractor_registry: ExtractorRegistry

    # Application Services
    content_repository: ContentRepository
