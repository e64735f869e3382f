from __future__ import annotations

from .catalog_cache import CacheCatalogStore
from .settings_store import CacheSettingsStore

__all__ = ["CacheCatalogStore", "CacheSettingsStore"]
