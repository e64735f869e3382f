from .cache import CachePort
from .catalog_store import CatalogCacheStore, SettingsPort
from .extractor import ExtractorPort, StreamResolverPort
from .fetcher import PageFetcherPort

__all__ = [
    "CachePort",
    "CatalogCacheStore",
    "ExtractorPort",
    "PageFetcherPort",
    "SettingsPort",
    "StreamResolverPort",
]
