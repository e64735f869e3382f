from .catalog import (
    CacheRecord,
    CatalogDescriptor,
    CatalogOrigin,
    CatalogSnapshot,
    ContentEntry,
    ContentKind,
    Episode,
)
from .stream import ResolvedStream

__all__ = [
    "CacheRecord",
    "CatalogDescriptor",
    "CatalogOrigin",
    "CatalogSnapshot",
    "ContentEntry",
    "ContentKind",
    "Episode",
    "ResolvedStream",
]
