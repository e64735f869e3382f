"""User settings backed by CachePort."""

from __future__ import annotations

import structlog

from streamshelf.domain.errors import InvalidCatalogUrlError
from streamshelf.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

KEY_CATALOG_URL = "settings:catalog_url"


class CacheSettingsStore:
    """Catalog URL setting with a configured fallback."""

    def __init__(self, cache: CachePort, default_catalog_url: str) -> None:
        self.cache = cache
        self.default_catalog_url = default_catalog_url

    async def get_catalog_url(self) -> str:
        value = await self.cache.get(KEY_CATALOG_URL)
        if isinstance(value, str) and value:
            return value
        return self.default_catalog_url

    async def set_catalog_url(self, url: str) -> None:
        url = url.strip()
        if not url.startswith(("http://", "https://")):
            raise InvalidCatalogUrlError(url)
        await self.cache.set(KEY_CATALOG_URL, url)
        log.info("catalog_url_saved", url=url)

    async def reset_catalog_url(self) -> None:
        """Forget the stored URL so the configured default applies again."""
        await self.cache.delete(KEY_CATALOG_URL)
        log.info("catalog_url_reset", default=self.default_catalog_url)
