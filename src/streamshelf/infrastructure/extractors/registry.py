"""Registry that dispatches page URLs to provider extractors.

Dispatch order is the order of the list given to the constructor and is
part of the contract: the first extractor whose ``can_handle`` accepts
the URL wins. ``default_extractors`` defines the production order.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from streamshelf.domain.entities.stream import ResolvedStream
from streamshelf.domain.errors import NoProviderMatchError, StreamshelfError
from streamshelf.domain.ports.extractor import ExtractorPort
from streamshelf.domain.ports.fetcher import PageFetcherPort
from streamshelf.infrastructure.config.defaults import DEFAULT_USER_AGENT

from ._urls import normalize_page_url
from .okru import OkRuExtractor
from .vkvideo import VkVideoExtractor

log = structlog.get_logger(__name__)


def default_extractors(
    fetcher: PageFetcherPort, user_agent: str = DEFAULT_USER_AGENT
) -> list[ExtractorPort]:
    """Production extractors in priority order.

    1. ``okru``    hosts ok.ru and subdomains
    2. ``vkvideo`` hosts vkvideo.ru (+ subdomains), vk.com ``/video*`` paths

    The URL claims are disjoint, so order only matters for future additions.
    """
    return [
        OkRuExtractor(fetcher, user_agent=user_agent),
        VkVideoExtractor(fetcher, user_agent=user_agent),
    ]


class ExtractorRegistry:
    """Ordered, fail-closed dispatch of page URLs to extractors."""

    def __init__(self, extractors: Sequence[ExtractorPort] | None = None) -> None:
        self._extractors: tuple[ExtractorPort, ...] = tuple(extractors or ())
        names = [e.name for e in self._extractors]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate extractor names: {names}")
        for extractor in self._extractors:
            log.debug("extractor_registered", provider=extractor.name)

    @property
    def supported_providers(self) -> list[str]:
        """Provider names in dispatch order."""
        return [e.name for e in self._extractors]

    def find(self, url: str) -> ExtractorPort | None:
        """Return the first extractor claiming *url*, or None."""
        for extractor in self._extractors:
            if extractor.can_handle(url):
                return extractor
        return None

    async def resolve(self, url: str) -> ResolvedStream:
        """Resolve *url* with the matching extractor.

        A URL without a scheme is treated as ``https``; the extractor
        receives the normalized form.

        Raises:
            NoProviderMatchError: no extractor claims the URL.
            StreamshelfError: whatever the extractor raised, unchanged.
        """
        target = normalize_page_url(url)
        extractor = self.find(target)
        if extractor is None:
            log.warning("extractor_no_match", url=url)
            raise NoProviderMatchError(url)

        log.debug("extractor_selected", provider=extractor.name, url=url)
        try:
            stream = await extractor.resolve(target)
        except StreamshelfError as exc:
            log.warning(
                "extractor_resolve_failed",
                provider=extractor.name,
                url=url,
                error_type=type(exc).__name__,
                error=str(exc),
                retryable=exc.retryable,
            )
            raise
        log.info(
            "extractor_resolve_success",
            provider=extractor.name,
            quality=stream.quality,
            is_hls=stream.is_hls,
        )
        return stream
