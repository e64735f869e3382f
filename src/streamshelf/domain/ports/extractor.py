"""Port for provider-specific video extractors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamshelf.domain.entities.stream import ResolvedStream


@runtime_checkable
class ExtractorPort(Protocol):
    """Turns a hosting page URL into a directly playable stream URL.

    Implementations handle site-specific scraping (embedded JSON blobs,
    inline script variables, anti-bot headers, quality selection).
    """

    @property
    def name(self) -> str:
        """Provider name this extractor handles (e.g. 'okru')."""
        ...

    def can_handle(self, url: str) -> bool:
        """Return True if the URL belongs to this provider."""
        ...

    async def resolve(self, page_url: str) -> ResolvedStream:
        """Resolve the page to a stream.

        Raises a ``StreamshelfError`` subclass on failure; never returns None.
        """
        ...


@runtime_checkable
class StreamResolverPort(Protocol):
    """Dispatches any page URL to the extractor that claims it."""

    async def resolve(self, url: str) -> ResolvedStream:
        """Raises ``NoProviderMatchError`` when no extractor claims *url*."""
        ...
