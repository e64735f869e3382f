"""Port for the plain "GET with headers, return body" primitive."""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class PageFetcherPort(Protocol):
    """Fetches a URL and returns its decoded body.

    Raises ``FetchError`` for transport failures, timeouts and non-2xx
    statuses, ``EmptyBodyError`` when the body is empty.
    """

    async def get_text(
        self, url: str, *, headers: Mapping[str, str] | None = None
    ) -> str: ...
