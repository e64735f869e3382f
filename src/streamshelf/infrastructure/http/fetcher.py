"""Thin async "GET with headers, return body" primitive over httpx.

Used by every extractor and by the catalog fetch. All transport-level
failures are classified as ``FetchError`` so callers handle one type.
"""

from __future__ import annotations

from typing import Mapping

import httpx
import structlog

from streamshelf.domain.errors import EmptyBodyError, FetchError
from streamshelf.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

_POOL_TIMEOUT = 10.0


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Build the shared client with connect/read/write timeouts from config."""
    timeout = httpx.Timeout(
        connect=config.http_connect_timeout_seconds,
        read=config.http_read_timeout_seconds,
        write=config.http_write_timeout_seconds,
        pool=_POOL_TIMEOUT,
    )
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": config.http_user_agent},
    )


class HttpFetcher:
    """Fetches pages and manifests, raising domain errors on failure."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def get_text(
        self, url: str, *, headers: Mapping[str, str] | None = None
    ) -> str:
        try:
            resp = await self._http.get(url, headers=dict(headers or {}))
        except httpx.TimeoutException as exc:
            log.warning("http_fetch_timeout", url=url)
            raise FetchError(f"Timed out fetching {url}", url=url) from exc
        except httpx.HTTPError as exc:
            log.warning("http_fetch_transport_error", url=url, error=str(exc))
            raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

        log.debug("http_fetch_response", url=url, status=resp.status_code)

        if not resp.is_success:
            log.warning("http_fetch_bad_status", url=url, status=resp.status_code)
            raise FetchError(
                f"Failed to fetch {url}. Code: {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            )

        body = resp.text
        if not body.strip():
            log.warning("http_fetch_empty_body", url=url)
            raise EmptyBodyError(url)

        log.debug("http_fetch_body_loaded", url=url, size=len(body))
        return body
