"""HTTP access shared by extractors and the catalog fetch."""

from __future__ import annotations

from .fetcher import HttpFetcher, create_http_client

__all__ = ["HttpFetcher", "create_http_client"]
