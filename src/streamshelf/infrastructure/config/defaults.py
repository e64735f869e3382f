"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CATALOG_URL = (
    "https://gist.githubusercontent.com/IGoRFonin/2a13f5b8fc2bfa42fc1080be654f2465"
    "/raw/112030f4d2f0afb0d7d950774fab773afbf5a4b5/movies.json"
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/139.0.0.0 Safari/537.36"
)

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamshelf",
    "environment": "dev",
    "catalog": {
        "default_url": DEFAULT_CATALOG_URL,
    },
    "http": {
        "connect_timeout_seconds": 10.0,
        "read_timeout_seconds": 30.0,
        "write_timeout_seconds": 30.0,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/streamshelf",
        "backend": "diskcache",
        "redis_url": "redis://localhost:6379/0",
    },
}
