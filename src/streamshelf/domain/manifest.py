"""JSON codec for the remote catalog manifest (pure, no I/O).

Wire format::

    {"version": 2.0,
     "content": [
        {"type": "movie", "id": "m1", "title": "...", "posterUrl": "...",
         "pageUrl": "https://ok.ru/video/1"},
        {"type": "series", "id": "s1", "title": "...", "posterUrl": "...",
         "episodes": [{"id": "e1", "title": "...", "pageUrl": "...",
                       "posterUrl": "..."}]}],
     "apkVersion": "1.2", "apkUrl": "https://..."}

``apkVersion``/``apkUrl`` are optional and only carried along.
"""

from __future__ import annotations

import json
import math
from typing import Any

from streamshelf.domain.entities.catalog import (
    CatalogDescriptor,
    ContentEntry,
    ContentKind,
    Episode,
)
from streamshelf.domain.errors import MalformedCatalogError


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedCatalogError(f"{where}.{key} must be a string")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedCatalogError(f"{where}.{key} must be a string or absent")
    return value


def _parse_version(value: Any) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedCatalogError("version must be a number")
    try:
        version = float(value)
    except OverflowError:
        raise MalformedCatalogError("version is out of range") from None
    if not math.isfinite(version):
        raise MalformedCatalogError(f"version must be finite, got {version!r}")
    return version


def _parse_episode(data: Any, where: str) -> Episode:
    if not isinstance(data, dict):
        raise MalformedCatalogError(f"{where} must be an object")
    return Episode(
        id=_require_str(data, "id", where),
        title=_require_str(data, "title", where),
        page_url=_require_str(data, "pageUrl", where),
        poster_url=_optional_str(data, "posterUrl", where),
    )


def _parse_entry(data: Any, where: str) -> ContentEntry:
    if not isinstance(data, dict):
        raise MalformedCatalogError(f"{where} must be an object")

    raw_kind = data.get("type")
    try:
        kind = ContentKind(raw_kind)
    except ValueError:
        raise MalformedCatalogError(f"{where}.type {raw_kind!r} is unknown") from None

    common = {
        "kind": kind,
        "id": _require_str(data, "id", where),
        "title": _require_str(data, "title", where),
        "poster_url": _require_str(data, "posterUrl", where),
    }

    if kind is ContentKind.MOVIE:
        return ContentEntry(page_url=_require_str(data, "pageUrl", where), **common)

    episodes = data.get("episodes")
    if not isinstance(episodes, list):
        raise MalformedCatalogError(f"{where}.episodes must be a list")
    return ContentEntry(
        episodes=tuple(
            _parse_episode(ep, f"{where}.episodes[{i}]") for i, ep in enumerate(episodes)
        ),
        **common,
    )


def parse_catalog(raw: str) -> CatalogDescriptor:
    """Decode a manifest JSON string.

    Raises:
        MalformedCatalogError: invalid JSON or schema violation.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise MalformedCatalogError(f"Catalog is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedCatalogError("Catalog root must be an object")

    content = data.get("content")
    if not isinstance(content, list):
        raise MalformedCatalogError("content must be a list")

    return CatalogDescriptor(
        version=_parse_version(data.get("version")),
        items=tuple(
            _parse_entry(item, f"content[{i}]") for i, item in enumerate(content)
        ),
        apk_version=_optional_str(data, "apkVersion", "catalog"),
        apk_url=_optional_str(data, "apkUrl", "catalog"),
    )


def _episode_to_dict(episode: Episode) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": episode.id,
        "title": episode.title,
        "pageUrl": episode.page_url,
    }
    if episode.poster_url is not None:
        out["posterUrl"] = episode.poster_url
    return out


def _entry_to_dict(entry: ContentEntry) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": entry.kind.value,
        "id": entry.id,
        "title": entry.title,
        "posterUrl": entry.poster_url,
    }
    if entry.episodes is not None:
        out["episodes"] = [_episode_to_dict(ep) for ep in entry.episodes]
    if entry.page_url is not None:
        out["pageUrl"] = entry.page_url
    return out


def catalog_to_dict(catalog: CatalogDescriptor) -> dict[str, Any]:
    """Wire-shaped dict of *catalog* (inverse of ``parse_catalog``)."""
    out: dict[str, Any] = {
        "version": catalog.version,
        "content": [_entry_to_dict(entry) for entry in catalog.items],
    }
    if catalog.apk_version is not None:
        out["apkVersion"] = catalog.apk_version
    if catalog.apk_url is not None:
        out["apkUrl"] = catalog.apk_url
    return out


def serialize_catalog(catalog: CatalogDescriptor) -> str:
    """Encode *catalog* as manifest JSON."""
    return json.dumps(catalog_to_dict(catalog), ensure_ascii=False)
