"""VK Video extractor: scrapes the inline ``playerParams`` script variable.

The page script contains ``var playerParams = {...};`` where the object
is JSON of the form ``{"params": [{"url720": "...", "hls": "...", ...}]}``.
It cannot be cut out by line or length, so the object is isolated by
brace balancing.

VK rejects requests without a ``remixdsid`` tracking cookie; any random
15-character alphanumeric value passes the check.

URLs follow the pattern:
    https://vkvideo.ru/video-{owner}_{id}
    https://vk.com/video-{owner}_{id}
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import structlog

from streamshelf.domain.entities.stream import ResolvedStream
from streamshelf.domain.errors import (
    EmptyParamsError,
    MalformedOptionsError,
    MarkerNotFoundError,
    NoUsableQualityError,
)
from streamshelf.domain.ports.fetcher import PageFetcherPort
from streamshelf.infrastructure.config.defaults import DEFAULT_USER_AGENT

from ._json_scan import extract_after_marker, generate_tracking_token, loads_object
from ._urls import host_in, normalize_page_url

log = structlog.get_logger(__name__)

_VIDEO_DOMAINS = frozenset({"vkvideo.ru"})
_SOCIAL_DOMAINS = frozenset({"vk.com"})

PLAYER_PARAMS_MARKER = "var playerParams = "
TRACKING_COOKIE_NAME = "remixdsid"
TRACKING_TOKEN_LENGTH = 15

# playerParams field -> format tag
_FORMAT_FIELDS: dict[str, str] = {
    "url144": "mp4_144",
    "url240": "mp4_240",
    "url360": "mp4_360",
    "url480": "mp4_480",
    "url720": "mp4_720",
    "url1080": "mp4_1080",
    "hls": "hls",
    "dash_sep": "dash_sep",
    "dash_webm": "dash_webm",
    "dash_webm_av1": "dash_webm_av1",
}

# Descending preference; DASH variants are collected but never chosen.
QUALITY_PRIORITY: tuple[str, ...] = (
    "mp4_1080",
    "mp4_720",
    "mp4_480",
    "hls",
    "mp4_360",
    "mp4_240",
    "mp4_144",
)


def parse_player_params(html: str) -> dict[str, Any]:
    """Return the first entry of ``playerParams.params``."""
    raw = extract_after_marker(html, PLAYER_PARAMS_MARKER)
    if raw is None:
        raise MarkerNotFoundError("Could not find playerParams in HTML")

    data = loads_object(raw)
    if data is None:
        raise MalformedOptionsError("Could not parse playerParams JSON")

    params = data.get("params")
    if not isinstance(params, list):
        raise MalformedOptionsError("playerParams.params is not a list")
    if not params:
        raise EmptyParamsError("playerParams.params is empty")
    if not isinstance(params[0], dict):
        raise MalformedOptionsError("playerParams.params[0] is not an object")
    return params[0]


def collect_stream_urls(video_data: dict[str, Any]) -> dict[str, str]:
    """Map format tag -> URL for every present quality field."""
    available: dict[str, str] = {}
    for field_name, tag in _FORMAT_FIELDS.items():
        value = video_data.get(field_name)
        if isinstance(value, str) and value:
            available[tag] = value
    return available


def select_best_format(available: dict[str, str]) -> tuple[str, str]:
    """Return ``(tag, url)`` of the highest-priority available format."""
    for tag in QUALITY_PRIORITY:
        url = available.get(tag)
        if url:
            return tag, url
    raise NoUsableQualityError("Could not find any playable VK video format")


class VkVideoExtractor:
    """Resolves vkvideo.ru / vk.com video pages to direct MP4/HLS URLs."""

    def __init__(
        self, fetcher: PageFetcherPort, user_agent: str = DEFAULT_USER_AGENT
    ) -> None:
        self._fetcher = fetcher
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "vkvideo"

    def can_handle(self, url: str) -> bool:
        if host_in(url, _VIDEO_DOMAINS):
            return True
        if host_in(url, _SOCIAL_DOMAINS):
            return urlparse(normalize_page_url(url)).path.startswith("/video")
        return False

    async def resolve(self, page_url: str) -> ResolvedStream:
        """Fetch the page with a spoofed tracking cookie and pick the best format."""
        token = generate_tracking_token(TRACKING_TOKEN_LENGTH)
        log.debug("vkvideo_resolve_start", url=page_url)

        html = await self._fetcher.get_text(
            page_url,
            headers={
                "User-Agent": self._user_agent,
                "Cookie": f"{TRACKING_COOKIE_NAME}={token}",
            },
        )

        available = collect_stream_urls(parse_player_params(html))
        log.debug("vkvideo_formats_found", formats=sorted(available))

        tag, url = select_best_format(available)
        log.info("vkvideo_quality_selected", quality=tag, url=page_url)
        return ResolvedStream(
            url=url,
            quality=tag,
            page_url=page_url,
            headers={"Referer": page_url, "User-Agent": self._user_agent},
            is_hls=tag == "hls",
            provider=self.name,
        )
