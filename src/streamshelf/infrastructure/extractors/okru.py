"""OK.ru extractor: reads the player config embedded in an HTML attribute.

The video page carries one element marked ``data-module="OKVideo"``.
Its ``data-options`` attribute is JSON; ``flashvars.metadata`` inside it
is a JSON *string* (double-encoded) whose ``videos`` list holds one
entry per quality:

    {"name": "hd", "url": "https://...", "disallowed": false}

URLs follow the pattern:
    https://ok.ru/video/{id}
    https://m.ok.ru/video/{id}
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from bs4 import BeautifulSoup

from streamshelf.domain.entities.stream import ResolvedStream
from streamshelf.domain.errors import (
    ElementNotFoundError,
    MalformedMetadataError,
    MalformedOptionsError,
    NoUsableQualityError,
)
from streamshelf.domain.ports.fetcher import PageFetcherPort
from streamshelf.infrastructure.config.defaults import DEFAULT_USER_AGENT

from ._json_scan import loads_object
from ._urls import host_in

log = structlog.get_logger(__name__)

_DOMAINS = frozenset({"ok.ru"})

_VIDEO_ELEMENT_SELECTOR = '[data-module="OKVideo"]'

# Descending preference
QUALITY_PRIORITY: tuple[str, ...] = ("full", "hd", "sd", "low", "lowest", "mobile")


@dataclass(frozen=True)
class VideoQuality:
    name: str
    url: str
    disallowed: bool = False


def extract_options_json(html: str) -> str:
    """Return the raw ``data-options`` value of the OKVideo element."""
    soup = BeautifulSoup(html, "lxml")
    element = soup.select_one(_VIDEO_ELEMENT_SELECTOR)
    if element is None:
        raise ElementNotFoundError(
            "Could not find video element with data-module=OKVideo"
        )
    options = element.get("data-options")
    if not isinstance(options, str) or not options.strip():
        raise MalformedOptionsError("OKVideo element has no data-options")
    return options


def parse_video_qualities(options_json: str) -> list[VideoQuality]:
    """Decode both JSON layers and return the quality entries.

    Entries without a string ``name`` and ``url`` are skipped; a missing
    ``disallowed`` flag counts as allowed.
    """
    options = loads_object(options_json)
    if options is None:
        raise MalformedOptionsError("Could not parse data-options")

    flashvars = options.get("flashvars")
    metadata_json = flashvars.get("metadata") if isinstance(flashvars, dict) else None
    if not isinstance(metadata_json, str):
        raise MalformedOptionsError("data-options has no flashvars.metadata string")

    metadata = loads_object(metadata_json)
    if metadata is None:
        raise MalformedMetadataError("Could not parse flashvars.metadata")

    videos = metadata.get("videos")
    if not isinstance(videos, list):
        raise MalformedMetadataError("metadata.videos is not a list")

    qualities: list[VideoQuality] = []
    for raw in videos:
        if not isinstance(raw, dict):
            continue
        name, url = raw.get("name"), raw.get("url")
        if not isinstance(name, str) or not isinstance(url, str) or not url:
            continue
        qualities.append(
            VideoQuality(name=name, url=url, disallowed=bool(raw.get("disallowed")))
        )
    return qualities


def select_best_quality(videos: list[VideoQuality]) -> VideoQuality:
    """First allowed entry in ``QUALITY_PRIORITY`` order wins."""
    for quality in QUALITY_PRIORITY:
        for video in videos:
            if video.name == quality and not video.disallowed:
                return video
    raise NoUsableQualityError("Could not find any allowed OK.ru video quality")


class OkRuExtractor:
    """Resolves ok.ru video pages to direct MP4/HLS URLs."""

    def __init__(
        self, fetcher: PageFetcherPort, user_agent: str = DEFAULT_USER_AGENT
    ) -> None:
        self._fetcher = fetcher
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return "okru"

    def can_handle(self, url: str) -> bool:
        return host_in(url, _DOMAINS)

    async def resolve(self, page_url: str) -> ResolvedStream:
        """Fetch the page and pick the best allowed quality."""
        log.debug("okru_resolve_start", url=page_url)
        html = await self._fetcher.get_text(
            page_url, headers={"User-Agent": self._user_agent}
        )

        videos = parse_video_qualities(extract_options_json(html))
        log.debug(
            "okru_qualities_found",
            count=len(videos),
            qualities={v.name: not v.disallowed for v in videos},
        )

        best = select_best_quality(videos)
        log.info("okru_quality_selected", quality=best.name, url=page_url)
        return ResolvedStream(
            url=best.url,
            quality=best.name,
            page_url=page_url,
            headers={"Referer": page_url, "User-Agent": self._user_agent},
            is_hls=".m3u8" in best.url,
            provider=self.name,
        )
