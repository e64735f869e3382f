"""Domain entities for video resolution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResolvedStream:
    """Result of resolving a hosting page URL to a directly playable URL.

    Never persisted: stream URLs are short-lived and signed.
    """

    url: str  # Actual playable URL (.mp4, .m3u8, ...)
    quality: str  # Provider quality tag, e.g. "hd" or "mp4_720"
    page_url: str = ""  # Originating hosting page
    headers: dict[str, str] = field(default_factory=dict)  # Required playback headers
    is_hls: bool = False  # True for .m3u8 playlists
    provider: str = ""
