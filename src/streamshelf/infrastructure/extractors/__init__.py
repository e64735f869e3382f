"""Provider extractors for turning hosting pages into playable stream URLs."""

from __future__ import annotations

from ._json_scan import find_balanced_braces, generate_tracking_token
from .okru import OkRuExtractor
from .registry import ExtractorRegistry, default_extractors
from .vkvideo import VkVideoExtractor

__all__ = [
    "ExtractorRegistry",
    "OkRuExtractor",
    "VkVideoExtractor",
    "default_extractors",
    "find_balanced_braces",
    "generate_tracking_token",
]
