"""Parsing primitives for JSON embedded in HTML and inline scripts.

Shared by the extractors; kept free of I/O so they can be tested
(and fuzzed) in isolation.
"""

from __future__ import annotations

import json
import random
import string
from typing import Any

from streamshelf.domain.errors import UnbalancedBracesError

_TOKEN_ALPHABET = string.ascii_letters + string.digits


def find_balanced_braces(text: str, start: int = 0) -> tuple[int, int]:
    """Locate the JSON object that begins at *start*.

    Leading whitespace is skipped; the first other character must be
    ``{``.  Nesting depth is counted until it returns to zero.  Braces
    inside double-quoted string literals (with backslash escapes) do
    not count.

    Returns the half-open span ``(begin, end)`` so that
    ``text[begin:end]`` is the object including both braces.

    Raises:
        UnbalancedBracesError: no ``{`` at *start*, a stray ``}``, or
            end of input before depth returns to zero.
    """
    if start < 0 or start > len(text):
        raise UnbalancedBracesError(f"Start offset {start} outside of text")

    begin = start
    while begin < len(text) and text[begin].isspace():
        begin += 1
    if begin >= len(text) or text[begin] != "{":
        raise UnbalancedBracesError(f"Expected '{{' at offset {begin}")

    depth = 0
    in_string = False
    escaped = False
    for i in range(begin, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return begin, i + 1
            if depth < 0:
                raise UnbalancedBracesError(f"Stray '}}' at offset {i}")

    raise UnbalancedBracesError(
        f"Input ended at depth {depth} before the object starting at {begin} closed"
    )


def extract_after_marker(text: str, marker: str) -> str | None:
    """Return the balanced JSON object following *marker*, or None if absent.

    Raises:
        UnbalancedBracesError: the marker exists but no object follows it.
    """
    idx = text.find(marker)
    if idx == -1:
        return None
    begin, end = find_balanced_braces(text, idx + len(marker))
    return text[begin:end]


def loads_object(raw: str) -> dict[str, Any] | None:
    """Decode *raw* as a JSON object; None if invalid or not an object."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def generate_tracking_token(length: int = 15) -> str:
    """Random alphanumeric cookie value; not a security token."""
    return "".join(random.choices(_TOKEN_ALPHABET, k=length))
