"""URL helpers for provider matching."""

from __future__ import annotations

from urllib.parse import urlparse


def normalize_page_url(url: str) -> str:
    """Strip whitespace and assume ``https`` when the scheme is missing.

    ``normalize_page_url("ok.ru/video/1")`` is ``"https://ok.ru/video/1"``.
    """
    url = url.strip()
    if not url or "://" in url:
        return url
    if url.startswith("//"):
        return "https:" + url
    return "https://" + url


def extract_hostname(url: str) -> str:
    """Return the lower-cased hostname of *url*, or ``""`` if unparsable."""
    try:
        return (urlparse(normalize_page_url(url)).hostname or "").lower()
    except ValueError:
        return ""


def host_in(url: str, domains: frozenset[str]) -> bool:
    """True if the URL host is one of *domains* or a subdomain of one.

    ``host_in("https://m.ok.ru/video/1", {"ok.ru"})`` is True,
    ``host_in("https://notok.ru/", {"ok.ru"})`` is False.
    """
    host = extract_hostname(url)
    if not host:
        return False
    return any(host == d or host.endswith("." + d) for d in domains)
