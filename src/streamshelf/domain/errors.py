"""Error taxonomy for catalog loading and video resolution.

Only ``FetchError`` is worth retrying by the caller. Parse and page
structure errors mean the payload or the provider's markup changed and
the extraction code needs an update.
"""

from __future__ import annotations


class StreamshelfError(Exception):
    """Base class for all streamshelf errors."""

    retryable: bool = False


class FetchError(StreamshelfError):
    """Transport failure, timeout or non-2xx HTTP status."""

    retryable = True

    def __init__(
        self, message: str, *, url: str = "", status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class EmptyBodyError(StreamshelfError):
    """The server answered successfully but sent nothing."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Empty response body from {url}")
        self.url = url


class ParseError(StreamshelfError):
    """A payload could not be decoded into the expected structure."""


class MalformedCatalogError(ParseError):
    """The catalog manifest is not valid JSON or violates its schema."""


class ExtractionError(StreamshelfError):
    """Base class for failures inside a provider extractor."""


class MalformedOptionsError(ExtractionError, ParseError):
    """The embedded player options blob is not valid JSON."""


class MalformedMetadataError(ExtractionError, ParseError):
    """The nested (double-encoded) metadata JSON is not valid."""


class PageStructureError(ExtractionError):
    """The page no longer matches the expected scraping pattern."""


class ElementNotFoundError(PageStructureError):
    """The marker element is missing from the page."""


class MarkerNotFoundError(PageStructureError):
    """The literal script marker is missing from the page."""


class UnbalancedBracesError(PageStructureError):
    """An inline JSON object could not be isolated by brace balancing."""


class EmptyParamsError(ExtractionError):
    """The player parameters list is empty."""


class NoUsableQualityError(ExtractionError):
    """Data was present but no acceptable stream quality was found."""


class NoProviderMatchError(StreamshelfError):
    """No registered extractor claims the page URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No provider found for URL: {url}")
        self.url = url


class InvalidCatalogUrlError(StreamshelfError, ValueError):
    """A catalog URL given by the user is not an http(s) URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Catalog URL must be http(s): {url!r}")
        self.url = url
