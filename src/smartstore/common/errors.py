"""Error taxonomy for the harvest pipeline."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for every error raised by the harvester."""


class FetchError(HarvestError):
    """A request failed after all retry attempts.

    Attributes:
        url: The resource that could not be fetched.
        cause: The last underlying exception.
    """

    reason = "request failed"

    def __init__(self, url: str, cause: Exception | None = None) -> None:
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{self.reason} for {url}{detail}")


class NotFoundError(FetchError):
    """HTTP 404 from the vendor."""

    reason = "not found"


class RateLimitedError(FetchError):
    """HTTP 429 from the vendor."""

    reason = "rate limited"


class TransportError(FetchError):
    """Connection error, timeout, or an unexpected HTTP status."""

    reason = "transport error"


class MalformedResponseError(HarvestError):
    """The response is missing required fields or is not valid JSON."""


class ResolutionError(HarvestError):
    """A storefront name could not be resolved to a channel."""

    def __init__(self, storefront_name: str, detail: str = "") -> None:
        self.storefront_name = storefront_name
        message = f"could not resolve channelUid for storefront '{storefront_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RecordSkipped(HarvestError):
    """A single listing record is unusable and was dropped."""
