"""Common utilities shared across the harvester modules."""

from .config import Config
from .errors import (
    FetchError,
    HarvestError,
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    RecordSkipped,
    ResolutionError,
    TransportError,
)
from .http_client import HTTPClient

__all__ = [
    "Config",
    "FetchError",
    "HTTPClient",
    "HarvestError",
    "MalformedResponseError",
    "NotFoundError",
    "RateLimitedError",
    "RecordSkipped",
    "ResolutionError",
    "TransportError",
]
