"""Data models for a single harvest run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StopReason(str, Enum):
    """Why the page traversal ended."""
    NEW_PRODUCT_FOUND = "new_product_found"
    EMPTY_PAGE = "empty_page"
    LAST_PAGE = "last_page"


@dataclass(frozen=True)
class PageRequest:
    """Listing API URL plus the storefront page it pretends to come from."""

    url: str
    referer: str


@dataclass
class HarvestResult:
    """Outcome of one storefront harvest."""

    channel_name: str
    storefront_name: str
    total_pages: int = 0
    pages_fetched: int = 0
    pages_failed: int = 0
    products_saved: int = 0
    products_failed: int = 0
    records_skipped: int = 0
    stop_reason: StopReason | None = None

    def to_dict(self) -> dict:
        return {
            "channel_name": self.channel_name,
            "storefront_name": self.storefront_name,
            "total_pages": self.total_pages,
            "pages_fetched": self.pages_fetched,
            "pages_failed": self.pages_failed,
            "products_saved": self.products_saved,
            "products_failed": self.products_failed,
            "records_skipped": self.records_skipped,
            "stop_reason": self.stop_reason.value if self.stop_reason else None,
        }
