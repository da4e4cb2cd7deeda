"""Paginated channel product listing.

API endpoint: GET {base_url}/i/v2/channels/{channel_uid}/categories/ALL/products
The API checks the Referer header, so every request carries the URL of the
matching storefront category page.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from pydantic import ValidationError

from src.common.models import ListingPage

from ..common.errors import MalformedResponseError
from ..common.http_client import HTTPClient
from .models import PageRequest

logger = logging.getLogger(__name__)

SORT_TYPE = "TOTALSALE"
CATEGORY = "ALL"


class PageFetcher:
    """Fetch one page of a channel's best-selling-first product listing."""

    def __init__(self, client: HTTPClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    def build_request(
        self,
        channel_uid: str,
        storefront_name: str,
        page_num: int,
        page_size: int,
    ) -> PageRequest:
        """Build the API URL and referer for a 1-based page number."""
        if page_num < 1:
            raise ValueError(f"page_num must be >= 1, got {page_num}")

        api_query = urlencode({
            "categorySearchType": "STDCATG",
            "sortType": SORT_TYPE,
            "page": page_num,
            "pageSize": page_size,
        })
        url = (
            f"{self.base_url}/i/v2/channels/{channel_uid}"
            f"/categories/{CATEGORY}/products?{api_query}"
        )

        referer_query = urlencode({
            "st": SORT_TYPE,
            "dt": "BIG_IMAGE",
            "page": page_num,
            "size": page_size,
        })
        referer = f"{self.base_url}/{storefront_name}/category/{CATEGORY}?{referer_query}"

        return PageRequest(url=url, referer=referer)

    def fetch_page(
        self,
        channel_uid: str,
        storefront_name: str,
        page_num: int,
        page_size: int,
    ) -> ListingPage:
        """Fetch and validate one listing page.

        Raises:
            FetchError: NotFoundError / RateLimitedError / TransportError
                from the client.
            MalformedResponseError: The envelope is not a listing page.
        """
        request = self.build_request(channel_uid, storefront_name, page_num, page_size)
        data = self._client.get_json(request.url, headers={"Referer": request.referer})

        try:
            page = ListingPage.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"unexpected listing envelope for page {page_num} "
                f"of '{storefront_name}': {exc.error_count()} error(s)"
            ) from exc

        logger.debug(
            "Fetched page %d of '%s': %d items (totalCount=%d)",
            page_num,
            storefront_name,
            len(page.simple_products),
            page.total_count,
        )
        return page
