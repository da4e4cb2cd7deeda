"""Page-by-page harvest of one storefront's catalog.

Flow:
  1. Resolve the storefront to its channel (uid, name, BEST/NEW id sets)
  2. Open the keyed store named after the channel
  3. Fetch page 1 (failure aborts the run) and derive the page count
  4. For each page: normalize, persist, then decide whether to continue
  5. Stop on a NEW-tagged product, an empty page, or the last page

Pages are fetched in TOTALSALE order. A NEW-tagged product is taken as the
sign that the rest of the listing was captured by an earlier run.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from src.common.models import ChannelInfo, ListingPage, NormalizedProduct

from ..common.config import Config
from ..common.errors import FetchError, HarvestError, MalformedResponseError, RateLimitedError
from ..common.http_client import HTTPClient
from ..database.store import KeyedStore, open_channel_store
from ..database.writer import save_products
from .models import HarvestResult, StopReason
from .page_fetcher import PageFetcher
from .resolver import ChannelResolver
from .transformer import transform_products

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], KeyedStore]


class SmartStoreHarvester:
    """Harvest a storefront's product listing into its channel store.

    Collaborators are injected so tests can substitute fakes; any that are
    omitted are built from ``config``.

    Usage:
        with SmartStoreHarvester(Config()) as harvester:
            result = harvester.harvest("dongsmarkett")
        print(result.channel_name)
    """

    def __init__(
        self,
        config: Config | None = None,
        client: HTTPClient | None = None,
        resolver: ChannelResolver | None = None,
        fetcher: PageFetcher | None = None,
        store_factory: StoreFactory | None = None,
    ) -> None:
        self.config = config or Config()
        self._owns_client = client is None
        self._client = client or HTTPClient(self.config)
        self.resolver = resolver or ChannelResolver(self._client, self.config.base_url)
        self.fetcher = fetcher or PageFetcher(self._client, self.config.base_url)
        self._store_factory = store_factory or (
            lambda channel_name: open_channel_store(channel_name, self.config)
        )

    def harvest(self, storefront_name: str) -> HarvestResult:
        """Run one harvest.

        Raises:
            ResolutionError: The storefront could not be resolved.
            HarvestError: The first listing page could not be fetched.
        """
        channel = self.resolver.resolve(storefront_name)

        with self._store_factory(channel.channel_name) as store:
            result = self._traverse(storefront_name, channel, store)

        logger.info(
            "Harvest of '%s' finished (%s): %d/%d pages fetched, %d failed, "
            "%d products saved, %d save failures, %d records skipped",
            storefront_name,
            result.stop_reason.value if result.stop_reason else "-",
            result.pages_fetched,
            result.total_pages,
            result.pages_failed,
            result.products_saved,
            result.products_failed,
            result.records_skipped,
        )
        return result

    def _traverse(
        self,
        storefront_name: str,
        channel: ChannelInfo,
        store: KeyedStore,
    ) -> HarvestResult:
        page_size = self.config.page_size
        result = HarvestResult(
            channel_name=channel.channel_name,
            storefront_name=storefront_name,
        )

        page_num = 1
        try:
            page: ListingPage | None = self._fetch(channel, storefront_name, page_num, page_size)
        except (FetchError, MalformedResponseError) as exc:
            raise HarvestError(
                f"first listing page of storefront '{storefront_name}' failed: {exc}"
            ) from exc

        result.total_pages = math.ceil(page.total_count / page_size)

        while True:
            if page is not None:
                result.pages_fetched += 1
                products = self._process_page(page, storefront_name, channel, store, result)

                if not page.simple_products:
                    logger.info("Page %d is empty; stopping", page_num)
                    result.stop_reason = StopReason.EMPTY_PAGE
                    break

                # TODO: newness and TOTALSALE rank are independent orderings;
                # confirm this stop rule with the store owner.
                if any(p.is_new for p in products):
                    logger.info(
                        "NEW product found on page %d/%d; stopping",
                        page_num,
                        result.total_pages,
                    )
                    result.stop_reason = StopReason.NEW_PRODUCT_FOUND
                    break

                logger.info("Page %d/%d done", page_num, result.total_pages)

            if page_num >= result.total_pages:
                result.stop_reason = StopReason.LAST_PAGE
                break

            page_num += 1
            time.sleep(self.config.page_delay_seconds)

            try:
                page = self._fetch(channel, storefront_name, page_num, page_size)
            except (FetchError, MalformedResponseError) as exc:
                result.pages_failed += 1
                logger.warning(
                    "Page %d/%d of '%s' failed, skipping: %s",
                    page_num,
                    result.total_pages,
                    storefront_name,
                    exc,
                )
                page = None

        return result

    def _fetch(
        self,
        channel: ChannelInfo,
        storefront_name: str,
        page_num: int,
        page_size: int,
    ) -> ListingPage:
        """Fetch a page, retrying once after a cooldown when rate limited."""
        try:
            return self.fetcher.fetch_page(
                channel.channel_uid, storefront_name, page_num, page_size
            )
        except RateLimitedError:
            cooldown = self.config.rate_limit_cooldown_seconds
            logger.warning(
                "Rate limited on page %d; cooling down %.1fs before one more try",
                page_num,
                cooldown,
            )
            time.sleep(cooldown)
            return self.fetcher.fetch_page(
                channel.channel_uid, storefront_name, page_num, page_size
            )

    def _process_page(
        self,
        page: ListingPage,
        storefront_name: str,
        channel: ChannelInfo,
        store: KeyedStore,
        result: HarvestResult,
    ) -> list[NormalizedProduct]:
        """Normalize a page and persist it; returns the normalized products."""
        products = transform_products(
            page.simple_products,
            self.config.base_url,
            storefront_name,
            channel,
        )
        result.records_skipped += len(page.simple_products) - len(products)

        saved, failed = save_products(store, products, self.config.write_workers)
        result.products_saved += saved
        result.products_failed += failed
        return products

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> SmartStoreHarvester:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
