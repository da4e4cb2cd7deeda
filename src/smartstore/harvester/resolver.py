"""Storefront → channel resolution.

API endpoint: GET {base_url}/i/v1/smart-stores?url={storefront_name}
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from src.common.models import ChannelInfo

from ..common.errors import FetchError, MalformedResponseError, ResolutionError
from ..common.http_client import HTTPClient

logger = logging.getLogger(__name__)


class ChannelResolver:
    """Resolve a storefront name to its channel and special-product ids.

    Usage:
        resolver = ChannelResolver(client, "https://smartstore.naver.com")
        channel = resolver.resolve("dongsmarkett")
    """

    LOOKUP_PATH = "/i/v1/smart-stores"

    def __init__(self, client: HTTPClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    def lookup_url(self, storefront_name: str) -> str:
        return f"{self.base_url}{self.LOOKUP_PATH}?url={quote(storefront_name, safe='')}"

    def resolve(self, storefront_name: str) -> ChannelInfo:
        """Look up the channel behind a storefront.

        Raises:
            ResolutionError: The lookup failed after retries, or the
                response carries no channel uid.
        """
        url = self.lookup_url(storefront_name)
        try:
            data = self._client.get_json(url)
        except (FetchError, MalformedResponseError) as exc:
            raise ResolutionError(storefront_name, str(exc)) from exc

        channel = parse_channel_info(data, storefront_name)
        logger.info(
            "Resolved '%s' → channel %s (%s), best=%d new=%d",
            storefront_name,
            channel.channel_uid,
            channel.channel_name,
            len(channel.best_product_ids),
            len(channel.new_product_ids),
        )
        return channel


def parse_channel_info(data: Any, storefront_name: str) -> ChannelInfo:
    """Build ChannelInfo from a smart-stores lookup response."""
    if not isinstance(data, dict):
        raise ResolutionError(storefront_name, "lookup response is not an object")

    channel = data.get("channel") or {}
    if not isinstance(channel, dict):
        raise ResolutionError(storefront_name, "channel is not an object")
    channel_uid = channel.get("channelUid")
    if not channel_uid:
        raise ResolutionError(storefront_name, "response has no channel.channelUid")

    special = data.get("specialProducts") or {}
    if not isinstance(special, dict):
        raise ResolutionError(storefront_name, "specialProducts is not an object")

    try:
        return ChannelInfo(
            channel_uid=str(channel_uid),
            channel_name=channel.get("channelName") or storefront_name,
            best_product_ids=_id_set(special.get("bestProductNos")),
            new_product_ids=_id_set(special.get("newProductNos")),
        )
    except ValueError as exc:
        raise ResolutionError(storefront_name, f"invalid channel info: {exc}") from exc


def _id_set(values: Any) -> frozenset[int]:
    if values is None:
        return frozenset()
    if not isinstance(values, list):
        raise ValueError(f"expected a list of product ids, got {type(values).__name__}")
    ids: set[int] = set()
    for value in values:
        try:
            ids.add(int(value))
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric special product id: %r", value)
    return frozenset(ids)
