"""Harvester Module - SmartStore catalog traversal."""

from .harvester import SmartStoreHarvester
from .models import HarvestResult, PageRequest, StopReason
from .page_fetcher import PageFetcher
from .resolver import ChannelResolver, parse_channel_info
from .transformer import transform_product, transform_products

__all__ = [
    "ChannelResolver",
    "HarvestResult",
    "PageFetcher",
    "PageRequest",
    "SmartStoreHarvester",
    "StopReason",
    "parse_channel_info",
    "transform_product",
    "transform_products",
]
