"""Raw listing record → NormalizedProduct."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from src.common.models import BenefitsView, ChannelInfo, NormalizedProduct, RawProduct

from ..common.errors import RecordSkipped

logger = logging.getLogger(__name__)


def transform_product(
    item: Any,
    base_url: str,
    storefront_name: str,
    channel: ChannelInfo,
) -> NormalizedProduct:
    """Normalize a single raw listing record.

    Discount prices fall back to the sale price when missing or zero; the
    review count falls back to 0. When only one of id / productNo is
    present it stands in for the other.

    Raises:
        RecordSkipped: The record is unusable.
    """
    if not isinstance(item, dict):
        raise RecordSkipped(f"listing record is not an object: {type(item).__name__}")

    try:
        raw = RawProduct.model_validate(item)
    except ValidationError as exc:
        raise RecordSkipped(f"invalid listing record: {exc.error_count()} error(s)") from exc

    if raw.id is None and raw.product_no is None:
        raise RecordSkipped("listing record has neither id nor productNo")

    product_id = raw.id if raw.id is not None else raw.product_no
    product_no = raw.product_no if raw.product_no is not None else raw.id

    sale_price = raw.sale_price or 0
    benefits = raw.benefits_view or BenefitsView()
    review_count = raw.review_amount.total_review_count if raw.review_amount else None

    return NormalizedProduct(
        id=str(product_id),
        product_no=str(product_no),
        name=raw.name or "",
        url=f"{base_url.rstrip('/')}/{storefront_name}/products/{product_id}",
        sale_price=sale_price,
        discounted_sale_price=benefits.discounted_sale_price or sale_price,
        mobile_discounted_sale_price=benefits.mobile_discounted_sale_price or sale_price,
        total_review_count=review_count or 0,
        tags=channel.tags_for(product_id),
    )


def transform_products(
    raw_items: Iterable[Any],
    base_url: str,
    storefront_name: str,
    channel: ChannelInfo,
) -> list[NormalizedProduct]:
    """Normalize a page of raw records, preserving order.

    Unusable records are logged and dropped. A product id that appears
    twice in the same batch is only emitted once.
    """
    products: list[NormalizedProduct] = []
    seen: set[str] = set()

    for index, item in enumerate(raw_items):
        try:
            product = transform_product(item, base_url, storefront_name, channel)
        except RecordSkipped as exc:
            logger.warning("Skipping listing record #%d: %s", index, exc)
            continue

        if product.id in seen:
            logger.warning("Skipping duplicate product id %s in one page", product.id)
            continue

        seen.add(product.id)
        products.append(product)

    return products
