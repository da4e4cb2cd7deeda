"""Merge-on-write persistence of normalized products."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from src.common.models import NormalizedProduct

from .store import KeyedStore

logger = logging.getLogger(__name__)


def merge_product(
    store: KeyedStore,
    product_id: str,
    record: dict[str, Any],
) -> dict[str, Any]:
    """Shallow-merge ``record`` over the stored value for ``product_id``.

    Fields present in ``record`` win; fields only in the stored value are
    kept. Merging the same record again leaves the value unchanged, only the
    update timestamp moves.

    Returns:
        The merged value that was written.
    """
    existing = store.get_or_default(product_id, {})
    merged = {**existing, **record}
    store.put(product_id, merged)
    return merged


def save_products(
    store: KeyedStore,
    products: list[NormalizedProduct],
    max_workers: int = 8,
) -> tuple[int, int]:
    """Persist one page of products, one concurrent merge per record.

    Blocks until every write has finished. A failing write is logged and
    does not affect its siblings.

    Returns:
        (saved, failed) counts.
    """
    if not products:
        return 0, 0

    saved = 0
    failed = 0
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(merge_product, store, p.id, p.to_record()): p
            for p in products
        }

        for future in as_completed(futures):
            product = futures[future]
            try:
                future.result()
            except Exception:
                failed += 1
                logger.exception("Failed to save product %s", product.id)
                continue
            saved += 1
            logger.debug(
                "Saved - id: %s, productNo: %s, name: %s",
                product.id,
                product.product_no,
                product.name,
            )

    return saved, failed
