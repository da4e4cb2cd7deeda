"""CSV export of a channel store.

The CSV carries a UTF-8 BOM so spreadsheet tools pick up the Korean labels.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from .common.config import Config
from .database.connection import channel_db_path, sanitize_channel_name
from .database.store import KeyedStore

logger = logging.getLogger(__name__)

# (column label, record key)
CSV_COLUMNS = [
    ("상품번호", "productNo"),
    ("상품ID", "id"),
    ("상품명", "name"),
    ("상품URL", "url"),
    ("정가", "salePrice"),
    ("할인가", "discountedSalePrice"),
    ("모바일할인가", "mobileDiscountedSalePrice"),
    ("리뷰수", "totalReviewCount"),
    ("태그", "tags"),
]


def _to_row(record: dict) -> list:
    row = []
    for _, key in CSV_COLUMNS:
        value = record.get(key, "")
        if key == "tags":
            value = ", ".join(value) if isinstance(value, list) else ""
        row.append(value)
    return row


def export_store_to_csv(store: KeyedStore, output_path: str | Path) -> int:
    """Write every record in ``store`` to ``output_path``.

    Returns:
        Number of products written. An empty store writes no file.
    """
    records = [record for _, record in store.items()]
    if not records:
        logger.warning("No products to export from %s", store.path)
        return 0

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8-sig") as handle:
        writer = csv.writer(handle)
        writer.writerow([label for label, _ in CSV_COLUMNS])
        for record in records:
            writer.writerow(_to_row(record))

    logger.info("Exported %d products to %s", len(records), output_path)
    return len(records)


def export_channel(
    channel_name: str,
    config: Config | None = None,
    output_path: str | Path | None = None,
) -> int:
    """Export the store of a harvested channel.

    Raises:
        FileNotFoundError: No store exists for the channel.
    """
    config = config or Config()
    db_path = channel_db_path(channel_name, config)
    if not db_path.exists():
        raise FileNotFoundError(f"No store found for channel '{channel_name}': {db_path}")

    if output_path is None:
        output_path = config.export_abs_dir / f"{sanitize_channel_name(channel_name)}.csv"

    with KeyedStore(db_path) as store:
        return export_store_to_csv(store, output_path)
