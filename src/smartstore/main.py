"""CLI entry point for the SmartStore catalog harvester.

Usage:
    python -m src.smartstore.main --url https://smartstore.naver.com/dongsmarkett
    python -m src.smartstore.main --url https://smartstore.naver.com/dongsmarkett --no-export
    python -m src.smartstore.main --url https://smartstore.naver.com/dongsmarkett \
        --output data/exports/dongsmarkett.csv --page-size 80
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys

from src.common.logging import setup_logging

from .common.config import Config
from .common.errors import HarvestError
from .exporter import export_channel
from .harvester import SmartStoreHarvester

logger = logging.getLogger(__name__)


def validate_store_url(url: str, base_url: str) -> bool:
    """Accept only ``{base_url}/<name>`` with a plain storefront name."""
    pattern = rf"{re.escape(base_url)}/[a-zA-Z0-9_-]+"
    if not re.fullmatch(pattern, url):
        return False

    store_name = extract_store_name(url, base_url)
    if ".." in store_name or "/" in store_name or "\\" in store_name:
        return False

    return True


def extract_store_name(url: str, base_url: str) -> str:
    return url[len(base_url) + 1:] if url.startswith(base_url + "/") else url


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SmartStore Catalog Harvester")
    parser.add_argument(
        "--url",
        type=str,
        required=True,
        help="Storefront URL (e.g., https://smartstore.naver.com/dongsmarkett)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        help="Products per listing page (default: from settings)",
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Skip the CSV export after harvesting",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="CSV output path (default: data/exports/<channel>.csv)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every saved product",
    )

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = Config()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    if args.page_size is not None:
        if args.page_size < 1:
            logger.error("--page-size must be >= 1, got %d", args.page_size)
            return 2
        config.page_size = args.page_size

    if not validate_store_url(args.url, config.base_url):
        logger.error(
            "Invalid storefront URL: %s (expected %s/<store-name>)",
            args.url,
            config.base_url,
        )
        return 2

    store_name = extract_store_name(args.url, config.base_url)
    logger.info("Harvesting product list of %s", args.url)

    try:
        with SmartStoreHarvester(config) as harvester:
            result = harvester.harvest(store_name)
    except HarvestError as exc:
        logger.error("Harvest failed: %s", exc)
        return 1

    logger.info("Result: %s", json.dumps(result.to_dict(), ensure_ascii=False))

    if not args.no_export:
        try:
            exported = export_channel(result.channel_name, config, args.output)
        except OSError as exc:
            logger.error("CSV export failed: %s", exc)
            return 1
        logger.info("Exported %d products for channel '%s'", exported, result.channel_name)

    return 0


if __name__ == "__main__":
    sys.exit(main())
