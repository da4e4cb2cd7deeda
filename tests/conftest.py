"""Shared test fixtures for the SmartStore harvester."""

import json
import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.models import ChannelInfo
from src.smartstore.common.config import Config
from src.smartstore.database.store import KeyedStore

BASE_URL = "https://smartstore.naver.com"


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures" / "smartstore"


@pytest.fixture
def config(tmp_path) -> Config:
    """Provide a Config whose stores and exports live in a temp directory."""
    return Config(
        base_url=BASE_URL,
        db_dir=str(tmp_path / "db"),
        export_dir=str(tmp_path / "exports"),
        max_retries=3,
        backoff_base_seconds=1.0,
        page_size=40,
        page_delay_seconds=0.5,
        rate_limit_cooldown_seconds=5.0,
        write_workers=4,
    )


@pytest.fixture
def store(tmp_path):
    """Provide an empty KeyedStore in a temp directory."""
    with KeyedStore(tmp_path / "store" / "test.db") as s:
        yield s


@pytest.fixture
def market_info(fixtures_dir) -> dict:
    return json.loads((fixtures_dir / "market_info.json").read_text(encoding="utf-8"))


@pytest.fixture
def products_page(fixtures_dir) -> dict:
    return json.loads((fixtures_dir / "products_page.json").read_text(encoding="utf-8"))


@pytest.fixture
def channel() -> ChannelInfo:
    """ChannelInfo where 5001001 is BEST and 5001002 is both BEST and NEW."""
    return ChannelInfo(
        channel_uid="2sWDw6fFDhMx8EbqHHHNf",
        channel_name="제이텐스토어",
        best_product_ids=frozenset({5001001, 5001002}),
        new_product_ids=frozenset({5001002, 5001009}),
    )


@pytest.fixture
def sample_product_record() -> dict:
    """Return a persisted product record for testing."""
    return {
        "id": "5001001",
        "productNo": "4801001",
        "name": "무선 블루투스 이어폰",
        "url": f"{BASE_URL}/jaytenstore/products/5001001",
        "salePrice": 39000,
        "discountedSalePrice": 29000,
        "mobileDiscountedSalePrice": 28000,
        "totalReviewCount": 152,
        "tags": ["BEST"],
    }
