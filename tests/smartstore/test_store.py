"""Tests for the keyed store and the merge writer."""

from __future__ import annotations

from unittest.mock import patch

from src.common.models import NormalizedProduct
from src.smartstore.database.connection import channel_db_path, sanitize_channel_name
from src.smartstore.database.store import KeyedStore, open_channel_store
from src.smartstore.database.writer import merge_product, save_products


class TestSanitizeChannelName:
    def test_keeps_safe_characters(self):
        assert sanitize_channel_name("제이텐_Store-01") == "제이텐_Store-01"

    def test_replaces_unsafe_characters(self):
        assert sanitize_channel_name("my shop/../x") == "my_shop____x"
        assert sanitize_channel_name("가게★(공식)") == "가게__공식_"

    def test_db_path(self, config):
        path = channel_db_path("동 스마켓", config)
        assert path.name == "동_스마켓.db"
        assert path.parent == config.db_abs_dir


class TestKeyedStore:
    def test_get_or_default_absent(self, store):
        assert store.get_or_default("missing", {}) == {}

    def test_put_and_get(self, store, sample_product_record):
        store.put("5001001", sample_product_record)
        assert store.get_or_default("5001001", {}) == sample_product_record
        assert len(store) == 1

    def test_put_replaces(self, store):
        store.put("1", {"a": 1})
        store.put("1", {"b": 2})
        assert store.get_or_default("1", {}) == {"b": 2}
        assert len(store) == 1

    def test_updated_at_recorded(self, store):
        stamp = store.put("1", {"a": 1}, updated_at="2026-10-16T00:00:00+00:00")
        assert stamp == "2026-10-16T00:00:00+00:00"
        assert store.get_updated_at("1") == stamp
        assert store.get_updated_at("2") is None

    def test_items_sorted(self, store):
        store.put("b", {"id": "b"})
        store.put("a", {"id": "a"})
        assert [k for k, _ in store.items()] == ["a", "b"]

    def test_items_numeric_ids_in_numeric_order(self, store):
        for key in ("2", "10", "1", "100"):
            store.put(key, {"id": key})
        assert [k for k, _ in store.items()] == ["1", "2", "10", "100"]

    def test_round_trip_across_reopen(self, tmp_path, sample_product_record):
        path = tmp_path / "shop.db"
        with KeyedStore(path) as s:
            s.put("5001001", sample_product_record)

        with KeyedStore(path) as s:
            assert s.get_or_default("5001001", {}) == sample_product_record

    def test_open_channel_store(self, config):
        with open_channel_store("Shop", config) as s:
            s.put("1", {"id": "1"})
        assert (config.db_abs_dir / "Shop.db").exists()


class TestMergeProduct:
    def test_merge_into_empty(self, store, sample_product_record):
        merged = merge_product(store, "5001001", sample_product_record)
        assert merged == sample_product_record
        assert store.get_or_default("5001001", {}) == sample_product_record

    def test_new_fields_win_old_fields_kept(self, store):
        store.put("1", {"id": "1", "name": "old", "note": "manual"})
        merged = merge_product(store, "1", {"id": "1", "name": "new"})
        assert merged == {"id": "1", "name": "new", "note": "manual"}

    def test_idempotent(self, store, sample_product_record):
        merge_product(store, "5001001", sample_product_record)
        once = store.get_or_default("5001001", {})
        merge_product(store, "5001001", sample_product_record)
        twice = store.get_or_default("5001001", {})
        assert once == twice

    def test_stamps_update_time(self, store, sample_product_record):
        store.put("5001001", {}, updated_at="2000-01-01T00:00:00+00:00")
        merge_product(store, "5001001", sample_product_record)
        assert store.get_updated_at("5001001") > "2000-01-01T00:00:00+00:00"


class TestSaveProducts:
    def _products(self, n: int) -> list[NormalizedProduct]:
        return [
            NormalizedProduct(
                id=str(i),
                product_no=str(i * 10),
                name=f"상품 {i}",
                url=f"https://smartstore.naver.com/shop/products/{i}",
                sale_price=1000 * i,
                discounted_sale_price=1000 * i,
                mobile_discounted_sale_price=1000 * i,
            )
            for i in range(1, n + 1)
        ]

    def test_saves_all(self, store):
        saved, failed = save_products(store, self._products(25), max_workers=4)
        assert (saved, failed) == (25, 0)
        assert len(store) == 25
        assert store.get_or_default("3", {})["productNo"] == "30"

    def test_empty(self, store):
        assert save_products(store, []) == (0, 0)

    def test_failure_isolated(self, store):
        real_merge = merge_product

        def flaky_merge(s, product_id, record):
            if product_id == "2":
                raise RuntimeError("disk full")
            return real_merge(s, product_id, record)

        with patch("src.smartstore.database.writer.merge_product", side_effect=flaky_merge):
            saved, failed = save_products(store, self._products(3), max_workers=2)

        assert (saved, failed) == (2, 1)
        assert store.get_or_default("2", None) is None
        assert store.get_or_default("3", {})["id"] == "3"
