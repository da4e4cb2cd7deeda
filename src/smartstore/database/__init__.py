"""Storage layer: per-channel keyed SQLite stores."""

from .connection import channel_db_path, get_connection, init_db, sanitize_channel_name
from .store import KeyedStore, open_channel_store
from .writer import merge_product, save_products

__all__ = [
    "KeyedStore",
    "channel_db_path",
    "get_connection",
    "init_db",
    "merge_product",
    "open_channel_store",
    "sanitize_channel_name",
    "save_products",
]
