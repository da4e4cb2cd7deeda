"""Keyed product store: one JSON document per product id."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from ..common.config import Config
from .connection import channel_db_path, get_connection, init_db

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyedStore:
    """Persistent mapping of product id → flat product record.

    Values are stored as JSON and read back as the same dicts that were
    written. Every operation holds one lock, so a single store can be shared
    by the page-level write workers.

    Usage:
        with KeyedStore(Path("data/db/shop.db")) as store:
            record = store.get_or_default("123", {})
            store.put("123", {**record, "name": "..."})
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._conn = get_connection(self.path)
        init_db(self._conn)

    def get_or_default(self, key: str, default: dict[str, Any]) -> dict[str, Any]:
        """Return the stored value for ``key``, or ``default`` if absent."""
        with self._lock:
            row = self._conn.execute(
                "SELECT data FROM products WHERE id = ?", (key,)
            ).fetchone()
        if row is None:
            return default
        return json.loads(row["data"])

    def put(
        self,
        key: str,
        value: dict[str, Any],
        updated_at: str | None = None,
    ) -> str:
        """Insert or replace the value for ``key``.

        Returns:
            The update timestamp that was stored (ISO 8601, UTC).
        """
        stamp = updated_at or _utc_now()
        data = json.dumps(value, ensure_ascii=False)
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO products (id, data, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
                """,
                (key, data, stamp),
            )
            self._conn.commit()
        return stamp

    def get_updated_at(self, key: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT updated_at FROM products WHERE id = ?", (key,)
            ).fetchone()
        return row["updated_at"] if row else None

    def items(self) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (id, value) pairs ordered by numeric id, then by text."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, data FROM products ORDER BY CAST(id AS INTEGER), id"
            ).fetchall()
        for row in rows:
            yield row["id"], json.loads(row["data"])

    def __len__(self) -> int:
        with self._lock:
            row = self._conn.execute("SELECT COUNT(*) FROM products").fetchone()
        return row[0]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> KeyedStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def open_channel_store(channel_name: str, config: Config | None = None) -> KeyedStore:
    """Open (creating if needed) the store for a resolved channel."""
    path = channel_db_path(channel_name, config)
    logger.info("Opening store for channel '%s' at %s", channel_name, path)
    return KeyedStore(path)
