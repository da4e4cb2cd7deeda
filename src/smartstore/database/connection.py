"""SQLite connection and schema management for per-channel stores."""

from __future__ import annotations

import logging
import re
import sqlite3
from pathlib import Path

from ..common.config import Config

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

# Anything outside latin letters, digits, Hangul syllables, '_' and '-'
_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9가-힣_-]")


def sanitize_channel_name(channel_name: str) -> str:
    """Make a channel display name safe to use as a file name."""
    return _UNSAFE_NAME_CHARS.sub("_", channel_name)


def channel_db_path(channel_name: str, config: Config | None = None) -> Path:
    """Path of the store file for a channel."""
    config = config or Config()
    return config.db_abs_dir / f"{sanitize_channel_name(channel_name)}.db"


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled.

    The connection may be shared between threads; callers serialize access.

    Args:
        db_path: Store file, created along with its parent directory.

    Returns:
        sqlite3.Connection with Row factory.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize the store schema (idempotent)."""
    conn.executescript(_SCHEMA_SQL)
    conn.commit()
