"""Runtime configuration for the harvester modules."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from src.common.config import DB_DIR, EXPORTS_DIR, PROJECT_ROOT, settings


@dataclass
class Config:
    """Central configuration; defaults from settings, overrides from env."""

    # SmartStore
    base_url: str = settings.base_url

    # HTTP
    request_timeout: int = settings.harvest.request_timeout
    user_agent: str = settings.user_agent
    max_retries: int = settings.harvest.max_retries
    backoff_base_seconds: float = settings.harvest.backoff_base_seconds

    # Traversal
    page_size: int = settings.harvest.page_size
    page_delay_seconds: float = settings.harvest.page_delay_seconds
    rate_limit_cooldown_seconds: float = settings.harvest.rate_limit_cooldown_seconds
    write_workers: int = settings.harvest.write_workers

    # Storage
    db_dir: str = field(
        default_factory=lambda: os.getenv("HARVEST_DB_DIR", str(DB_DIR))
    )
    export_dir: str = field(
        default_factory=lambda: os.getenv("HARVEST_EXPORT_DIR", str(EXPORTS_DIR))
    )

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("SMARTSTORE_BASE_URL"):
            self.base_url = url
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = int(timeout)
        if page_size := os.getenv("HARVEST_PAGE_SIZE"):
            self.page_size = int(page_size)
        if delay := os.getenv("HARVEST_PAGE_DELAY"):
            self.page_delay_seconds = float(delay)
        self.base_url = self.base_url.rstrip("/")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def db_abs_dir(self) -> Path:
        """Resolve the store directory relative to project root."""
        p = Path(self.db_dir)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p

    @property
    def export_abs_dir(self) -> Path:
        """Resolve the export directory relative to project root."""
        p = Path(self.export_dir)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p
