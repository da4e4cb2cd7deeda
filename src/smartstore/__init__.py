"""
SmartStore Catalog Harvester

Modules:
- common: HTTP client, error taxonomy, runtime config
- database: per-channel keyed SQLite store
- harvester: channel resolver, page fetcher, record transformer, harvest loop
- exporter: CSV export of a channel store
- main: CLI entry point
"""

__version__ = "0.1.0"
