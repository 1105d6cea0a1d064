"""
Inventory settings schema.

Frozen dataclasses that YAML settings files are parsed into by the loader.
Field defaults mirror defaults.yaml so a partial file is still complete.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection and pool settings passed to init_engine_from_url()."""

    url: str = "sqlite:///inventory.db"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    sqlite_busy_timeout: int = 30_000  # milliseconds


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class InventorySettings:
    """Root settings object returned by get_active_settings()."""

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
