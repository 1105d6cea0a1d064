"""
inventory_config -- single public entrypoint for inventory settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``: the shipped defaults.yaml (or a caller
    supplied file) with environment overrides layered on top.

Architecture position:
    Configuration.  Sits beside ``inventory_kernel``; the kernel MUST NEVER
    import from ``inventory_config``.  Entry points (the CLI) read settings
    here and pass plain values to ``init_engine_from_url()`` and
    ``configure_logging()``.

Failure modes:
    - ``FileNotFoundError`` -- the settings file does not exist.
    - ``ValueError`` -- unknown keys, wrong types, or a bad log level.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from inventory_config.loader import (
    apply_env_overrides,
    load_yaml_file,
    parse_settings,
)
from inventory_config.schema import (
    DatabaseSettings,
    InventorySettings,
    LoggingSettings,
)

__all__ = [
    "DatabaseSettings",
    "InventorySettings",
    "LoggingSettings",
    "get_active_settings",
]

_logger = logging.getLogger("inventory_kernel.config")

DEFAULTS_FILE = Path(__file__).parent / "defaults.yaml"


def get_active_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> InventorySettings:
    """The ONLY public settings entrypoint.

    Args:
        path: Settings file to load. Defaults to the packaged defaults.yaml.
        environ: Environment mapping for overrides. Defaults to os.environ.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the settings fail validation.
    """
    source = Path(path) if path is not None else DEFAULTS_FILE
    settings = parse_settings(load_yaml_file(source))
    settings = apply_env_overrides(
        settings, os.environ if environ is None else environ
    )

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "source": str(source),
            "database_backend": settings.database.url.split(":", 1)[0],
            "log_level": settings.logging.level,
        },
    )
    return settings
