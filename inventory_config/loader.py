"""
Settings Loader (``inventory_config.loader``).

Responsibility
--------------
Loads YAML settings files and parses them into the frozen dataclasses in
``inventory_config.schema``, then layers environment overrides on top.
Callers should go through ``inventory_config.get_active_settings()``.

Invariants enforced
-------------------
* Unknown sections or keys raise ``ValueError``; a typo never silently
  falls back to a default.
* Values are type-checked against the schema field types.
* Every parsed object is a frozen dataclass from ``schema.py``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key, wrong type, bad log level  -> ``ValueError``.
"""

from __future__ import annotations

from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from inventory_config.schema import (
    LOG_LEVELS,
    DatabaseSettings,
    InventorySettings,
    LoggingSettings,
)

_SECTIONS: dict[str, type] = {
    "database": DatabaseSettings,
    "logging": LoggingSettings,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _parse_section(name: str, cls: type, data: Any):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Section '{name}' must be a mapping")

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown keys in '{name}': {', '.join(unknown)}")

    defaults = cls()
    for key, value in data.items():
        expected = type(getattr(defaults, key))
        # bool is an int subclass; keep them apart
        if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
            raise ValueError(
                f"{name}.{key} must be {expected.__name__}, got {value!r}"
            )
    return cls(**data)


def parse_settings(data: Mapping[str, Any]) -> InventorySettings:
    """
    Parse a settings dict (as loaded from YAML) into InventorySettings.

    Missing sections and keys take their schema defaults.

    Raises:
        ValueError: on unknown sections/keys, wrong value types, or an
            unrecognized log level.
    """
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ValueError(f"Unknown settings sections: {', '.join(unknown)}")

    settings = InventorySettings(
        **{
            name: _parse_section(name, cls, data.get(name))
            for name, cls in _SECTIONS.items()
        }
    )
    return _normalize_level(settings)


def apply_env_overrides(
    settings: InventorySettings,
    environ: Mapping[str, str],
) -> InventorySettings:
    """
    Return a copy of *settings* with environment overrides applied.

    INVENTORY_DATABASE_URL takes precedence over DATABASE_URL.
    INVENTORY_LOG_LEVEL overrides the logging level.
    """
    url = environ.get("INVENTORY_DATABASE_URL") or environ.get("DATABASE_URL")
    if url:
        settings = replace(settings, database=replace(settings.database, url=url))

    level = environ.get("INVENTORY_LOG_LEVEL")
    if level:
        settings = replace(settings, logging=replace(settings.logging, level=level))

    return _normalize_level(settings)


def _normalize_level(settings: InventorySettings) -> InventorySettings:
    level = settings.logging.level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {', '.join(sorted(LOG_LEVELS))}, "
            f"got {settings.logging.level!r}"
        )
    return replace(settings, logging=replace(settings.logging, level=level))
