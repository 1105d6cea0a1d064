"""CLI configuration: settings resolution."""

import os

from inventory_config import InventorySettings, get_active_settings

# Optional settings file; falls back to the packaged defaults.yaml
SETTINGS_PATH = os.environ.get("INVENTORY_SETTINGS")


def load_settings(
    path: str | None = None,
    database_url: str | None = None,
    log_level: str | None = None,
) -> InventorySettings:
    """Resolve settings: file, then environment, then command-line flags."""
    environ = dict(os.environ)
    if database_url:
        environ["INVENTORY_DATABASE_URL"] = database_url
    if log_level:
        environ["INVENTORY_LOG_LEVEL"] = log_level
    return get_active_settings(path or SETTINGS_PATH, environ=environ)
