"""Tests for inventory_config: YAML settings with environment overrides."""

import logging

import pytest
import yaml

from inventory_config import (
    DatabaseSettings,
    InventorySettings,
    get_active_settings,
)
from inventory_config.loader import apply_env_overrides, load_yaml_file, parse_settings


def _write(tmp_path, data) -> str:
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    def test_packaged_defaults_load(self):
        settings = get_active_settings(environ={})
        assert settings.database.url == "sqlite:///inventory.db"
        assert settings.database.pool_size == 20
        assert settings.logging.level == "INFO"

    def test_defaults_file_matches_schema_defaults(self):
        assert get_active_settings(environ={}) == InventorySettings()

    def test_config_trace_logged(self, captured_logs):
        get_active_settings(environ={})
        [trace] = [r for r in captured_logs() if r["message"] == "INVENTORY_CONFIG_TRACE"]
        assert trace["database_backend"] == "sqlite"


class TestParsing:
    def test_partial_file_keeps_defaults(self, tmp_path):
        path = _write(tmp_path, {"database": {"url": "postgresql://u:p@db/inv"}})
        settings = get_active_settings(path, environ={})
        assert settings.database.url == "postgresql://u:p@db/inv"
        assert settings.database.max_overflow == DatabaseSettings().max_overflow

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}
        assert parse_settings({}) == InventorySettings()

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError, match="metrics"):
            parse_settings({"metrics": {}})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="pool_sise"):
            parse_settings({"database": {"pool_sise": 3}})

    @pytest.mark.parametrize(
        "section",
        [
            {"database": {"pool_size": "20"}},
            {"database": {"echo": 1}},
            {"database": {"pool_size": True}},
            {"database": "sqlite://"},
        ],
    )
    def test_wrong_types_rejected(self, section):
        with pytest.raises(ValueError):
            parse_settings(section)

    def test_log_level_normalized(self):
        assert parse_settings({"logging": {"level": "debug"}}).logging.level == "DEBUG"

    def test_bad_log_level_rejected(self):
        with pytest.raises(ValueError, match="logging.level"):
            parse_settings({"logging": {"level": "LOUD"}})

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_yaml_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_settings(tmp_path / "nope.yaml", environ={})


class TestEnvironmentOverrides:
    def test_inventory_database_url_wins(self):
        settings = apply_env_overrides(
            InventorySettings(),
            {"INVENTORY_DATABASE_URL": "sqlite:///a.db", "DATABASE_URL": "sqlite:///b.db"},
        )
        assert settings.database.url == "sqlite:///a.db"

    def test_database_url_fallback(self):
        settings = apply_env_overrides(InventorySettings(), {"DATABASE_URL": "sqlite:///b.db"})
        assert settings.database.url == "sqlite:///b.db"

    def test_log_level_override(self):
        settings = apply_env_overrides(InventorySettings(), {"INVENTORY_LOG_LEVEL": "warning"})
        assert settings.logging.level == "WARNING"
        assert getattr(logging, settings.logging.level) == logging.WARNING

    def test_no_overrides(self):
        assert apply_env_overrides(InventorySettings(), {}) == InventorySettings()

    def test_settings_are_frozen(self):
        settings = InventorySettings()
        with pytest.raises(AttributeError):
            settings.database.url = "x"
