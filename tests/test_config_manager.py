"""
test_config_manager.py - settings files
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from easycore import ConfigManager, ConfigurationError


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoad:

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.json")
        config = manager.load()

        assert config == {
            "debug": False,
            "log_errors_via_console": True,
            "modules": {},
            "extensions": {},
        }

    def test_json_is_merged_over_defaults(self, tmp_path):
        path = _write(
            tmp_path / "app.json",
            json.dumps({"debug": True, "modules": {"clock": {"interval": 5}}}),
        )
        config = ConfigManager(path).load()

        assert config["debug"] is True
        assert config["log_errors_via_console"] is True
        assert config["modules"] == {"clock": {"interval": 5}}

    @pytest.mark.parametrize("name", ["app.yaml", "app.yml"])
    def test_yaml(self, tmp_path, name):
        path = _write(
            tmp_path / name,
            "modules:\n  clock:\n    interval: 5\n    autostart: false\n",
        )
        config = ConfigManager(path).load()

        assert config["modules"]["clock"] == {"interval": 5, "autostart": False}

    def test_empty_yaml(self, tmp_path):
        path = _write(tmp_path / "app.yaml", "")
        assert ConfigManager(path).load()["modules"] == {}

    def test_custom_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.json", defaults={"a": {"b": 1}})
        assert manager.load() == {"a": {"b": 1}}

    def test_malformed_json(self, tmp_path):
        path = _write(tmp_path / "app.json", "{not json")
        with pytest.raises(ConfigurationError, match="Could not read"):
            ConfigManager(path).load()

    def test_malformed_yaml(self, tmp_path):
        path = _write(tmp_path / "app.yaml", "modules: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(path).load()

    def test_non_mapping_content(self, tmp_path):
        path = _write(tmp_path / "app.json", "[1, 2]")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            ConfigManager(path).load()

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unsupported"):
            ConfigManager(tmp_path / "app.ini")


class TestAccess:

    def test_dotted_get(self, tmp_path):
        path = _write(
            tmp_path / "app.json", json.dumps({"modules": {"clock": {"interval": 5}}})
        )
        manager = ConfigManager(path)
        manager.load()

        assert manager.get("modules.clock.interval") == 5
        assert manager.get("modules.clock.missing", "fallback") == "fallback"
        assert manager.get("debug.deeper", "fallback") == "fallback"

    def test_dotted_set_creates_mappings(self, tmp_path):
        manager = ConfigManager(tmp_path / "app.json")
        manager.set("modules.clock.interval", 10)

        assert manager.get("modules.clock.interval") == 10
        assert manager.as_dict()["modules"] == {"clock": {"interval": 10}}

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "app.yaml"
        manager = ConfigManager(path)
        manager.set("extensions.audit.level", "high")
        manager.save()

        assert yaml.safe_load(path.read_text(encoding="utf-8"))["extensions"] == {
            "audit": {"level": "high"}
        }
        assert ConfigManager(path).load()["extensions"]["audit"]["level"] == "high"

    def test_path(self, tmp_path):
        assert ConfigManager(tmp_path / "app.json").path == tmp_path / "app.json"
