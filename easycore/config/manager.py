"""
Config manager - reads, writes and merges settings files.

Supports JSON and YAML files, default value merging and nested key access.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from easycore.config.defaults import build_default_config
from easycore.config.merge import deep_merge
from easycore.errors import ConfigurationError

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


class ConfigManager:
    """
    Settings file manager.

    Supports:
    - nested key access (e.g. "modules.clock.interval")
    - deep merge of the file over defaults
    - persistence to JSON or YAML, chosen by file suffix
    """

    def __init__(
        self,
        config_path: str | os.PathLike[str],
        defaults: dict[str, Any] | None = None,
    ) -> None:
        self._config_path = Path(config_path)
        self._defaults = build_default_config() if defaults is None else defaults
        self._config: dict[str, Any] = deep_merge({}, self._defaults)

        suffix = self._config_path.suffix.lower()
        if suffix != ".json" and suffix not in _YAML_SUFFIXES:
            raise ConfigurationError(
                f"Unsupported settings file type: {self._config_path.name}"
            )

    @property
    def path(self) -> Path:
        return self._config_path

    def load(self) -> dict[str, Any]:
        """
        Load the settings file and merge it over the defaults.

        A missing file leaves the defaults in place.
        """
        if not self._config_path.exists():
            logger.info("Settings file %s not found, using defaults", self._config_path)
            self._config = deep_merge({}, self._defaults)
            return self._config

        try:
            with open(self._config_path, encoding="utf-8") as f:
                if self._is_yaml:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationError(
                f"Could not read settings file {self._config_path}: {exc}"
            ) from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {self._config_path} must contain a mapping"
            )

        self._config = deep_merge({}, self._defaults, data)
        logger.info("Settings loaded from %s", self._config_path)
        return self._config

    def save(self) -> None:
        """Save the current settings to the file."""
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_path, "w", encoding="utf-8") as f:
            if self._is_yaml:
                yaml.safe_dump(self._config, f, allow_unicode=True, sort_keys=False)
            else:
                json.dump(self._config, f, ensure_ascii=False, indent=2)
        logger.debug("Settings saved to %s", self._config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, e.g. "modules.clock.interval"."""
        current: Any = self._config
        for k in key.split("."):
            if isinstance(current, dict):
                current = current.get(k)
            else:
                return default
            if current is None:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key, creating intermediate mappings."""
        keys = key.split(".")
        current = self._config
        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

    def as_dict(self) -> dict[str, Any]:
        """Get the full settings dictionary."""
        return dict(self._config)

    @property
    def _is_yaml(self) -> bool:
        return self._config_path.suffix.lower() in _YAML_SUFFIXES
