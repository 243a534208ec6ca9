"""
Config module - default settings, validation, files and structural merging.
"""

from easycore.config.defaults import VERSION, build_default_config
from easycore.config.manager import ConfigManager
from easycore.config.merge import (
    MISSING,
    deep_merge,
    get_type,
    is_object,
    is_plain_object,
    merge,
)
from easycore.config.settings import CoreSettings, validate_settings

__all__ = [
    "VERSION",
    "MISSING",
    "ConfigManager",
    "CoreSettings",
    "build_default_config",
    "deep_merge",
    "get_type",
    "is_object",
    "is_plain_object",
    "merge",
    "validate_settings",
]
