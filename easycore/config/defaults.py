"""
Default configuration - default values of every core option.
"""

from __future__ import annotations

from typing import Any

VERSION = "1.0.0"


def build_default_config() -> dict[str, Any]:
    """
    Build the default configuration.

    Module and extension settings may be supplied here, but units are
    expected to carry their own defaults.
    """
    return {
        # expose internal pools and conf on the facade; not for production
        "debug": False,
        # mirror caught unit faults to the log
        "log_errors_via_console": True,
        # module id -> module settings (``autostart: False`` opts out of start())
        "modules": {},
        # extension id -> extension settings
        "extensions": {},
    }
