"""
Error types raised by easycore.

Unit faults (constructors, start/stop hooks, extension creators) are never
raised to the host; they are reported through ``error``/``warning`` events.
Only faults that prevent a facade from being built are raised.
"""

from __future__ import annotations


class EasyCoreError(Exception):
    """Base class for all easycore errors."""


class ConfigurationError(EasyCoreError):
    """Raised when settings or a settings file are invalid."""


class MediatorMissingError(EasyCoreError):
    """Raised when no event bus collaborator is available."""


class UnitLoadError(EasyCoreError):
    """Raised when a creator path cannot be resolved."""
