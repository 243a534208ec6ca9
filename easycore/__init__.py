"""
easycore - a small application structure built from modules and extensions.

Modules are mutually unaware units that only see their sandbox and talk over
a shared event channel. Extensions augment the core itself, e.g. by adding
capabilities to sandboxes. The facade registers both and drives every module
through init -> start -> stop.
"""

from easycore.config import (
    MISSING,
    ConfigManager,
    CoreSettings,
    VERSION,
    deep_merge,
    get_type,
    is_object,
    is_plain_object,
    merge,
)
from easycore.errors import (
    ConfigurationError,
    EasyCoreError,
    MediatorMissingError,
    UnitLoadError,
)
from easycore.kernel import (
    CoreEvent,
    EasyCore,
    ExtensionContext,
    Mediator,
    RegistrationKind,
    Sandbox,
    SandboxFactory,
    SubscriberPriority,
)
from easycore.kernel.logging import setup_logging
from easycore.loader import bootstrap, resolve_creator

__version__ = VERSION

__all__ = [
    "MISSING",
    "VERSION",
    "ConfigManager",
    "ConfigurationError",
    "CoreEvent",
    "CoreSettings",
    "EasyCore",
    "EasyCoreError",
    "ExtensionContext",
    "Mediator",
    "MediatorMissingError",
    "RegistrationKind",
    "Sandbox",
    "SandboxFactory",
    "SubscriberPriority",
    "UnitLoadError",
    "bootstrap",
    "deep_merge",
    "get_type",
    "is_object",
    "is_plain_object",
    "merge",
    "resolve_creator",
    "setup_logging",
]
