"""
Kernel - registry, lifecycle, sandboxes and the event bus behind the facade.
"""

from easycore.kernel.core import EasyCore
from easycore.kernel.lifecycle import LifecycleController
from easycore.kernel.mediator import CoreEvent, Mediator, SubscriberPriority
from easycore.kernel.registry import ExtensionContext, Registry, RegistrationKind
from easycore.kernel.sandbox import Sandbox, SandboxFactory

__all__ = [
    "CoreEvent",
    "EasyCore",
    "ExtensionContext",
    "LifecycleController",
    "Mediator",
    "Registry",
    "RegistrationKind",
    "Sandbox",
    "SandboxFactory",
    "SubscriberPriority",
]
