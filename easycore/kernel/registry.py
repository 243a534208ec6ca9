"""
Registry - module and extension pools keyed by unique id.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from easycore.kernel.core import EasyCore
    from easycore.kernel.sandbox import SandboxFactory

logger = logging.getLogger(__name__)

# handler(core, unit_id, creator), looked up by kind in EasyCore.module_type_map
RegistrationHandler = Callable[["EasyCore", str, Callable[..., Any]], None]


class RegistrationKind(str, Enum):
    """Built-in registration kinds."""

    # module, constructed lazily during init()
    STANDARD = "standard"
    # extension, invoked right away
    EXTENSION = "extension"


class ModuleEntry:
    """
    Registered module.

    ``instance`` is None until init() constructs the module and again after
    a successful stop. ``sandbox`` is only kept in debug mode.
    """

    __slots__ = ("creator", "instance", "sandbox")

    def __init__(self, creator: Callable[..., Any]) -> None:
        self.creator = creator
        self.instance: Any = None
        self.sandbox: Any = None

    def __repr__(self) -> str:
        state = "idle" if self.instance is None else "instantiated"
        return f"<ModuleEntry creator={self.creator!r} {state}>"


class ExtensionEntry:
    """Registered extension and the instance its creator returned."""

    __slots__ = ("creator", "instance")

    def __init__(self, creator: Callable[..., Any], instance: Any) -> None:
        self.creator = creator
        self.instance = instance

    def __repr__(self) -> str:
        return f"<ExtensionEntry creator={self.creator!r}>"


@dataclass(frozen=True)
class ExtensionContext:
    """Third argument handed to extension creators."""

    # channel shared by every sandbox
    sandbox_mediator: Any
    # merged core configuration
    core_settings: dict[str, Any]
    # lets the extension augment sandboxes created later
    sandbox_factory: SandboxFactory


class Registry:
    """
    Two independent pools, iterated in registration order.

    Ids are immutable once registered; callers must check for duplicates
    before adding.
    """

    def __init__(self) -> None:
        self.modules: dict[str, ModuleEntry] = {}
        self.extensions: dict[str, ExtensionEntry] = {}

    def has_module(self, module_id: str) -> bool:
        return module_id in self.modules

    def has_extension(self, extension_id: str) -> bool:
        return extension_id in self.extensions

    def get_module(self, module_id: str) -> ModuleEntry | None:
        return self.modules.get(module_id)

    def module_ids(self) -> list[str]:
        return list(self.modules)

    def add_module(self, module_id: str, creator: Callable[..., Any]) -> ModuleEntry:
        if module_id in self.modules:
            raise KeyError(f"Module already registered: {module_id}")
        entry = ModuleEntry(creator)
        self.modules[module_id] = entry
        logger.debug("Registered module %s", module_id)
        return entry

    def add_extension(
        self,
        extension_id: str,
        creator: Callable[..., Any],
        instance: Any,
    ) -> ExtensionEntry:
        if extension_id in self.extensions:
            raise KeyError(f"Extension already registered: {extension_id}")
        entry = ExtensionEntry(creator, instance)
        self.extensions[extension_id] = entry
        logger.debug("Registered extension %s", extension_id)
        return entry
