"""
EasyCore - the facade handed to the host application.

Only the registration, lifecycle and utility operations are meant for the
host. Internal pools and the merged configuration are exposed only when the
core is built with ``debug=True``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from easycore.config.defaults import VERSION, build_default_config
from easycore.config.merge import deep_merge, get_type, is_object, is_plain_object, merge
from easycore.config.settings import validate_settings
from easycore.errors import MediatorMissingError
from easycore.kernel.lifecycle import LifecycleController, ModuleSelection
from easycore.kernel.mediator import CoreEvent, Mediator
from easycore.kernel.registry import (
    ExtensionContext,
    Registry,
    RegistrationHandler,
    RegistrationKind,
)
from easycore.kernel.sandbox import Sandbox, SandboxFactory

logger = logging.getLogger(__name__)


class EasyCore:
    """
    Application core.

    Usage:
        core = EasyCore({"modules": {"clock": {"interval": 5}}})
        core.on("error", handle_error)
        core.register("clock", Clock)
        core.init().start()

    Modules are constructed as ``creator(sandbox, module_settings)`` and may
    provide ``start()`` and ``stop()``. Extensions are invoked on
    registration as ``creator(core, extension_settings, context)``.
    """

    VERSION = VERSION
    # shorthand so units need no separate import
    Mediator = Mediator

    extend = staticmethod(merge)
    is_object = staticmethod(is_object)
    get_type = staticmethod(get_type)
    is_plain_object = staticmethod(is_plain_object)

    def __init__(
        self,
        settings: Mapping[str, Any] | None = None,
        *,
        mediator_cls: Callable[..., Any] | None = Mediator,
    ) -> None:
        if mediator_cls is None:
            raise MediatorMissingError("EasyCore needs a Mediator")

        conf = deep_merge({}, build_default_config(), settings)
        if "logErrorsViaConsole" in conf:
            conf["log_errors_via_console"] = conf.pop("logErrorsViaConsole")
        self._settings = validate_settings(conf)
        self._conf: dict[str, Any] = conf

        self._registry = Registry()
        self._initialized = False

        # core events: error, warning, after*
        self._mediator = mediator_cls(expose_channel=self._settings.debug)
        self._mediator.install(self)

        # one channel for all sandboxes
        self._sandbox_mediator = mediator_cls(expose_channel=self._settings.debug)
        # subclass per core, so extensions can add to it without leaking
        self.sandbox_factory = SandboxFactory(
            self._sandbox_mediator, type("Sandbox", (Sandbox,), {})
        )

        self._lifecycle = LifecycleController(
            self._registry,
            self.sandbox_factory,
            self._conf,
            report=self._report,
            report_fault=self._report_fault,
            debug=self._settings.debug,
        )

        # registration kind -> handler; may be extended before register()
        self.module_type_map: dict[str, RegistrationHandler] = {
            RegistrationKind.STANDARD.value: register_standard_module,
            RegistrationKind.EXTENSION.value: register_extension,
        }

        if self._settings.debug:
            self._expose_internals()

        logger.debug("EasyCore %s created (debug=%s)", VERSION, self._settings.debug)

    @property
    def Sandbox(self) -> type[Sandbox]:  # noqa: N802
        """Class every sandbox of this core is created from."""
        return self.sandbox_factory.sandbox_cls

    @Sandbox.setter
    def Sandbox(self, sandbox_cls: type[Sandbox]) -> None:  # noqa: N802
        self.sandbox_factory.sandbox_cls = sandbox_cls

    def register(
        self,
        unit_id: Any,
        kind_or_creator: Any = None,
        creator: Any = None,
    ) -> EasyCore:
        """
        Register a module, an extension or a unit of a custom kind.

        ``register(id, creator)`` registers a standard module;
        ``register(id, kind, creator)`` dispatches on ``module_type_map``.
        Problems are reported as events, never raised.
        """
        if isinstance(kind_or_creator, str):
            kind = (
                kind_or_creator.value
                if isinstance(kind_or_creator, Enum)
                else kind_or_creator
            )
        else:
            kind = RegistrationKind.STANDARD.value
            creator = kind_or_creator

        handler = self.module_type_map.get(kind)
        if handler is None:
            self._report(
                CoreEvent.WARNING,
                "register",
                f"Given module type does not exist: {kind} (id: {unit_id})",
            )
            return self

        severity = (
            CoreEvent.ERROR
            if kind == RegistrationKind.EXTENSION.value
            else CoreEvent.WARNING
        )
        if not isinstance(unit_id, str) or not unit_id:
            self._report(
                severity,
                "register",
                f"Given id is not of type string or empty: {unit_id!r}",
            )
            return self
        if not callable(creator):
            self._report(
                severity,
                "register",
                f"Given creator is not callable: {unit_id}",
            )
            return self

        handler(self, unit_id, creator)
        return self

    def register_module(self, module_id: Any, creator: Any) -> EasyCore:
        return self.register(module_id, RegistrationKind.STANDARD, creator)

    def register_extension(self, extension_id: Any, creator: Any) -> EasyCore:
        return self.register(extension_id, RegistrationKind.EXTENSION, creator)

    def init(self) -> EasyCore:
        """
        Construct all registered modules and emit ``afterInit``.

        Runs once; later calls do nothing.
        """
        if self._initialized:
            return self
        self._initialized = True

        self._lifecycle.init_modules()
        self._report(CoreEvent.AFTER_INIT, self)
        return self

    def start(self, module_ids: ModuleSelection = None) -> EasyCore:
        """Start all autostart modules, one module, or a list of modules."""
        self._lifecycle.start(module_ids)
        self._report(CoreEvent.AFTER_START, self)
        return self

    def stop(self, module_ids: ModuleSelection = None) -> EasyCore:
        """Stop all modules, one module, or a list of modules."""
        self._lifecycle.stop(module_ids)
        self._report(CoreEvent.AFTER_STOP, self)
        return self

    def _expose_internals(self) -> None:
        self.modules = MappingProxyType(self._registry.modules)
        self.extensions = MappingProxyType(self._registry.extensions)
        self.conf = MappingProxyType(self._conf)

    def _report(self, event: CoreEvent | str, *args: Any) -> None:
        self._mediator.trigger(event, *args)

    def _report_fault(
        self,
        event: CoreEvent,
        site: str,
        context: str,
        fault: BaseException,
    ) -> None:
        if self._settings.log_errors_via_console:
            logger.error("%s: %s", site, context, exc_info=fault)
        self._report(event, site, context, fault)

    def __repr__(self) -> str:
        return (
            f"<EasyCore modules={len(self._registry.modules)} "
            f"extensions={len(self._registry.extensions)}>"
        )


def register_standard_module(
    core: EasyCore,
    module_id: str,
    creator: Callable[..., Any],
) -> None:
    """Store a module for construction during init()."""
    if core._registry.has_module(module_id):
        core._report(
            CoreEvent.WARNING,
            "registerStandardModule",
            f"Given id exists already: {module_id}",
        )
        return

    core._registry.add_module(module_id, creator)


def register_extension(
    core: EasyCore,
    extension_id: str,
    creator: Callable[..., Any],
) -> None:
    """
    Invoke an extension right away and keep what it returns.

    Extensions hook into the lifecycle through the core's events
    (``afterInit`` and friends) and augment sandboxes through the context.
    """
    if core._registry.has_extension(extension_id):
        core._report(
            CoreEvent.ERROR,
            "registerExtension",
            f"Given id exists already: {extension_id}",
        )
        return

    config = core._conf["extensions"].get(extension_id)
    context = ExtensionContext(
        sandbox_mediator=core._sandbox_mediator,
        core_settings=core._conf,
        sandbox_factory=core.sandbox_factory,
    )

    try:
        instance = creator(core, {} if config is None else config, context)
    except Exception as exc:
        core._report_fault(CoreEvent.ERROR, "registerExtension", extension_id, exc)
        return

    core._registry.add_extension(extension_id, creator, instance)
