"""
Lifecycle Controller - moves modules through init -> start -> stop.

Per module: Registered -> Instantiated -> Started <-> Stopped. Only whether
an instance exists is stored; "started" means the module's own start hook has
run. Modules are handled in registration order, and a failing module never
prevents the others from being handled.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from easycore.kernel.mediator import CoreEvent
from easycore.kernel.registry import ModuleEntry, Registry
from easycore.kernel.sandbox import SandboxFactory

logger = logging.getLogger(__name__)

# report(event, *args)
Reporter = Callable[..., None]
# report_fault(event, site, context, fault)
FaultReporter = Callable[[CoreEvent, str, str, BaseException], None]

ModuleSelection = str | Sequence[str] | None


class LifecycleController:
    """
    Instantiates, starts and stops registered modules.

    Faults raised by a module's constructor or hooks are caught here and
    turned into ``error``/``warning`` events.
    """

    def __init__(
        self,
        registry: Registry,
        sandbox_factory: SandboxFactory,
        conf: Mapping[str, Any],
        report: Reporter,
        report_fault: FaultReporter,
        debug: bool = False,
    ) -> None:
        self._registry = registry
        self._sandbox_factory = sandbox_factory
        self._conf = conf
        self._report = report
        self._report_fault = report_fault
        self._debug = debug

    def init_modules(self) -> int:
        """
        Construct every module that has no instance yet.

        Already instantiated modules are skipped, the walk goes on. Returns
        the number of modules constructed.
        """
        constructed = 0

        # snapshot, constructors may register further modules
        for module_id, entry in list(self._registry.modules.items()):
            if entry.instance is not None:
                logger.debug("Module %s already instantiated, skipping", module_id)
                continue

            try:
                self._construct(module_id, entry)
            except Exception as exc:
                self._report_fault(
                    CoreEvent.ERROR,
                    "initModule",
                    f"creation and init function: {module_id}",
                    exc,
                )
            else:
                constructed += 1

        logger.info(
            "Initialized %d of %d modules",
            constructed,
            len(self._registry.modules),
        )
        return constructed

    def start(self, module_ids: ModuleSelection = None) -> None:
        """
        Start one module, a list of modules, or all of them.

        Without ids, modules configured with ``autostart: False`` are left
        alone.
        """
        for module_id in self._select(module_ids, autostart_only=True):
            self.start_module(module_id)

    def stop(self, module_ids: ModuleSelection = None) -> None:
        """Stop one module, a list of modules, or all of them."""
        for module_id in self._select(module_ids):
            self.stop_module(module_id)

    def start_module(self, module_id: Any) -> bool:
        """
        Run the start hook of a module.

        A module without instance or without start hook is left as is.
        Returns whether the hook ran successfully.
        """
        entry = self._lookup(module_id, "startModule")
        if entry is None or entry.instance is None:
            return False

        start = getattr(entry.instance, "start", None)
        if not callable(start):
            return False

        try:
            start()
        except Exception as exc:
            self._report_fault(
                CoreEvent.ERROR, "startModule", f"start function: {module_id}", exc
            )
            return False

        logger.debug("Started module %s", module_id)
        return True

    def stop_module(self, module_id: Any) -> bool:
        """
        Run the stop hook of a module and drop its instance.

        When the hook raises, the instance is kept; the module is considered
        still running. Returns whether the module was stopped.
        """
        entry = self._lookup(module_id, "stopModule")
        if entry is None or entry.instance is None:
            return False

        stop = getattr(entry.instance, "stop", None)
        if not callable(stop):
            return False

        try:
            stop()
        except Exception as exc:
            self._report_fault(
                CoreEvent.WARNING, "stopModule", f"stop function: {module_id}", exc
            )
            return False

        entry.instance = None
        entry.sandbox = None
        logger.debug("Stopped module %s", module_id)
        return True

    def _construct(self, module_id: str, entry: ModuleEntry) -> None:
        sandbox = self._sandbox_factory.create(module_id)
        if self._debug:
            entry.sandbox = sandbox
        entry.instance = entry.creator(sandbox, self._module_config(module_id))

    def _module_config(self, module_id: str) -> Any:
        config = self._conf["modules"].get(module_id)
        return {} if config is None else config

    def _autostarts(self, module_id: str) -> bool:
        config = self._conf["modules"].get(module_id)
        return not (isinstance(config, Mapping) and config.get("autostart") is False)

    def _lookup(self, module_id: Any, site: str) -> ModuleEntry | None:
        entry = (
            self._registry.get_module(module_id)
            if isinstance(module_id, str)
            else None
        )
        if entry is None:
            self._report(
                CoreEvent.WARNING,
                site,
                f"Given module id is not of type string or does not exist: {module_id!r}",
            )
        return entry

    def _select(self, module_ids: Any, autostart_only: bool = False) -> list[Any]:
        if module_ids is None:
            ids = self._registry.module_ids()
            if autostart_only:
                ids = [module_id for module_id in ids if self._autostarts(module_id)]
            return ids
        if isinstance(module_ids, str):
            return [module_ids]
        if isinstance(module_ids, (list, tuple)):
            return list(module_ids)
        # reported as an invalid id by the per-module step
        return [module_ids]
