"""
Sandbox - the only view a module has of the rest of the system.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Sandbox:
    """
    Reference sandbox; empty apart from the identity tag.

    Event capabilities are installed by the factory. Everything else is
    expected to be added by extensions, either on the facade's ``Sandbox``
    class or through ``SandboxFactory.add_augmenter``.
    """

    module_id: str = ""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} module_id={self.module_id!r}>"


Augmenter = Callable[[Sandbox], Any]


class SandboxFactory:
    """
    Creates one sandbox per module instance.

    Every sandbox receives the capabilities of the same mediator, so all
    modules talk over one channel while keeping their own identity.
    """

    def __init__(self, mediator: Any, sandbox_cls: type[Sandbox] = Sandbox) -> None:
        self._mediator = mediator
        self.sandbox_cls = sandbox_cls
        self._augmenters: list[Augmenter] = []

    def add_augmenter(self, augmenter: Augmenter) -> None:
        """Register a callable applied to every sandbox created from now on."""
        if not callable(augmenter):
            raise TypeError(f"Sandbox augmenter is not callable: {augmenter!r}")
        self._augmenters.append(augmenter)

    def create(self, module_id: str) -> Sandbox:
        sandbox = self.sandbox_cls()
        self._mediator.install(sandbox)
        sandbox.module_id = module_id

        for augmenter in self._augmenters:
            augmenter(sandbox)

        logger.debug("Created sandbox for module %s", module_id)
        return sandbox
