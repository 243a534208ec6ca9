"""
Unit loader - builds a core from settings that name their creators.

A module or extension is declared by giving its settings a ``creator`` path::

    modules:
      clock:
        creator: "myapp.clock:Clock"
        interval: 5
    extensions:
      audit:
        creator: "myapp.audit:AuditExtension"
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from easycore.errors import UnitLoadError
from easycore.kernel.core import EasyCore
from easycore.kernel.mediator import CoreEvent, Mediator
from easycore.kernel.registry import RegistrationKind

logger = logging.getLogger(__name__)

CREATOR_KEY = "creator"


class DeclaredUnit(NamedTuple):
    kind: RegistrationKind
    unit_id: str
    creator_path: str


def resolve_creator(path: str) -> Callable[..., Any]:
    """
    Import a creator from a ``"package.module:Name"`` path.

    Nested attributes are allowed after the colon (``"pkg.mod:Outer.Inner"``).
    """
    module_name, sep, attr_path = str(path).partition(":")
    if not sep or not module_name or not attr_path:
        raise UnitLoadError(
            f"Creator path must look like 'package.module:Name': {path!r}"
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise UnitLoadError(f"Cannot import {module_name!r}: {exc}") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise UnitLoadError(
                f"{module_name!r} has no attribute {attr_path!r}"
            ) from exc

    if not callable(target):
        raise UnitLoadError(f"Creator {path!r} is not callable")
    return target


def declared_units(settings: Mapping[str, Any]) -> list[DeclaredUnit]:
    """
    List the units that declare a creator path.

    Extensions come first so they can hook into the lifecycle of the
    modules registered after them.
    """
    units: list[DeclaredUnit] = []
    sections = (
        (RegistrationKind.EXTENSION, "extensions"),
        (RegistrationKind.STANDARD, "modules"),
    )
    for kind, section in sections:
        for unit_id, unit_settings in (settings.get(section) or {}).items():
            if isinstance(unit_settings, Mapping) and unit_settings.get(CREATOR_KEY):
                units.append(DeclaredUnit(kind, unit_id, unit_settings[CREATOR_KEY]))
    return units


def bootstrap(
    settings: Mapping[str, Any] | None = None,
    *,
    mediator_cls: Callable[..., Any] | None = Mediator,
    subscribers: Mapping[CoreEvent | str, Callable[..., Any]] | None = None,
) -> EasyCore:
    """
    Create a core and register every declared unit.

    ``subscribers`` are attached before anything is registered, so
    registration problems reach them. A creator that cannot be resolved is
    reported like any other registration problem.
    """
    settings = settings or {}
    core = EasyCore(settings, mediator_cls=mediator_cls)

    for name, handler in (subscribers or {}).items():
        core.subscribe(name, handler)

    for unit in declared_units(settings):
        try:
            creator = resolve_creator(unit.creator_path)
        except UnitLoadError as exc:
            event = (
                CoreEvent.ERROR
                if unit.kind is RegistrationKind.EXTENSION
                else CoreEvent.WARNING
            )
            logger.warning("Could not load creator of %s: %s", unit.unit_id, exc)
            core.trigger(event, "bootstrap", f"creator of {unit.unit_id}", exc)
            continue

        core.register(unit.unit_id, unit.kind, creator)

    return core
