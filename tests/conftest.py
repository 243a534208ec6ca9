"""
conftest.py - shared fixtures
"""
from __future__ import annotations

import logging
from typing import Any

import pytest

from easycore import CoreEvent, EasyCore
from tests.units import Clock


class EventRecorder:
    """Collects core events as (event, args) pairs."""

    EVENTS = (
        CoreEvent.ERROR,
        CoreEvent.WARNING,
        CoreEvent.AFTER_INIT,
        CoreEvent.AFTER_START,
        CoreEvent.AFTER_STOP,
    )

    def __init__(self) -> None:
        self.events: list[tuple[str, tuple[Any, ...]]] = []

    def attach(self, core: EasyCore) -> EasyCore:
        for event in self.EVENTS:
            core.on(event, self._handler(event.value))
        return core

    def _handler(self, name: str):
        def record(*args: Any) -> None:
            self.events.append((name, args))

        return record

    def of(self, name: str) -> list[tuple[Any, ...]]:
        return [args for event, args in self.events if event == name]

    @property
    def errors(self) -> list[tuple[Any, ...]]:
        return self.of("error")

    @property
    def warnings(self) -> list[tuple[Any, ...]]:
        return self.of("warning")


@pytest.fixture(autouse=True)
def _reset_clock_instances():
    Clock.instances.clear()
    yield
    Clock.instances.clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers left behind by setup_logging()."""
    yield
    from easycore.kernel import logging as core_logging

    logger = logging.getLogger(core_logging.LOGGER_NAME)
    for handler in core_logging._installed_handlers:
        logger.removeHandler(handler)
        handler.close()
    core_logging._installed_handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def make_core(recorder):
    """Factory for facades wired to the recorder; logging of faults is off."""

    def _make(settings: dict[str, Any] | None = None, **kwargs: Any) -> EasyCore:
        merged = {"log_errors_via_console": False}
        merged.update(settings or {})
        return recorder.attach(EasyCore(merged, **kwargs))

    return _make
