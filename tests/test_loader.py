"""
test_loader.py - creator paths and bootstrap
"""
from __future__ import annotations

import pytest

from easycore import UnitLoadError, bootstrap, resolve_creator
from easycore.kernel.registry import RegistrationKind
from easycore.loader import DeclaredUnit, declared_units
from tests.units import Clock, GreeterExtension


class TestResolveCreator:

    def test_resolves_attribute(self):
        assert resolve_creator("tests.units:Clock") is Clock

    def test_nested_attribute(self):
        assert resolve_creator("tests.units:Clock.start") is Clock.start

    @pytest.mark.parametrize(
        "path",
        ["tests.units", "tests.units:", ":Clock", "tests.units.Clock"],
    )
    def test_bad_format(self, path):
        with pytest.raises(UnitLoadError, match="must look like"):
            resolve_creator(path)

    def test_unknown_module(self):
        with pytest.raises(UnitLoadError, match="Cannot import"):
            resolve_creator("tests.no_such_module:Thing")

    def test_unknown_attribute(self):
        with pytest.raises(UnitLoadError, match="has no attribute"):
            resolve_creator("tests.units:Nope")

    def test_not_callable(self):
        with pytest.raises(UnitLoadError, match="not callable"):
            resolve_creator("tests.units:NOT_CALLABLE")


class TestDeclaredUnits:

    def test_extensions_come_first(self):
        settings = {
            "modules": {
                "clock": {"creator": "tests.units:Clock"},
                "plain": {"interval": 5},
                "empty": None,
            },
            "extensions": {"greeter": {"creator": "tests.units:GreeterExtension"}},
        }

        assert declared_units(settings) == [
            DeclaredUnit(
                RegistrationKind.EXTENSION, "greeter", "tests.units:GreeterExtension"
            ),
            DeclaredUnit(RegistrationKind.STANDARD, "clock", "tests.units:Clock"),
        ]

    def test_nothing_declared(self):
        assert declared_units({}) == []


class TestBootstrap:

    def test_registers_declared_units(self):
        core = bootstrap(
            {
                "debug": True,
                "modules": {"clock": {"creator": "tests.units:Clock", "interval": 5}},
                "extensions": {"greeter": {"creator": "tests.units:GreeterExtension"}},
            }
        )
        core.init()

        clock = core.modules["clock"].instance
        assert isinstance(clock, Clock)
        assert clock.config["interval"] == 5
        assert clock.sandbox.greet() == "hello clock"
        assert isinstance(core.extensions["greeter"].instance, GreeterExtension)

    def test_unresolvable_creators_are_reported(self):
        events = []
        core = bootstrap(
            {
                "debug": True,
                "modules": {"clock": {"creator": "tests.units:Missing"}},
                "extensions": {"audit": {"creator": "nowhere.at.all:Audit"}},
            },
            subscribers={
                "error": lambda *args: events.append(("error", args)),
                "warning": lambda *args: events.append(("warning", args)),
            },
        )

        assert len(core.modules) == 0
        assert len(core.extensions) == 0
        assert [(name, args[:2]) for name, args in events] == [
            ("error", ("bootstrap", "creator of audit")),
            ("warning", ("bootstrap", "creator of clock")),
        ]
        assert all(isinstance(args[2], UnitLoadError) for _, args in events)

    def test_without_settings(self):
        core = bootstrap()
        assert core.init().start().stop() is core
