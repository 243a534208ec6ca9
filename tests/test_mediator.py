"""
test_mediator.py - event bus
"""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from easycore.kernel.mediator import CoreEvent, Mediator, SubscriberPriority


class TestSubscribe:

    def test_trigger_passes_arguments(self):
        bus = Mediator()
        received = []
        bus.subscribe("ping", lambda *args: received.append(args))

        assert bus.trigger("ping", 1, "two") == 1
        assert received == [(1, "two")]

    def test_trigger_without_subscribers(self):
        assert Mediator().trigger("nobody") == 0

    def test_priority_order_is_stable(self):
        bus = Mediator()
        order = []
        bus.on("e", lambda: order.append("normal-1"))
        bus.on("e", lambda: order.append("low"), priority=SubscriberPriority.LOW)
        bus.on("e", lambda: order.append("high"), priority=SubscriberPriority.HIGH)
        bus.on("e", lambda: order.append("normal-2"))
        bus.trigger("e")

        assert order == ["high", "normal-1", "normal-2", "low"]

    def test_enum_and_string_names_share_channel(self):
        bus = Mediator()
        received = []
        bus.on(CoreEvent.ERROR, received.append)
        bus.trigger("error", "x")

        assert received == ["x"]
        assert bus.has_subscribers("error")

    def test_not_callable_is_rejected(self):
        with pytest.raises(TypeError):
            Mediator().subscribe("e", "not callable")

    def test_predicate_filters(self):
        bus = Mediator()
        received = []
        bus.subscribe("n", received.append, predicate=lambda n: n > 1)

        assert bus.trigger("n", 1) == 0
        assert bus.trigger("n", 2) == 1
        assert received == [2]

    def test_once(self):
        bus = Mediator()
        received = []
        bus.once("e", received.append)
        bus.trigger("e", 1)
        bus.trigger("e", 2)

        assert received == [1]
        assert not bus.has_subscribers("e")

    def test_failing_subscriber_does_not_stop_delivery(self, caplog):
        bus = Mediator()
        received = []

        def broken(*_):
            raise RuntimeError("boom")

        bus.on("e", broken)
        bus.on("e", received.append)

        assert bus.trigger("e", "payload") == 2
        assert received == ["payload"]
        assert "failed while handling e" in caplog.text


class TestUnsubscribe:

    def test_by_function(self):
        bus = Mediator()
        handler = lambda: None  # noqa: E731
        bus.on("e", handler)
        bus.on("e", lambda: None)

        assert bus.off("e", handler) == 1
        assert bus.subscriber_count("e") == 1

    def test_by_id(self):
        bus = Mediator()
        sub_id = bus.on("e", lambda: None)

        assert bus.unsubscribe("e", sub_id) == 1
        assert not bus.has_subscribers("e")

    def test_whole_channel(self):
        bus = Mediator()
        bus.on("e", lambda: None)
        bus.on("e", lambda: None)

        assert bus.unsubscribe("e") == 2
        assert bus.unsubscribe("e") == 0

    def test_counts_and_clear(self):
        bus = Mediator()
        bus.on("a", lambda: None)
        bus.on("b", lambda: None)

        assert bus.subscriber_count() == 2
        bus.clear()
        assert bus.subscriber_count() == 0


class TestInstall:

    def test_targets_share_channels(self):
        bus = Mediator()
        first = bus.install(SimpleNamespace())
        second = bus.install(SimpleNamespace())
        received = []
        first.on("chat", received.append)
        second.trigger("chat", "hi")

        assert received == ["hi"]

    def test_installs_capabilities(self):
        target = Mediator().install(SimpleNamespace())
        for name in Mediator.CAPABILITIES:
            assert callable(getattr(target, name))
        assert not hasattr(target, "channels")

    def test_channels_hidden_by_default(self):
        with pytest.raises(AttributeError):
            Mediator().channels

    def test_channels_exposed_read_only(self):
        bus = Mediator(expose_channel=True)
        target = bus.install(SimpleNamespace())
        bus.on("e", lambda: None)

        assert "e" in target.channels
        with pytest.raises(TypeError):
            target.channels["x"] = []
