"""
Mediator - synchronous publish/subscribe event bus.

Every facade owns one mediator for core events and one shared by all
sandboxes. Subscribers run in priority order; a failing subscriber is logged
and does not stop delivery to the others. The capability set can be installed
onto any object, so sandboxes and the facade expose ``on``/``trigger``
directly while sharing one channel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubscriberPriority(Enum):
    """Subscriber priority, lower runs first."""

    HIGHEST = 0
    HIGH = 25
    NORMAL = 50
    LOW = 75
    LOWEST = 100


class CoreEvent(str, Enum):
    """Events emitted by the core."""

    # registration/construction faults: (site, context, fault)
    ERROR = "error"
    # recoverable misuse: (site, message[, fault])
    WARNING = "warning"
    # lifecycle checkpoints: (core)
    AFTER_INIT = "afterInit"
    AFTER_START = "afterStart"
    AFTER_STOP = "afterStop"


@dataclass
class Subscriber:
    """Binds a handler to a channel."""

    channel: str
    fn: Callable[..., Any]
    priority: SubscriberPriority = SubscriberPriority.NORMAL
    # optional filter, receives the trigger arguments
    predicate: Callable[..., bool] | None = None
    subscriber_id: str = ""
    once: bool = False


def _channel_key(name: CoreEvent | str) -> str:
    return name.value if isinstance(name, Enum) else name


class Mediator:
    """
    Event bus with named channels.

    ``expose_channel`` makes the raw channel table reachable through
    ``channels`` (read-only); it is meant for debugging only.
    """

    # names copied onto targets by install()
    CAPABILITIES = (
        "subscribe",
        "on",
        "once",
        "unsubscribe",
        "off",
        "trigger",
        "has_subscribers",
    )

    def __init__(self, expose_channel: bool = False) -> None:
        self._channels: dict[str, list[Subscriber]] = {}
        self._expose_channel = expose_channel
        self._counter = 0

    @property
    def channels(self) -> Mapping[str, list[Subscriber]]:
        if not self._expose_channel:
            raise AttributeError("channels are only exposed with expose_channel=True")
        return MappingProxyType(self._channels)

    def subscribe(
        self,
        name: CoreEvent | str,
        fn: Callable[..., Any],
        priority: SubscriberPriority = SubscriberPriority.NORMAL,
        predicate: Callable[..., bool] | None = None,
        once: bool = False,
    ) -> str:
        """
        Subscribe a handler to a channel.

        Returns the subscriber id, usable with unsubscribe().
        """
        if not callable(fn):
            raise TypeError(f"Subscriber for {name!r} is not callable: {fn!r}")

        key = _channel_key(name)
        self._counter += 1
        subscriber = Subscriber(
            channel=key,
            fn=fn,
            priority=priority,
            predicate=predicate,
            subscriber_id=f"sub_{self._counter}",
            once=once,
        )

        bucket = self._channels.setdefault(key, [])
        bucket.append(subscriber)
        # stable, so equal priorities keep subscription order
        bucket.sort(key=lambda s: s.priority.value)

        logger.debug("Subscribed %s to channel %s", subscriber.subscriber_id, key)
        return subscriber.subscriber_id

    on = subscribe

    def once(
        self,
        name: CoreEvent | str,
        fn: Callable[..., Any],
        priority: SubscriberPriority = SubscriberPriority.NORMAL,
    ) -> str:
        """Subscribe a handler that is removed after its first call."""
        return self.subscribe(name, fn, priority=priority, once=True)

    def unsubscribe(
        self,
        name: CoreEvent | str,
        fn_or_id: Callable[..., Any] | str | None = None,
    ) -> int:
        """
        Remove subscribers from a channel.

        Without ``fn_or_id`` the whole channel is cleared. Returns the number
        of removed subscribers.
        """
        key = _channel_key(name)
        bucket = self._channels.get(key)
        if not bucket:
            return 0

        if fn_or_id is None:
            kept: list[Subscriber] = []
        elif isinstance(fn_or_id, str):
            kept = [s for s in bucket if s.subscriber_id != fn_or_id]
        else:
            kept = [s for s in bucket if s.fn != fn_or_id]

        removed = len(bucket) - len(kept)
        if kept:
            self._channels[key] = kept
        else:
            self._channels.pop(key, None)
        return removed

    off = unsubscribe

    def trigger(self, name: CoreEvent | str, *args: Any) -> int:
        """
        Call every subscriber of a channel with ``args``.

        Returns the number of subscribers that were called.
        """
        key = _channel_key(name)
        subscribers = list(self._channels.get(key, ()))
        called = 0

        for subscriber in subscribers:
            try:
                if subscriber.predicate is not None and not subscriber.predicate(*args):
                    continue
                if subscriber.once:
                    self.unsubscribe(key, subscriber.subscriber_id)
                called += 1
                subscriber.fn(*args)
            except Exception:
                logger.exception(
                    "Subscriber %s failed while handling %s",
                    subscriber.subscriber_id,
                    key,
                )

        return called

    def has_subscribers(self, name: CoreEvent | str) -> bool:
        return bool(self._channels.get(_channel_key(name)))

    def subscriber_count(self, name: CoreEvent | str | None = None) -> int:
        """Get the number of subscribers, for one channel or overall."""
        if name is None:
            return sum(len(bucket) for bucket in self._channels.values())
        return len(self._channels.get(_channel_key(name), ()))

    def clear(self) -> None:
        """Remove all subscribers."""
        self._channels.clear()

    def install(self, target: T) -> T:
        """
        Copy the capability set onto ``target``.

        All targets share this mediator's channels.
        """
        for capability in self.CAPABILITIES:
            setattr(target, capability, getattr(self, capability))
        if self._expose_channel:
            setattr(target, "channels", self.channels)
        return target
