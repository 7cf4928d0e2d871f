"""Synchronous event bus used by engines to publish call lifecycle events.

Handlers run in subscription order on the publishing thread. Handler
exceptions propagate to the publisher.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from resultpager.core.logging import get_logger

logger = get_logger("events")

Listener = Callable[[Any], None]


class EventBus:
    """Topic keyed observer list.

    Example:
        bus = EventBus()
        unsubscribe = bus.subscribe("call_state_changed", print)
        bus.publish("call_state_changed", event)
        unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        """Subscribe a listener to a topic.

        Returns:
            Idempotent callable removing the listener
        """
        self._listeners.setdefault(topic, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(topic, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def publish(self, topic: str, event: Any) -> None:
        """Deliver an event to every listener of a topic."""
        listeners = list(self._listeners.get(topic, []))
        logger.debug("Publishing %s to %d listener(s)", topic, len(listeners))
        for listener in listeners:
            listener(event)

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, []))
