"""Outgoing simulation events and the bus the host application listens on.

Engines publish events instead of calling back into audio, score or
screen-shake code. Delivery is synchronous and fire-and-forget: handlers
for one event type run in subscription order, and nothing is promised
about ordering across unrelated event types.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HazardWarningStarted:
    """A lightning telegraph appeared at ``x`` (audio ramp-up hook)."""
    x: float


@dataclass(frozen=True, slots=True)
class HazardHit:
    """Lightning took ``damage`` life from a target standing at (x, y)."""
    x: float
    y: float
    damage: float


@dataclass(frozen=True, slots=True)
class StrikeLanded:
    """A bolt just hit the ground. Fired by the host and by mirroring clients."""
    x: float


@dataclass(frozen=True, slots=True)
class ProjectileHit:
    """A fireball connected. Only published by authoritative engines."""
    target_id: int
    x: float
    y: float
    damage: float


@dataclass(frozen=True, slots=True)
class SoundCue:
    """Name of a sound the audio layer should play."""
    name: str


Handler = Callable[[object], None]


class EventBus:
    """Typed publish/subscribe channel for simulation side effects."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: object) -> None:
        """Deliver ``event`` to every handler subscribed to its exact type."""
        handlers = self._handlers.get(type(event))
        if not handlers:
            return
        logger.debug("Publishing %s to %d handler(s)", event, len(handlers))
        for handler in list(handlers):
            handler(event)


class EventRecorder:
    """Collects every published event of the given types, in order.

    Used by the tests to assert on what the engines published.
    """

    def __init__(self, bus: EventBus, *event_types: type) -> None:
        self.events: list[object] = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
