"""Protocols for publishing factory events.

Sinks receive events only for calls whose storage transaction committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from worldfactory.tracing.models import FactoryEvent


@runtime_checkable
class EventSink(Protocol):
    """Receives factory events in commit order.

    Usage:
        log = InMemoryEventLog()
        factory = WorldFactory(storage, events=log)
        factory.deploy("arena", 1)
        log.events  # [DeploymentProgressed(...)]
    """

    def publish(self, event: FactoryEvent) -> None:
        """Record one event."""
        ...


class InMemoryEventLog:
    """Unbounded in-memory EventSink for development and tests."""

    def __init__(self) -> None:
        self._events: list[FactoryEvent] = []

    def publish(self, event: FactoryEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[FactoryEvent]:
        return list(self._events)

    def of_type(self, event_type: type) -> list[FactoryEvent]:
        return [e for e in self._events if isinstance(e, event_type)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
