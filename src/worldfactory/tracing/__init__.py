"""Event trail for observing factory activity.

Usage:
    from worldfactory.tracing import InMemoryEventLog

    log = InMemoryEventLog()
    factory = WorldFactory(storage, events=log)
"""

from worldfactory.tracing.models import (
    ConfigChanged,
    DeploymentProgressed,
    FactoryEvent,
    WorldDeployedEvent,
)
from worldfactory.tracing.protocol import EventSink, InMemoryEventLog

__all__ = [
    "EventSink",
    "InMemoryEventLog",
    "FactoryEvent",
    "ConfigChanged",
    "DeploymentProgressed",
    "WorldDeployedEvent",
]
