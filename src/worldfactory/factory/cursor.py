"""Deployment cursor: phase order, positions and per-call budget.

Usage:
    cursor = load_or_create(storage, version=1, name="arena")
    budget = Budget.for_call(cursor, config)
    for phase in Phase:
        for index, item in phase.remaining(cursor, config):
            ...
            phase.advance(cursor)
            if budget.charge(cursor):
                break
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from worldfactory.core.models import FactoryConfig, FactoryDeploymentCursor
from worldfactory.storage.protocol import Storage


class Phase(Enum):
    """Budgeted deployment phases, in execution order.

    Each value names the cursor field that gates the phase and the config
    sequence that bounds it.
    """

    CONTRACTS = ("contract_cursor", "contracts")
    MODELS = ("model_cursor", "models")
    EVENTS = ("event_cursor", "events")
    PERMISSIONS = ("permission_cursor", "contracts")
    INIT = ("init_cursor", "contracts")

    def __init__(self, cursor_field: str, config_field: str):
        self.cursor_field = cursor_field
        self.config_field = config_field

    @property
    def label(self) -> str:
        return self.name.lower()

    def items(self, config: FactoryConfig) -> list[Any]:
        return list(getattr(config, self.config_field))

    def length(self, config: FactoryConfig) -> int:
        return len(getattr(config, self.config_field))

    def position(self, cursor: FactoryDeploymentCursor) -> int:
        return int(getattr(cursor, self.cursor_field))

    def is_done(self, cursor: FactoryDeploymentCursor, config: FactoryConfig) -> bool:
        return self.position(cursor) >= self.length(config)

    def remaining(
        self, cursor: FactoryDeploymentCursor, config: FactoryConfig
    ) -> Iterator[tuple[int, Any]]:
        """Yield (index, item) for items at or past the cursor, in config order.

        Yields nothing when the cursor is at or past the end of the sequence.
        """
        items = self.items(config)
        start = self.position(cursor)
        for index in range(start, len(items)):
            yield index, items[index]

    def advance(self, cursor: FactoryDeploymentCursor) -> None:
        setattr(cursor, self.cursor_field, self.position(cursor) + 1)


def current_phase(cursor: FactoryDeploymentCursor, config: FactoryConfig) -> Phase | None:
    """First phase with items left, None when every phase is exhausted."""
    for phase in Phase:
        if not phase.is_done(cursor, config):
            return phase
    return None


def overrun_phases(cursor: FactoryDeploymentCursor, config: FactoryConfig) -> list[Phase]:
    """Phases whose cursor is past the config sequence, e.g. after the owner shrank it."""
    return [phase for phase in Phase if phase.position(cursor) > phase.length(config)]


def load_or_create(storage: Storage, version: int, name: str) -> FactoryDeploymentCursor:
    """Load the cursor for (version, name), or a fresh unsaved one if absent."""
    cursor = storage.read(FactoryDeploymentCursor, version, name)
    if cursor is None:
        cursor = FactoryDeploymentCursor(version=version, name=name)
    return cursor


@dataclass(slots=True)
class Budget:
    """Action allowance for one deploy call.

    Attributes:
        ceiling: Lifetime action count at which the call must suspend.
        spent: Actions charged during this call.
    """

    ceiling: int
    spent: int = 0

    @classmethod
    def for_call(cls, cursor: FactoryDeploymentCursor, config: FactoryConfig) -> Budget:
        return cls(ceiling=cursor.total_actions + config.max_actions)

    def charge(self, cursor: FactoryDeploymentCursor) -> bool:
        """Count one action against the cursor.

        Returns:
            True if the budget is now exhausted.
        """
        cursor.total_actions += 1
        self.spent += 1
        return cursor.total_actions >= self.ceiling
