"""Event models published by the factory after each committed call.

Designed to be JSON-friendly so any indexer can consume them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ConfigChanged:
    """A config version was written."""

    version: int
    owner: int
    block_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "config_changed",
            "version": self.version,
            "owner": self.owner,
            "block_number": self.block_number,
        }


@dataclass(frozen=True, slots=True)
class DeploymentProgressed:
    """A deploy call committed without finishing the deployment.

    Attributes:
        version: Config version driving the deployment.
        name: World name.
        actions: Actions performed in this call.
        total_actions: Lifetime actions after this call.
        phase: Phase the next call resumes in.
        block_number: Block the call was included in.
    """

    version: int
    name: str
    actions: int
    total_actions: int
    phase: str
    block_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "deployment_progressed",
            "version": self.version,
            "name": self.name,
            "actions": self.actions,
            "total_actions": self.total_actions,
            "phase": self.phase,
            "block_number": self.block_number,
        }


@dataclass(frozen=True, slots=True)
class WorldDeployedEvent:
    """A deployment completed."""

    version: int
    name: str
    address: int
    block_number: int
    tx_hash: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "world_deployed",
            "version": self.version,
            "name": self.name,
            "address": self.address,
            "block_number": self.block_number,
            "tx_hash": self.tx_hash,
        }


FactoryEvent = ConfigChanged | DeploymentProgressed | WorldDeployedEvent
