"""Protocols for the world collaborators the factory drives.

The factory only depends on these interfaces. ``LocalProvisioner`` and
``LocalWorld`` are in-process reference implementations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from worldfactory.core.identity import Address


@runtime_checkable
class WorldDispatcher(Protocol):
    """Operations exposed by one deployed world instance.

    Each operation is atomic and meant to be called once per logical
    registration. Calling twice for the same resource is a caller bug.
    """

    @property
    def address(self) -> Address:
        """Address of the world this dispatcher operates on."""
        ...

    def register_namespace(self, namespace: str) -> None:
        ...

    def register_contract(self, selector: int, namespace: str, class_hash: int) -> Address:
        """Register a contract and return the address it is deployed at."""
        ...

    def register_model(self, namespace: str, class_hash: int) -> int:
        """Register a model and return its resource selector."""
        ...

    def register_event(self, namespace: str, class_hash: int) -> int:
        """Register an event and return its resource selector."""
        ...

    def grant_writer(self, resource: int, grantee: Address) -> None:
        ...

    def grant_owner(self, resource: int, grantee: Address) -> None:
        ...

    def init_contract(self, selector: int, init_args: Sequence[int]) -> None:
        """Invoke the initializer of a registered contract."""
        ...


@runtime_checkable
class WorldProvisioner(Protocol):
    """Creates world instances and hands out dispatchers for existing ones."""

    def provision(self, name: str, class_hash: int) -> Address:
        """Deploy a new world deterministically from (name, class_hash).

        Provisioning the same inputs twice collides.
        """
        ...

    def attach(self, address: Address, operator: Address) -> WorldDispatcher:
        """Get a dispatcher for an existing world, acting as operator."""
        ...
