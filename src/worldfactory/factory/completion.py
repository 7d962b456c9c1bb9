"""Terminal record written when every phase of a deployment is exhausted."""

from __future__ import annotations

import logging

from worldfactory.core.errors import WorldNameTakenError
from worldfactory.core.identity import Address
from worldfactory.core.models import FactoryDeploymentCursor, WorldDeployed
from worldfactory.storage.protocol import Storage
from worldfactory.world.chain import CallContext

logger = logging.getLogger(__name__)


class CompletionRecorder:
    """Writes WorldDeployed once per world name and latches the cursor."""

    def __init__(self, storage: Storage):
        self._storage = storage

    def ensure_name_available(self, name: str) -> None:
        """Raise WorldNameTakenError if a world with this name already completed."""
        existing = self._storage.read(WorldDeployed, name)
        if existing is not None:
            raise WorldNameTakenError(name, existing.address)

    def ensure_name_unclaimed(self, name: str, version: int) -> None:
        """Raise WorldNameTakenError if the name is deployed or provisioned by another version.

        WorldContract and WorldDeployed records are keyed by name alone, so two
        configs deploying the same name would overwrite each other's records.
        """
        self.ensure_name_available(name)
        for cursor in self._storage.records(FactoryDeploymentCursor):
            if (
                cursor.name == name
                and cursor.version != version
                and cursor.world_address is not None
            ):
                raise WorldNameTakenError(name, cursor.world_address)

    def record(
        self,
        cursor: FactoryDeploymentCursor,
        address: Address,
        context: CallContext,
    ) -> WorldDeployed:
        """Write the terminal record and mark the cursor completed.

        Raises:
            WorldNameTakenError: If a WorldDeployed record exists for the name.
        """
        self.ensure_name_available(cursor.name)
        deployed = WorldDeployed(
            name=cursor.name,
            address=address,
            block_number=context.block_number,
            tx_hash=context.tx_hash,
        )
        self._storage.write(deployed)
        cursor.completed = True
        self._storage.write(cursor)
        logger.info(
            "World %r deployed at %s (config %d, %d actions, block %d)",
            cursor.name,
            address,
            cursor.version,
            cursor.total_actions,
            context.block_number,
        )
        return deployed
