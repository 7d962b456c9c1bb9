"""Versioned factory configs guarded by first-writer ownership."""

from __future__ import annotations

import logging

from worldfactory.core.errors import NotConfigOwnerError
from worldfactory.core.identity import Address
from worldfactory.core.models import FactoryConfig, FactoryConfigOwner
from worldfactory.storage.protocol import Storage

logger = logging.getLogger(__name__)


class ConfigStore:
    """Reads and writes FactoryConfig records under the ownership rule.

    The first caller to write a version becomes its owner. Only the owner
    may overwrite it afterwards. Contents are not validated here; bad class
    references surface when a deployment reaches them.
    """

    def __init__(self, storage: Storage):
        self._storage = storage

    def set_config(self, config: FactoryConfig, caller: Address) -> bool:
        """Store a config version.

        Args:
            config: Config to store under config.version.
            caller: Address of the writer.

        Returns:
            True if this write recorded caller as the version's first owner.

        Raises:
            NotConfigOwnerError: If the version is owned by another address.
                Nothing is written in that case.
            ValueError: If caller is the zero address.
        """
        if caller.is_zero():
            raise ValueError("The zero address cannot own a factory config")

        owner = self.get_owner(config.version)
        first_write = owner.is_zero()
        if not first_write and owner != caller:
            raise NotConfigOwnerError(config.version, caller, owner)

        if first_write:
            self._storage.write(FactoryConfigOwner(version=config.version, contract_address=caller))
        self._storage.write(config)
        logger.info(
            "Config version %d %s by %s",
            config.version,
            "created" if first_write else "updated",
            caller,
        )
        return first_write

    def get_config(self, version: int) -> FactoryConfig | None:
        return self._storage.read(FactoryConfig, version)

    def get_owner(self, version: int) -> Address:
        """Owner of a version, Address.ZERO if never written."""
        owner = self._storage.read(FactoryConfigOwner, version)
        return owner.contract_address if owner is not None else Address.ZERO
