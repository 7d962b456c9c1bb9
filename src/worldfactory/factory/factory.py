"""WorldFactory: public entry point for configuring and deploying worlds.

Usage:
    factory = WorldFactory()
    factory.classes.declare(WORLD_CLASS, "world", ClassKind.WORLD)
    factory.set_config(config, caller=admin)

    # Repeat until the deployment completes; each call spends at most
    # config.max_actions actions and resumes where the previous one stopped.
    outcome = factory.deploy("arena", config.version)
"""

from __future__ import annotations

from typing import Any

from worldfactory.config.settings import FactorySettings
from worldfactory.core.identity import Address
from worldfactory.core.models import (
    FactoryConfig,
    FactoryDeploymentCursor,
    WorldContract,
    WorldDeployed,
)
from worldfactory.factory.config_store import ConfigStore
from worldfactory.factory.engine import DeployOutcome, PhaseEngine
from worldfactory.storage.local import LocalStorage
from worldfactory.storage.protocol import Storage
from worldfactory.tracing.models import ConfigChanged, DeploymentProgressed, WorldDeployedEvent
from worldfactory.tracing.protocol import EventSink
from worldfactory.world.chain import LocalChain
from worldfactory.world.classes import ClassRegistry
from worldfactory.world.local import LocalProvisioner
from worldfactory.world.protocol import WorldDispatcher, WorldProvisioner


class WorldFactory:
    """Owns the config store and phase engine over one storage backend.

    Every public mutating call runs in one storage transaction: it either
    commits all of its writes or none of them. Events are published only
    after commit.

    Args:
        storage: Storage backend (LocalStorage by default).
        provisioner: World provisioner (LocalProvisioner over storage by default).
        classes: Class registry for the default provisioner.
        chain: Source of per-call block and transaction context.
        events: Optional sink for factory events.
        settings: Factory settings (loaded from environment by default).
    """

    def __init__(
        self,
        storage: Storage | None = None,
        provisioner: WorldProvisioner | None = None,
        classes: ClassRegistry | None = None,
        chain: LocalChain | None = None,
        events: EventSink | None = None,
        settings: FactorySettings | None = None,
    ):
        self._settings = settings or FactorySettings()
        self._storage = storage or LocalStorage()
        self._classes = classes or ClassRegistry()
        self._provisioner = provisioner or LocalProvisioner(
            self._storage, self._classes, salt=self._settings.world_salt
        )
        self._chain = chain or LocalChain(genesis_block=self._settings.genesis_block)
        self._events = events
        self._address = Address(self._settings.factory_address)
        self._configs = ConfigStore(self._storage)
        self._engine = PhaseEngine(self._storage, self._provisioner, operator=self._address)

    @property
    def address(self) -> Address:
        """Address the factory acts as on the worlds it deploys."""
        return self._address

    @property
    def storage(self) -> Storage:
        return self._storage

    @property
    def classes(self) -> ClassRegistry:
        return self._classes

    @property
    def settings(self) -> FactorySettings:
        return self._settings

    def set_config(self, config: FactoryConfig, caller: Address) -> None:
        """Store a config version, recording caller as owner on first write.

        Raises:
            NotConfigOwnerError: If another address owns config.version.
        """
        context = self._chain.begin(caller)
        with self._storage.transaction():
            self._configs.set_config(config, caller)
        owner = self._configs.get_owner(config.version)
        self._publish(
            ConfigChanged(
                version=config.version,
                owner=owner.value,
                block_number=context.block_number,
            )
        )

    def set_config_from_dict(self, payload: dict[str, Any], caller: Address) -> FactoryConfig:
        """Parse a config payload and store it. Missing max_actions uses the settings default."""
        config = FactoryConfig.from_dict(
            payload, default_max_actions=self._settings.default_max_actions
        )
        self.set_config(config, caller)
        return config

    def deploy(self, name: str, version: int, caller: Address | None = None) -> DeployOutcome:
        """Advance the deployment of world `name` from config `version` by one call.

        Args:
            name: World name.
            version: Config version.
            caller: Address issuing the call (the factory itself by default).

        Returns:
            DeployOutcome describing the progress made.

        Raises:
            DeploymentAlreadyCompletedError: If this deployment already completed.
            FactoryError: On other factory-level failures.
            WorldError: If a world collaborator fails. No writes are committed.
        """
        context = self._chain.begin(caller or self._address)
        with self._storage.transaction():
            outcome = self._engine.deploy(name, version, context)

        if outcome.completed:
            self._publish(
                WorldDeployedEvent(
                    version=version,
                    name=name,
                    address=outcome.world_address.value,
                    block_number=context.block_number,
                    tx_hash=context.tx_hash,
                )
            )
        else:
            resume = outcome.resume_phase
            self._publish(
                DeploymentProgressed(
                    version=version,
                    name=name,
                    actions=outcome.actions,
                    total_actions=outcome.total_actions,
                    phase=resume.label if resume else "completion",
                    block_number=context.block_number,
                )
            )
        return outcome

    # Queries over the persisted records

    def config(self, version: int) -> FactoryConfig | None:
        return self._configs.get_config(version)

    def config_owner(self, version: int) -> Address:
        return self._configs.get_owner(version)

    def cursor(self, version: int, name: str) -> FactoryDeploymentCursor | None:
        return self._storage.read(FactoryDeploymentCursor, version, name)

    def deployed(self, name: str) -> WorldDeployed | None:
        return self._storage.read(WorldDeployed, name)

    def world_contract(self, name: str, selector: int) -> Address | None:
        found = self._storage.read(WorldContract, name, selector)
        return found.contract_address if found is not None else None

    def world(self, version: int, name: str) -> WorldDispatcher | None:
        """Dispatcher for the world a deployment provisioned, None before provisioning."""
        cursor = self.cursor(version, name)
        if cursor is None or cursor.world_address is None:
            return None
        return self._provisioner.attach(cursor.world_address, self._address)

    def _publish(self, event: Any) -> None:
        if self._events is not None:
            self._events.publish(event)
