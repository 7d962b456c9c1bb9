"""Phase engine: budgeted, resumable deployment of one world.

A deployment runs provisioning and then five phases in strict order:

    contracts -> models -> events -> permissions -> init

Provisioning is free. Every phase item is one action. After each action the
engine checks the call's budget; once exhausted it writes the cursor and
returns normally, and the next call resumes exactly at the cursor. When every
phase is exhausted the completion recorder writes the terminal record.

If the config owner shrinks a sequence after the cursor has passed its new
length, the cursor is left as is: the phase counts as exhausted, nothing is
undone, and a warning is logged for each such phase.

Usage:
    engine = PhaseEngine(storage, provisioner, operator=factory_address)
    outcome = engine.deploy("arena", 1, context)
    outcome.completed  # False until the last phase item is done
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from worldfactory.core.errors import (
    ConfigNotFoundError,
    ContractNotRegisteredError,
    DeploymentAlreadyCompletedError,
    InvalidBudgetError,
    WorldContractConflictError,
)
from worldfactory.core.identity import Address, namespace_selector
from worldfactory.core.models import (
    ContractEntry,
    FactoryConfig,
    FactoryDeploymentCursor,
    WorldContract,
)
from worldfactory.factory.completion import CompletionRecorder
from worldfactory.factory.cursor import (
    Budget,
    Phase,
    current_phase,
    load_or_create,
    overrun_phases,
)
from worldfactory.storage.protocol import Storage
from worldfactory.world.chain import CallContext
from worldfactory.world.protocol import WorldDispatcher, WorldProvisioner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DeployOutcome:
    """What one deploy call achieved.

    Attributes:
        version: Config version.
        name: World name.
        world_address: Address of the provisioned world.
        actions: Actions performed by this call.
        total_actions: Lifetime actions after this call.
        completed: True if this call finished the deployment.
        resume_phase: Phase the next call starts in, None once every phase is exhausted.
        provisioned: True if this call provisioned the world.
    """

    version: int
    name: str
    world_address: Address
    actions: int
    total_actions: int
    completed: bool
    resume_phase: Phase | None = None
    provisioned: bool = False


@dataclass(slots=True)
class _CallState:
    """Call-scoped state shared by the phase handlers."""

    config: FactoryConfig
    cursor: FactoryDeploymentCursor
    world: WorldDispatcher
    addresses: dict[int, Address] = field(default_factory=dict)


class PhaseEngine:
    """Drives a FactoryDeploymentCursor through provisioning and the phases.

    Args:
        storage: Storage holding configs, cursors and world records.
        provisioner: Creates worlds and returns dispatchers for them.
        operator: Address the engine acts as on provisioned worlds.
    """

    def __init__(self, storage: Storage, provisioner: WorldProvisioner, operator: Address):
        self._storage = storage
        self._provisioner = provisioner
        self._operator = operator
        self._completion = CompletionRecorder(storage)
        self._handlers: dict[Phase, Callable[[_CallState, Any], None]] = {
            Phase.CONTRACTS: self._register_contract,
            Phase.MODELS: self._register_model,
            Phase.EVENTS: self._register_event,
            Phase.PERMISSIONS: self._sync_permissions,
            Phase.INIT: self._init_contract,
        }

    def deploy(self, name: str, version: int, context: CallContext) -> DeployOutcome:
        """Advance the deployment of world `name` from config `version`.

        Must run inside a storage transaction so a raised error leaves no
        partial writes behind.

        Args:
            name: World name.
            version: Factory config version.
            context: Caller, block and transaction of this call.

        Returns:
            DeployOutcome for this call. Running out of budget is not an error.

        Raises:
            DeploymentAlreadyCompletedError: If the cursor is already completed.
            ConfigNotFoundError: If no config exists for version.
            InvalidBudgetError: If the config's max_actions is below 1.
            WorldNameTakenError: If another config already deployed or provisioned this name.
            WorldContractConflictError: If a contract address is already recorded differently.
            WorldError: If a world collaborator fails.
        """
        cursor = load_or_create(self._storage, version, name)
        if cursor.completed:
            raise DeploymentAlreadyCompletedError(version, name)

        config = self._storage.read(FactoryConfig, version)
        if config is None:
            raise ConfigNotFoundError(version)
        if config.max_actions < 1:
            raise InvalidBudgetError(version, config.max_actions)

        for phase in overrun_phases(cursor, config):
            logger.warning(
                "Deployment %r (config %d): %s cursor %d is past the config length %d, "
                "treating the phase as exhausted",
                name,
                version,
                phase.label,
                phase.position(cursor),
                phase.length(config),
            )

        budget = Budget.for_call(cursor, config)
        provisioned = cursor.world_address is None
        world = self._provision(cursor, config)
        state = _CallState(config=config, cursor=cursor, world=world)

        for phase in Phase:
            if self._run_phase(phase, state, budget):
                self._storage.write(cursor)
                resume = current_phase(cursor, config)
                logger.info(
                    "Deployment %r (config %d) suspended after %d action(s), "
                    "total %d, resumes in %s",
                    name,
                    version,
                    budget.spent,
                    cursor.total_actions,
                    resume.label if resume else "completion",
                )
                return DeployOutcome(
                    version=version,
                    name=name,
                    world_address=world.address,
                    actions=budget.spent,
                    total_actions=cursor.total_actions,
                    completed=False,
                    resume_phase=resume,
                    provisioned=provisioned,
                )

        self._completion.record(cursor, world.address, context)
        return DeployOutcome(
            version=version,
            name=name,
            world_address=world.address,
            actions=budget.spent,
            total_actions=cursor.total_actions,
            completed=True,
            provisioned=provisioned,
        )

    def _provision(self, cursor: FactoryDeploymentCursor, config: FactoryConfig) -> WorldDispatcher:
        if cursor.world_address is not None:
            return self._provisioner.attach(cursor.world_address, self._operator)

        self._completion.ensure_name_unclaimed(cursor.name, cursor.version)
        address = self._provisioner.provision(cursor.name, config.world_class_hash)
        world = self._provisioner.attach(address, self._operator)
        world.register_namespace(config.default_namespace)
        cursor.world_address = address
        self._storage.write(cursor)
        logger.info(
            "World %r at %s ready with namespace %r",
            cursor.name,
            address,
            config.default_namespace,
        )
        return world

    def _run_phase(self, phase: Phase, state: _CallState, budget: Budget) -> bool:
        """Run one phase from its cursor.

        Returns:
            True if the budget ran out and the call must suspend.
        """
        handler = self._handlers[phase]
        for index, item in phase.remaining(state.cursor, state.config):
            handler(state, item)
            phase.advance(state.cursor)
            exhausted = budget.charge(state.cursor)
            logger.debug(
                "%s[%d] done for %r (total %d)",
                phase.label,
                index,
                state.cursor.name,
                state.cursor.total_actions,
            )
            if exhausted:
                return True
        return False

    # Phase handlers. Each performs exactly one action.

    def _register_contract(self, state: _CallState, entry: ContractEntry) -> None:
        address = state.world.register_contract(
            entry.selector, state.config.default_namespace, entry.class_hash
        )
        recorded = self._storage.read(WorldContract, state.cursor.name, entry.selector)
        if recorded is not None and recorded.contract_address != address:
            raise WorldContractConflictError(
                state.cursor.name, entry.selector, recorded.contract_address, address
            )
        self._storage.write(
            WorldContract(
                name=state.cursor.name,
                contract_selector=entry.selector,
                contract_address=address,
            )
        )
        state.addresses[entry.selector] = address

    def _register_model(self, state: _CallState, class_hash: int) -> None:
        state.world.register_model(state.config.default_namespace, class_hash)

    def _register_event(self, state: _CallState, class_hash: int) -> None:
        state.world.register_event(state.config.default_namespace, class_hash)

    def _sync_permissions(self, state: _CallState, entry: ContractEntry) -> None:
        address = self._contract_address(state, entry.selector)
        if state.config.default_namespace_writer_all:
            state.world.grant_writer(namespace_selector(state.config.default_namespace), address)
        for resource in entry.writer_of_resources:
            state.world.grant_writer(resource, address)
        for resource in entry.owner_of_resources:
            state.world.grant_owner(resource, address)

    def _init_contract(self, state: _CallState, entry: ContractEntry) -> None:
        state.world.init_contract(entry.selector, entry.init_args)

    def _contract_address(self, state: _CallState, selector: int) -> Address:
        address = state.addresses.get(selector)
        if address is None:
            record = self._storage.read(WorldContract, state.cursor.name, selector)
            if record is None:
                raise ContractNotRegisteredError(state.cursor.name, selector)
            address = record.contract_address
            state.addresses[selector] = address
        return address
