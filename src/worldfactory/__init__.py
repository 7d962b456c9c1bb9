"""worldfactory: resumable, budgeted deployment of isolated worlds.

Usage:
    from worldfactory import Address, ClassKind, ContractEntry, FactoryConfig, WorldFactory

    factory = WorldFactory()
    factory.classes.declare(0x100, "world", ClassKind.WORLD)
    factory.classes.declare(0x200, "actions", ClassKind.CONTRACT)

    factory.set_config(
        FactoryConfig(
            version=1,
            world_class_hash=0x100,
            default_namespace="arena",
            max_actions=2,
            contracts=[ContractEntry(selector=0xA, class_hash=0x200)],
        ),
        caller=Address(0xAD),
    )

    while not factory.deploy("arena", 1).completed:
        pass
"""

__version__ = "0.1.0"

# Core primitives
from worldfactory.core import (
    Address,
    ConfigNotFoundError,
    ContractEntry,
    ContractNotRegisteredError,
    DeploymentAlreadyCompletedError,
    FactoryConfig,
    FactoryConfigOwner,
    FactoryDeploymentCursor,
    FactoryError,
    InvalidBudgetError,
    NotConfigOwnerError,
    WorldContract,
    WorldDeployed,
    WorldContractConflictError,
    WorldNameTakenError,
    compute_address,
    namespace_selector,
    record,
    selector_from_tag,
)

# Factory
from worldfactory.factory import (
    DeployOutcome,
    Phase,
    WorldFactory,
    deploy_until_complete,
)

# Storage
from worldfactory.storage import LocalStorage, Storage

# Tracing
from worldfactory.tracing import EventSink, InMemoryEventLog

# World collaborators
from worldfactory.world import (
    ClassKind,
    ClassRegistry,
    LocalChain,
    LocalProvisioner,
    LocalWorld,
    WorldDispatcher,
    WorldError,
    WorldProvisioner,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Address",
    "compute_address",
    "selector_from_tag",
    "namespace_selector",
    "record",
    "ContractEntry",
    "FactoryConfig",
    "FactoryConfigOwner",
    "FactoryDeploymentCursor",
    "WorldContract",
    "WorldDeployed",
    # Errors
    "FactoryError",
    "NotConfigOwnerError",
    "DeploymentAlreadyCompletedError",
    "ConfigNotFoundError",
    "InvalidBudgetError",
    "WorldNameTakenError",
    "ContractNotRegisteredError",
    "WorldContractConflictError",
    "WorldError",
    # Factory
    "WorldFactory",
    "DeployOutcome",
    "Phase",
    "deploy_until_complete",
    # Storage
    "Storage",
    "LocalStorage",
    # World
    "WorldDispatcher",
    "WorldProvisioner",
    "LocalProvisioner",
    "LocalWorld",
    "ClassRegistry",
    "ClassKind",
    "LocalChain",
    # Tracing
    "EventSink",
    "InMemoryEventLog",
]
