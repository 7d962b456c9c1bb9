"""Core functionalities: identity, keyed records, factory records and errors.

Architecture Note:
    core/ holds stateless definitions. Stateful services live in storage/,
    world/ and factory/.
"""

from worldfactory.core.errors import (
    ConfigNotFoundError,
    ContractNotRegisteredError,
    DeploymentAlreadyCompletedError,
    FactoryError,
    InvalidBudgetError,
    NotConfigOwnerError,
    WorldContractConflictError,
    WorldNameTakenError,
)
from worldfactory.core.identity import (
    Address,
    compute_address,
    namespace_selector,
    selector_from_tag,
)
from worldfactory.core.models import (
    ContractEntry,
    FactoryConfig,
    FactoryConfigOwner,
    FactoryDeploymentCursor,
    WorldContract,
    WorldDeployed,
)
from worldfactory.core.record import get_registry, record, record_key, record_meta

__all__ = [
    # Identity
    "Address",
    "compute_address",
    "namespace_selector",
    "selector_from_tag",
    # Records
    "record",
    "record_key",
    "record_meta",
    "get_registry",
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
]
