"""World collaborators: provisioning, per-world operations and call context.

Architecture Note:
    The factory depends only on the protocols here. The Local* classes are
    in-process implementations that keep world state in the factory's Storage.
"""

from worldfactory.world.chain import CallContext, LocalChain
from worldfactory.world.classes import ClassRegistry
from worldfactory.world.errors import (
    ClassNotDeclaredError,
    ContractAlreadyInitializedError,
    NamespaceNotRegisteredError,
    ResourceAlreadyRegisteredError,
    ResourceNotFoundError,
    WorldAlreadyDeployedError,
    WorldError,
)
from worldfactory.world.local import LocalProvisioner, LocalWorld
from worldfactory.world.models import (
    ClassDeclaration,
    ClassKind,
    InitRecord,
    NamespaceRecord,
    Permission,
    PermissionRecord,
    ResourceKind,
    ResourceRecord,
    WorldInstance,
)
from worldfactory.world.protocol import WorldDispatcher, WorldProvisioner

__all__ = [
    "WorldDispatcher",
    "WorldProvisioner",
    "LocalProvisioner",
    "LocalWorld",
    "ClassRegistry",
    "ClassDeclaration",
    "ClassKind",
    "CallContext",
    "LocalChain",
    "WorldInstance",
    "NamespaceRecord",
    "ResourceRecord",
    "ResourceKind",
    "PermissionRecord",
    "Permission",
    "InitRecord",
    "WorldError",
    "ClassNotDeclaredError",
    "WorldAlreadyDeployedError",
    "NamespaceNotRegisteredError",
    "ResourceAlreadyRegisteredError",
    "ResourceNotFoundError",
    "ContractAlreadyInitializedError",
]
