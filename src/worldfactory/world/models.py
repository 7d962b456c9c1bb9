"""World-side records and class declarations.

These records are written by LocalWorld into the same storage as the
factory records, so a rolled-back call rolls back world mutations too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from worldfactory.core.identity import Address
from worldfactory.core.record import record


class ClassKind(Enum):
    """What a declared class can be instantiated as."""

    WORLD = "world"
    CONTRACT = "contract"
    MODEL = "model"
    EVENT = "event"


class ResourceKind(Enum):
    NAMESPACE = "namespace"
    CONTRACT = "contract"
    MODEL = "model"
    EVENT = "event"


class Permission(Enum):
    WRITER = "writer"
    OWNER = "owner"


@dataclass(frozen=True, slots=True)
class ClassDeclaration:
    """Previously published code: a class hash, its declared name and kind."""

    class_hash: int
    name: str
    kind: ClassKind


@record(keys=("address",))
@dataclass(slots=True)
class WorldInstance:
    """A provisioned world."""

    address: Address
    name: str
    class_hash: int


@record(keys=("world", "namespace"))
@dataclass(slots=True)
class NamespaceRecord:
    world: Address
    namespace: str
    selector: int
    owner: Address


@record(keys=("world", "selector"))
@dataclass(slots=True)
class ResourceRecord:
    """A contract, model or event registered in a world under a namespace."""

    world: Address
    selector: int
    kind: ResourceKind
    namespace: str
    class_hash: int
    address: Address
    name: str = ""


@record(keys=("world", "resource", "grantee", "permission"))
@dataclass(slots=True)
class PermissionRecord:
    world: Address
    resource: int
    grantee: Address
    permission: Permission


@record(keys=("world", "selector"))
@dataclass(slots=True)
class InitRecord:
    """Initializer call made on a registered contract."""

    world: Address
    selector: int
    init_args: list[int] = field(default_factory=list)
