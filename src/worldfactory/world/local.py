"""Local world provisioner and dispatcher.

World state is written as records into the shared Storage, so it is subject
to the same transaction as the factory call that caused it.

Usage:
    classes = ClassRegistry()
    provisioner = LocalProvisioner(storage, classes, salt=0)
    address = provisioner.provision("arena", WORLD_CLASS)
    world = provisioner.attach(address, operator=factory_address)
    world.register_namespace("arena")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from worldfactory.core.identity import (
    Address,
    compute_address,
    namespace_selector,
    selector_from_tag,
)
from worldfactory.storage.protocol import Storage
from worldfactory.world.classes import ClassRegistry
from worldfactory.world.errors import (
    ContractAlreadyInitializedError,
    NamespaceNotRegisteredError,
    ResourceAlreadyRegisteredError,
    ResourceNotFoundError,
    WorldAlreadyDeployedError,
    WorldError,
)
from worldfactory.world.models import (
    ClassKind,
    InitRecord,
    NamespaceRecord,
    Permission,
    PermissionRecord,
    ResourceKind,
    ResourceRecord,
    WorldInstance,
)

logger = logging.getLogger(__name__)


class LocalProvisioner:
    """Provisions worlds at addresses derived from (name, class_hash, salt).

    Args:
        storage: Storage world records are written to.
        classes: Registry resolving world and resource class hashes.
        salt: Fixed deployment parameter mixed into every world address.
    """

    def __init__(self, storage: Storage, classes: ClassRegistry, salt: int = 0):
        self._storage = storage
        self._classes = classes
        self._salt = salt

    @property
    def classes(self) -> ClassRegistry:
        return self._classes

    def world_address(self, name: str, class_hash: int) -> Address:
        """Address a world with this name and class would be provisioned at."""
        return compute_address("world", name, class_hash, salt=self._salt)

    def provision(self, name: str, class_hash: int) -> Address:
        """Deploy a new world instance.

        Raises:
            ClassNotDeclaredError: If class_hash is not a declared world class.
            WorldAlreadyDeployedError: If a world already exists at the derived address.
        """
        self._classes.resolve(class_hash, ClassKind.WORLD)
        address = self.world_address(name, class_hash)
        if self._storage.read(WorldInstance, address) is not None:
            raise WorldAlreadyDeployedError(f"World {name!r} already exists at {address}")
        self._storage.write(WorldInstance(address=address, name=name, class_hash=class_hash))
        logger.info("Provisioned world %r at %s", name, address)
        return address

    def attach(self, address: Address, operator: Address) -> LocalWorld:
        """Get a dispatcher for an existing world.

        Raises:
            WorldError: If no world was provisioned at address.
        """
        if self._storage.read(WorldInstance, address) is None:
            raise WorldError(f"No world at {address}")
        return LocalWorld(self._storage, address, self._classes, operator)


class LocalWorld:
    """Dispatcher for one provisioned world, acting on behalf of an operator.

    The operator becomes owner of every namespace it registers.
    """

    def __init__(
        self,
        storage: Storage,
        address: Address,
        classes: ClassRegistry,
        operator: Address,
    ):
        self._storage = storage
        self._address = address
        self._classes = classes
        self._operator = operator

    @property
    def address(self) -> Address:
        return self._address

    def register_namespace(self, namespace: str) -> None:
        if self._storage.read(NamespaceRecord, self._address, namespace) is not None:
            raise ResourceAlreadyRegisteredError(f"Namespace {namespace!r} already registered")
        selector = namespace_selector(namespace)
        self._storage.write(
            NamespaceRecord(
                world=self._address,
                namespace=namespace,
                selector=selector,
                owner=self._operator,
            )
        )
        self._storage.write(
            PermissionRecord(
                world=self._address,
                resource=selector,
                grantee=self._operator,
                permission=Permission.OWNER,
            )
        )

    def register_contract(self, selector: int, namespace: str, class_hash: int) -> Address:
        self._require_namespace(namespace)
        declaration = self._classes.resolve(class_hash, ClassKind.CONTRACT)
        self._require_free(selector)
        address = compute_address(self._address, namespace, class_hash, salt=selector)
        self._storage.write(
            ResourceRecord(
                world=self._address,
                selector=selector,
                kind=ResourceKind.CONTRACT,
                namespace=namespace,
                class_hash=class_hash,
                address=address,
                name=declaration.name,
            )
        )
        return address

    def register_model(self, namespace: str, class_hash: int) -> int:
        return self._register_typed(namespace, class_hash, ClassKind.MODEL, ResourceKind.MODEL)

    def register_event(self, namespace: str, class_hash: int) -> int:
        return self._register_typed(namespace, class_hash, ClassKind.EVENT, ResourceKind.EVENT)

    def grant_writer(self, resource: int, grantee: Address) -> None:
        self._grant(resource, grantee, Permission.WRITER)

    def grant_owner(self, resource: int, grantee: Address) -> None:
        self._grant(resource, grantee, Permission.OWNER)

    def init_contract(self, selector: int, init_args: Sequence[int]) -> None:
        resource = self._storage.read(ResourceRecord, self._address, selector)
        if resource is None or resource.kind is not ResourceKind.CONTRACT:
            raise ResourceNotFoundError(f"No contract {selector:#x} in world {self._address}")
        if self._storage.read(InitRecord, self._address, selector) is not None:
            raise ContractAlreadyInitializedError(f"Contract {selector:#x} already initialized")
        self._storage.write(
            InitRecord(world=self._address, selector=selector, init_args=list(init_args))
        )

    # Queries

    def namespaces(self) -> Iterator[NamespaceRecord]:
        for ns in self._storage.records(NamespaceRecord):
            if ns.world == self._address:
                yield ns

    def resources(self) -> Iterator[ResourceRecord]:
        for resource in self._storage.records(ResourceRecord):
            if resource.world == self._address:
                yield resource

    def permissions(self) -> Iterator[PermissionRecord]:
        for permission in self._storage.records(PermissionRecord):
            if permission.world == self._address:
                yield permission

    def is_writer(self, resource: int, grantee: Address) -> bool:
        return self._has(resource, grantee, Permission.WRITER)

    def is_owner(self, resource: int, grantee: Address) -> bool:
        return self._has(resource, grantee, Permission.OWNER)

    # Internals

    def _register_typed(
        self, namespace: str, class_hash: int, class_kind: ClassKind, kind: ResourceKind
    ) -> int:
        self._require_namespace(namespace)
        declaration = self._classes.resolve(class_hash, class_kind)
        selector = selector_from_tag(namespace, declaration.name)
        self._require_free(selector)
        self._storage.write(
            ResourceRecord(
                world=self._address,
                selector=selector,
                kind=kind,
                namespace=namespace,
                class_hash=class_hash,
                address=compute_address(self._address, class_hash, salt=selector),
                name=declaration.name,
            )
        )
        return selector

    def _grant(self, resource: int, grantee: Address, permission: Permission) -> None:
        if not self._resource_exists(resource):
            raise ResourceNotFoundError(f"No resource {resource:#x} in world {self._address}")
        self._storage.write(
            PermissionRecord(
                world=self._address,
                resource=resource,
                grantee=grantee,
                permission=permission,
            )
        )

    def _has(self, resource: int, grantee: Address, permission: Permission) -> bool:
        found = self._storage.read(PermissionRecord, self._address, resource, grantee, permission)
        return found is not None

    def _resource_exists(self, selector: int) -> bool:
        if self._storage.read(ResourceRecord, self._address, selector) is not None:
            return True
        return any(ns.selector == selector for ns in self.namespaces())

    def _require_namespace(self, namespace: str) -> None:
        if self._storage.read(NamespaceRecord, self._address, namespace) is None:
            raise NamespaceNotRegisteredError(f"Namespace {namespace!r} not registered")

    def _require_free(self, selector: int) -> None:
        if self._storage.read(ResourceRecord, self._address, selector) is not None:
            raise ResourceAlreadyRegisteredError(f"Resource {selector:#x} already registered")
