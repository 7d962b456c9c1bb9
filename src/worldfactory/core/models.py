"""Factory records: configuration, ownership, cursor and completion.

These records are the durable contract with the outside world. An indexer
can rebuild deployment progress from them alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from worldfactory.core.identity import Address
from worldfactory.core.record import record


@dataclass(slots=True)
class ContractEntry:
    """One contract to register, permission and initialize in a world.

    Attributes:
        selector: Stable identifier of the contract within the default namespace.
        class_hash: Code reference the contract is instantiated from.
        init_args: Arguments passed to the contract initializer.
        writer_of_resources: Resource selectors the contract gets writer rights on.
        owner_of_resources: Resource selectors the contract gets owner rights on.
    """

    selector: int
    class_hash: int
    init_args: list[int] = field(default_factory=list)
    writer_of_resources: list[int] = field(default_factory=list)
    owner_of_resources: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "class_hash": self.class_hash,
            "init_args": list(self.init_args),
            "writer_of_resources": list(self.writer_of_resources),
            "owner_of_resources": list(self.owner_of_resources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContractEntry:
        return cls(
            selector=_as_int(data["selector"]),
            class_hash=_as_int(data["class_hash"]),
            init_args=[_as_int(v) for v in data.get("init_args", [])],
            writer_of_resources=[_as_int(v) for v in data.get("writer_of_resources", [])],
            owner_of_resources=[_as_int(v) for v in data.get("owner_of_resources", [])],
        )


@record(keys=("version",))
@dataclass(slots=True)
class FactoryConfig:
    """Versioned description of what a deployed world contains.

    Attributes:
        version: Config version, the record key.
        world_class_hash: Code reference of the world instance type.
        default_namespace: Namespace everything is registered under.
        max_actions: Action budget available to each deploy call.
        default_namespace_writer_all: Grant every contract writer rights on the
            default namespace during permission sync.
        contracts: Ordered contracts to register, permission and initialize.
        models: Ordered model class references.
        events: Ordered event class references.
    """

    version: int
    world_class_hash: int
    default_namespace: str
    max_actions: int
    default_namespace_writer_all: bool = False
    contracts: list[ContractEntry] = field(default_factory=list)
    models: list[int] = field(default_factory=list)
    events: list[int] = field(default_factory=list)

    def total_actions_required(self) -> int:
        """Number of budgeted actions needed to fully deploy this config."""
        return 3 * len(self.contracts) + len(self.models) + len(self.events)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "world_class_hash": self.world_class_hash,
            "default_namespace": self.default_namespace,
            "max_actions": self.max_actions,
            "default_namespace_writer_all": self.default_namespace_writer_all,
            "contracts": [c.to_dict() for c in self.contracts],
            "models": list(self.models),
            "events": list(self.events),
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], default_max_actions: int | None = None
    ) -> FactoryConfig:
        """Build a config from a plain payload (e.g. parsed JSON).

        Integer fields accept ints or hex strings. Boolean fields accept bools
        or the strings "true" and "false".

        Args:
            data: Payload dict.
            default_max_actions: Budget used when the payload omits max_actions.

        Raises:
            KeyError: If a required field is missing.
        """
        if "max_actions" in data:
            max_actions = _as_int(data["max_actions"])
        elif default_max_actions is not None:
            max_actions = default_max_actions
        else:
            raise KeyError("max_actions")
        return cls(
            version=_as_int(data["version"]),
            world_class_hash=_as_int(data["world_class_hash"]),
            default_namespace=str(data["default_namespace"]),
            max_actions=max_actions,
            default_namespace_writer_all=_as_bool(
                data.get("default_namespace_writer_all", False)
            ),
            contracts=[ContractEntry.from_dict(c) for c in data.get("contracts", [])],
            models=[_as_int(m) for m in data.get("models", [])],
            events=[_as_int(e) for e in data.get("events", [])],
        )


@record(keys=("version",))
@dataclass(slots=True)
class FactoryConfigOwner:
    """First writer of a config version. ZERO until the first write."""

    version: int
    contract_address: Address = Address.ZERO


@record(keys=("version", "name"))
@dataclass(slots=True)
class FactoryDeploymentCursor:
    """Durable progress of one world deployment.

    Each ``*_cursor`` counts items completed in its phase and never decreases.
    ``completed`` is a one-way latch.
    """

    version: int
    name: str
    world_address: Address | None = None
    contract_cursor: int = 0
    model_cursor: int = 0
    event_cursor: int = 0
    permission_cursor: int = 0
    init_cursor: int = 0
    total_actions: int = 0
    completed: bool = False


@record(keys=("name", "contract_selector"))
@dataclass(slots=True)
class WorldContract:
    """Address a contract received when registered in the named world. Write-once."""

    name: str
    contract_selector: int
    contract_address: Address


@record(keys=("name",))
@dataclass(slots=True)
class WorldDeployed:
    """Terminal record written once when a world finishes deploying."""

    name: str
    address: Address
    block_number: int
    tx_hash: int


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Expected int or hex string, got bool {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value, 0)
    raise TypeError(f"Expected int or hex string, got {type(value).__name__}")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise TypeError(f"Expected bool or 'true'/'false', got {value!r}")
