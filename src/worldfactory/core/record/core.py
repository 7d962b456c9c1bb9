"""Record registry and decorator.

A record is a dataclass persisted in storage under a key tuple drawn from
its declared key fields.

Usage:
    @record(keys=("version", "name"))
    @dataclass(slots=True)
    class Cursor:
        version: int
        name: str
        position: int = 0

    record_key(Cursor(version=1, name="w"))  # (1, "w")
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RecordTypeMeta:
    """Metadata attached to a registered record type."""

    record_type_id: int
    type_name: str
    keys: tuple[str, ...]


def _stable_record_type_id(cls: type) -> int:
    """Generate deterministic ID from fully qualified class name.

    Args:
        cls: Record class to generate ID for.

    Returns:
        Deterministic integer ID derived from class name hash.
    """
    fqn = f"{cls.__module__}.{cls.__qualname__}"
    return int(hashlib.sha256(fqn.encode()).hexdigest()[:16], 16)


class RecordRegistry:
    """Process-local registry mapping record types to deterministic type IDs."""

    def __init__(self) -> None:
        self._by_type: dict[type, RecordTypeMeta] = {}
        self._by_type_id: dict[int, type] = {}

    def register(self, cls: type, keys: tuple[str, ...]) -> RecordTypeMeta:
        """Register a record type and return its metadata.

        Args:
            cls: Dataclass to register.
            keys: Names of the fields forming the storage key, in order.

        Returns:
            Record metadata including ID and key field names.

        Raises:
            TypeError: If cls is not a dataclass or keys are not fields of it.
            RuntimeError: If the record ID collides with another registered type.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} must be a dataclass to be a record")
        if not keys:
            raise TypeError(f"{cls.__name__} must declare at least one key field")
        field_names = {f.name for f in fields(cls)}
        unknown = [k for k in keys if k not in field_names]
        if unknown:
            raise TypeError(f"{cls.__name__} has no key field(s) {', '.join(unknown)}")

        record_type_id = _stable_record_type_id(cls)
        if record_type_id in self._by_type_id:
            existing = self._by_type_id[record_type_id]
            raise RuntimeError(
                f"Record ID collision: {cls} and {existing} hash to {record_type_id}"
            )

        meta = RecordTypeMeta(
            record_type_id=record_type_id,
            type_name=f"{cls.__module__}.{cls.__qualname__}",
            keys=tuple(keys),
        )
        self._by_type[cls] = meta
        self._by_type_id[record_type_id] = cls
        return meta

    def get_meta(self, cls: type) -> RecordTypeMeta | None:
        """Get metadata for a registered record type, None if unregistered."""
        return self._by_type.get(cls)

    def get_type(self, record_type_id: int) -> type | None:
        """Get record type by its type ID."""
        return self._by_type_id.get(record_type_id)

    def is_registered(self, cls: type) -> bool:
        return cls in self._by_type


_registry = RecordRegistry()


def get_registry() -> RecordRegistry:
    """Access the global record registry.

    Returns:
        The process-local RecordRegistry instance.
    """
    return _registry


def record(*, keys: tuple[str, ...]) -> Callable[[type[T]], type[T]]:
    """Register a dataclass as a keyed storage record.

    Args:
        keys: Names of the fields forming the storage key.

    Returns:
        Class decorator returning the class unchanged.
    """

    def decorator(cls: type[T]) -> type[T]:
        _registry.register(cls, keys)
        return cls

    return decorator


def record_meta(cls: type) -> RecordTypeMeta:
    """Get metadata for a record type.

    Raises:
        TypeError: If cls was not registered with @record.
    """
    meta = _registry.get_meta(cls)
    if meta is None:
        raise TypeError(f"{cls.__name__} is not a registered record; decorate it with @record")
    return meta


def record_key(instance: Any) -> tuple[Any, ...]:
    """Extract the storage key tuple from a record instance."""
    meta = record_meta(type(instance))
    return tuple(getattr(instance, k) for k in meta.keys)
