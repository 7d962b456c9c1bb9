"""Storage protocol for swappable keyed-record backends.

The storage layer abstracts the durable substrate the factory and the worlds
write their records to. Every public factory call runs inside one
``transaction()``: its writes all commit together, or none do.

Usage:
    storage = LocalStorage()
    with storage.transaction():
        storage.write(cursor)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Storage(Protocol):
    """Abstract keyed-record storage. Implementations handle actual data."""

    def read(self, record_type: type[T], *keys: Any) -> T | None:
        """Read the record of record_type stored under keys, None if absent."""
        ...

    def write(self, record: Any) -> None:
        """Insert or overwrite a record under the key its key fields form."""
        ...

    def delete(self, record_type: type, *keys: Any) -> bool:
        """Delete a record. Returns True if it existed."""
        ...

    def records(self, record_type: type[T]) -> Iterator[T]:
        """Iterate all records of a type."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Group writes so they commit atomically on success, discard on error."""
        ...

    @property
    def write_count(self) -> int:
        """Number of committed record writes and deletes since creation."""
        ...

    def snapshot(self) -> bytes:
        """Serialize entire storage state."""
        ...

    def restore(self, data: bytes) -> None:
        """Restore from snapshot."""
        ...
