"""Local in-memory storage implementation.

Simple dict-based storage suitable for single-process use and testing.

Usage:
    storage = LocalStorage()
    factory = WorldFactory(storage=storage)
"""

from __future__ import annotations

import copy as cp
import logging
import pickle  # nosec B403 - Used only for local testing/prototyping, not production
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar, cast

from worldfactory.core.record import record_key, record_meta

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Marks a key deleted inside an open transaction.
_DELETED = object()


class LocalStorage:
    """Simple in-memory storage using nested dicts.

    Structure:
        _records[record_type][key_tuple] = record_instance

    Reads return deep copies so callers cannot mutate stored state without
    writing it back. Inside ``transaction()`` writes go to an overlay that is
    merged into ``_records`` only when the outermost transaction exits cleanly.
    """

    def __init__(self) -> None:
        self._records: dict[type, dict[tuple[Any, ...], Any]] = {}
        self._pending: dict[type, dict[tuple[Any, ...], Any]] | None = None
        self._depth = 0
        self._write_count = 0

    @property
    def write_count(self) -> int:
        return self._write_count

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def read(self, record_type: type[T], *keys: Any) -> T | None:
        """Read a record by its key.

        Args:
            record_type: Registered record class.
            *keys: Key values in declared key order.

        Returns:
            Deep copy of the stored record or None if absent.

        Raises:
            TypeError: If the number of keys does not match the record's key fields.
        """
        key = self._key_for(record_type, keys)
        if self._pending is not None:
            staged = self._pending.get(record_type, {}).get(key)
            if staged is _DELETED:
                return None
            if staged is not None:
                return cast(T, cp.deepcopy(staged))
        stored = self._records.get(record_type, {}).get(key)
        return cast(T, cp.deepcopy(stored)) if stored is not None else None

    def write(self, record: Any) -> None:
        """Insert or overwrite a record.

        Args:
            record: Instance of a registered record class.
        """
        record_type = type(record)
        key = record_key(record)
        value = cp.deepcopy(record)
        if self._pending is not None:
            self._pending.setdefault(record_type, {})[key] = value
        else:
            self._records.setdefault(record_type, {})[key] = value
            self._write_count += 1

    def delete(self, record_type: type, *keys: Any) -> bool:
        """Delete a record.

        Returns:
            True if the record existed (including staged writes), False otherwise.
        """
        key = self._key_for(record_type, keys)
        existed = self.read(record_type, *keys) is not None
        if not existed:
            return False
        if self._pending is not None:
            self._pending.setdefault(record_type, {})[key] = _DELETED
        else:
            del self._records[record_type][key]
            self._write_count += 1
        return True

    def records(self, record_type: type[T]) -> Iterator[T]:
        """Iterate copies of all records of a type, staged writes included."""
        merged: dict[tuple[Any, ...], Any] = dict(self._records.get(record_type, {}))
        if self._pending is not None:
            merged.update(self._pending.get(record_type, {}))
        for value in merged.values():
            if value is not _DELETED:
                yield cast(T, cp.deepcopy(value))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Stage writes and commit them atomically.

        Nested transactions join the outermost one. If any exception escapes,
        every write staged since the outermost transaction began is discarded
        and the exception propagates.
        """
        if self._depth == 0:
            self._pending = {}
        self._depth += 1
        try:
            yield
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                discarded = sum(len(v) for v in (self._pending or {}).values())
                self._pending = None
                logger.debug("Transaction rolled back, %d staged write(s) discarded", discarded)
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit()

    def _commit(self) -> None:
        pending = self._pending or {}
        self._pending = None
        for record_type, staged in pending.items():
            table = self._records.setdefault(record_type, {})
            for key, value in staged.items():
                if value is _DELETED:
                    table.pop(key, None)
                else:
                    table[key] = value
                self._write_count += 1

    def _key_for(self, record_type: type, keys: tuple[Any, ...]) -> tuple[Any, ...]:
        meta = record_meta(record_type)
        if len(keys) != len(meta.keys):
            raise TypeError(
                f"{record_type.__name__} is keyed by {meta.keys}, got {len(keys)} key value(s)"
            )
        return tuple(keys)

    def snapshot(self) -> bytes:
        """Pickle entire committed state for serialization.

        Not efficient - use only for testing/prototyping, not production.

        Raises:
            RuntimeError: If called while a transaction is open.
        """
        if self.in_transaction:
            raise RuntimeError("Cannot snapshot storage inside an open transaction")
        return pickle.dumps({"records": self._records, "write_count": self._write_count})

    def restore(self, data: bytes) -> None:
        """Restore from pickle snapshot.

        Args:
            data: Pickled bytes from previous snapshot() call.
        """
        if self.in_transaction:
            raise RuntimeError("Cannot restore storage inside an open transaction")
        state = pickle.loads(data)  # nosec B301 - Used only for local testing, not production
        self._records = state["records"]
        self._write_count = state["write_count"]
