"""Keyed record functionality: registry, decorator and key extraction."""

from worldfactory.core.record.core import (
    RecordRegistry,
    RecordTypeMeta,
    get_registry,
    record,
    record_key,
    record_meta,
)

__all__ = [
    "RecordRegistry",
    "RecordTypeMeta",
    "get_registry",
    "record",
    "record_key",
    "record_meta",
]
