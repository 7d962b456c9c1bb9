"""Storage backends."""

from worldfactory.storage.local import LocalStorage
from worldfactory.storage.protocol import Storage

__all__ = [
    "Storage",
    "LocalStorage",
]
