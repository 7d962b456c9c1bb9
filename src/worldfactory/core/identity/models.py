"""Address and selector identity models.

Usage:
    world = compute_address("my_world", 0xABC, salt=0)
    selector = selector_from_tag("ns", "Position")
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar

# Addresses and selectors live in a 251-bit field, like felt-based chains.
ADDRESS_BITS = 251
_ADDRESS_MASK = (1 << ADDRESS_BITS) - 1


@dataclass(frozen=True, slots=True)
class Address:
    """Opaque on-world address. Zero means "unset"."""

    value: int = 0

    ZERO: ClassVar[Address]

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Address must be non-negative, got {self.value}")

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return hex(self.value)

    def is_zero(self) -> bool:
        """Check if this is the zero (unset) address.

        Returns:
            True if value is 0.
        """
        return self.value == 0

    @classmethod
    def from_hex(cls, text: str) -> Address:
        """Parse an address from a hex string (with or without 0x prefix)."""
        return cls(int(text, 16))


Address.ZERO = Address(0)


def _digest(*parts: object) -> int:
    h = hashlib.sha256()
    for part in parts:
        h.update(repr(part).encode())
        h.update(b"\x00")
    return int.from_bytes(h.digest(), "big") & _ADDRESS_MASK


def compute_address(*parts: object, salt: int = 0) -> Address:
    """Derive a deterministic address from arbitrary parts and a salt.

    The same parts and salt always produce the same address, across processes.

    Args:
        *parts: Values identifying the deployed instance.
        salt: Fixed deployment parameter mixed into the hash.

    Returns:
        Non-zero deterministic Address.
    """
    value = _digest("address", salt, *parts)
    return Address(value or 1)


def selector_from_tag(namespace: str, name: str) -> int:
    """Compute the stable selector of a named resource within a namespace.

    Args:
        namespace: Namespace the resource is registered under.
        name: Resource name.

    Returns:
        Integer selector.
    """
    return _digest("selector", namespace, name)


def namespace_selector(namespace: str) -> int:
    """Selector identifying the namespace resource itself."""
    return _digest("namespace", namespace)
