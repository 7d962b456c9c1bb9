"""Class reference resolution.

Turns an opaque class hash into the declaration it was published with.
"""

from __future__ import annotations

import warnings

from worldfactory.world.errors import ClassNotDeclaredError
from worldfactory.world.models import ClassDeclaration, ClassKind


class ClassRegistry:
    """Declared classes keyed by class hash.

    Usage:
        classes = ClassRegistry()
        classes.declare(0x1, "Position", ClassKind.MODEL)
        classes.resolve(0x1, ClassKind.MODEL).name  # "Position"
    """

    def __init__(self) -> None:
        self._by_hash: dict[int, ClassDeclaration] = {}

    def declare(self, class_hash: int, name: str, kind: ClassKind) -> ClassDeclaration:
        """Declare a class. Redeclaring the same hash replaces the declaration."""
        existing = self._by_hash.get(class_hash)
        declaration = ClassDeclaration(class_hash=class_hash, name=name, kind=kind)
        if existing is not None and existing != declaration:
            warnings.warn(
                f"Class {class_hash:#x} redeclared as {name!r} ({kind.value}), "
                f"was {existing.name!r} ({existing.kind.value})",
                stacklevel=2,
            )
        self._by_hash[class_hash] = declaration
        return declaration

    def resolve(self, class_hash: int, kind: ClassKind) -> ClassDeclaration:
        """Resolve a class hash to a declaration of the expected kind.

        Raises:
            ClassNotDeclaredError: If the hash is unknown or declared as another kind.
        """
        declaration = self._by_hash.get(class_hash)
        if declaration is None:
            raise ClassNotDeclaredError(f"Class {class_hash:#x} is not declared")
        if declaration.kind is not kind:
            raise ClassNotDeclaredError(
                f"Class {class_hash:#x} is declared as {declaration.kind.value}, "
                f"not {kind.value}"
            )
        return declaration

    def __contains__(self, class_hash: object) -> bool:
        return class_hash in self._by_hash

    def __len__(self) -> int:
        return len(self._by_hash)
