"""Identity functionality: addresses, deterministic derivation and selectors."""

from worldfactory.core.identity.models import (
    Address,
    compute_address,
    namespace_selector,
    selector_from_tag,
)

__all__ = [
    "Address",
    "compute_address",
    "namespace_selector",
    "selector_from_tag",
]
