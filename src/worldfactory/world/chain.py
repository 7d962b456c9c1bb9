"""Execution context for factory calls.

Each public call sees the caller, the block it is included in and its
transaction hash. LocalChain issues a new block per call.
"""

from __future__ import annotations

from dataclasses import dataclass

from worldfactory.core.identity import Address, compute_address


@dataclass(frozen=True, slots=True)
class CallContext:
    caller: Address
    block_number: int
    tx_hash: int


class LocalChain:
    """Monotonic block counter producing one CallContext per call.

    Args:
        genesis_block: Block number of the first call.
    """

    def __init__(self, genesis_block: int = 1):
        self._next_block = genesis_block

    @property
    def block_number(self) -> int:
        """Block number the next call will be included in."""
        return self._next_block

    def begin(self, caller: Address) -> CallContext:
        block = self._next_block
        self._next_block += 1
        tx_hash = compute_address("tx", block, caller.value).value
        return CallContext(caller=caller, block_number=block, tx_hash=tx_hash)
