"""
Starknet light client capability interface.
"""

from __future__ import annotations

from typing import Protocol


class StarknetLightClient(Protocol):
    """Protocol that Starknet light clients must implement."""

    async def chain_id(self) -> int:
        """Chain id felt as an integer."""
        ...

    async def block_number(self) -> int:
        """Most recent accepted block number."""
        ...
