"""
Ethereum light client capability interface.

Everything the RPC layer needs from a trustless Ethereum light client.
Sync and verification happen behind this interface; implementations must
be safe to call from several tasks at once for read operations.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..types import Address, Block, BlockTag, CallOptions, Hash32, SyncStatus


class EthereumLightClient(Protocol):
    """Protocol that Ethereum light clients must implement."""

    async def chain_id(self) -> int: ...

    async def get_block_number(self) -> int: ...

    async def get_block_by_hash(self, block_hash: Hash32, full_tx: bool) -> Optional[Block]:
        """Return the block, or None when no such block is known."""
        ...

    async def get_block_by_number(self, tag: BlockTag, full_tx: bool) -> Optional[Block]:
        """Return the block, or None when no such block is known."""
        ...

    async def get_block_transaction_count_by_hash(self, block_hash: Hash32) -> Optional[int]:
        """Return the transaction count, or None when no such block is known."""
        ...

    async def get_block_transaction_count_by_number(self, tag: BlockTag) -> Optional[int]:
        """Return the transaction count, or None when no such block is known."""
        ...

    async def get_balance(self, address: Address, tag: BlockTag) -> int:
        """Balance in wei."""
        ...

    async def get_nonce(self, address: Address, tag: BlockTag) -> int: ...

    async def get_code(self, address: Address, tag: BlockTag) -> bytes: ...

    async def get_gas_price(self) -> int: ...

    async def get_priority_fee(self) -> int: ...

    async def estimate_gas(self, options: CallOptions) -> int: ...

    async def call(self, options: CallOptions, tag: BlockTag) -> bytes: ...

    async def send_raw_transaction(self, raw_tx: bytes) -> Hash32:
        """Broadcast a signed transaction and return its hash."""
        ...

    async def get_syncing(self) -> SyncStatus: ...

    async def get_coinbase(self) -> Address: ...
