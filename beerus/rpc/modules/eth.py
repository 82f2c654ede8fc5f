"""
Beerus eth_* RPC Methods

Ethereum JSON-RPC namespace served from the Ethereum light client.

Every handler follows the same three steps:
    1. decode the wire parameters (nothing reaches the client on bad input)
    2. make one call on the shared client under its read lock
    3. encode the typed result once the lock has been released

All parameters are positional and mandatory. Block tags and the
``full_tx`` flag travel as strings (``"latest"``, ``"0x10"``, ``"true"``).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ...exceptions import BlockNotFoundError, IndexOutOfRangeError
from ...logger import get_logger
from ...types import Block, BlockTag
from ..codec import (
    decode_address,
    decode_block_tag,
    decode_bool,
    decode_bytes,
    decode_call_options,
    decode_hash,
    decode_index,
    encode_block,
    encode_byte_array,
    encode_decimal,
    encode_ether,
    encode_hex,
    encode_transaction,
)
from ..server import RPCError, RPCErrorCode, RPCModule, rpc_method

logger = get_logger(__name__)


class EthModule(RPCModule):
    """
    Ethereum RPC methods (eth_* namespace).
    """

    namespace = "eth"

    def _client(self):
        if self.client is None:
            raise RPCError(RPCErrorCode.INTERNAL_ERROR, "Light client not available")
        return self.client

    async def _read(self, operation):
        return await self._client().read_ethereum(operation)

    # ══════════════════════════════════════════════════════════════════════════
    #  CHAIN INFO
    # ══════════════════════════════════════════════════════════════════════════

    @rpc_method
    async def chainId(self) -> int:
        """Returns the chain ID of the current network."""
        return await self._read(lambda eth: eth.chain_id())

    @rpc_method
    async def blockNumber(self) -> int:
        """Returns the number of the most recent block."""
        return await self._read(lambda eth: eth.get_block_number())

    @rpc_method
    async def gasPrice(self) -> str:
        """Returns the current gas price in wei, as a decimal string."""
        price = await self._read(lambda eth: eth.get_gas_price())
        return encode_decimal(price)

    @rpc_method
    async def maxPriorityFeePerGas(self) -> str:
        """Returns the suggested priority fee in wei, as a decimal string."""
        fee = await self._read(lambda eth: eth.get_priority_fee())
        return encode_decimal(fee)

    @rpc_method
    async def syncing(self) -> Union[bool, Dict]:
        """Returns False when synced, a progress object otherwise."""
        return await self._read(lambda eth: eth.get_syncing())

    @rpc_method
    async def coinbase(self) -> str:
        """Returns the coinbase address."""
        address = await self._read(lambda eth: eth.get_coinbase())
        return encode_hex(address)

    # ══════════════════════════════════════════════════════════════════════════
    #  BLOCKS
    # ══════════════════════════════════════════════════════════════════════════

    @rpc_method
    async def getBlockByHash(self, block_hash: str, full_tx: str) -> Optional[Dict]:
        """Returns a block by hash, or null when the block is unknown."""
        h = decode_hash(block_hash)
        full = decode_bool(full_tx)
        block = await self._read(lambda eth: eth.get_block_by_hash(h, full))
        if block is None:
            return None
        return encode_block(block)

    @rpc_method
    async def getBlockByNumber(self, block_number: str, full_tx: str) -> Optional[Dict]:
        """Returns a block by number or tag, or null when the block is unknown."""
        tag = decode_block_tag(block_number)
        full = decode_bool(full_tx)
        block = await self._read(lambda eth: eth.get_block_by_number(tag, full))
        if block is None:
            return None
        return encode_block(block)

    @rpc_method
    async def getBlockTransactionCountByHash(self, block_hash: str) -> int:
        """
        Returns the number of transactions in a block.

        Unlike getBlockByHash, an unknown block is an error here.
        """
        h = decode_hash(block_hash)
        count = await self._read(lambda eth: eth.get_block_transaction_count_by_hash(h))
        if count is None:
            raise BlockNotFoundError(f"block {block_hash} not found")
        return count

    @rpc_method
    async def getBlockTransactionCountByNumber(self, block_number: str) -> int:
        """Returns the number of transactions in a block; unknown block is an error."""
        tag = decode_block_tag(block_number)
        count = await self._read(lambda eth: eth.get_block_transaction_count_by_number(tag))
        if count is None:
            raise BlockNotFoundError(f"block {block_number} not found")
        return count

    # ══════════════════════════════════════════════════════════════════════════
    #  TRANSACTIONS
    # ══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def _transaction_at(block: Optional[Block], index: int) -> Dict[str, Any]:
        # Missing blocks and hash-only blocks both count as an empty list
        transactions: List[Dict[str, Any]] = block.full_transaction_list if block else []
        if index >= len(transactions):
            raise IndexOutOfRangeError(index, len(transactions))
        return encode_transaction(transactions[index])

    @rpc_method
    async def getTransactionByBlockHashAndIndex(self, block_hash: str, index: Any) -> Dict:
        """Returns the transaction at ``index`` in the block with the given hash."""
        h = decode_hash(block_hash)
        idx = decode_index(index)
        block = await self._read(lambda eth: eth.get_block_by_hash(h, True))
        return self._transaction_at(block, idx)

    @rpc_method
    async def getTransactionByBlockNumberAndIndex(self, block_number: str, index: Any) -> Dict:
        """Returns the transaction at ``index`` in the block with the given number or tag."""
        tag = decode_block_tag(block_number)
        idx = decode_index(index)
        block = await self._read(lambda eth: eth.get_block_by_number(tag, True))
        return self._transaction_at(block, idx)

    @rpc_method
    async def sendRawTransaction(self, raw_tx: str) -> str:
        """
        Broadcast a signed transaction.

        This is the only method with an effect outside the process.

        Returns:
            Transaction hash (0x hex)
        """
        raw = decode_bytes(raw_tx)
        tx_hash = await self._read(lambda eth: eth.send_raw_transaction(raw))
        logger.info(f"eth_sendRawTransaction broadcast {encode_hex(tx_hash)}")
        return encode_hex(tx_hash)

    # ══════════════════════════════════════════════════════════════════════════
    #  ACCOUNTS
    # ══════════════════════════════════════════════════════════════════════════

    @rpc_method
    async def getBalance(self, address: str) -> str:
        """
        Returns the balance of an address at the latest block.

        The balance is rendered in ether as a decimal string
        (1000000000000000000 wei → "1").
        """
        addr = decode_address(address)
        balance = await self._read(lambda eth: eth.get_balance(addr, BlockTag.latest()))
        return encode_ether(balance)

    @rpc_method
    async def getTransactionCount(self, address: str) -> int:
        """Returns the nonce of an address at the latest block."""
        addr = decode_address(address)
        return await self._read(lambda eth: eth.get_nonce(addr, BlockTag.latest()))

    @rpc_method
    async def getCode(self, address: str) -> List[int]:
        """Returns the code at an address as an array of byte values."""
        addr = decode_address(address)
        code = await self._read(lambda eth: eth.get_code(addr, BlockTag.latest()))
        return encode_byte_array(code)

    # ══════════════════════════════════════════════════════════════════════════
    #  EXECUTION
    # ══════════════════════════════════════════════════════════════════════════

    @rpc_method
    async def call(self, transaction: Dict, block_number: str) -> str:
        """Executes a read-only message call; returns the output as 0x hex."""
        options = decode_call_options(transaction)
        tag = decode_block_tag(block_number)
        output = await self._read(lambda eth: eth.call(options, tag))
        return encode_hex(output)

    @rpc_method
    async def estimateGas(self, transaction: Dict) -> str:
        """Estimates the gas a message call needs, as a decimal string."""
        options = decode_call_options(transaction)
        gas = await self._read(lambda eth: eth.estimate_gas(options))
        return encode_decimal(gas)
