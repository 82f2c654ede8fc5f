"""
Shared fixtures: in-memory light clients that record every call.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from beerus.lightclient import BeerusLightClient
from beerus.rpc.modules import EthModule, StarkModule
from beerus.rpc.server import RPCServer
from beerus.types import Block, BlockTag

BLOCK_HASH = "0x" + "ab" * 32
OTHER_HASH = "0x" + "cd" * 32
ADDRESS = "0x" + "11" * 20
ONE_ETHER = 10 ** 18


def make_tx(nonce: int) -> Dict[str, Any]:
    return {
        "hash": bytes([nonce]) * 32,
        "nonce": hex(nonce),
        "from": "0x" + "22" * 20,
        "to": "0x" + "33" * 20,
        "value": "0x0",
    }


class FakeEthereumClient:
    """EthereumLightClient backed by a dict of blocks keyed by hash and number."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.blocks_by_hash: Dict[bytes, Block] = {}
        self.blocks_by_number: Dict[int, Block] = {}
        self.latest: Optional[Block] = None
        self.block_number = 17_000_000
        self.balance = ONE_ETHER
        self.nonce = 7
        self.code = b"\x60\x80"
        self.gas_price = 30_000_000_000
        self.priority_fee = 1_000_000_000
        self.gas_estimate = 21000
        self.call_output = b"\x00\x01"
        self.syncing: Any = False
        self.coinbase = b"\x44" * 20
        self.delay = 0.0
        self.fail_with: Optional[Exception] = None

    async def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    def add_block(self, block_hash: bytes, number: int, block: Block):
        self.blocks_by_hash[block_hash] = block
        self.blocks_by_number[number] = block
        self.latest = block

    def _lookup(self, tag: BlockTag) -> Optional[Block]:
        if tag.is_number:
            return self.blocks_by_number.get(tag.number)
        return self.latest

    @staticmethod
    def _shape(block: Optional[Block], full_tx: bool) -> Optional[Block]:
        if block is None or full_tx:
            return block
        hashes = [tx["hash"] for tx in block.transactions]
        return Block(header=block.header, transactions=hashes, full_transactions=False)

    async def chain_id(self):
        await self._record("chain_id")
        return 1

    async def get_block_number(self):
        await self._record("get_block_number")
        return self.block_number

    async def get_block_by_hash(self, block_hash, full_tx):
        await self._record("get_block_by_hash", block_hash, full_tx)
        return self._shape(self.blocks_by_hash.get(block_hash), full_tx)

    async def get_block_by_number(self, tag, full_tx):
        await self._record("get_block_by_number", tag, full_tx)
        return self._shape(self._lookup(tag), full_tx)

    async def get_block_transaction_count_by_hash(self, block_hash):
        await self._record("get_block_transaction_count_by_hash", block_hash)
        block = self.blocks_by_hash.get(block_hash)
        return None if block is None else len(block.transactions)

    async def get_block_transaction_count_by_number(self, tag):
        await self._record("get_block_transaction_count_by_number", tag)
        block = self._lookup(tag)
        return None if block is None else len(block.transactions)

    async def get_balance(self, address, tag):
        await self._record("get_balance", address, tag)
        return self.balance

    async def get_nonce(self, address, tag):
        await self._record("get_nonce", address, tag)
        return self.nonce

    async def get_code(self, address, tag):
        await self._record("get_code", address, tag)
        return self.code

    async def get_gas_price(self):
        await self._record("get_gas_price")
        return self.gas_price

    async def get_priority_fee(self):
        await self._record("get_priority_fee")
        return self.priority_fee

    async def estimate_gas(self, options):
        await self._record("estimate_gas", options)
        return self.gas_estimate

    async def call(self, options, tag):
        await self._record("call", options, tag)
        return self.call_output

    async def send_raw_transaction(self, raw_tx):
        await self._record("send_raw_transaction", raw_tx)
        return b"\x99" * 32

    async def get_syncing(self):
        await self._record("get_syncing")
        return self.syncing

    async def get_coinbase(self):
        await self._record("get_coinbase")
        return self.coinbase


class FakeStarknetClient:
    """StarknetLightClient with fixed answers."""

    def __init__(self):
        self.calls: List[str] = []
        # "SN_MAIN" as a felt
        self.chain = 0x534E5F4D41494E
        self.height = 512_000

    async def chain_id(self):
        self.calls.append("chain_id")
        return self.chain

    async def block_number(self):
        self.calls.append("block_number")
        return self.height


@pytest.fixture
def eth_client():
    client = FakeEthereumClient()
    txs = [make_tx(i) for i in range(3)]
    client.add_block(
        bytes.fromhex(BLOCK_HASH[2:]),
        100,
        Block(header={"number": hex(100), "hash": BLOCK_HASH}, transactions=txs, full_transactions=True),
    )
    return client


@pytest.fixture
def stark_client():
    return FakeStarknetClient()


@pytest.fixture
def light_client(eth_client, stark_client):
    return BeerusLightClient(eth_client, stark_client, backend_timeout=1.0)


@pytest.fixture
def eth_module(light_client):
    return EthModule(light_client)


@pytest.fixture
def stark_module(light_client):
    return StarkModule(light_client)


@pytest.fixture
def rpc_server(eth_module, stark_module):
    server = RPCServer()
    server.register_module(eth_module)
    server.register_module(stark_module)
    return server
