"""
Upstream JSON-RPC light client adapters.

``HttpEthereumClient`` and ``HttpStarknetClient`` implement the capability
interfaces by forwarding each operation to an execution / Starknet JSON-RPC
endpoint over httpx. They perform no verification of the answers and exist
so the service can run without an embedded light client.
"""

from __future__ import annotations

import itertools
from typing import Any, List, Optional

import httpx
from eth_utils import decode_hex, encode_hex

from ..exceptions import BackendError
from ..logger import get_logger
from ..types import Address, Block, BlockTag, CallOptions, Hash32, SyncStatus

logger = get_logger(__name__)


def _to_int(value: Any, method: str) -> int:
    """Parse a hex quantity from an upstream response."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 16)
        except ValueError:
            pass
    raise BackendError(f"{method}: malformed quantity in upstream response: {value!r}")


def _to_bytes(value: Any, method: str) -> bytes:
    if isinstance(value, str):
        try:
            return decode_hex(value)
        except ValueError:
            pass
    raise BackendError(f"{method}: malformed data in upstream response: {value!r}")


class _JsonRpcTransport:
    """Minimal async JSON-RPC 2.0 client."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not url:
            raise ValueError("RPC URL cannot be empty")
        self.url = url
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def _request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a single JSON-RPC call.

        Raises:
            BackendError: On transport failure or a JSON-RPC error response
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug(f"--> {method} {self.url}")
        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise BackendError(f"{method}: upstream request failed: {e}") from e
        except ValueError as e:
            raise BackendError(f"{method}: upstream returned invalid JSON") from e

        if not isinstance(data, dict):
            raise BackendError(f"{method}: malformed upstream response")
        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise BackendError(f"{method}: {message}")
        return data.get("result")

    async def aclose(self) -> None:
        await self._client.aclose()


class HttpEthereumClient(_JsonRpcTransport):
    """Ethereum capability backed by an execution-layer JSON-RPC endpoint."""

    async def chain_id(self) -> int:
        return _to_int(await self._request("eth_chainId"), "eth_chainId")

    async def get_block_number(self) -> int:
        return _to_int(await self._request("eth_blockNumber"), "eth_blockNumber")

    def _block(self, data: Any, method: str) -> Optional[Block]:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise BackendError(f"{method}: malformed block in upstream response")
        return Block.from_dict(data)

    async def get_block_by_hash(self, block_hash: Hash32, full_tx: bool) -> Optional[Block]:
        data = await self._request("eth_getBlockByHash", [encode_hex(block_hash), full_tx])
        return self._block(data, "eth_getBlockByHash")

    async def get_block_by_number(self, tag: BlockTag, full_tx: bool) -> Optional[Block]:
        data = await self._request("eth_getBlockByNumber", [tag.to_wire(), full_tx])
        return self._block(data, "eth_getBlockByNumber")

    async def get_block_transaction_count_by_hash(self, block_hash: Hash32) -> Optional[int]:
        method = "eth_getBlockTransactionCountByHash"
        result = await self._request(method, [encode_hex(block_hash)])
        return None if result is None else _to_int(result, method)

    async def get_block_transaction_count_by_number(self, tag: BlockTag) -> Optional[int]:
        method = "eth_getBlockTransactionCountByNumber"
        result = await self._request(method, [tag.to_wire()])
        return None if result is None else _to_int(result, method)

    async def get_balance(self, address: Address, tag: BlockTag) -> int:
        result = await self._request("eth_getBalance", [encode_hex(address), tag.to_wire()])
        return _to_int(result, "eth_getBalance")

    async def get_nonce(self, address: Address, tag: BlockTag) -> int:
        result = await self._request("eth_getTransactionCount", [encode_hex(address), tag.to_wire()])
        return _to_int(result, "eth_getTransactionCount")

    async def get_code(self, address: Address, tag: BlockTag) -> bytes:
        result = await self._request("eth_getCode", [encode_hex(address), tag.to_wire()])
        return _to_bytes(result, "eth_getCode")

    async def get_gas_price(self) -> int:
        return _to_int(await self._request("eth_gasPrice"), "eth_gasPrice")

    async def get_priority_fee(self) -> int:
        result = await self._request("eth_maxPriorityFeePerGas")
        return _to_int(result, "eth_maxPriorityFeePerGas")

    async def estimate_gas(self, options: CallOptions) -> int:
        result = await self._request("eth_estimateGas", [options.to_dict()])
        return _to_int(result, "eth_estimateGas")

    async def call(self, options: CallOptions, tag: BlockTag) -> bytes:
        result = await self._request("eth_call", [options.to_dict(), tag.to_wire()])
        return _to_bytes(result, "eth_call")

    async def send_raw_transaction(self, raw_tx: bytes) -> Hash32:
        result = await self._request("eth_sendRawTransaction", [encode_hex(raw_tx)])
        return Hash32(_to_bytes(result, "eth_sendRawTransaction"))

    async def get_syncing(self) -> SyncStatus:
        result = await self._request("eth_syncing")
        if result is False or isinstance(result, dict):
            return result
        raise BackendError(f"eth_syncing: malformed upstream response: {result!r}")

    async def get_coinbase(self) -> Address:
        result = await self._request("eth_coinbase")
        return Address(_to_bytes(result, "eth_coinbase"))


class HttpStarknetClient(_JsonRpcTransport):
    """Starknet capability backed by a Starknet JSON-RPC endpoint."""

    async def chain_id(self) -> int:
        return _to_int(await self._request("starknet_chainId"), "starknet_chainId")

    async def block_number(self) -> int:
        return _to_int(await self._request("starknet_blockNumber"), "starknet_blockNumber")
