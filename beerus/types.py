"""
Beerus Domain Types

Request-scoped values produced by the wire decoder and consumed by the
light client interfaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from eth_typing import Address, Hash32

__all__ = [
    "Address",
    "Hash32",
    "Block",
    "BlockTag",
    "BlockTagKind",
    "CallOptions",
    "SyncStatus",
]


class BlockTagKind(str, Enum):
    """Symbolic block references understood by the light client."""
    LATEST = "latest"
    FINALIZED = "finalized"
    SAFE = "safe"
    EARLIEST = "earliest"
    PENDING = "pending"
    NUMBER = "number"


@dataclass(frozen=True)
class BlockTag:
    """A symbolic tag or an exact block height."""

    kind: BlockTagKind
    number: Optional[int] = None

    @classmethod
    def latest(cls) -> "BlockTag":
        return cls(BlockTagKind.LATEST)

    @classmethod
    def exact(cls, number: int) -> "BlockTag":
        return cls(BlockTagKind.NUMBER, number)

    @property
    def is_number(self) -> bool:
        return self.kind is BlockTagKind.NUMBER

    def to_wire(self) -> str:
        """Render as the standard Ethereum JSON-RPC block parameter."""
        if self.is_number:
            return hex(self.number)
        return self.kind.value

    def __str__(self) -> str:
        return str(self.number) if self.is_number else self.kind.value


@dataclass(frozen=True)
class CallOptions:
    """
    Message call parameters for eth_call / eth_estimateGas.

    Attributes:
        to: Recipient (contract) address
        from_address: Optional sender
        gas: Optional gas limit
        gas_price: Optional gas price in wei
        value: Optional value in wei
        data: Calldata
    """
    to: Address
    from_address: Optional[Address] = None
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    value: Optional[int] = None
    data: bytes = b""

    def to_dict(self) -> Dict[str, str]:
        """Standard JSON-RPC transaction call object (hex encoded)."""
        result = {"to": "0x" + self.to.hex()}
        if self.from_address is not None:
            result["from"] = "0x" + self.from_address.hex()
        if self.gas is not None:
            result["gas"] = hex(self.gas)
        if self.gas_price is not None:
            result["gasPrice"] = hex(self.gas_price)
        if self.value is not None:
            result["value"] = hex(self.value)
        if self.data:
            result["data"] = "0x" + self.data.hex()
        return result


@dataclass
class Block:
    """
    Execution block as returned by the light client.

    ``transactions`` holds full transaction bodies when ``full_transactions``
    is True and bare transaction hashes otherwise.
    """
    header: Dict[str, Any]
    transactions: List[Any] = field(default_factory=list)
    full_transactions: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Block":
        header = {k: v for k, v in data.items() if k != "transactions"}
        txs = list(data.get("transactions") or [])
        full = bool(txs) and all(isinstance(tx, dict) for tx in txs)
        return cls(header=header, transactions=txs, full_transactions=full)

    @property
    def full_transaction_list(self) -> List[Dict[str, Any]]:
        """Transaction bodies, or an empty list for a hash-only block."""
        if not self.full_transactions:
            return []
        return self.transactions


# eth_syncing answers either False or a progress object
SyncStatus = Union[bool, Dict[str, Any]]
