"""
Beerus Wire Codec

Decodes loosely-typed JSON-RPC parameters into domain values and encodes
light client results back into their Ethereum JSON-RPC wire shapes.

Every decoder is total except for one failure mode: it raises
``DecodeError``. Hex input must carry the ``0x`` prefix; hex digits are
case-insensitive.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping

from eth_utils import decode_hex, encode_hex as _eth_encode_hex, from_wei, is_0x_prefixed

from ..constants import (
    ADDRESS_LENGTH,
    HASH_LENGTH,
    MAX_U64,
    VALID_DECIMAL_PATTERN,
    VALID_HEX_PATTERN,
)
from ..exceptions import DecodeError
from ..types import Address, Block, BlockTag, BlockTagKind, CallOptions, Hash32

_BLOCK_TAG_KEYWORDS = {
    kind.value: kind for kind in BlockTagKind if kind is not BlockTagKind.NUMBER
}


# ─── Decoder ──────────────────────────────────────────────────────────────────

def _hex_body(value: Any, what: str) -> str:
    """Validate a 0x-prefixed hex string and return the part after the prefix."""
    if not isinstance(value, str):
        raise DecodeError(f"invalid {what}: expected a hex string, got {type(value).__name__}")
    if not is_0x_prefixed(value):
        raise DecodeError(f"invalid {what}: missing 0x prefix")
    body = value[2:]
    if not VALID_HEX_PATTERN.fullmatch(body):
        raise DecodeError(f"invalid {what}: non-hex character")
    return body


def decode_bytes(value: Any) -> bytes:
    """``0x``-prefixed, even-length hex → bytes. ``"0x"`` is empty."""
    body = _hex_body(value, "bytes")
    if len(body) % 2:
        raise DecodeError("invalid bytes: odd number of hex digits")
    try:
        return decode_hex(value)
    except ValueError as e:
        raise DecodeError(f"invalid bytes: {e}") from e


def _decode_fixed(value: Any, length: int, what: str) -> bytes:
    body = _hex_body(value, what)
    if len(body) != 2 * length:
        raise DecodeError(
            f"invalid {what}: expected {2 + 2 * length} characters, got {len(value)}"
        )
    try:
        return decode_hex(value)
    except ValueError as e:
        raise DecodeError(f"invalid {what}: {e}") from e


def decode_address(value: Any) -> Address:
    """``0x`` + 40 hex digits → 20-byte address."""
    return Address(_decode_fixed(value, ADDRESS_LENGTH, "address"))


def decode_hash(value: Any) -> Hash32:
    """``0x`` + 64 hex digits → 32-byte hash."""
    return Hash32(_decode_fixed(value, HASH_LENGTH, "hash"))


def _parse_u64(value: str, what: str) -> int:
    """Parse a base-10 or 0x-hex unsigned integer literal."""
    if is_0x_prefixed(value):
        body = value[2:]
        if not body or not VALID_HEX_PATTERN.fullmatch(body):
            raise DecodeError(f"invalid {what}: {value!r}")
        number = int(body, 16)
    elif VALID_DECIMAL_PATTERN.fullmatch(value):
        number = int(value, 10)
    else:
        raise DecodeError(f"invalid {what}: {value!r}")
    if number > MAX_U64:
        raise DecodeError(f"invalid {what}: {value!r} does not fit in 64 bits")
    return number


def decode_block_tag(value: Any) -> BlockTag:
    """Keyword (``latest``, ``finalized``, ...) or integer literal → BlockTag."""
    if not isinstance(value, str):
        raise DecodeError(f"invalid block tag: expected a string, got {type(value).__name__}")
    kind = _BLOCK_TAG_KEYWORDS.get(value)
    if kind is not None:
        return BlockTag(kind)
    return BlockTag.exact(_parse_u64(value, "block tag"))


def decode_bool(value: Any) -> bool:
    """Only the exact strings ``"true"`` and ``"false"`` are accepted."""
    if isinstance(value, str) and value in ("true", "false"):
        return value == "true"
    raise DecodeError(f"invalid boolean: {value!r} (expected \"true\" or \"false\")")


def decode_index(value: Any) -> int:
    """Transaction position: a non-negative JSON integer or integer literal string."""
    if isinstance(value, bool):
        raise DecodeError(f"invalid index: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise DecodeError(f"invalid index: {value}")
        return value
    if isinstance(value, str):
        return _parse_u64(value, "index")
    raise DecodeError(f"invalid index: {value!r}")


def decode_quantity(value: Any, what: str = "quantity") -> int:
    """``0x`` hex quantity → int."""
    body = _hex_body(value, what)
    if not body:
        raise DecodeError(f"invalid {what}: empty hex quantity")
    return int(body, 16)


def decode_call_options(value: Any) -> CallOptions:
    """JSON call object → CallOptions. Only well-formedness is checked."""
    if not isinstance(value, Mapping):
        raise DecodeError("invalid call options: expected an object")
    if value.get("to") is None:
        raise DecodeError("invalid call options: missing 'to' address")

    data = value.get("data", value.get("input"))
    sender = value.get("from")
    gas = value.get("gas")
    gas_price = value.get("gasPrice")
    amount = value.get("value")

    return CallOptions(
        to=decode_address(value["to"]),
        from_address=decode_address(sender) if sender is not None else None,
        gas=decode_quantity(gas, "gas") if gas is not None else None,
        gas_price=decode_quantity(gas_price, "gasPrice") if gas_price is not None else None,
        value=decode_quantity(amount, "value") if amount is not None else None,
        data=decode_bytes(data) if data is not None else b"",
    )


# ─── Encoder ──────────────────────────────────────────────────────────────────

def encode_ether(wei: int) -> str:
    """
    Balance in wei → decimal ether string.

    Full precision, no exponent notation: 10**18 → "1", 1.5 * 10**18 → "1.5".
    """
    return format(Decimal(from_wei(wei, "ether")), "f")


def encode_hex(data: bytes) -> str:
    """bytes → ``0x``-prefixed lowercase hex."""
    return _eth_encode_hex(bytes(data))


def encode_decimal(value: int) -> str:
    return str(value)


def encode_byte_array(data: bytes) -> List[int]:
    return list(bytes(data))


def _jsonify(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return encode_hex(value)
    if isinstance(value, Mapping):
        return {k: _jsonify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(v) for v in value]
    return value


def encode_transaction(tx: Mapping[str, Any]) -> Dict[str, Any]:
    return _jsonify(tx)


def encode_block(block: Block) -> Dict[str, Any]:
    result = _jsonify(block.header)
    result["transactions"] = [_jsonify(tx) for tx in block.transactions]
    return result
