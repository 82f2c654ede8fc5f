"""
Wire codec tests: parameter decoding and result encoding.
"""

import pytest

from beerus.constants import MAX_U64
from beerus.exceptions import DecodeError
from beerus.rpc.codec import (
    decode_address,
    decode_block_tag,
    decode_bool,
    decode_bytes,
    decode_call_options,
    decode_hash,
    decode_index,
    decode_quantity,
    encode_block,
    encode_byte_array,
    encode_decimal,
    encode_ether,
    encode_hex,
    encode_transaction,
)
from beerus.types import Block, BlockTag, BlockTagKind


class TestDecodeAddress:
    def test_valid(self):
        addr = decode_address("0x" + "ab" * 20)
        assert addr == b"\xab" * 20

    def test_mixed_case(self):
        addr = decode_address("0x" + "aB" * 20)
        assert addr == b"\xab" * 20

    def test_uppercase_prefix(self):
        assert decode_address("0X" + "00" * 20) == b"\x00" * 20

    @pytest.mark.parametrize("value", [
        "ab" * 20,              # no prefix
        "0x" + "ab" * 19,       # too short
        "0x" + "ab" * 21,       # too long
        "0x" + "zz" * 20,       # non-hex
        "0x" + "a" * 39,        # odd
        "0x" + "ab" * 19 + "a\n",  # trailing newline
        "",
        20,
        None,
    ])
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            decode_address(value)


class TestDecodeHash:
    def test_valid(self):
        assert decode_hash("0x" + "01" * 32) == b"\x01" * 32

    def test_address_length_rejected(self):
        with pytest.raises(DecodeError):
            decode_hash("0x" + "01" * 20)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_hash("0x1234")

    def test_trailing_newline(self):
        with pytest.raises(DecodeError):
            decode_hash("0x" + "ab" * 31 + "a\n")


class TestDecodeBlockTag:
    @pytest.mark.parametrize("keyword,kind", [
        ("latest", BlockTagKind.LATEST),
        ("finalized", BlockTagKind.FINALIZED),
        ("safe", BlockTagKind.SAFE),
        ("earliest", BlockTagKind.EARLIEST),
        ("pending", BlockTagKind.PENDING),
    ])
    def test_keywords(self, keyword, kind):
        tag = decode_block_tag(keyword)
        assert tag.kind is kind
        assert tag.number is None

    @pytest.mark.parametrize("n", [0, 1, 255, 17_000_000, MAX_U64])
    def test_numbers_hex_and_decimal(self, n):
        assert decode_block_tag(hex(n)) == BlockTag.exact(n)
        assert decode_block_tag(str(n)) == BlockTag.exact(n)

    def test_hex_case_insensitive(self):
        assert decode_block_tag("0xFF") == BlockTag.exact(255)

    @pytest.mark.parametrize("value", [
        "Latest",
        "0x",
        "0xg1",
        "-1",
        "1.5",
        "",
        hex(MAX_U64 + 1),
        str(MAX_U64 + 1),
        "12\n",
        "0x10\n",
        16,
        None,
    ])
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            decode_block_tag(value)


class TestDecodeBool:
    def test_true_false(self):
        assert decode_bool("true") is True
        assert decode_bool("false") is False

    @pytest.mark.parametrize("value", [True, False, "True", "FALSE", "1", "0", 1, None])
    def test_only_exact_strings(self, value):
        with pytest.raises(DecodeError):
            decode_bool(value)


class TestDecodeBytes:
    def test_empty(self):
        assert decode_bytes("0x") == b""

    def test_valid(self):
        assert decode_bytes("0xdeadBEEF") == b"\xde\xad\xbe\xef"

    def test_odd_length(self):
        with pytest.raises(DecodeError):
            decode_bytes("0xabc")

    def test_missing_prefix(self):
        with pytest.raises(DecodeError):
            decode_bytes("abcd")


class TestDecodeIndex:
    def test_int(self):
        assert decode_index(0) == 0
        assert decode_index(5) == 5

    def test_strings(self):
        assert decode_index("0x2") == 2
        assert decode_index("12") == 12

    @pytest.mark.parametrize("value", [-1, True, 1.0, None, "x", "0x", "7\n"])
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            decode_index(value)


class TestDecodeQuantity:
    def test_valid(self):
        assert decode_quantity("0x5208") == 21000

    def test_empty(self):
        with pytest.raises(DecodeError):
            decode_quantity("0x", "gas")


class TestDecodeCallOptions:
    def test_minimal(self):
        opts = decode_call_options({"to": "0x" + "11" * 20})
        assert opts.to == b"\x11" * 20
        assert opts.from_address is None
        assert opts.data == b""

    def test_full(self):
        opts = decode_call_options({
            "to": "0x" + "11" * 20,
            "from": "0x" + "22" * 20,
            "gas": "0x5208",
            "gasPrice": "0x3b9aca00",
            "value": "0x1",
            "data": "0x70a08231",
        })
        assert opts.from_address == b"\x22" * 20
        assert opts.gas == 21000
        assert opts.gas_price == 1_000_000_000
        assert opts.value == 1
        assert opts.data == bytes.fromhex("70a08231")

    def test_input_alias(self):
        opts = decode_call_options({"to": "0x" + "11" * 20, "input": "0x01"})
        assert opts.data == b"\x01"

    def test_to_dict(self):
        opts = decode_call_options({"to": "0x" + "11" * 20, "gas": "0x10", "data": "0x01"})
        assert opts.to_dict() == {"to": "0x" + "11" * 20, "gas": "0x10", "data": "0x01"}

    @pytest.mark.parametrize("value", [
        {},
        {"from": "0x" + "22" * 20},
        {"to": "0x1234"},
        {"to": "0x" + "11" * 20, "data": "0xabc"},
        {"to": "0x" + "11" * 20, "gas": 21000},
        ["0x" + "11" * 20],
        "0x" + "11" * 20,
    ])
    def test_invalid(self, value):
        with pytest.raises(DecodeError):
            decode_call_options(value)


class TestEncodeEther:
    @pytest.mark.parametrize("wei,expected", [
        (10 ** 18, "1"),
        (15 * 10 ** 17, "1.5"),
        (0, "0"),
        (1, "0.000000000000000001"),
        (123 * 10 ** 18, "123"),
        (10 ** 30, "1000000000000"),
    ])
    def test_values(self, wei, expected):
        assert encode_ether(wei) == expected


class TestEncoders:
    def test_hex(self):
        assert encode_hex(b"\xab\xcd") == "0xabcd"
        assert encode_hex(b"") == "0x"

    def test_decimal(self):
        assert encode_decimal(21000) == "21000"

    def test_byte_array(self):
        assert encode_byte_array(b"\x60\x80") == [96, 128]
        assert encode_byte_array(b"") == []

    def test_transaction_bytes_become_hex(self):
        tx = encode_transaction({"hash": b"\x01\x02", "nonce": "0x1", "accessList": [b"\xff"]})
        assert tx == {"hash": "0x0102", "nonce": "0x1", "accessList": ["0xff"]}

    def test_block(self):
        block = Block(header={"number": "0x1", "miner": b"\x00" * 2}, transactions=[b"\xaa"])
        encoded = encode_block(block)
        assert encoded == {"number": "0x1", "miner": "0x0000", "transactions": ["0xaa"]}


class TestBlockTag:
    def test_to_wire(self):
        assert BlockTag.latest().to_wire() == "latest"
        assert BlockTag.exact(16).to_wire() == "0x10"

    def test_str(self):
        assert str(BlockTag(BlockTagKind.FINALIZED)) == "finalized"
        assert str(BlockTag.exact(42)) == "42"


class TestBlock:
    def test_from_dict_full(self):
        block = Block.from_dict({"number": "0x1", "transactions": [{"hash": "0x01"}]})
        assert block.full_transactions is True
        assert block.full_transaction_list == [{"hash": "0x01"}]
        assert "transactions" not in block.header

    def test_from_dict_hashes(self):
        block = Block.from_dict({"number": "0x1", "transactions": ["0x01"]})
        assert block.full_transactions is False
        assert block.full_transaction_list == []

    def test_empty_block_truthy(self):
        assert Block.from_dict({"number": "0x1", "transactions": []})
