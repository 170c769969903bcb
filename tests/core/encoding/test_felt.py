"""
Tests for felt and Uint256 encoding helpers.
"""

import pytest

from ua2.core.encoding.felt import (
    felt_eq,
    felt_to_int,
    hex_pad,
    selector_from_name,
    to_felt,
    to_uint256,
    uint256_to_hex_parts,
    uint256_to_int,
)
from ua2.core.errors import EncodingError


class TestToFelt:

    def test_int_renders_lowercase_hex(self):
        assert to_felt(0) == "0x0"
        assert to_felt(255) == "0xff"
        assert to_felt(2**251) == "0x8" + "0" * 62

    def test_hex_string_is_canonicalized(self):
        assert to_felt("0xDEAD") == "0xdead"
        assert to_felt("0x00ab") == "0xab"
        assert to_felt("  0xBEEF ") == "0xbeef"

    def test_decimal_string_is_parsed(self):
        assert to_felt("10") == "0xa"
        assert to_felt("10000000000000000") == "0x2386f26fc10000"

    @pytest.mark.parametrize("bad", ["", "0x", "hello", "0xzz", "1.5", "-1", "1_000"])
    def test_non_numeric_strings_fail(self, bad):
        with pytest.raises(EncodingError):
            to_felt(bad)

    def test_negative_and_bool_fail(self):
        with pytest.raises(EncodingError):
            to_felt(-1)
        with pytest.raises(EncodingError):
            to_felt(True)

    def test_equality_on_canonical_form(self):
        assert felt_eq("0xDEAD", "0x0000dead")
        assert felt_eq("57005", 0xDEAD)
        assert not felt_eq("0x1", "0x2")
        assert felt_to_int("0x10") == 16


class TestUint256:

    @pytest.mark.parametrize(
        "value",
        [0, 1, 2**128 - 1, 2**128, 2**128 + 5, 2**200 + 12345, 2**256 - 1],
    )
    def test_limbs_reconstruct_value(self, value):
        u = to_uint256(value)
        assert felt_to_int(u.low) + (felt_to_int(u.high) << 128) == value
        assert uint256_to_int(u) == value

    def test_string_inputs(self):
        assert to_uint256("10000000000000000") == ("0x2386f26fc10000", "0x0")
        assert to_uint256("0x1" + "0" * 32) == ("0x0", "0x1")

    def test_overflow_is_truncated(self):
        assert to_uint256(2**256) == ("0x0", "0x0")
        assert to_uint256(2**256 + 7) == ("0x7", "0x0")

    def test_hex_parts(self):
        u = to_uint256(2**128 + 1)
        assert uint256_to_hex_parts(u) == {"low": "0x1", "high": "0x1"}
        assert u.low == u[0]


def test_hex_pad_aligns_to_bytes():
    assert hex_pad("0xabc") == "0x0abc"
    assert hex_pad("0xab") == "0xab"
    assert hex_pad("0x0") == "0x00"
    assert int(hex_pad("0x123"), 16) == 0x123


def test_selector_from_name():
    # Well-known Starknet selector for `transfer`
    assert selector_from_name("transfer") == (
        "0x83afd3f4caedc6eebf44246fe54e38c95e3179a5ec9ea81740eca5b482d12e"
    )
    assert selector_from_name("__default__") == "0x0"
