"""
Felt and Uint256 helpers.

A felt is rendered as a canonical lowercase ``0x``-prefixed hex string with no
leading zeros. All arithmetic is unsigned; values wider than 256 bits are
truncated by ``to_uint256`` rather than rejected.
"""

from __future__ import annotations

import re
from typing import Dict, NamedTuple, Union

from eth_utils import keccak

from ..errors import EncodingError

Felt = str
FeltLike = Union[int, str]

UINT128_MASK = (1 << 128) - 1
UINT256_MASK = (1 << 256) - 1
# Starknet selectors are keccak-256 truncated to 250 bits
SELECTOR_MASK = (1 << 250) - 1

_HEX_RE = re.compile(r"^0x[0-9a-f]+$")
_DEC_RE = re.compile(r"^[0-9]+$")


class Uint256(NamedTuple):
    """Two-limb encoding of a 256-bit value: ``low + high * 2**128``."""
    low: Felt
    high: Felt


def _parse_int(value: FeltLike) -> int:
    # bool is an int subclass; True is not a felt
    if isinstance(value, bool):
        raise EncodingError(f"Cannot encode boolean {value!r} as a felt")
    if isinstance(value, int):
        if value < 0:
            raise EncodingError(f"Felt values are unsigned, got {value}")
        return value
    if isinstance(value, str):
        s = value.strip().lower()
        if _HEX_RE.match(s):
            return int(s, 16)
        if _DEC_RE.match(s):
            return int(s, 10)
        raise EncodingError(f"Not a numeric felt string: {value!r}")
    raise EncodingError(f"Cannot encode {type(value).__name__} as a felt")


def to_felt(value: FeltLike) -> Felt:
    """Encode an int, hex string or decimal string as a canonical felt."""
    return hex(_parse_int(value))


def felt_to_int(value: FeltLike) -> int:
    return _parse_int(value)


def felt_eq(a: FeltLike, b: FeltLike) -> bool:
    """Compare two felts on their canonical form."""
    return to_felt(a) == to_felt(b)


def hex_pad(felt: Felt) -> Felt:
    """Left-pad the hex body to whole bytes, e.g. ``0xabc`` -> ``0x0abc``."""
    body = felt[2:] if felt.startswith("0x") else felt
    if len(body) % 2 == 1:
        body = "0" + body
    return "0x" + body


def to_uint256(value: FeltLike) -> Uint256:
    """Split ``value mod 2**256`` into low and high 128-bit limbs."""
    v = _parse_int(value) & UINT256_MASK
    return Uint256(low=hex(v & UINT128_MASK), high=hex(v >> 128))


def uint256_to_int(u: Uint256) -> int:
    low, high = u
    return felt_to_int(low) + (felt_to_int(high) << 128)


def uint256_to_hex_parts(u: Uint256) -> Dict[str, Felt]:
    return {"low": u[0], "high": u[1]}


def selector_from_name(name: str) -> Felt:
    """Entrypoint selector for a Cairo function name."""
    if name in ("__default__", "__l1_default__"):
        return "0x0"
    return hex(int.from_bytes(keccak(text=name), "big") & SELECTOR_MASK)
