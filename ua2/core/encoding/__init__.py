"""
Felt encoding helpers.

Calldata builders live in ``ua2.core.encoding.calldata``.
"""

from .felt import (
    Felt,
    FeltLike,
    Uint256,
    felt_eq,
    felt_to_int,
    hex_pad,
    selector_from_name,
    to_felt,
    to_uint256,
    uint256_to_hex_parts,
    uint256_to_int,
)

__all__ = [
    "Felt",
    "FeltLike",
    "Uint256",
    "felt_eq",
    "felt_to_int",
    "hex_pad",
    "selector_from_name",
    "to_felt",
    "to_uint256",
    "uint256_to_hex_parts",
    "uint256_to_int",
]
