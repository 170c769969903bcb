"""
Paymaster Module

Wraps call batches with a fee-sponsorship adapter before executing them on
the UA² account:
- PaymasterRunner / with_paymaster(): sponsor, encode and submit a batch
- NoopPaymaster and friends: built-in adapters that add no sponsor data
- paymaster_from(): build a built-in adapter from a string id

Usage:
    from ua2.core.paymaster import paymaster_from, with_paymaster

    runner = with_paymaster(transport, "0xacc0", paymaster_from("noop"))
    result = await runner.call("0xdead", "0x1234", ["0xaa"])
    result.tx_hash, result.sponsored, result.sponsor_name
"""

from .adapters import (
    CartridgePaymaster,
    NoopPaymaster,
    StarknetReactPaymaster,
    paymaster_from,
)
from .runner import PaymasterRunner, is_sponsored, with_paymaster

__all__ = [
    "CartridgePaymaster",
    "NoopPaymaster",
    "StarknetReactPaymaster",
    "paymaster_from",
    "PaymasterRunner",
    "is_sponsored",
    "with_paymaster",
]
