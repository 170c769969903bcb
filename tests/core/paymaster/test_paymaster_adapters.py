"""
Tests for the built-in paymaster adapters.
"""

import pytest

from ua2.core.errors import PaymasterDeniedError
from ua2.core.execution.models import AccountCall, AccountTransaction
from ua2.core.paymaster import (
    CartridgePaymaster,
    NoopPaymaster,
    StarknetReactPaymaster,
    paymaster_from,
)


@pytest.mark.parametrize(
    "paymaster_id,cls,name",
    [
        ("noop", NoopPaymaster, "noop"),
        ("noop:test", NoopPaymaster, "noop:test"),
        ("cartridge", CartridgePaymaster, "cartridge"),
        ("Cartridge:Arcade", CartridgePaymaster, "cartridge:Arcade"),
        ("starknet-react:demo", StarknetReactPaymaster, "starknet-react:demo"),
        ("  NOOP  ", NoopPaymaster, "noop"),
    ],
)
def test_paymaster_from(paymaster_id, cls, name):
    paymaster = paymaster_from(paymaster_id)
    assert type(paymaster) is cls
    assert paymaster.name == name


@pytest.mark.parametrize("paymaster_id", ["", "   ", "avnu", "noop-ish:x"])
def test_paymaster_from_rejects_unknown_ids(paymaster_id):
    with pytest.raises(PaymasterDeniedError):
        paymaster_from(paymaster_id)


@pytest.mark.asyncio
async def test_noop_sponsor_keeps_calls_and_fee():
    tx = AccountTransaction(calls=[AccountCall(to="0x1", selector="0x2")], max_fee="0x5")

    sponsored = await NoopPaymaster().sponsor(tx)

    assert sponsored.calls == tx.calls
    assert sponsored.max_fee == "0x5"
    assert sponsored.sponsor_data is None
    assert sponsored.sponsor_name == "noop"
