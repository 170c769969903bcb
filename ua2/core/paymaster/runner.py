"""
Sponsored execution through a paymaster adapter.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ...config import settings
from ..encoding.calldata import encode_execute
from ..encoding.felt import Felt, FeltLike, to_felt
from ..execution.models import (
    AccountCall,
    AccountTransaction,
    CallTransport,
    CallsInput,
    PaymasterAdapter,
    SponsoredExecuteResult,
    SponsoredTransaction,
    as_call_list,
    tx_hash_of,
)

logger = logging.getLogger(__name__)


def is_sponsored(tx: AccountTransaction) -> bool:
    """True when the paymaster attached sponsor data, a sponsor name or a max fee."""
    if not isinstance(tx, SponsoredTransaction):
        return bool(tx.max_fee)
    return bool(tx.sponsor_data) or bool(tx.sponsor_name) or bool(tx.max_fee)


class PaymasterRunner:
    """
    Sponsors call batches with a paymaster and executes them via the UA² account.

    The paymaster runs first; if it raises, the error reaches the caller as is
    and nothing is submitted.
    """

    def __init__(
        self,
        transport: CallTransport,
        ua2_address: FeltLike,
        paymaster: PaymasterAdapter,
        entrypoint: Optional[str] = None,
    ) -> None:
        self.transport = transport
        self.ua2_address = to_felt(ua2_address)
        self.paymaster = paymaster
        self.entrypoint = entrypoint or settings.execute_entrypoint

    async def execute(
        self,
        calls: CallsInput,
        max_fee: Optional[FeltLike] = None,
    ) -> SponsoredExecuteResult:
        batch = AccountTransaction(calls=as_call_list(calls), max_fee=max_fee)

        sponsored = await self.paymaster.sponsor(batch)
        calldata = encode_execute(sponsored)

        result = await self.transport.invoke(self.ua2_address, self.entrypoint, calldata)
        tx_hash = tx_hash_of(result)

        sponsor_name = getattr(sponsored, "sponsor_name", None) or self.paymaster.name
        flagged = is_sponsored(sponsored)
        logger.info(
            f"Executed {len(sponsored.calls)} call(s) via {self.entrypoint} "
            f"(paymaster={sponsor_name}, sponsored={flagged}, tx={tx_hash})"
        )
        return SponsoredExecuteResult(tx_hash=tx_hash, sponsored=flagged, sponsor_name=sponsor_name)

    async def call(
        self,
        to: FeltLike,
        selector: FeltLike,
        calldata: Iterable[FeltLike] = (),
        max_fee: Optional[FeltLike] = None,
    ) -> SponsoredExecuteResult:
        return await self.execute(AccountCall(to=to, selector=selector, calldata=tuple(calldata)), max_fee)


def with_paymaster(
    transport: CallTransport,
    ua2_address: Felt,
    paymaster: PaymasterAdapter,
    entrypoint: Optional[str] = None,
) -> PaymasterRunner:
    return PaymasterRunner(
        transport=transport,
        ua2_address=ua2_address,
        paymaster=paymaster,
        entrypoint=entrypoint,
    )
