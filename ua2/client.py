"""
Account binding.

``UA2Client`` ties the session store and paymaster runners to one connected
account. Wallet detection happens elsewhere; the caller describes what it has
with an ``AccountContext``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .core.encoding.felt import Felt, to_felt
from .core.errors import PaymasterDeniedError
from .core.execution.models import CallTransport, PaymasterAdapter
from .core.paymaster.runner import PaymasterRunner
from .core.sessions.store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountContext:
    """
    Capabilities of a connected account.

    Attributes:
        address: Account address
        chain_id: Chain the account is connected to
        label: Human name for diagnostics
        transport: Submits invokes for this account
        ua2_address: UA² contract address when it differs from ``address``
        entrypoint: Execute entrypoint override (default ``__execute__``)
    """
    address: Felt
    chain_id: Optional[Felt] = None
    label: Optional[str] = None
    transport: Optional[CallTransport] = None
    ua2_address: Optional[Felt] = None
    entrypoint: Optional[str] = None

    @property
    def contract_address(self) -> Felt:
        return to_felt(self.ua2_address or self.address)


class UA2Client:
    """
    Sessions and sponsored execution for one account.

    Usage:
        client = UA2Client(AccountContext(address="0xacc", transport=transport))
        session = await client.sessions.create(policy)
        runner = client.with_paymaster(paymaster_from("noop"))
        await runner.execute(calls)
    """

    def __init__(self, account: AccountContext, sessions: Optional[SessionStore] = None) -> None:
        self.account = account
        self.sessions = sessions or SessionStore(
            account=account,
            transport=account.transport,
            ua2_address=account.contract_address if account.transport else None,
        )

    @property
    def address(self) -> Felt:
        return self.account.address

    def with_paymaster(
        self,
        paymaster: PaymasterAdapter,
        transport: Optional[CallTransport] = None,
        ua2_address: Optional[Felt] = None,
        entrypoint: Optional[str] = None,
    ) -> PaymasterRunner:
        """
        Build a runner executing through ``paymaster``.

        Explicit arguments override what the account context provides.

        Raises:
            PaymasterDeniedError: If no transport is available
        """
        transport = transport or self.account.transport
        if transport is None:
            raise PaymasterDeniedError(
                "UA² client missing CallTransport for paymaster execution. "
                "Provide one on the AccountContext or as an override."
            )
        return PaymasterRunner(
            transport=transport,
            ua2_address=ua2_address or self.account.contract_address,
            paymaster=paymaster,
            entrypoint=entrypoint or self.account.entrypoint,
        )

    async def disconnect(self) -> None:
        logger.debug(f"Disconnected account {self.account.address}")
