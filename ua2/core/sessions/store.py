"""
In-memory session store for one connected account.

Manages the lifecycle of session keys:
- Creation (optionally registering the policy on the account contract)
- Local revocation, plus caller-driven on-chain revocation
- Listing and lookup

Session identity uses the raw generated key: ``Session.id == Session.pubkey``.
Usage is tracked client side per call batch (see ``guard.use_session``).

The store is not safe for interleaved ``create`` calls on the same account;
callers serialize access per account.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import replace
from typing import TYPE_CHECKING, List, Optional

from ...config import settings
from ..encoding.calldata import encode_add_session, encode_revoke_session
from ..encoding.felt import Felt, FeltLike, to_felt
from ..errors import ProviderUnavailableError
from ..execution.models import CallTransport, InvokeResult, tx_hash_of
from .guard import Clock, NowInput, SessionUsage, use_session
from .models import Session, SessionPolicy

if TYPE_CHECKING:
    from ...client import AccountContext


logger = logging.getLogger(__name__)


def generate_session_key() -> Felt:
    """
    Random 256-bit value with the top bit cleared so it stays below the field
    prime. Development-grade only: this is not a Stark keypair.
    """
    buf = bytearray(secrets.token_bytes(32))
    buf[0] &= 0x7F
    return to_felt(int.from_bytes(buf, "big"))


def _short(felt: Felt) -> str:
    return f"{felt[:10]}…" if len(felt) > 10 else felt


class SessionStore:
    """
    Owns the sessions created for one account.

    Usage:
        store = SessionStore(transport=transport, ua2_address="0x...")
        session = await store.create(guard(expires_in_seconds=600).build())
        usage = await store.use(session.id)
        usage.ensure_allowed(calls)
        await store.revoke(session.id)
    """

    def __init__(
        self,
        account: Optional[AccountContext] = None,
        transport: Optional[CallTransport] = None,
        ua2_address: Optional[FeltLike] = None,
        entrypoint: Optional[str] = None,
        clock: Clock = time.time,
    ) -> None:
        self.account = account
        self.transport = transport
        self.ua2_address = to_felt(ua2_address) if ua2_address is not None else None
        self.entrypoint = entrypoint or settings.add_session_entrypoint
        self._clock = clock
        self._sessions: List[Session] = []

    @property
    def can_dispatch(self) -> bool:
        return self.transport is not None and self.ua2_address is not None

    async def create(self, policy: SessionPolicy) -> Session:
        """
        Create a session key for ``policy``.

        When a transport and account address are configured, the policy is
        registered on chain first. A dispatch failure propagates and nothing
        is stored.
        """
        pubkey = generate_session_key()
        calldata = encode_add_session(pubkey, policy)

        if self.can_dispatch:
            result = await self.transport.invoke(self.ua2_address, self.entrypoint, calldata)
            logger.info(
                f"Registered session {_short(pubkey)} on {self.ua2_address} "
                f"(tx {tx_hash_of(result)})"
            )

        session = Session(
            id=pubkey,
            pubkey=pubkey,
            policy=policy,
            created_at=int(self._clock() * 1000),
        )
        self._sessions.append(session)

        logger.info(
            f"Created session {_short(session.id)}, valid {policy.valid_after}..{policy.valid_until}, "
            f"max_calls={policy.limits.max_calls}"
        )
        return session

    def _index_of(self, session_id: FeltLike) -> Optional[int]:
        wanted = to_felt(session_id)
        for i, session in enumerate(self._sessions):
            if session.id == wanted:
                return i
        return None

    def find(self, session_id: FeltLike) -> Optional[Session]:
        """Current stored copy of a session, or None."""
        i = self._index_of(session_id)
        return self._sessions[i] if i is not None else None

    async def get(self, session_id: FeltLike) -> Optional[Session]:
        return self.find(session_id)

    async def revoke(self, session_id: FeltLike) -> None:
        """Deactivate a session locally. Unknown ids are ignored."""
        i = self._index_of(session_id)
        if i is None:
            logger.debug(f"Revoke ignored, unknown session {session_id}")
            return
        session = self._sessions[i]
        self._sessions[i] = replace(session, policy=session.policy.deactivated())
        logger.info(f"Revoked session {_short(session.id)} locally")

    async def revoke_on_chain(self, session_id: FeltLike) -> InvokeResult:
        """Call ``revoke_session`` on the account, then revoke locally."""
        if not self.can_dispatch:
            raise ProviderUnavailableError(
                "Session store has no transport or account address for on-chain revocation."
            )
        result = await self.transport.invoke(
            self.ua2_address,
            settings.revoke_session_entrypoint,
            encode_revoke_session(session_id),
        )
        await self.revoke(session_id)
        return InvokeResult(tx_hash=tx_hash_of(result))

    async def list(self) -> List[Session]:
        """Snapshot of known sessions in creation order."""
        return list(self._sessions)

    async def use(self, session_id: FeltLike, now: NowInput = None) -> SessionUsage:
        return await use_session(self, session_id, now=now)
