"""
Client-side session policy enforcement.

Mirrors the account contract's checks so a batch that would revert is caught
before submission:

1. Liveness: active flag and the ``valid_after``/``valid_until`` window
2. Call count against ``max_calls``
3. Per call, target then selector against the allowlists

The first failing check raises; violations are not accumulated.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence, Union

from ..encoding.felt import Felt, FeltLike
from ..errors import PolicyViolationError, PolicyViolationKind, SessionExpiredError
from ..execution.models import AccountCall, CallsInput, as_call_list
from .models import Session

if TYPE_CHECKING:
    from .store import SessionStore

Clock = Callable[[], float]
# Epoch milliseconds, or a callable returning them; None means wall clock
NowInput = Union[None, float, Callable[[], float]]


def _now_ms(now: NowInput) -> float:
    if now is None:
        return time.time() * 1000
    if callable(now):
        return now()
    return now


def ensure_session_active(session: Session, now: NowInput = None) -> None:
    """Raise ``SessionExpiredError`` unless ``session`` is usable at ``now`` (ms)."""
    policy = session.policy
    if not policy.active:
        raise SessionExpiredError(f"Session {session.id} is inactive.")

    now_seconds = math.floor(_now_ms(now) / 1000)
    if now_seconds < policy.valid_after:
        raise SessionExpiredError(f"Session {session.id} not active until {policy.valid_after}.")
    if policy.valid_until <= now_seconds:
        raise SessionExpiredError(f"Session {session.id} expired at {policy.valid_until}.")


def ensure_allowed(session: Session, calls: Sequence[AccountCall]) -> None:
    """Check a batch against the session's call cap and allowlists."""
    policy = session.policy
    if len(calls) > policy.limits.max_calls:
        raise PolicyViolationError(
            PolicyViolationKind.CALLS, f"{len(calls)} > {policy.limits.max_calls}"
        )

    for call in calls:
        if not policy.allow.allows_target(call.to):
            raise PolicyViolationError(PolicyViolationKind.TARGET, str(call.to))
        if not policy.allow.allows_selector(call.selector):
            raise PolicyViolationError(PolicyViolationKind.SELECTOR, str(call.selector))


@dataclass
class SessionUsage:
    """
    Handle for one session in a store.

    Every check reads the store's current copy of the session, so a revoke
    made after the handle was created is seen by the next check.
    """
    store: SessionStore
    session_id: Felt
    now: NowInput = None

    @property
    def session(self) -> Session:
        current = self.store.find(self.session_id)
        if current is None:
            raise SessionExpiredError(f"Session {self.session_id} not found.")
        return current

    def ensure_allowed(self, calls: CallsInput) -> None:
        session = self.session
        ensure_session_active(session, self.now)
        ensure_allowed(session, as_call_list(calls))


async def use_session(
    store: SessionStore,
    session_id: FeltLike,
    now: NowInput = None,
) -> SessionUsage:
    """
    Load a session for client-side enforcement.

    Raises:
        SessionExpiredError: If the session is unknown, inactive or outside its window
    """
    found = await store.get(session_id)
    if found is None:
        raise SessionExpiredError(f"Session {session_id} not found.")

    ensure_session_active(found, now)
    return SessionUsage(store=store, session_id=found.id, now=now)
