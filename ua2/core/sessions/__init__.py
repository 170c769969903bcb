"""
Session Management Module

Session keys grant time-limited, capability-scoped access to a UA² account:
- PolicyBuilder / guard(): Build a normalized SessionPolicy
- SessionStore: Create, list and revoke sessions for one account
- use_session(): Enforce a session's policy before submitting calls

Usage:
    from ua2.core.sessions import SessionStore, guard, use_session

    store = SessionStore(transport=transport, ua2_address="0x...")
    session = await store.create(
        guard(max_value="1000", expires_in_seconds=3600)
        .target("0xdead")
        .selector("0x1234")
        .max_calls(5)
        .build()
    )

    usage = await use_session(store, session.id)
    usage.ensure_allowed(calls)  # raises PolicyViolationError / SessionExpiredError
"""

from .models import (
    Session,
    SessionAllow,
    SessionLimits,
    SessionPolicy,
)
from .guard import (
    SessionUsage,
    ensure_allowed,
    ensure_session_active,
    use_session,
)
from .builder import PolicyBuilder, guard, limits
from .store import SessionStore, generate_session_key

__all__ = [
    # Models
    "Session",
    "SessionAllow",
    "SessionLimits",
    "SessionPolicy",
    # Builder
    "PolicyBuilder",
    "guard",
    "limits",
    # Store
    "SessionStore",
    "generate_session_key",
    # Guard
    "SessionUsage",
    "ensure_allowed",
    "ensure_session_active",
    "use_session",
]
