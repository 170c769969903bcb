"""
Tests for client-side session policy enforcement.
"""

import pytest

from ua2.core.errors import PolicyViolationError, SessionExpiredError
from ua2.core.execution.models import AccountCall
from ua2.core.sessions import (
    SessionStore,
    ensure_allowed,
    ensure_session_active,
    guard,
    use_session,
)
from ua2.core.sessions.models import Session

VALID_AFTER = 1_000
VALID_UNTIL = 2_000
NOW_MS = 1_500 * 1000


def _call(to="0xdead", selector="0x1234") -> AccountCall:
    return AccountCall(to=to, selector=selector, calldata=())


def _session(**init) -> Session:
    init.setdefault("valid_after", VALID_AFTER)
    init.setdefault("valid_until", VALID_UNTIL)
    return Session(id="0x1", pubkey="0x1", policy=guard(**init).build(), created_at=0)


class TestLiveness:

    def test_live_session_passes(self):
        ensure_session_active(_session(), NOW_MS)

    def test_inactive_session_fails(self):
        with pytest.raises(SessionExpiredError, match="inactive"):
            ensure_session_active(_session(active=False), NOW_MS)

    def test_before_valid_after_fails(self):
        with pytest.raises(SessionExpiredError, match="not active until"):
            ensure_session_active(_session(), VALID_AFTER * 1000 - 1)

    def test_at_valid_after_passes(self):
        ensure_session_active(_session(), VALID_AFTER * 1000)

    def test_at_valid_until_fails(self):
        with pytest.raises(SessionExpiredError, match="expired"):
            ensure_session_active(_session(), VALID_UNTIL * 1000)

    def test_just_before_valid_until_passes(self):
        ensure_session_active(_session(), VALID_UNTIL * 1000 - 1)

    def test_now_can_be_a_callable(self):
        with pytest.raises(SessionExpiredError):
            ensure_session_active(_session(), lambda: VALID_UNTIL * 1000 + 5)

    def test_wall_clock_default(self):
        session = _session(valid_after=0, valid_until=1)
        with pytest.raises(SessionExpiredError):
            ensure_session_active(session)


class TestPolicy:

    def test_call_cap(self):
        session = _session(max_calls=3)
        ensure_allowed(session, [_call()] * 3)
        with pytest.raises(PolicyViolationError) as exc_info:
            ensure_allowed(session, [_call()] * 4)
        assert exc_info.value.kind == "calls"
        assert exc_info.value.detail == "4 > 3"

    def test_empty_allowlists_allow_anything(self):
        session = _session(max_calls=2)
        ensure_allowed(session, [_call("0x9999", "0x8888"), _call("0x1", "0x2")])

    def test_target_not_in_allowlist(self):
        session = _session(max_calls=5, targets=["0xdead", "0xbeef"])
        ensure_allowed(session, [_call("0xDEAD"), _call("0x00beef")])
        with pytest.raises(PolicyViolationError) as exc_info:
            ensure_allowed(session, [_call("0xdead"), _call("0xcafe")])
        assert exc_info.value.kind == "target"
        assert exc_info.value.detail == "0xcafe"

    def test_selector_not_in_allowlist(self):
        session = _session(selectors=["0x1234"])
        with pytest.raises(PolicyViolationError) as exc_info:
            ensure_allowed(session, [_call(selector="0x5678")])
        assert exc_info.value.kind == "selector"

    def test_count_checked_before_allowlists(self):
        session = _session(max_calls=1, targets=["0xdead"])
        with pytest.raises(PolicyViolationError) as exc_info:
            ensure_allowed(session, [_call("0xcafe"), _call("0xcafe")])
        assert exc_info.value.kind == "calls"

    def test_target_checked_before_selector_on_same_call(self):
        session = _session(targets=["0xdead"], selectors=["0x1234"])
        with pytest.raises(PolicyViolationError) as exc_info:
            ensure_allowed(session, [_call("0xcafe", "0x5678")])
        assert exc_info.value.kind == "target"


class TestUseSession:

    @pytest.mark.asyncio
    async def test_unknown_session_is_reported_as_expired(self):
        with pytest.raises(SessionExpiredError, match="not found"):
            await use_session(SessionStore(), "0xabc", now=NOW_MS)

    @pytest.mark.asyncio
    async def test_handle_enforces_policy(self):
        store = SessionStore()
        session = await store.create(
            guard(valid_after=VALID_AFTER, valid_until=VALID_UNTIL, max_calls=2)
            .target("0xdead")
            .build()
        )

        usage = await use_session(store, session.id, now=NOW_MS)

        assert usage.session.id == session.id
        usage.ensure_allowed(_call())
        usage.ensure_allowed([_call(), _call()])
        with pytest.raises(PolicyViolationError):
            usage.ensure_allowed([_call()] * 3)
        with pytest.raises(PolicyViolationError):
            usage.ensure_allowed(_call("0xbeef"))

    @pytest.mark.asyncio
    async def test_expired_session_fails_on_load(self):
        store = SessionStore()
        session = await store.create(guard(valid_after=VALID_AFTER, valid_until=VALID_UNTIL).build())

        with pytest.raises(SessionExpiredError):
            await use_session(store, session.id, now=VALID_UNTIL * 1000)

    @pytest.mark.asyncio
    async def test_revoked_session_fails_on_load(self):
        store = SessionStore()
        session = await store.create(guard(valid_after=VALID_AFTER, valid_until=VALID_UNTIL).build())
        await store.revoke(session.id)

        with pytest.raises(SessionExpiredError, match="inactive"):
            await store.use(session.id, now=NOW_MS)

    @pytest.mark.asyncio
    async def test_revoke_after_load_blocks_handle(self):
        store = SessionStore()
        session = await store.create(guard(valid_after=VALID_AFTER, valid_until=VALID_UNTIL).build())

        usage = await use_session(store, session.id, now=NOW_MS)
        usage.ensure_allowed(AccountCall(to="0x1", selector="0x2"))

        await store.revoke(session.id)

        assert usage.session.policy.active is False
        with pytest.raises(SessionExpiredError, match="inactive"):
            usage.ensure_allowed(AccountCall(to="0x1", selector="0x2"))

    @pytest.mark.asyncio
    async def test_liveness_rechecked_on_each_use(self):
        store = SessionStore()
        session = await store.create(guard(valid_after=VALID_AFTER, valid_until=VALID_UNTIL).build())
        clock = {"now": NOW_MS}

        usage = await use_session(store, session.id, now=lambda: clock["now"])
        usage.ensure_allowed(_call())

        clock["now"] = VALID_UNTIL * 1000
        with pytest.raises(SessionExpiredError):
            usage.ensure_allowed(_call())
