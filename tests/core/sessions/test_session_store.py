"""
Tests for the in-memory session store.
"""

import re
from dataclasses import FrozenInstanceError

import pytest

from ua2.core.encoding.felt import to_uint256
from ua2.core.errors import ProviderUnavailableError
from ua2.core.sessions import SessionStore, generate_session_key, guard, limits
from ua2.core.sessions.models import SessionAllow, SessionPolicy

FELT_RE = re.compile(r"^0x[0-9a-f]+$")


@pytest.fixture
def policy() -> SessionPolicy:
    return SessionPolicy(
        valid_after=0,
        valid_until=1_700_000_000,
        limits=limits(10, "10000000000000000"),
        allow=SessionAllow(targets=["0xDEAD", "0xBEEF"], selectors=["0x1234", "0x5678"]),
        active=True,
    )


def test_generated_keys_stay_below_field_prime():
    for _ in range(50):
        key = generate_session_key()
        assert FELT_RE.match(key)
        assert int(key, 16) < 2**255


@pytest.mark.asyncio
async def test_create_shapes_session(policy):
    store = SessionStore()

    session = await store.create(policy)

    assert FELT_RE.match(session.id)
    assert FELT_RE.match(session.pubkey)
    assert session.id == session.pubkey
    assert session.policy.limits.max_calls == 10
    assert session.policy.limits.max_value_per_call == to_uint256("10000000000000000")
    assert session.policy.allow.targets == ("0xdead", "0xbeef")

    listed = await store.list()
    assert [s.id for s in listed] == [session.id]


@pytest.mark.asyncio
async def test_create_without_transport_does_not_dispatch(policy, transport):
    store = SessionStore(transport=transport)  # no address
    await store.create(policy)
    assert transport.sent == []


@pytest.mark.asyncio
async def test_create_dispatches_add_session(policy, transport):
    store = SessionStore(transport=transport, ua2_address="0xACC0")

    session = await store.create(policy)

    assert len(transport.sent) == 1
    address, entrypoint, calldata = transport.sent[0]
    assert address == "0xacc0"
    assert entrypoint == "add_session_with_allowlists"
    assert calldata[0] == session.pubkey
    assert calldata[1:] == [
        "0x0", hex(1_700_000_000), "0xa", "0x2386f26fc10000", "0x0",
        "0x2", "0xdead", "0xbeef",
        "0x2", "0x1234", "0x5678",
    ]


@pytest.mark.asyncio
async def test_create_is_atomic_on_dispatch_failure(policy, failing_transport):
    boom = RuntimeError("rpc down")
    store = SessionStore(transport=failing_transport(boom), ua2_address="0x1")

    with pytest.raises(RuntimeError) as exc_info:
        await store.create(policy)

    assert exc_info.value is boom
    assert await store.list() == []


@pytest.mark.asyncio
async def test_revoke_flips_active_locally(transport):
    store = SessionStore(transport=transport, ua2_address="0x1")
    session = await store.create(guard(valid_until=1_800_000_000).build())

    await store.revoke(session.id)

    listed = await store.list()
    assert listed[0].policy.active is False
    assert listed[0].id == session.id
    # local revoke never touches the chain
    assert [entry for _, entry, _ in transport.sent] == ["add_session_with_allowlists"]
    # caller's earlier copy is unaffected
    assert session.policy.active is True


@pytest.mark.asyncio
async def test_revoke_unknown_is_noop(policy):
    store = SessionStore()
    await store.create(policy)

    await store.revoke("0x123")

    assert (await store.list())[0].policy.active is True


@pytest.mark.asyncio
async def test_revoke_matches_canonical_id(policy):
    store = SessionStore()
    session = await store.create(policy)

    await store.revoke(session.id.upper().replace("0X", "0x"))

    assert (await store.get(session.id)).policy.active is False


@pytest.mark.asyncio
async def test_list_is_a_snapshot(policy):
    store = SessionStore()
    await store.create(policy)

    listed = await store.list()
    listed.clear()
    assert len(await store.list()) == 1

    session = (await store.list())[0]
    with pytest.raises(FrozenInstanceError):
        session.policy = session.policy.deactivated()


@pytest.mark.asyncio
async def test_sessions_are_appended_in_order(policy):
    store = SessionStore()
    first = await store.create(policy)
    second = await store.create(policy)

    assert [s.id for s in await store.list()] == [first.id, second.id]
    assert await store.get("0x0") is None


@pytest.mark.asyncio
async def test_created_at_uses_clock(policy):
    store = SessionStore(clock=lambda: 1_700_000_000.5)
    session = await store.create(policy)
    assert session.created_at == 1_700_000_000_500


@pytest.mark.asyncio
async def test_revoke_on_chain(policy, transport):
    store = SessionStore(transport=transport, ua2_address="0x1")
    session = await store.create(policy)

    result = await store.revoke_on_chain(session.id)

    assert transport.sent[-1] == ("0x1", "revoke_session", [session.id])
    assert result.tx_hash == "0x1002"
    assert (await store.get(session.id)).policy.active is False


@pytest.mark.asyncio
async def test_revoke_on_chain_requires_transport(policy):
    store = SessionStore()
    session = await store.create(policy)

    with pytest.raises(ProviderUnavailableError):
        await store.revoke_on_chain(session.id)
    assert (await store.get(session.id)).policy.active is True
