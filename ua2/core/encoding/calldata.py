"""
Calldata builders for the UA² account ABI.

Every builder is a pure function returning a flat list of felts. Order is
exactly the input order (call batch order, allowlist insertion order); nothing
is sorted, so equal inputs always give equal outputs.

Layouts:

    add_session_with_allowlists:
        [ pubkey,
          valid_after, valid_until, max_calls, max_value_low, max_value_high,
          targets_len, ...targets,
          selectors_len, ...selectors ]

    __execute__ (sponsored):
        [ num_calls,
          to_0, selector_0, calldata_len_0, ...calldata_0,
          ...,
          sponsor_data_len, ...sponsor_data ]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

from .felt import Felt, FeltLike, to_felt
from ..execution.models import AccountTransaction, SponsoredTransaction

if TYPE_CHECKING:
    from ..sessions.models import SessionAllow, SessionPolicy

UINT32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class PolicyCalldata:
    """On-chain ``SessionPolicy`` struct in Cairo member order."""
    is_active: Felt
    valid_after: Felt
    valid_until: Felt
    max_calls: Felt
    calls_used: Felt
    max_value_per_call_low: Felt
    max_value_per_call_high: Felt

    def as_list(self) -> List[Felt]:
        return [
            self.is_active,
            self.valid_after,
            self.valid_until,
            self.max_calls,
            self.calls_used,
            self.max_value_per_call_low,
            self.max_value_per_call_high,
        ]


def normalize_window(valid_after: float, valid_until: float) -> tuple[int, int]:
    """Floor both bounds to non-negative ints and keep ``valid_until > valid_after``."""
    after = max(0, int(valid_after // 1))
    until = max(0, int(valid_until // 1))
    if until <= after:
        until = after + 1
    return after, until


def _length_prefixed(values: Sequence[FeltLike]) -> List[Felt]:
    return [to_felt(len(values)), *(to_felt(v) for v in values)]


def encode_policy_struct(policy: SessionPolicy) -> PolicyCalldata:
    valid_after, valid_until = normalize_window(policy.valid_after, policy.valid_until)
    low, high = policy.limits.max_value_per_call
    return PolicyCalldata(
        is_active=to_felt(1 if policy.active else 0),
        valid_after=to_felt(valid_after),
        valid_until=to_felt(valid_until),
        max_calls=to_felt(max(1, int(policy.limits.max_calls)) & UINT32_MASK),
        calls_used=to_felt(max(0, int(policy.calls_used)) & UINT32_MASK),
        max_value_per_call_low=to_felt(low),
        max_value_per_call_high=to_felt(high),
    )


def encode_policy(policy: SessionPolicy) -> List[Felt]:
    """Scalar policy members sent with ``add_session_with_allowlists``."""
    struct = encode_policy_struct(policy)
    return [
        struct.valid_after,
        struct.valid_until,
        struct.max_calls,
        struct.max_value_per_call_low,
        struct.max_value_per_call_high,
    ]


def encode_allowlists(allow: SessionAllow) -> List[Felt]:
    return _length_prefixed(allow.targets) + _length_prefixed(allow.selectors)


def encode_add_session(pubkey: FeltLike, policy: SessionPolicy) -> List[Felt]:
    return [to_felt(pubkey), *encode_policy(policy), *encode_allowlists(policy.allow)]


def encode_revoke_session(session_id: FeltLike) -> List[Felt]:
    return [to_felt(session_id)]


def encode_execute(tx: AccountTransaction) -> List[Felt]:
    """Flatten a (possibly sponsored) batch for the account's execute entrypoint."""
    flat: List[Felt] = [to_felt(len(tx.calls))]
    for call in tx.calls:
        flat.append(to_felt(call.to))
        flat.append(to_felt(call.selector))
        flat.extend(_length_prefixed(call.calldata))

    sponsor_data = tx.sponsor_data if isinstance(tx, SponsoredTransaction) else None
    flat.extend(_length_prefixed(sponsor_data or ()))
    return flat
