"""
Session and session policy models.

A session is a time- and capability-bounded authorization held by a key that
is distinct from the account owner's key. Every model here is an immutable
value object: the session store hands out the same instances it keeps, so
nothing a caller does to a returned session can change stored state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from ..encoding.felt import Felt, FeltLike, Uint256, to_felt, to_uint256


def felt_set(values: Optional[Iterable[FeltLike]]) -> Tuple[Felt, ...]:
    """Canonicalize and de-duplicate felts, keeping first-seen order."""
    return tuple(dict.fromkeys(to_felt(v) for v in (values or ())))


@dataclass(frozen=True)
class SessionLimits:
    """Per-session caps."""
    max_calls: int = 1
    max_value_per_call: Uint256 = field(default_factory=lambda: to_uint256(0))


@dataclass(frozen=True)
class SessionAllow:
    """Target and selector allowlists. An empty list allows anything."""
    targets: Tuple[Felt, ...] = ()
    selectors: Tuple[Felt, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "targets", felt_set(self.targets))
        object.__setattr__(self, "selectors", felt_set(self.selectors))

    def allows_target(self, target: FeltLike) -> bool:
        return not self.targets or to_felt(target) in self.targets

    def allows_selector(self, selector: FeltLike) -> bool:
        return not self.selectors or to_felt(selector) in self.selectors


@dataclass(frozen=True)
class SessionPolicy:
    """
    Constraints attached to a session.

    ``valid_after``/``valid_until`` are epoch seconds. ``calls_used`` mirrors the
    on-chain counter locally; the chain remains authoritative.
    """
    valid_after: int
    valid_until: int
    limits: SessionLimits = field(default_factory=SessionLimits)
    allow: SessionAllow = field(default_factory=SessionAllow)
    active: bool = True
    calls_used: int = 0

    @property
    def max_calls(self) -> int:
        return self.limits.max_calls

    @property
    def max_value_per_call(self) -> Uint256:
        return self.limits.max_value_per_call

    @property
    def targets(self) -> Tuple[Felt, ...]:
        return self.allow.targets

    @property
    def selectors(self) -> Tuple[Felt, ...]:
        return self.allow.selectors

    def deactivated(self) -> SessionPolicy:
        return replace(self, active=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validAfter": self.valid_after,
            "validUntil": self.valid_until,
            "limits": {
                "maxCalls": self.limits.max_calls,
                "maxValuePerCall": list(self.limits.max_value_per_call),
            },
            "allow": {
                "targets": list(self.allow.targets),
                "selectors": list(self.allow.selectors),
            },
            "active": self.active,
            "callsUsed": self.calls_used,
        }


@dataclass(frozen=True)
class Session:
    """A registered session. ``id`` never changes after creation."""
    id: Felt
    pubkey: Felt
    policy: SessionPolicy
    created_at: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "policy": self.policy.to_dict(),
            "createdAt": self.created_at,
        }

