"""
Fluent session policy builder.

    policy = (
        guard(max_value="10", expires_in_seconds=600)
        .target("0x1")
        .selector(selector_from_name("transfer"))
        .max_calls(5)
        .build()
    )

Time bounds are epoch seconds. ``valid_until`` always ends up strictly after
``valid_after``: any expiry at or before the start is bumped to
``valid_after + 1``.
"""

from __future__ import annotations

import math
import time
from typing import Callable, Dict, Iterable, Optional

from ...config import settings
from ..encoding.felt import Felt, FeltLike, to_felt, to_uint256
from .models import SessionAllow, SessionLimits, SessionPolicy

Clock = Callable[[], float]


def _floor_non_negative(value: float) -> int:
    return max(0, math.floor(value))


def normalize_valid_until(value: float, valid_after: int) -> int:
    normalized = _floor_non_negative(value)
    return valid_after + 1 if normalized <= valid_after else normalized


def limits(max_calls: int, max_value: FeltLike) -> SessionLimits:
    """Shorthand for ``SessionLimits`` with a numeric per-call value cap."""
    return SessionLimits(max_calls=max_calls, max_value_per_call=to_uint256(max_value))


class PolicyBuilder:
    """Mutable builder; every setter returns the builder so calls can be chained."""

    def __init__(
        self,
        valid_after: Optional[float] = None,
        valid_until: Optional[float] = None,
        expires_at: Optional[float] = None,
        expires_in_seconds: Optional[float] = None,
        max_calls: Optional[int] = None,
        max_value: FeltLike = 0,
        targets: Optional[Iterable[FeltLike]] = None,
        selectors: Optional[Iterable[FeltLike]] = None,
        active: bool = True,
        clock: Clock = time.time,
    ) -> None:
        self._clock = clock
        self._valid_after = _floor_non_negative(valid_after or 0)
        self._valid_until = self._resolve_valid_until(valid_until, expires_at, expires_in_seconds)
        self._max_calls = 1 if max_calls is None else max(1, math.floor(max_calls))
        self._max_value: FeltLike = max_value
        self._active = active
        # dicts keep insertion order and drop duplicates
        self._targets: Dict[Felt, None] = dict.fromkeys(to_felt(t) for t in (targets or ()))
        self._selectors: Dict[Felt, None] = dict.fromkeys(to_felt(s) for s in (selectors or ()))

    def _now(self) -> int:
        return math.floor(self._clock())

    def _resolve_valid_until(
        self,
        valid_until: Optional[float],
        expires_at: Optional[float],
        expires_in_seconds: Optional[float],
    ) -> int:
        if valid_until is not None:
            return normalize_valid_until(valid_until, self._valid_after)
        if expires_at is not None:
            return normalize_valid_until(expires_at, self._valid_after)
        if expires_in_seconds is not None:
            return normalize_valid_until(
                self._now() + _floor_non_negative(expires_in_seconds), self._valid_after
            )
        return normalize_valid_until(
            self._now() + settings.default_session_ttl_seconds, self._valid_after
        )

    def valid_after(self, timestamp: float) -> PolicyBuilder:
        self._valid_after = _floor_non_negative(timestamp)
        self._valid_until = max(self._valid_until, self._valid_after + 1)
        return self

    def valid_until(self, timestamp: float) -> PolicyBuilder:
        self._valid_until = normalize_valid_until(timestamp, self._valid_after)
        return self

    def expires_at(self, timestamp: float) -> PolicyBuilder:
        return self.valid_until(timestamp)

    def expires_in(self, seconds: float) -> PolicyBuilder:
        return self.valid_until(self._now() + _floor_non_negative(seconds))

    def target(self, address: FeltLike) -> PolicyBuilder:
        self._targets[to_felt(address)] = None
        return self

    def targets(self, addresses: Iterable[FeltLike]) -> PolicyBuilder:
        for address in addresses:
            self.target(address)
        return self

    def selector(self, selector: FeltLike) -> PolicyBuilder:
        self._selectors[to_felt(selector)] = None
        return self

    def selectors(self, values: Iterable[FeltLike]) -> PolicyBuilder:
        for value in values:
            self.selector(value)
        return self

    def max_calls(self, count: float) -> PolicyBuilder:
        self._max_calls = max(1, math.floor(count))
        return self

    def max_value(self, value: FeltLike) -> PolicyBuilder:
        self._max_value = value
        return self

    def active(self, flag: bool) -> PolicyBuilder:
        self._active = bool(flag)
        return self

    def build(self) -> SessionPolicy:
        return SessionPolicy(
            valid_after=self._valid_after,
            valid_until=self._valid_until,
            limits=SessionLimits(
                max_calls=self._max_calls,
                max_value_per_call=to_uint256(self._max_value),
            ),
            allow=SessionAllow(
                targets=tuple(self._targets),
                selectors=tuple(self._selectors),
            ),
            active=self._active,
        )


def guard(**init) -> PolicyBuilder:
    """Start a policy builder. Keyword arguments match ``PolicyBuilder.__init__``."""
    return PolicyBuilder(**init)
