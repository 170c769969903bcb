"""
Built-in paymaster adapters and the id-based factory.

    paymaster_from("noop")              -> NoopPaymaster, name "noop"
    paymaster_from("cartridge:arcade")  -> CartridgePaymaster, name "cartridge:arcade"
    paymaster_from("starknet-react")    -> StarknetReactPaymaster, name "starknet-react"

The base id is case-insensitive; anything after the first ``:`` is kept
verbatim as a tag.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from ..errors import PaymasterDeniedError
from ..execution.models import AccountTransaction, SponsoredTransaction


class NoopPaymaster:
    """Returns the transaction unchanged apart from stamping its own name."""

    default_name = "noop"

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or self.default_name

    async def sponsor(self, tx: AccountTransaction) -> SponsoredTransaction:
        return SponsoredTransaction.from_transaction(tx, sponsor_name=self.name)


class CartridgePaymaster(NoopPaymaster):
    default_name = "cartridge"


class StarknetReactPaymaster(NoopPaymaster):
    default_name = "starknet-react"


_ADAPTERS: Dict[str, Callable[[Optional[str]], NoopPaymaster]] = {
    "noop": NoopPaymaster,
    "cartridge": CartridgePaymaster,
    "starknet-react": StarknetReactPaymaster,
}


def _split_id(paymaster_id: str) -> Tuple[str, Optional[str]]:
    base, sep, tag = paymaster_id.partition(":")
    return base.lower(), (tag if sep else None)


def paymaster_from(paymaster_id: str) -> NoopPaymaster:
    """Build a built-in adapter from an id such as ``"noop"`` or ``"cartridge:tag"``."""
    trimmed = (paymaster_id or "").strip()
    if not trimmed:
        raise PaymasterDeniedError("Paymaster id must be a non-empty string.")

    base, tag = _split_id(trimmed)
    factory = _ADAPTERS.get(base)
    if factory is None:
        raise PaymasterDeniedError(f"Unknown paymaster adapter: {paymaster_id}")
    return factory(f"{base}:{tag}" if tag is not None else base)
