"""
Account call batches and the collaborators that submit them.

``CallTransport`` and ``PaymasterAdapter`` are implemented outside the SDK
(a wallet provider, an RPC client, a sponsorship service). The SDK only awaits
them; whatever they raise reaches the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional, Protocol, Sequence, Tuple, Union

from ..encoding.felt import Felt


@dataclass(frozen=True)
class AccountCall:
    """A single contract call executed by the account."""
    to: Felt
    selector: Felt
    calldata: Tuple[Felt, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "calldata", tuple(self.calldata))


@dataclass(frozen=True)
class AccountTransaction:
    """An ordered batch of calls with an optional max fee hint."""
    calls: Tuple[AccountCall, ...] = ()
    max_fee: Optional[Felt] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "calls", tuple(self.calls))


@dataclass(frozen=True)
class SponsoredTransaction(AccountTransaction):
    """A transaction after a paymaster has decorated it."""
    sponsor_data: Optional[Tuple[Felt, ...]] = None
    sponsor_name: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.sponsor_data is not None:
            object.__setattr__(self, "sponsor_data", tuple(self.sponsor_data))

    @classmethod
    def from_transaction(cls, tx: AccountTransaction, **changes) -> SponsoredTransaction:
        """Copy ``tx`` (keeping any sponsor fields it already has) and apply ``changes``."""
        if isinstance(tx, SponsoredTransaction):
            return replace(tx, **changes)
        return cls(calls=tx.calls, max_fee=tx.max_fee, **changes)


@dataclass(frozen=True)
class InvokeResult:
    """Returned by a transport for a submitted invoke."""
    tx_hash: Felt


def tx_hash_of(result: Union[InvokeResult, Mapping[str, Felt]]) -> Felt:
    """Read the transaction hash from an ``InvokeResult`` or a plain RPC-style dict."""
    if isinstance(result, InvokeResult):
        return result.tx_hash
    if isinstance(result, Mapping):
        tx_hash = result.get("txHash") or result.get("tx_hash") or result.get("transaction_hash")
        if tx_hash:
            return tx_hash
    raise TypeError(f"Transport returned no transaction hash: {result!r}")


@dataclass(frozen=True)
class SponsoredExecuteResult:
    tx_hash: Felt
    sponsored: bool
    sponsor_name: Optional[str] = None


CallsInput = Union[AccountCall, Iterable[AccountCall]]


def as_call_list(calls: CallsInput) -> Tuple[AccountCall, ...]:
    """Accept a single call or any iterable of calls."""
    if isinstance(calls, AccountCall):
        return (calls,)
    return tuple(calls)


class CallTransport(Protocol):
    """Submits an invoke of ``entrypoint`` on the contract at ``address``."""

    async def invoke(self, address: Felt, entrypoint: str, calldata: Sequence[Felt]) -> Union[InvokeResult, Mapping[str, Felt]]:
        ...


class PaymasterAdapter(Protocol):
    """Decorates a transaction with sponsorship data. May raise to deny it."""

    name: str

    async def sponsor(self, tx: AccountTransaction) -> SponsoredTransaction:
        ...
