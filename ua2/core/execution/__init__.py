"""
Account call batches and the transport/paymaster collaborator interfaces.
"""

from .models import (
    AccountCall,
    AccountTransaction,
    CallTransport,
    CallsInput,
    InvokeResult,
    PaymasterAdapter,
    SponsoredExecuteResult,
    SponsoredTransaction,
    as_call_list,
    tx_hash_of,
)

__all__ = [
    "AccountCall",
    "AccountTransaction",
    "CallTransport",
    "CallsInput",
    "InvokeResult",
    "PaymasterAdapter",
    "SponsoredExecuteResult",
    "SponsoredTransaction",
    "as_call_list",
    "tx_hash_of",
]
