"""
ua2: session keys, calldata shaping and sponsored execution for UA² accounts.
"""

from ua2.client import AccountContext, UA2Client
from ua2.core.encoding import Felt, Uint256, hex_pad, selector_from_name, to_felt, to_uint256
from ua2.core.errors import (
    EncodingError,
    PaymasterDeniedError,
    PolicyViolationError,
    ProviderUnavailableError,
    SessionExpiredError,
    UA2Error,
    UnknownContractError,
    map_contract_error,
)
from ua2.core.execution import (
    AccountCall,
    AccountTransaction,
    InvokeResult,
    SponsoredExecuteResult,
    SponsoredTransaction,
)
from ua2.core.paymaster import NoopPaymaster, PaymasterRunner, paymaster_from, with_paymaster
from ua2.core.sessions import (
    PolicyBuilder,
    Session,
    SessionPolicy,
    SessionStore,
    guard,
    limits,
    use_session,
)

__version__ = "0.1.0"
__all__ = [
    "AccountContext",
    "UA2Client",
    "Felt",
    "Uint256",
    "hex_pad",
    "selector_from_name",
    "to_felt",
    "to_uint256",
    "EncodingError",
    "PaymasterDeniedError",
    "PolicyViolationError",
    "ProviderUnavailableError",
    "SessionExpiredError",
    "UA2Error",
    "UnknownContractError",
    "map_contract_error",
    "AccountCall",
    "AccountTransaction",
    "InvokeResult",
    "SponsoredExecuteResult",
    "SponsoredTransaction",
    "NoopPaymaster",
    "PaymasterRunner",
    "paymaster_from",
    "with_paymaster",
    "PolicyBuilder",
    "Session",
    "SessionPolicy",
    "SessionStore",
    "guard",
    "limits",
    "use_session",
]
