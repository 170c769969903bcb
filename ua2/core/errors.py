"""
Error taxonomy and contract revert mapping.

Every error raised by the SDK derives from ``UA2Error`` and carries a stable
``code`` string. Raw failure payloads coming back from the account contract
(revert strings, RPC error objects, exceptions) are translated into this
taxonomy by ``map_contract_error``. Callers invoke it explicitly; nothing in
the SDK intercepts transport errors on its own.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class UA2Error(Exception):
    """Base error. ``code`` identifies the error kind independently of the class."""

    def __init__(self, code: str, message: Optional[str] = None, contract_code: Optional[str] = None):
        if message is None:
            message = code
        super().__init__(message)
        self.code = code
        self.message = message
        # Revert token this error was mapped from, when it came from the contract
        self.contract_code = contract_code


class ProviderUnavailableError(UA2Error):
    """No transport or wallet provider is available for the requested operation."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("ProviderUnavailable", message or "No available wallet connectors.")


class SessionExpiredError(UA2Error):
    """Session is unknown, inactive, not yet valid or past its expiry."""

    def __init__(self, message: Optional[str] = None, contract_code: Optional[str] = None):
        super().__init__("SessionExpired", message or "Session is inactive or expired.", contract_code)


class PolicyViolationKind(str, Enum):
    """Which policy constraint a call batch broke."""
    CALLS = "calls"
    TARGET = "target"
    SELECTOR = "selector"
    VALUE = "value"


class PolicyViolationError(UA2Error):
    """A call batch does not comply with the session policy."""

    def __init__(
        self,
        kind: PolicyViolationKind | str,
        detail: Optional[str] = None,
        message: Optional[str] = None,
        contract_code: Optional[str] = None,
    ):
        self.kind = PolicyViolationKind(kind).value
        self.detail = detail
        suffix = f" ({detail})" if detail else ""
        super().__init__(
            "PolicyViolation",
            message or f"Session policy violation: {self.kind}{suffix}.",
            contract_code,
        )


class PaymasterDeniedError(UA2Error):
    """The sponsoring paymaster refused or could not decorate the transaction."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("PaymasterDenied", message or "Paymaster rejected the transaction.")


class EncodingError(UA2Error):
    """A value could not be encoded as a felt."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("EncodingError", message or "Value is not a valid felt.")


UNKNOWN_CONTRACT_ERROR = "UnknownContractError"


class UnknownContractError(UA2Error):
    """Failure payload without a recognizable revert code."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(UNKNOWN_CONTRACT_ERROR, message or "")


# =============================================================================
# Revert code table
# =============================================================================

class ContractErrorCode(str, Enum):
    """Revert codes emitted by the UA² account contract."""
    # Session lifecycle
    SESSION_INACTIVE = "ERR_SESSION_INACTIVE"
    SESSION_EXPIRED = "ERR_SESSION_EXPIRED"
    SESSION_NOT_READY = "ERR_SESSION_NOT_READY"
    SESSION_STALE = "ERR_SESSION_STALE"
    SESSION_NOT_FOUND = "ERR_SESSION_NOT_FOUND"
    BAD_SESSION_NONCE = "ERR_BAD_SESSION_NONCE"
    # Policy
    POLICY_CALLCAP = "ERR_POLICY_CALLCAP"
    POLICY_TARGET_DENIED = "ERR_POLICY_TARGET_DENIED"
    POLICY_SELECTOR_DENIED = "ERR_POLICY_SELECTOR_DENIED"
    POLICY_VALUE_CAP = "ERR_POLICY_VALUE_CAP"
    VALUE_LIMIT_EXCEEDED = "ERR_VALUE_LIMIT_EXCEEDED"
    # Ownership / guardians / recovery
    NOT_OWNER = "ERR_NOT_OWNER"
    NOT_GUARDIAN = "ERR_NOT_GUARDIAN"
    GUARDIAN_EXISTS = "ERR_GUARDIAN_EXISTS"
    BAD_THRESHOLD = "ERR_BAD_THRESHOLD"
    RECOVERY_IN_PROGRESS = "ERR_RECOVERY_IN_PROGRESS"
    NO_RECOVERY = "ERR_NO_RECOVERY"
    RECOVERY_TIMELOCK = "ERR_BEFORE_ETA"
    ALREADY_CONFIRMED = "ERR_ALREADY_CONFIRMED"


class _ErrorFamily(str, Enum):
    SESSION = "session"
    POLICY = "policy"
    GENERIC = "generic"


@dataclass(frozen=True)
class _CodeEntry:
    family: _ErrorFamily
    message: str
    kind: Optional[PolicyViolationKind] = None


_CODE_TABLE: Dict[ContractErrorCode, _CodeEntry] = {
    ContractErrorCode.SESSION_INACTIVE: _CodeEntry(_ErrorFamily.SESSION, "Session is inactive or was revoked."),
    ContractErrorCode.SESSION_EXPIRED: _CodeEntry(_ErrorFamily.SESSION, "Session has expired."),
    ContractErrorCode.SESSION_NOT_READY: _CodeEntry(_ErrorFamily.SESSION, "Session is not valid yet."),
    ContractErrorCode.SESSION_STALE: _CodeEntry(
        _ErrorFamily.SESSION, "Session was invalidated by an owner rotation."
    ),
    ContractErrorCode.SESSION_NOT_FOUND: _CodeEntry(_ErrorFamily.SESSION, "Session is not registered on the account."),
    ContractErrorCode.BAD_SESSION_NONCE: _CodeEntry(_ErrorFamily.SESSION, "Session nonce does not match the account."),
    ContractErrorCode.POLICY_CALLCAP: _CodeEntry(
        _ErrorFamily.POLICY, "Session call cap exceeded.", PolicyViolationKind.CALLS
    ),
    ContractErrorCode.POLICY_TARGET_DENIED: _CodeEntry(
        _ErrorFamily.POLICY, "Call target is not in the session allowlist.", PolicyViolationKind.TARGET
    ),
    ContractErrorCode.POLICY_SELECTOR_DENIED: _CodeEntry(
        _ErrorFamily.POLICY, "Call selector is not in the session allowlist.", PolicyViolationKind.SELECTOR
    ),
    ContractErrorCode.POLICY_VALUE_CAP: _CodeEntry(
        _ErrorFamily.POLICY, "Call value exceeds the session per-call limit.", PolicyViolationKind.VALUE
    ),
    ContractErrorCode.VALUE_LIMIT_EXCEEDED: _CodeEntry(
        _ErrorFamily.POLICY, "Call value exceeds the session per-call limit.", PolicyViolationKind.VALUE
    ),
    ContractErrorCode.NOT_OWNER: _CodeEntry(_ErrorFamily.GENERIC, "Caller is not the account owner."),
    ContractErrorCode.NOT_GUARDIAN: _CodeEntry(_ErrorFamily.GENERIC, "Caller is not a registered guardian."),
    ContractErrorCode.GUARDIAN_EXISTS: _CodeEntry(_ErrorFamily.GENERIC, "Guardian is already registered."),
    ContractErrorCode.BAD_THRESHOLD: _CodeEntry(_ErrorFamily.GENERIC, "Guardian threshold is invalid."),
    ContractErrorCode.RECOVERY_IN_PROGRESS: _CodeEntry(_ErrorFamily.GENERIC, "A recovery is already in progress."),
    ContractErrorCode.NO_RECOVERY: _CodeEntry(_ErrorFamily.GENERIC, "No recovery is in progress."),
    ContractErrorCode.RECOVERY_TIMELOCK: _CodeEntry(_ErrorFamily.GENERIC, "Recovery timelock has not elapsed."),
    ContractErrorCode.ALREADY_CONFIRMED: _CodeEntry(_ErrorFamily.GENERIC, "Guardian already confirmed this recovery."),
}

_CODE_PATTERN = re.compile(r"\bERR_[A-Z0-9_]+")


def _extract_message(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, BaseException):
        return str(raw)
    if isinstance(raw, dict):
        message = raw.get("message")
        if isinstance(message, str):
            return message
    else:
        message = getattr(raw, "message", None)
        if isinstance(message, str):
            return message
    try:
        return json.dumps(raw, default=str)
    except (TypeError, ValueError):
        return repr(raw)


def _from_code(code: ContractErrorCode) -> UA2Error:
    entry = _CODE_TABLE[code]
    if entry.family is _ErrorFamily.SESSION:
        return SessionExpiredError(entry.message, contract_code=code.value)
    if entry.family is _ErrorFamily.POLICY:
        return PolicyViolationError(entry.kind, message=entry.message, contract_code=code.value)
    return UA2Error(code.value, entry.message, contract_code=code.value)


def map_contract_error(raw: Any) -> UA2Error:
    """
    Translate a raw failure payload into a typed ``UA2Error``.

    Args:
        raw: Revert string, exception, RPC error object or any other payload

    Returns:
        ``raw`` itself when it already is a ``UA2Error``; otherwise a new error
        built from the first ``ERR_*`` token found in the payload's message
    """
    if isinstance(raw, UA2Error):
        return raw

    message = _extract_message(raw)
    found = _CODE_PATTERN.search(message)
    if not found:
        logger.debug("No revert code in contract failure payload")
        return UnknownContractError(message)

    token = found.group(0)
    try:
        code = ContractErrorCode(token)
    except ValueError:
        logger.debug(f"Unrecognized revert code {token}")
        return UA2Error(token, f"Contract reverted with {token}.", contract_code=token)

    return _from_code(code)
