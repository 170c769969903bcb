"""
JSON-RPC paymaster adapter.

Sends the call batch to a sponsorship service and reads back the sponsor
fields it attaches. The service answers ``<rpc_method>`` with an object like:

    {"sponsorData": ["0x..."], "maxFee": "0x...", "sponsorName": "avnu"}

Every field is optional. An RPC error, a transport failure or an unusable
result is a denial (``PaymasterDeniedError``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .base import Provider
from ..config import settings
from ..core.encoding.felt import to_felt
from ..core.errors import EncodingError, PaymasterDeniedError
from ..core.execution.models import AccountTransaction, SponsoredTransaction

logger = logging.getLogger(__name__)


@dataclass
class PaymasterConfig:
    rpc_url: str
    api_key: str = ""
    rpc_method: str = "paymaster_sponsorTransaction"
    timeout_s: float = 20.0

    @classmethod
    def from_settings(cls) -> PaymasterConfig:
        return cls(
            rpc_url=settings.paymaster_rpc_url,
            api_key=settings.paymaster_api_key,
            rpc_method=settings.paymaster_rpc_method,
            timeout_s=settings.paymaster_timeout_seconds,
        )


def transaction_to_rpc(tx: AccountTransaction) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "calls": [
            {
                "to": to_felt(call.to),
                "selector": to_felt(call.selector),
                "calldata": [to_felt(x) for x in call.calldata],
            }
            for call in tx.calls
        ],
    }
    if tx.max_fee is not None:
        payload["maxFee"] = to_felt(tx.max_fee)
    return payload


class RpcPaymaster(Provider):
    """Paymaster adapter backed by a JSON-RPC sponsorship endpoint."""

    name = "rpc"

    def __init__(
        self,
        config: Optional[PaymasterConfig] = None,
        name: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or PaymasterConfig.from_settings()
        self.timeout_s = self._config.timeout_s
        if name:
            self.name = name
        self._client = client

    async def ready(self) -> bool:
        return bool(self._config.rpc_url)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "disabled", "reason": "Paymaster not configured"}

        try:
            result = await self._rpc_call("paymaster_isAvailable", [])
            return {"status": "healthy" if result else "unavailable", "available": bool(result)}
        except (httpx.HTTPError, ValueError, PaymasterDeniedError) as exc:
            return {"status": "error", "reason": str(exc)}

    async def sponsor(self, tx: AccountTransaction) -> SponsoredTransaction:
        if not await self.ready():
            raise PaymasterDeniedError("Paymaster provider is not configured")

        try:
            result = await self._rpc_call(self._config.rpc_method, [transaction_to_rpc(tx)])
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Paymaster {self.name} request failed: {exc}")
            raise PaymasterDeniedError(f"Paymaster request failed: {exc}") from exc

        if not isinstance(result, dict):
            raise PaymasterDeniedError("Invalid paymaster response")

        sponsor_data: Optional[List[str]] = result.get("sponsorData") or result.get("sponsor_data")
        max_fee = result.get("maxFee") or result.get("max_fee") or tx.max_fee
        sponsor_name = result.get("sponsorName") or result.get("sponsor_name") or self.name

        try:
            sponsored = SponsoredTransaction.from_transaction(
                tx,
                max_fee=to_felt(max_fee) if max_fee is not None else None,
                sponsor_data=tuple(to_felt(x) for x in sponsor_data) if sponsor_data else None,
                sponsor_name=sponsor_name,
            )
        except (EncodingError, TypeError) as exc:
            raise PaymasterDeniedError(f"Invalid paymaster response: {exc}") from exc

        logger.debug(
            f"Paymaster {self.name} sponsored {len(tx.calls)} call(s) "
            f"with {len(sponsored.sponsor_data or ())} sponsor felt(s)"
        )
        return sponsored

    async def _rpc_call(self, method: str, params: List[Any]) -> Any:
        if not self._client or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)

        headers = {"api-key": self._config.api_key} if self._config.api_key else None
        response = await self._client.post(
            self._config.rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
            headers=headers,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise PaymasterDeniedError("Invalid paymaster response")
        if "error" in payload:
            error = payload["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise PaymasterDeniedError(message or "Paymaster rejected the transaction.")
        return payload.get("result")

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
