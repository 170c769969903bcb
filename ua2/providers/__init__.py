"""Adapters for out-of-process services (paymaster RPC)."""

from .base import Provider
from .paymaster import PaymasterConfig, RpcPaymaster

__all__ = ["Provider", "PaymasterConfig", "RpcPaymaster"]
