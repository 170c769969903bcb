import os

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UA2_",
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy paymaster URL variable when the new one is unset."""

        super().model_post_init(__context)

        if not self.paymaster_rpc_url:
            fallback = os.getenv("UA2_PAYMASTER_URL") or os.getenv("PAYMASTER_URL")
            if fallback:
                object.__setattr__(self, "paymaster_rpc_url", fallback)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Account entrypoints
    execute_entrypoint: str = Field(
        default="__execute__",
        description="Account entrypoint used for sponsored execution",
    )
    add_session_entrypoint: str = Field(
        default="add_session_with_allowlists",
        description="Account entrypoint that registers a session with its allowlists",
    )
    revoke_session_entrypoint: str = Field(
        default="revoke_session",
        description="Account entrypoint that deactivates a session on chain",
    )

    # Session defaults
    default_session_ttl_seconds: int = Field(
        default=3600,
        ge=1,
        description="Session lifetime applied when a policy has no expiry input",
    )

    # Paymaster RPC
    paymaster_rpc_url: str = Field(
        default="",
        description="JSON-RPC endpoint of the sponsoring paymaster",
        validation_alias=AliasChoices("paymaster_rpc_url", "UA2_PAYMASTER_RPC_URL"),
    )
    paymaster_api_key: str = Field(default="", description="API key sent to the paymaster")
    paymaster_rpc_method: str = Field(
        default="paymaster_sponsorTransaction",
        description="JSON-RPC method that decorates a transaction with sponsor data",
    )
    paymaster_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout for paymaster RPC calls",
    )

    @property
    def has_paymaster(self) -> bool:
        return bool(self.paymaster_rpc_url)


# Global settings instance
settings = Settings()
