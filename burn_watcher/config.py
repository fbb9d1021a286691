from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"  # official mainnet USDC mint


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env",), env_prefix="BW_", extra="allow", populate_by_name=True
    )

    # Solana RPC; the bare RPC_URL / USDC_MINT names are accepted as well
    rpc_url: str = Field(
        default=DEFAULT_RPC_URL, validation_alias=AliasChoices("rpc_url", "BW_RPC_URL", "RPC_URL")
    )
    rpc_timeout_sec: float = Field(default=15.0, gt=0)

    # Address whose signatures are polled (normally the token mint)
    watch_address: str = Field(
        default=DEFAULT_USDC_MINT,
        validation_alias=AliasChoices("watch_address", "BW_WATCH_ADDRESS", "USDC_MINT"),
    )
    token_program: str = "spl-token"

    # Polling
    poll_interval_sec: float = Field(default=10.0, gt=0)
    signature_limit: int = Field(default=20, ge=1, le=1000)
    # adopt: first cycle only records the newest signature; process: scan the whole first page
    bootstrap: Literal["adopt", "process"] = "adopt"

    # Output
    output_format: Literal["text", "json"] = "text"
    database_url: str | None = None  # optional store for detected burns

    # Logging
    log_level: str = "INFO"

    @field_validator("database_url", mode="before")
    @classmethod
    def _empty_str_to_none(cls, v):
        if v == "":
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v
