"""
Configuration management using pydantic-settings.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from txinfo.constants import EXPLORER_API_URLS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TXINFO_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: Literal["mainnet", "testnet", "signet"] = "mainnet"

    # Overrides the per-network Esplora endpoint when set
    explorer_api_url: str | None = None
    request_timeout: float = Field(default=30.0, gt=0)

    log_level: str = "INFO"

    def get_explorer_api_url(self) -> str:
        if self.explorer_api_url:
            return self.explorer_api_url.rstrip("/")
        return EXPLORER_API_URLS[self.network]


def get_settings(**overrides: Any) -> Settings:
    """Load settings from the environment, with explicit values taking priority."""
    return Settings(**overrides)
