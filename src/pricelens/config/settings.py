"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """PriceLens configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="PriceLens", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Provider calls
    provider_timeout_seconds: float = Field(
        default=5.0, gt=0, le=60, description="Timeout for every provider request"
    )
    provider_max_attempts: int = Field(
        default=1, ge=1, le=5, description="Attempts per provider call (1 = no retry)"
    )

    # Result cache
    price_cache_ttl_ms: int = Field(
        default=10_000, ge=0, description="TTL of aggregated price views"
    )
    search_cache_ttl_ms: int = Field(
        default=60_000, ge=0, description="TTL of token search results"
    )
    result_cache_max_size: int = Field(
        default=1024, ge=1, description="Maximum cached entries"
    )

    # External APIs
    coingecko_api_key: SecretStr = Field(
        default=SecretStr(""), description="CoinGecko demo API key"
    )
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3", description="CoinGecko API URL"
    )
    dexscreener_base_url: str = Field(
        default="https://api.dexscreener.com", description="DexScreener API URL"
    )
    goplus_base_url: str = Field(
        default="https://api.gopluslabs.io", description="GoPlus Security API URL"
    )

    @field_validator("coingecko_base_url", "dexscreener_base_url", "goplus_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate provider URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Provider URL must start with http:// or https://")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
