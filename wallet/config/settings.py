"""
Configuration Management for Wallet

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what the client depends on and ensures
configuration is validated before the first request goes out.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Used only when no base address is configured
DEFAULT_API_BASE_URL = "https://nickl-wallet-api.onrender.com"


class ApiSettings(BaseSettings):
    """Remote transaction service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Mobile builds expose the address as EXPO_PUBLIC_API_BASE_URL
    base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        validation_alias=AliasChoices(
            "EXPO_PUBLIC_API_BASE_URL",
            "API_BASE_URL",
            "WALLET_API_BASE_URL",
        ),
        description="Base address of the transaction service"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Request timeout; unset means the HTTP library default"
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Base address must be an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API base URL must start with http:// or https://, got {v!r}")
        return v


class SyncSettings(BaseSettings):
    """Synchronization core behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auto_fetch: bool = Field(
        default=True,
        description="Load transactions and summary when a store is primed"
    )
    prime_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Attempts per read during priming (1 = no retry)"
    )
    discard_stale_fetches: bool = Field(
        default=False,
        description="Ignore fetch results superseded by a newer fetch of the same kind"
    )
    max_recorded_events: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="How many sync events to keep in memory"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render logs as JSON (console renderer otherwise)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def sync(self) -> SyncSettings:
        return SyncSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for each invalid one.
    """
    results = {}

    settings = get_settings()

    for name in ("api", "sync", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
