"""Configuration package."""

from wallet.config.settings import (
    ApiSettings,
    DEFAULT_API_BASE_URL,
    LoggingSettings,
    Settings,
    SyncSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ApiSettings",
    "DEFAULT_API_BASE_URL",
    "LoggingSettings",
    "Settings",
    "SyncSettings",
    "get_settings",
    "validate_all_settings",
]
