"""Tests for settings loading."""

import pytest

from wallet.config import (
    ApiSettings,
    DEFAULT_API_BASE_URL,
    LoggingSettings,
    SyncSettings,
    get_settings,
    validate_all_settings,
)


BASE_URL_VARS = ("EXPO_PUBLIC_API_BASE_URL", "API_BASE_URL", "WALLET_API_BASE_URL")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No base URL in the environment and no .env file in the cwd."""
    for var in BASE_URL_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestApiSettings:
    """Tests for ApiSettings."""

    def test_default_base_url(self, clean_env):
        assert ApiSettings().base_url == DEFAULT_API_BASE_URL

    def test_expo_variable_wins(self, clean_env):
        clean_env.setenv("API_BASE_URL", "https://generic.test")
        clean_env.setenv("EXPO_PUBLIC_API_BASE_URL", "https://expo.test")
        assert ApiSettings().base_url == "https://expo.test"

    def test_generic_variable(self, clean_env):
        clean_env.setenv("API_BASE_URL", "http://localhost:3000/")
        assert ApiSettings().base_url == "http://localhost:3000/"

    def test_rejects_non_http_url(self, clean_env):
        with pytest.raises(ValueError, match="http:// or https://"):
            ApiSettings(base_url="ftp://files.test")

    def test_timeout_optional(self, clean_env):
        assert ApiSettings().timeout_seconds is None
        clean_env.setenv("WALLET_API_TIMEOUT_SECONDS", "2.5")
        assert ApiSettings().timeout_seconds == 2.5


class TestSyncSettings:
    """Tests for SyncSettings."""

    def test_defaults(self, clean_env):
        settings = SyncSettings()
        assert settings.auto_fetch is True
        assert settings.prime_attempts == 1
        assert settings.discard_stale_fetches is False

    def test_env_override(self, clean_env):
        clean_env.setenv("WALLET_SYNC_DISCARD_STALE_FETCHES", "true")
        assert SyncSettings().discard_stale_fetches is True

    def test_prime_attempts_bounds(self, clean_env):
        with pytest.raises(ValueError):
            SyncSettings(prime_attempts=0)


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_normalized(self, clean_env):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_unknown_level(self, clean_env):
        with pytest.raises(ValueError):
            LoggingSettings(level="loud")


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_all_valid(self, clean_env):
        results = validate_all_settings()
        assert results == {"api": True, "sync": True, "logging": True}

    def test_reports_invalid(self, clean_env):
        clean_env.setenv("API_BASE_URL", "not-a-url")
        results = validate_all_settings()
        assert results["api"] is False
        assert "api_error" in results
        assert results["sync"] is True
