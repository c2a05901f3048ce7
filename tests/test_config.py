"""Tests for configuration loading."""

import pytest
from pathlib import Path

from pydantic import ValidationError

from banking.config import LedgerSettings, get_settings


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self):
        """Test defaults match the documented behaviour."""
        settings = LedgerSettings()
        assert settings.store_path == Path("banking_system.csv")
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"

    def test_environment_overrides(self, monkeypatch):
        """Test BANKING_* variables override defaults."""
        monkeypatch.setenv("BANKING_STORE_PATH", "/var/lib/ledger.csv")
        monkeypatch.setenv("BANKING_LOG_LEVEL", "debug")
        monkeypatch.setenv("BANKING_LOG_FORMAT", "json")
        settings = LedgerSettings()
        assert settings.store_path == Path("/var/lib/ledger.csv")
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_dotenv_file(self, tmp_path):
        """Test settings are read from .env in the working directory."""
        (tmp_path / ".env").write_text("BANKING_STORE_PATH=from_dotenv.csv\n", encoding="utf-8")
        assert LedgerSettings().store_path == Path("from_dotenv.csv")

    def test_rejects_unknown_log_level(self, monkeypatch):
        """Test bad log levels fail validation."""
        monkeypatch.setenv("BANKING_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError, match="log_level must be one of"):
            LedgerSettings()

    def test_rejects_unknown_log_format(self, monkeypatch):
        """Test bad log formats fail validation."""
        monkeypatch.setenv("BANKING_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            LedgerSettings()

    def test_get_settings_is_cached(self):
        """Test get_settings returns the same instance until cleared."""
        assert get_settings() is get_settings()
        first = get_settings()
        get_settings.cache_clear()
        assert get_settings() is not first
