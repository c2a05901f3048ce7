"""
Configuration Management for Banking Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. There is very
little of it: where the ledger file lives and how chatty the logs are.
Everything else about the ledger is fixed behaviour, not configuration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LedgerSettings(BaseSettings):
    """
    Application settings.

    Loads configuration from BANKING_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BANKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    store_path: Path = Field(
        default=Path("banking_system.csv"),
        description="CSV file holding the ledger"
    )
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for log output on stderr"
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
