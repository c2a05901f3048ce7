"""
Shared pytest fixtures.

Settings are cached process-wide, so every test starts from a clean
cache and an environment pointing the ledger at a temporary directory.
"""

import logging
from pathlib import Path

import pytest

from banking.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch):
    """Point settings at a per-test ledger file and reset the cache."""
    monkeypatch.chdir(tmp_path)
    for var in ("BANKING_STORE_PATH", "BANKING_LOG_LEVEL", "BANKING_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # main() points the root handler at the captured stderr of one test
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """Path of a ledger file that does not exist yet."""
    return tmp_path / "banking_system.csv"
