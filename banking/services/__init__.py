"""
Services Package

External-facing services used by the ledger. Currently only storage.
"""

from banking.services.storage import (
    CsvLedgerStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    LoadError,
    ParseError,
    StorageError,
    WriteError,
)

__all__ = [
    "CsvLedgerStorage",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
    "LoadError",
    "ParseError",
    "StorageError",
    "WriteError",
]
