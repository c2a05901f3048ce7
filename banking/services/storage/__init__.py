"""
Storage Services Package

Provides the abstract storage interface and its implementations.
The CSV file is the production backend; the in-memory store serves tests
and callers that embed the ledger.
"""

from banking.services.storage.interface import (
    LedgerStorageInterface,
    LoadError,
    ParseError,
    StorageError,
    WriteError,
)
from banking.services.storage.csv_file import (
    HEADER,
    CsvLedgerStorage,
)
from banking.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "LoadError",
    "ParseError",
    "StorageError",
    "WriteError",
    # Implementations
    "HEADER",
    "CsvLedgerStorage",
    "InMemoryLedgerStorage",
]
