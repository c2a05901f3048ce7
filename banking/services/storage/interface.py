"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger persistence.
This allows us to:
1. Swap the CSV file for another backend later
2. Use in-memory storage for testing
3. Keep the engine free of any I/O

The contract is deliberately tiny: load the whole ledger, save the whole
ledger. There are no partial reads or writes.
"""

from abc import ABC, abstractmethod

from banking.engine import Ledger
from banking.models.account import LedgerError


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> Ledger:
        """
        Load every stored account into a fresh, clean Ledger.

        A store that holds nothing yet yields an empty Ledger.

        Raises:
            LoadError: If the backing medium cannot be read
            ParseError: If stored data is malformed
        """
        pass

    @abstractmethod
    def save(self, ledger: Ledger) -> None:
        """
        Replace the stored accounts with the ledger's full account set.

        Either every account is written or the previous contents are
        left readable and unchanged.

        Raises:
            WriteError: If the write fails
        """
        pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class LoadError(StorageError):
    """Stored ledger could not be read."""
    pass


class ParseError(LoadError):
    """Stored ledger is malformed at a specific row."""

    def __init__(self, row: int, reason: str):
        self.row = row
        self.reason = reason
        super().__init__(f"row {row}: {reason}")


class WriteError(StorageError):
    """Ledger could not be persisted."""
    pass
