"""
In-Memory Storage Implementation

Keeps a snapshot of (name, balance) pairs instead of a file. Each load
builds fresh Account objects, so a loaded ledger never shares state with
the snapshot, just like a ledger loaded from disk.
"""

from decimal import Decimal
from typing import Iterable

from banking.engine import Ledger
from banking.models.account import Account
from banking.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger storage held in process memory."""

    def __init__(self, accounts: Iterable[tuple[str, Decimal]] = ()):
        self._rows: list[tuple[str, Decimal]] = list(accounts)
        self.save_count = 0

    @property
    def rows(self) -> list[tuple[str, Decimal]]:
        return list(self._rows)

    def load(self) -> Ledger:
        return Ledger(Account(name=name, balance=balance) for name, balance in self._rows)

    def save(self, ledger: Ledger) -> None:
        self._rows = ledger.list_accounts()
        self.save_count += 1
