"""
Ledger Engine

Holds the in-memory account set for one invocation and applies the
mutating operations to it.

DESIGN DECISION: Validate first, mutate last. Every operation checks all
of its preconditions before touching any balance, so a failed operation
leaves the ledger exactly as it found it. This matters most for transfer,
where both sides must apply or neither does.

The engine does no I/O. Loading and saving belong to the storage layer;
deciding when to save belongs to the orchestrator, which reads `dirty`.
"""

from decimal import Decimal
from typing import Iterable, Optional

from banking.models.account import (
    Account,
    AmountLike,
    LedgerError,
)


class DuplicateAccount(LedgerError):
    """An account with this name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"account with name {name} already exists")


class AccountNotFound(LedgerError):
    """No account with this name exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"account with name {name} not found")


class SameAccount(LedgerError):
    """Transfer source and destination are the same account."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"cannot transfer from account {name} to itself")


class Ledger:
    """
    The complete set of accounts for one invocation.

    Accounts keep insertion order, which is also file order after a load.
    `dirty` turns True after the first successful mutation and stays True
    until `mark_clean()` is called once the ledger has been persisted.
    """

    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts: dict[str, Account] = {}
        for account in accounts:
            if account.name in self._accounts:
                raise DuplicateAccount(account.name)
            self._accounts[account.name] = account
        self._dirty = False

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, name: object) -> bool:
        return name in self._accounts

    def __repr__(self) -> str:
        return f"Ledger(accounts={len(self)}, dirty={self._dirty})"

    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_clean(self) -> None:
        self._dirty = False

    def get(self, name: str) -> Optional[Account]:
        return self._accounts.get(name)

    def accounts(self) -> tuple[Account, ...]:
        """All accounts in insertion order."""
        return tuple(self._accounts.values())

    def _require(self, name: str) -> Account:
        account = self._accounts.get(name)
        if account is None:
            raise AccountNotFound(name)
        return account

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create(self, name: str, initial_amount: AmountLike) -> Account:
        """
        Open a new account.

        Raises:
            DuplicateAccount: Name already taken
            InvalidAccountName: Name is empty
            InvalidAmount: Opening balance is negative or malformed
        """
        if name in self._accounts:
            raise DuplicateAccount(name)
        account = Account.open(name, initial_amount)
        self._accounts[name] = account
        self._dirty = True
        return account

    def deposit(self, name: str, amount: AmountLike) -> Account:
        """
        Add money to an account.

        Raises:
            AccountNotFound, InvalidAmount, BalanceOverflow
        """
        account = self._require(name).deposit(amount)
        self._dirty = True
        return account

    def withdraw(self, name: str, amount: AmountLike) -> Account:
        """
        Take money out of an account.

        Raises:
            AccountNotFound, InvalidAmount, InsufficientFunds
        """
        account = self._require(name).withdraw(amount)
        self._dirty = True
        return account

    def transfer(
        self,
        source: str,
        destination: str,
        amount: AmountLike,
    ) -> tuple[Account, Account]:
        """
        Move money between two accounts as one state transition.

        Check order: source exists, destination exists, accounts differ,
        amount valid, source covers it, destination can hold it.

        Raises:
            AccountNotFound, SameAccount, InvalidAmount,
            InsufficientFunds, BalanceOverflow
        """
        debit = self._require(source)
        credit = self._require(destination)
        if source == destination:
            raise SameAccount(source)

        amount = debit.check_withdraw(amount)
        credit.check_deposit(amount)

        # Both checks passed; neither mutation below can fail.
        debit.withdraw(amount)
        credit.deposit(amount)
        self._dirty = True
        return debit, credit

    def list_accounts(self) -> list[tuple[str, Decimal]]:
        """(name, balance) pairs in insertion order. Never mutates."""
        return [(account.name, account.balance) for account in self._accounts.values()]
