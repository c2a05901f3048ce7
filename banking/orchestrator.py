"""
Main Orchestrator for Banking Ledger

Ties storage and engine together and defines the one flow every
invocation follows:

    load ledger -> apply exactly one command -> save if it changed

DESIGN DECISION: The orchestrator is the only place that decides to
write. The rules it enforces:
- A rejected command never touches the store
- A successful mutating command is not successful until the save is
- `show` never writes, even though it goes through the same flow

Errors are not caught here. They propagate to the caller (the CLI),
which turns them into messages and exit codes.
"""

from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from banking.config import get_settings
from banking.engine import Ledger
from banking.log import get_logger
from banking.models.account import Account, LedgerError
from banking.services.storage import CsvLedgerStorage, LedgerStorageInterface


logger = get_logger(__name__)


class Action(str, Enum):
    """Commands the ledger understands."""
    SHOW = "show"
    CREATE = "create"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"


# Parameters each action needs
_REQUIRED_FIELDS = {
    Action.SHOW: (),
    Action.CREATE: ("name", "amount"),
    Action.DEPOSIT: ("name", "amount"),
    Action.WITHDRAW: ("name", "amount"),
    Action.TRANSFER: ("source", "destination", "amount"),
}


class Command(BaseModel):
    """
    One parsed invocation.

    Amounts arrive already parsed into Decimal; floats are refused.
    """
    model_config = ConfigDict(frozen=True)

    action: Action
    name: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, strict=True)

    @model_validator(mode="after")
    def check_required_fields(self) -> "Command":
        missing = [
            field for field in _REQUIRED_FIELDS[self.action]
            if getattr(self, field) is None
        ]
        if missing:
            raise ValueError(
                f"{self.action.value} requires: {', '.join(missing)}"
            )
        return self


class CommandResult(BaseModel):
    """
    Outcome of a successful command.

    `accounts` holds the accounts the command touched, in the order the
    command names them. `listing` is filled for `show` only.
    """
    action: Action
    accounts: list[Account] = Field(default_factory=list)
    listing: list[tuple[str, Decimal]] = Field(default_factory=list)
    saved: bool = False


class LedgerCommandFlow:
    """
    Runs one command against a storage backend.

    Flow:
    1. Load -> fresh Ledger from storage
    2. Apply -> exactly one engine operation
    3. Save -> only if the ledger is dirty
    """

    def __init__(self, storage: LedgerStorageInterface):
        self._storage = storage

    def run(self, command: Command) -> CommandResult:
        """
        Execute a command and persist its effect.

        Raises:
            LoadError / ParseError: Store unreadable; nothing was applied
            LedgerError subclasses: Command rejected; store untouched
            WriteError: Command applied in memory but not persisted
        """
        ledger = self._storage.load()

        try:
            result = self._apply(ledger, command)
        except LedgerError as e:
            logger.info(
                "command_rejected",
                action=command.action.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        if ledger.dirty:
            self._storage.save(ledger)
            ledger.mark_clean()
            result.saved = True
            logger.info(
                "command_applied",
                action=command.action.value,
                accounts=[account.name for account in result.accounts],
            )
        else:
            logger.debug("ledger_unchanged", action=command.action.value)

        return result

    def _apply(self, ledger: Ledger, command: Command) -> CommandResult:
        """Route the command to the matching engine operation."""
        action = command.action

        if action == Action.SHOW:
            return CommandResult(action=action, listing=ledger.list_accounts())
        elif action == Action.CREATE:
            account = ledger.create(command.name, command.amount)
            return CommandResult(action=action, accounts=[account])
        elif action == Action.DEPOSIT:
            account = ledger.deposit(command.name, command.amount)
            return CommandResult(action=action, accounts=[account])
        elif action == Action.WITHDRAW:
            account = ledger.withdraw(command.name, command.amount)
            return CommandResult(action=action, accounts=[account])
        else:
            debit, credit = ledger.transfer(
                command.source, command.destination, command.amount
            )
            return CommandResult(action=action, accounts=[debit, credit])


def create_flow(store_path: Optional[Path] = None) -> LedgerCommandFlow:
    """
    Build a command flow over the configured CSV file.

    Args:
        store_path: Overrides the configured store path when given
    """
    path = store_path or get_settings().store_path
    return LedgerCommandFlow(CsvLedgerStorage(path))
