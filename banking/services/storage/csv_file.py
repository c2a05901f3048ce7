"""
CSV File Storage Implementation

DESIGN DECISION: A plain CSV file is the storage backend because:
1. Users can read and hand-edit their balances in any text editor
2. No database setup required
3. The whole ledger is small enough to rewrite on every change

FORMAT:
- UTF-8, comma separated, "\\n" line terminator; a leading BOM is ignored
- First row is always the header "name,balance"; loading skips it
  whatever it says
- One row per account, in ledger order
- Balance as a fixed-point string with two decimals ("10.00")
- Names containing commas or quotes are quoted by the csv module;
  names never contain line breaks

TRADEOFFS:
- No locking: two concurrent invocations race, last writer wins
- Saves go to a temporary file that is atomically renamed over the
  target, so a crash mid-write never leaves a half-written ledger
"""

import contextlib
import csv
import io
import os
import stat
import tempfile
from pathlib import Path
from typing import Union

from banking.engine import Ledger
from banking.log import get_logger
from banking.models.account import (
    LINE_BREAK_REASON,
    MAX_AMOUNT,
    Account,
    AmountOverflow,
    InvalidAmount,
    format_amount,
    format_money,
    has_line_break,
    parse_amount,
)
from banking.services.storage.interface import (
    LedgerStorageInterface,
    LoadError,
    ParseError,
    WriteError,
)


HEADER = ["name", "balance"]
BOM = "\ufeff"

logger = get_logger(__name__)


def render_ledger(ledger: Ledger) -> str:
    """Encode a ledger as CSV text, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    for account in ledger.accounts():
        writer.writerow([account.name, format_amount(account.balance)])
    return buffer.getvalue()


def parse_ledger(text: str) -> Ledger:
    """
    Decode CSV text into a clean Ledger.

    Empty text is an empty ledger. Blank lines are ignored. The first
    non-blank row is the header and is skipped without being checked.
    Row numbers in errors are physical line numbers, starting at 1.

    Raises:
        ParseError: On the first malformed row
    """
    text = text.removeprefix(BOM)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    accounts: dict[str, Account] = {}
    seen_header = False

    try:
        for fields in reader:
            row = reader.line_num
            if not fields:
                continue
            if not seen_header:
                if fields != HEADER:
                    logger.warning("ledger_header_unexpected", row=row, header=fields)
                seen_header = True
                continue
            account = _parse_row(row, fields)
            if account.name in accounts:
                raise ParseError(row, f"duplicate account name {account.name!r}")
            accounts[account.name] = account
    except csv.Error as e:
        raise ParseError(reader.line_num, f"unreadable row: {e}") from e

    return Ledger(accounts.values())


def _parse_row(row: int, fields: list[str]) -> Account:
    """Convert one data row into an Account."""
    if len(fields) != len(HEADER):
        raise ParseError(row, f"expected {len(HEADER)} fields, found {len(fields)}")

    name, balance_text = fields
    if not name:
        raise ParseError(row, "account name is empty")
    if has_line_break(name):
        raise ParseError(row, f"account name {LINE_BREAK_REASON}")
    if balance_text.startswith("-"):
        raise ParseError(row, f"negative balance {balance_text!r}")

    try:
        balance = parse_amount(balance_text)
    except AmountOverflow as e:
        raise ParseError(
            row, f"balance {balance_text!r} exceeds {format_money(MAX_AMOUNT)}"
        ) from e
    except InvalidAmount as e:
        raise ParseError(row, f"invalid balance {balance_text!r}") from e

    return Account(name=name, balance=balance)


class CsvLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage backed by a single CSV file.

    The file does not need to exist: loading a missing file gives an
    empty ledger, and the first save creates it (and its directory).
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Ledger:
        try:
            # newline="" keeps CR inside quoted fields for the csv reader
            with self._path.open(encoding="utf-8-sig", newline="") as handle:
                text = handle.read()
        except FileNotFoundError:
            logger.info("ledger_missing", path=str(self._path))
            return Ledger()
        except UnicodeDecodeError as e:
            raise LoadError(f"{self._path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise LoadError(f"could not read ledger from {self._path}: {e}") from e

        ledger = parse_ledger(text)
        logger.debug("ledger_loaded", path=str(self._path), accounts=len(ledger))
        return ledger

    def save(self, ledger: Ledger) -> None:
        content = render_ledger(ledger)
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            self._copy_mode(tmp_path)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_path)
            raise WriteError(f"could not write ledger to {self._path}: {e}") from e

        logger.debug("ledger_saved", path=str(self._path), accounts=len(ledger))

    def _copy_mode(self, tmp_path: str) -> None:
        """Keep the permissions of the file being replaced."""
        try:
            mode = stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return
        os.chmod(tmp_path, mode)
