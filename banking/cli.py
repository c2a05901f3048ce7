"""
Command Line Interface for Banking Ledger

Usage:
    banking show
    banking create -n NAME -a AMOUNT
    banking deposit -n NAME -a AMOUNT
    banking withdraw -n NAME -a AMOUNT
    banking transfer -f FROM -t TO -a AMOUNT

Global options go before the command:
    banking --store ~/ledger.csv -v show

Exit codes:
    0  success
    1  command rejected (unknown account, bad amount, overdraft, ...)
    2  usage or configuration error
    3  ledger file unreadable or not writable
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from banking import __version__
from banking.config import get_settings
from banking.log import configure_logging, get_logger
from banking.models.account import LedgerError, format_money, parse_amount
from banking.orchestrator import Action, Command, CommandResult, create_flow
from banking.services.storage import StorageError


EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_USAGE = 2
EXIT_STORAGE = 3

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="banking",
        description="Keep named account balances in a local CSV ledger.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--store", type=Path, default=None, metavar="PATH",
        help="ledger file (default: $BANKING_STORE_PATH or banking_system.csv)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log debug output to stderr",
    )

    commands = parser.add_subparsers(dest="action", required=True, metavar="COMMAND")

    commands.add_parser("show", help="Show all accounts")

    for action, help_text in (
        ("create", "Create account"),
        ("deposit", "Deposit amount to account"),
        ("withdraw", "Withdraw amount from account"),
    ):
        sub = commands.add_parser(action, help=help_text)
        sub.add_argument("-n", "--name", required=True)
        sub.add_argument("-a", "--amount", required=True)

    transfer = commands.add_parser("transfer", help="Transfer amount between accounts")
    transfer.add_argument("-f", "--from", dest="source", required=True)
    transfer.add_argument("-t", "--to", dest="destination", required=True)
    transfer.add_argument("-a", "--amount", required=True)

    return parser


def render_result(result: CommandResult) -> list[str]:
    """Turn a command result into the lines printed on stdout."""
    if result.action == Action.SHOW:
        return [
            f"name: {name}\tbalance: {format_money(balance)}"
            for name, balance in result.listing
        ]
    if result.action == Action.CREATE:
        account = result.accounts[0]
        return [
            f"Account created with name {account.name} "
            f"and balance {format_money(account.balance)}"
        ]
    if result.action == Action.TRANSFER:
        debit, credit = result.accounts
        return [
            f"{debit.name} balance is now {format_money(debit.balance)}, "
            f"{credit.name} balance is now {format_money(credit.balance)}"
        ]
    return [f"Account balance is now {format_money(result.accounts[0].balance)}"]


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one command. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        _error(f"invalid configuration: {e}")
        return EXIT_USAGE

    configure_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        fmt=settings.log_format,
    )

    try:
        amount = parse_amount(args.amount) if args.action != "show" else None
        command = Command(
            action=Action(args.action),
            name=getattr(args, "name", None),
            source=getattr(args, "source", None),
            destination=getattr(args, "destination", None),
            amount=amount,
        )
        result = create_flow(args.store).run(command)
    except StorageError as e:
        logger.debug("storage_failed", error_type=type(e).__name__)
        _error(str(e))
        return EXIT_STORAGE
    except LedgerError as e:
        _error(str(e))
        return EXIT_REJECTED

    for line in render_result(result):
        print(line)
    return EXIT_OK
