"""
Data Models Package

Contains the account model and the amount rules shared by every layer.
"""

from banking.models.account import (
    MAX_AMOUNT,
    Account,
    AmountOverflow,
    BalanceOverflow,
    InsufficientFunds,
    InvalidAccountName,
    InvalidAmount,
    LedgerError,
    check_amount,
    format_amount,
    format_money,
    parse_amount,
)

__all__ = [
    "MAX_AMOUNT",
    "Account",
    # Errors
    "AmountOverflow",
    "BalanceOverflow",
    "InsufficientFunds",
    "InvalidAccountName",
    "InvalidAmount",
    "LedgerError",
    # Amount helpers
    "check_amount",
    "format_amount",
    "format_money",
    "parse_amount",
]
