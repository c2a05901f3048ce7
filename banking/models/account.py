"""
Account Model and Amount Rules

These definitions are the single source of truth for what a valid
amount and a valid account look like. Every layer (CLI, engine, store)
goes through them.

DESIGN DECISION: Money is a Decimal with exactly two fractional digits.
Binary floats are rejected outright, so repeated deposits and withdrawals
can never drift.

DESIGN DECISION: Amounts are capped at MAX_AMOUNT, the largest value
representable as unsigned 64-bit cents. Every sum of two capped values
still fits in Decimal's default 28-digit context, so arithmetic is exact.
"""

import re
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


CENT = Decimal("0.01")
MAX_AMOUNT = Decimal(2**64 - 1) / 100

# Digits with an optional one- or two-digit fractional part.
# The integer part may be omitted (".5"), the fractional part may not ("1.").
_AMOUNT_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]{1,2})?|\.[0-9]{1,2}")

AmountLike = Union[Decimal, int]

LINE_BREAK_REASON = "cannot contain line breaks"


# =============================================================================
# ERRORS
# =============================================================================

class LedgerError(Exception):
    """Base exception for every failure the ledger reports."""
    pass


class InvalidAmount(LedgerError):
    """Amount is malformed, out of range, or not allowed for the operation."""

    def __init__(self, amount: object, reason: str = ""):
        self.amount = amount
        self.reason = reason or (
            "must be a non-negative number only containing digits "
            "up to two decimal places"
        )
        super().__init__(f"invalid amount {str(amount)!r}, {self.reason}")


class AmountOverflow(InvalidAmount):
    """Amount is larger than the ledger can hold."""

    def __init__(self, amount: object):
        super().__init__(amount, f"must not exceed {format_money(MAX_AMOUNT)}")


class InvalidAccountName(LedgerError):
    """Account names must be non-empty and fit on one line."""

    def __init__(self, name: str = "", reason: str = "cannot be empty"):
        self.name = name
        self.reason = reason
        super().__init__(f"account name {reason}")


class InsufficientFunds(LedgerError):
    """Withdrawal would take the balance below zero."""

    def __init__(self, name: str, balance: Decimal, amount: Decimal):
        self.name = name
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"account {name} would overdraft if {format_money(amount)} "
            f"was withdrawn from balance {format_money(balance)}"
        )


class BalanceOverflow(LedgerError):
    """Deposit would take the balance above MAX_AMOUNT."""

    def __init__(self, name: str, amount: Decimal):
        self.name = name
        self.amount = amount
        super().__init__(
            f"account {name} would have balance overflow "
            f"if {format_money(amount)} was deposited"
        )


# =============================================================================
# AMOUNT HELPERS
# =============================================================================

def format_amount(value: Decimal) -> str:
    """Render an amount as a fixed-point string with two decimals, e.g. '10.00'."""
    return f"{value.quantize(CENT):f}"


def format_money(value: Decimal) -> str:
    """Render an amount for display, e.g. '$10.00'."""
    return f"${format_amount(value)}"


def check_amount(amount: AmountLike, *, allow_zero: bool = False) -> Decimal:
    """
    Validate an already-parsed amount.

    Args:
        amount: A Decimal (or int) amount
        allow_zero: Accept 0 (opening balances); otherwise amount must be > 0

    Returns:
        The amount quantized to two decimal places

    Raises:
        InvalidAmount: Not a Decimal/int, not finite, negative, zero when
            not allowed, or more than two decimal places
        AmountOverflow: Larger than MAX_AMOUNT
    """
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
        raise InvalidAmount(amount, "must be a Decimal, not " + type(amount).__name__)
    amount = Decimal(amount)

    if not amount.is_finite():
        raise InvalidAmount(amount, "must be a finite number")
    if amount < 0:
        raise InvalidAmount(amount, "must not be negative")
    if amount == 0 and not allow_zero:
        raise InvalidAmount(amount, "must be greater than zero")
    if amount > MAX_AMOUNT:
        raise AmountOverflow(amount)

    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise InvalidAmount(amount, "must not have more than two decimal places")
    return quantized


def parse_amount(text: str) -> Decimal:
    """
    Parse user-supplied text into an amount.

    Accepted: "10", "10.5", "10.05", ".5", "0.00".
    Rejected: signs, exponents, whitespace, "1.", "2.002", "1.1.2".

    Raises:
        InvalidAmount: Text does not match the amount grammar
        AmountOverflow: Value is larger than MAX_AMOUNT
    """
    if not _AMOUNT_PATTERN.fullmatch(text):
        raise InvalidAmount(text)
    value = Decimal(text)
    if value > MAX_AMOUNT:
        raise AmountOverflow(text)
    return value.quantize(CENT)


# =============================================================================
# ACCOUNT MODEL
# =============================================================================

def has_line_break(name: str) -> bool:
    """Names are stored one per CSV row, so CR and LF are not allowed."""
    return "\r" in name or "\n" in name


class Account(BaseModel):
    """
    One named account and its balance.

    CRITICAL: balance >= 0 at all times. The mutation methods check this
    before touching state, and assignment validation rejects it again
    if anything slips through.

    The name is frozen: accounts are never renamed.
    """
    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(
        ...,
        min_length=1,
        frozen=True,
        description="Case-sensitive account name, unique within a ledger"
    )
    balance: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        le=MAX_AMOUNT,
        decimal_places=2,
        description="Current balance"
    )

    @field_validator("name")
    @classmethod
    def single_line_name(cls, v: str) -> str:
        if has_line_break(v):
            raise ValueError(f"account name {LINE_BREAK_REASON}")
        return v

    @field_validator("balance")
    @classmethod
    def quantize_balance(cls, v: Decimal) -> Decimal:
        """Always hold the balance with exactly two decimal places."""
        return v.quantize(CENT)

    @classmethod
    def open(cls, name: str, balance: AmountLike) -> "Account":
        """
        Create a new account, raising ledger errors instead of ValidationError.

        Zero is a valid opening balance; negative is not.
        """
        if not name:
            raise InvalidAccountName(name)
        if has_line_break(name):
            raise InvalidAccountName(name, LINE_BREAK_REASON)
        return cls(name=name, balance=check_amount(balance, allow_zero=True))

    def check_deposit(self, amount: AmountLike) -> Decimal:
        """Validate a deposit without applying it. Returns the checked amount."""
        amount = check_amount(amount)
        if self.balance + amount > MAX_AMOUNT:
            raise BalanceOverflow(self.name, amount)
        return amount

    def check_withdraw(self, amount: AmountLike) -> Decimal:
        """Validate a withdrawal without applying it. Returns the checked amount."""
        amount = check_amount(amount)
        if amount > self.balance:
            raise InsufficientFunds(self.name, self.balance, amount)
        return amount

    def deposit(self, amount: AmountLike) -> "Account":
        amount = self.check_deposit(amount)
        self.balance = self.balance + amount
        return self

    def withdraw(self, amount: AmountLike) -> "Account":
        amount = self.check_withdraw(amount)
        self.balance = self.balance - amount
        return self

    def __str__(self) -> str:
        return f"name: {self.name}\tbalance: {format_money(self.balance)}"
