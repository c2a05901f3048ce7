"""
Tests for the command flow.

The flow owns the commit protocol: rejected commands never write,
successful mutations always write, `show` never writes.
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from banking.engine import AccountNotFound, DuplicateAccount, Ledger
from banking.models.account import InsufficientFunds
from banking.orchestrator import (
    Action,
    Command,
    LedgerCommandFlow,
    create_flow,
)
from banking.services.storage import (
    CsvLedgerStorage,
    InMemoryLedgerStorage,
    ParseError,
    WriteError,
)


class FailingSaveStorage(InMemoryLedgerStorage):
    """In-memory store whose writes always fail."""

    def save(self, ledger: Ledger) -> None:
        raise WriteError("disk full")


def run(storage, action, **params):
    return LedgerCommandFlow(storage).run(Command(action=action, **params))


class TestCommand:
    """Tests for the Command model."""

    def test_show_needs_nothing(self):
        """Test show is valid without parameters."""
        assert Command(action=Action.SHOW).action == Action.SHOW

    def test_missing_parameters(self):
        """Test each action demands its parameters."""
        with pytest.raises(ValidationError, match="create requires: amount"):
            Command(action=Action.CREATE, name="user")
        with pytest.raises(ValidationError, match="transfer requires: destination"):
            Command(action=Action.TRANSFER, source="a", amount=Decimal("1"))

    def test_refuses_float_amounts(self):
        """Test floats never reach the engine."""
        with pytest.raises(ValidationError):
            Command(action=Action.DEPOSIT, name="user", amount=0.1)

    def test_action_from_string(self):
        """Test actions can be given by name."""
        assert Command(action="show").action is Action.SHOW


class TestLedgerCommandFlow:
    """Tests for load -> apply -> save."""

    def test_create_saves(self):
        """Test a successful create writes the full ledger."""
        storage = InMemoryLedgerStorage()
        result = run(storage, Action.CREATE, name="user1", amount=Decimal("10.00"))
        assert result.saved
        assert result.accounts[0].name == "user1"
        assert storage.rows == [("user1", Decimal("10.00"))]
        assert storage.save_count == 1

    def test_show_never_saves(self):
        """Test show lists accounts without writing."""
        storage = InMemoryLedgerStorage([("a", Decimal("1.00")), ("b", Decimal("2.00"))])
        result = run(storage, Action.SHOW)
        assert result.listing == [("a", Decimal("1.00")), ("b", Decimal("2.00"))]
        assert not result.saved
        assert storage.save_count == 0

    def test_rejected_command_never_saves(self):
        """Test a failed deposit leaves the store untouched."""
        storage = InMemoryLedgerStorage()
        with pytest.raises(AccountNotFound):
            run(storage, Action.DEPOSIT, name="ghost", amount=Decimal("1.00"))
        assert storage.save_count == 0

    def test_rejected_duplicate_keeps_store(self):
        """Test a duplicate create changes nothing on disk."""
        storage = InMemoryLedgerStorage([("user1", Decimal("5.00"))])
        with pytest.raises(DuplicateAccount):
            run(storage, Action.CREATE, name="user1", amount=Decimal("1.00"))
        assert storage.rows == [("user1", Decimal("5.00"))]
        assert storage.save_count == 0

    def test_transfer_result_order(self):
        """Test transfer reports source then destination."""
        storage = InMemoryLedgerStorage([("a", Decimal("10.00")), ("b", Decimal("0.00"))])
        result = run(storage, Action.TRANSFER, source="a", destination="b", amount=Decimal("10"))
        assert [(acc.name, acc.balance) for acc in result.accounts] == [
            ("a", Decimal("0.00")),
            ("b", Decimal("10.00")),
        ]
        assert storage.rows == [("a", Decimal("0.00")), ("b", Decimal("10.00"))]

    def test_failed_transfer_keeps_store(self):
        """Test an overdrawing transfer writes nothing."""
        storage = InMemoryLedgerStorage([("a", Decimal("1.00")), ("b", Decimal("0.00"))])
        with pytest.raises(InsufficientFunds):
            run(storage, Action.TRANSFER, source="a", destination="b", amount=Decimal("2"))
        assert storage.save_count == 0

    def test_write_error_propagates(self):
        """Test the command fails when the save fails."""
        storage = FailingSaveStorage()
        with pytest.raises(WriteError):
            run(storage, Action.CREATE, name="user1", amount=Decimal("1"))

    def test_parse_error_aborts_before_apply(self, store_path):
        """Test a malformed store stops the command before any operation."""
        store_path.write_text("name,balance\nuser1,-1.00\n", encoding="utf-8")
        with pytest.raises(ParseError):
            run(CsvLedgerStorage(store_path), Action.CREATE, name="u", amount=Decimal("1"))
        assert store_path.read_text(encoding="utf-8") == "name,balance\nuser1,-1.00\n"

    def test_state_carries_across_invocations(self, store_path):
        """Test each run sees what the previous run committed."""
        storage = CsvLedgerStorage(store_path)
        run(storage, Action.CREATE, name="user1", amount=Decimal("10.00"))
        run(storage, Action.WITHDRAW, name="user1", amount=Decimal("0.20"))
        with pytest.raises(InsufficientFunds):
            run(storage, Action.WITHDRAW, name="user1", amount=Decimal("100.00"))
        assert run(storage, Action.SHOW).listing == [("user1", Decimal("9.80"))]
        assert store_path.read_text(encoding="utf-8") == "name,balance\nuser1,9.80\n"


class TestCreateFlow:
    """Tests for building the default flow."""

    def test_uses_configured_path(self, tmp_path, monkeypatch):
        """Test the flow writes where settings point."""
        target = tmp_path / "configured.csv"
        monkeypatch.setenv("BANKING_STORE_PATH", str(target))
        create_flow().run(Command(action=Action.CREATE, name="a", amount=Decimal("1")))
        assert target.exists()

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        """Test an explicit path overrides settings."""
        monkeypatch.setenv("BANKING_STORE_PATH", str(tmp_path / "configured.csv"))
        explicit = tmp_path / "explicit.csv"
        create_flow(explicit).run(Command(action=Action.CREATE, name="a", amount=Decimal("1")))
        assert explicit.exists()
        assert not (tmp_path / "configured.csv").exists()
