"""Tests for the accrual ledger and obligation tracker."""

import pytest
from datetime import date
from decimal import Decimal

from schoolledger.cli.main import cli
from schoolledger.domain.entities import (
    AccrualEntryKind,
    ObligationKind,
    ObligationStatus,
)
from schoolledger.domain.errors import NotFoundError, ValidationError


class TestCreateEntry:
    def test_revenue_opens_receivable(self, tuition_receivable):
        entry, obligation = tuition_receivable.entry, tuition_receivable.obligation

        assert entry.kind == AccrualEntryKind.REVENUE
        assert entry.counterparty_name == "Aarav"
        assert entry.linked_obligation_id == obligation.id

        assert obligation.kind == ObligationKind.RECEIVABLE
        assert obligation.source_accrual_entry_id == entry.id
        assert obligation.original_amount == Decimal("10000")
        assert obligation.paid_amount == Decimal("0")
        assert obligation.balance == Decimal("10000")
        assert obligation.status == ObligationStatus.UNPAID
        assert obligation.due_date == date(2024, 6, 30)
        assert obligation.description == "Receivable for Student Fees"
        assert obligation.version == 1

    def test_expense_opens_payable(self, electricity_payable):
        assert electricity_payable.entry.kind == AccrualEntryKind.EXPENSE
        assert electricity_payable.obligation.kind == ObligationKind.PAYABLE
        assert electricity_payable.obligation.description == "Payable for Utilities"

    def test_each_entry_gets_its_own_obligation(self, accrual_service, seeded_db):
        for amount in ("100", "200", "300"):
            accrual_service.create_revenue(
                date=date(2024, 6, 1), customer="Diya", category="Student Fees", amount=Decimal(amount)
            )

        entries = seeded_db.list_accrual_entries()
        obligations = seeded_db.list_obligations()
        assert len(entries) == len(obligations) == 3
        assert {e.linked_obligation_id for e in entries} == {o.id for o in obligations}
        for obligation in obligations:
            source = seeded_db.get_accrual_entry(obligation.source_accrual_entry_id)
            assert source.amount == obligation.original_amount

    def test_category_must_match_kind(self, accrual_service, seeded_db):
        with pytest.raises(NotFoundError):
            accrual_service.create_expense(
                date=date(2024, 6, 1), vendor="Diya", category="Student Fees", amount=Decimal("100")
            )
        assert seeded_db.list_accrual_entries() == []
        assert seeded_db.list_obligations() == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"counterparty_name": "  "},
            {"amount": Decimal("0")},
            {"date": None},
            {"kind": "refund"},
            {"subcategory": "Hostel Fees"},
        ],
    )
    def test_invalid_input_writes_nothing(self, accrual_service, seeded_db, overrides):
        fields = {
            "kind": "revenue",
            "date": date(2024, 6, 1),
            "counterparty_name": "Diya",
            "category": "Student Fees",
            "amount": Decimal("100"),
            "subcategory": "Tuition Fees",
        }
        fields.update(overrides)

        with pytest.raises(ValidationError):
            accrual_service.create_entry(**fields)
        assert seeded_db.list_obligations() == []


class TestQueries:
    @pytest.fixture
    def entries(self, accrual_service):
        accrual_service.create_revenue(
            date=date(2024, 6, 1), customer="Aarav Sharma", category="Student Fees", amount=Decimal("100"),
            description="June tuition", recorded_by="clerk",
        )
        accrual_service.create_revenue(
            date=date(2024, 7, 1), customer="Diya", category="Sponsorships", amount=Decimal("200"),
            due_date=date(2024, 7, 10),
        )
        accrual_service.create_expense(
            date=date(2024, 6, 15), vendor="City Power", category="Utilities", subcategory="Electricity",
            amount=Decimal("300"), due_date=date(2024, 6, 20),
        )

    def test_newest_first(self, accrual_service, entries):
        assert [e.date for e in accrual_service.list_entries()] == [
            date(2024, 7, 1),
            date(2024, 6, 15),
            date(2024, 6, 1),
        ]

    def test_filters(self, accrual_service, entries):
        assert len(accrual_service.list_entries(kind="revenue")) == 2
        assert len(accrual_service.list_entries(start_date=date(2024, 6, 10))) == 2
        assert len(accrual_service.list_entries(end_date=date(2024, 6, 30))) == 2
        assert len(accrual_service.list_entries(category="Utilities")) == 1
        assert len(accrual_service.list_entries(subcategory="Electricity")) == 1
        assert len(accrual_service.list_entries(recorded_by="clerk")) == 1

    def test_counterparty_is_case_insensitive_substring(self, accrual_service, entries):
        (entry,) = accrual_service.list_entries(counterparty="sharma")
        assert entry.counterparty_name == "Aarav Sharma"

    def test_search(self, accrual_service, entries):
        assert len(accrual_service.list_entries(search="tuition")) == 1
        assert len(accrual_service.list_entries(search="POWER")) == 1
        assert len(accrual_service.list_entries(search="sponsor")) == 1
        assert accrual_service.list_entries(search="100%") == []

    def test_obligations_ordered_by_due_date(self, accrual_service, entries):
        obligations = accrual_service.list_obligations()
        assert [o.due_date for o in obligations] == [date(2024, 6, 20), date(2024, 7, 10), None]

    def test_receivables_and_payables(self, accrual_service, entries):
        assert [o.counterparty_name for o in accrual_service.list_receivables()] == ["Diya", "Aarav Sharma"]
        assert [o.counterparty_name for o in accrual_service.list_payables()] == ["City Power"]
        assert accrual_service.list_receivables(customer="diya")[0].counterparty_name == "Diya"
        assert accrual_service.list_payables(vendor="nobody") == []

    def test_status_filter(self, accrual_service, settlement_service, entries):
        payable = accrual_service.list_payables()[0]
        settlement_service.record_payment(payable.id, date(2024, 6, 18), Decimal("300"), document_type="Invoice")

        assert [o.id for o in accrual_service.list_obligations(status="Paid")] == [payable.id]
        assert len(accrual_service.list_obligations(status=ObligationStatus.UNPAID)) == 2
        with pytest.raises(ValidationError):
            accrual_service.list_obligations(status="Overdue")

    def test_require_obligation(self, accrual_service):
        with pytest.raises(NotFoundError):
            accrual_service.require_obligation(12)
        assert accrual_service.get_obligation(12) is None


def test_accrual_revenue_command(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            seeded_db.database_path,
            "accrual",
            "revenue",
            "--customer",
            "Aarav",
            "--category",
            "Student Fees",
            "--subcategory",
            "Tuition Fees",
            "--amount",
            "10000",
            "--date",
            "2024-06-01",
            "--due-date",
            "2024-06-30",
        ],
    )

    assert result.exit_code == 0
    assert "Recorded revenue 10,000.00 for 'Aarav'" in result.output
    assert "Opened receivable 1: balance 10,000.00" in result.output

    (obligation,) = seeded_db.list_obligations()
    assert obligation.due_date == date(2024, 6, 30)


def test_accrual_expense_unknown_category(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            seeded_db.database_path,
            "accrual",
            "expense",
            "--vendor",
            "City Power",
            "--category",
            "Electricity Board",
            "--amount",
            "100",
        ],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert seeded_db.list_accrual_entries() == []


def test_accrual_list_and_obligations(cli_runner, seeded_db, tuition_receivable, electricity_payable):
    path = seeded_db.database_path

    result = cli_runner.invoke(cli, ["--db-path", path, "accrual", "list", "--kind", "revenue"])
    assert result.exit_code == 0
    assert "Found 1 accrual entry" in result.output
    assert "Aarav" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "accrual", "obligations", "--kind", "payable"])
    assert result.exit_code == 0
    assert "City Power" in result.output
    assert "Unpaid" in result.output
    assert "Aarav" not in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "accrual", "obligations", "--status", "Paid"])
    assert "No obligations found." in result.output


def test_settle_receipt_command(cli_runner, seeded_db, tuition_receivable):
    obligation_id = tuition_receivable.obligation.id

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            seeded_db.database_path,
            "settle",
            "receipt",
            str(obligation_id),
            "--amount",
            "4000",
            "--date",
            "2024-06-10",
            "--mode",
            "UPI",
        ],
    )

    assert result.exit_code == 0
    assert "Recorded Receipt 4,000.00" in result.output
    assert f"Receivable {obligation_id}: balance 6,000.00 (Partial)" in result.output

    seeded_db.disconnect()
    settlement = seeded_db.list_settlements()[0]
    assert settlement.payment_mode == "UPI"


def test_settle_overpayment_command(cli_runner, seeded_db, tuition_receivable):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "settle", "receipt", str(tuition_receivable.obligation.id), "--amount", "12000"],
    )

    assert result.exit_code == 1
    assert "exceeds outstanding balance" in result.output
    assert seeded_db.list_settlements() == []


def test_settle_payment_requires_document(cli_runner, seeded_db, electricity_payable):
    args = ["--db-path", seeded_db.database_path, "settle", "payment", str(electricity_payable.obligation.id)]

    result = cli_runner.invoke(cli, args + ["--amount", "2500"])
    assert result.exit_code == 1
    assert "Document type is required" in result.output

    result = cli_runner.invoke(cli, args + ["--amount", "2500", "--document-type", "Receipt"])
    assert result.exit_code == 1
    assert "Document number is required" in result.output

    result = cli_runner.invoke(
        cli, args + ["--amount", "2500", "--document-type", "Receipt", "--document-number", "CP-1"]
    )
    assert result.exit_code == 0
    assert "(Paid)" in result.output


def test_settle_capital_and_list(cli_runner, seeded_db):
    path = seeded_db.database_path

    result = cli_runner.invoke(
        cli, ["--db-path", path, "--user", "Meera", "settle", "capital", "--amount", "50000", "--date", "2024-04-01"]
    )
    assert result.exit_code == 0
    assert "Recorded Capital Injection 50,000.00" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "settle", "list", "--kind", "Capital Injection"])
    assert result.exit_code == 0
    assert "Found 1 settlement(s)" in result.output
