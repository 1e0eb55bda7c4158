"""Tests for the asset register, adjustments and report commands."""

import json

import pytest
from datetime import date
from decimal import Decimal

from schoolledger.cli.main import cli
from schoolledger.domain.entities import AdjustmentType, STRAIGHT_LINE
from schoolledger.domain.errors import NotFoundError, ValidationError


class TestAssetService:
    def test_add_asset(self, asset_service):
        asset = asset_service.add_asset(
            "School bus", date(2024, 1, 1), Decimal("100000"), 9, Decimal("10000"), recorded_by="bursar"
        )

        assert asset.id is not None
        assert asset.method == STRAIGHT_LINE
        assert asset.annual_depreciation == Decimal("10000")
        assert asset.recorded_by == "bursar"

    def test_salvage_defaults_to_zero(self, asset_service):
        asset = asset_service.add_asset("Projector", date(2024, 1, 1), Decimal("5000"), 5, salvage_value=None)
        assert asset.salvage_value == Decimal("0")

    @pytest.mark.parametrize(
        "cost,life,salvage",
        [
            (Decimal("0"), 5, Decimal("0")),
            (Decimal("1000"), 0, Decimal("0")),
            (Decimal("1000"), -2, Decimal("0")),
            (Decimal("1000"), 2.5, Decimal("0")),
            (Decimal("1000"), True, Decimal("0")),
            (Decimal("1000"), 5, Decimal("-1")),
            (Decimal("1000"), 5, Decimal("1000.01")),
        ],
    )
    def test_invalid_values(self, asset_service, cost, life, salvage):
        with pytest.raises(ValidationError):
            asset_service.add_asset("Projector", date(2024, 1, 1), cost, life, salvage)
        assert asset_service.list_assets() == []

    def test_list_most_recent_first(self, asset_service):
        asset_service.add_asset("Old", date(2020, 1, 1), Decimal("100"), 1)
        asset_service.add_asset("New", date(2024, 1, 1), Decimal("100"), 1)
        assert [a.name for a in asset_service.list_assets()] == ["New", "Old"]


class TestAdjustments:
    def test_add_and_list(self, asset_service):
        first = asset_service.add_adjustment(
            "Prepaid Expense", date(2024, 9, 30), Decimal("200"), related_category="Utilities"
        )
        asset_service.add_adjustment(AdjustmentType.ACCRUED_INCOME, date(2024, 10, 31), Decimal("50"))

        assert first.type == AdjustmentType.PREPAID_EXPENSE
        assert first.related_category == "Utilities"
        assert [a.amount for a in asset_service.list_adjustments()] == [Decimal("50"), Decimal("200")]
        assert len(asset_service.list_adjustments(end_date=date(2024, 9, 30))) == 1

    def test_unknown_type(self, asset_service):
        with pytest.raises(ValidationError):
            asset_service.add_adjustment("Bad Debt", date(2024, 9, 30), Decimal("10"))

    def test_non_positive_amount(self, asset_service):
        with pytest.raises(ValidationError):
            asset_service.add_adjustment("Accrued Income", date(2024, 9, 30), Decimal("-10"))

    def test_delete(self, asset_service):
        adjustment = asset_service.add_adjustment("Accrued Income", date(2024, 9, 30), Decimal("10"))
        asset_service.delete_adjustment(adjustment.id)
        assert asset_service.list_adjustments() == []
        with pytest.raises(NotFoundError):
            asset_service.delete_adjustment(adjustment.id)


def test_asset_commands(cli_runner, seeded_db):
    path = seeded_db.database_path

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            path,
            "asset",
            "add",
            "Smart boards",
            "--purchase-date",
            "2024-07-01",
            "--cost",
            "10,000",
            "--life",
            "1",
        ],
    )
    assert result.exit_code == 0
    assert "annual depreciation 10,000.00" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "asset", "list"])
    assert "Smart boards" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "asset", "schedule", "--as-of", "2024-12-31", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["lines"][0]["accumulated_depreciation"] == "5041.10"
    assert data["total_net_book_value"] == "4958.90"


def test_asset_add_bad_salvage(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            seeded_db.database_path,
            "asset",
            "add",
            "Bus",
            "--purchase-date",
            "2024-07-01",
            "--cost",
            "1000",
            "--life",
            "5",
            "--salvage",
            "2000",
        ],
    )

    assert result.exit_code == 1
    assert "salvage_value" in result.output


def test_adjustment_commands(cli_runner, seeded_db):
    path = seeded_db.database_path

    result = cli_runner.invoke(
        cli,
        ["--db-path", path, "adjustment", "add", "--type", "Unearned Income", "--amount", "400", "--date", "2024-09-30"],
    )
    assert result.exit_code == 0
    assert "Recorded Unearned Income 400.00" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "adjustment", "list"])
    assert "Unearned Income" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "adjustment", "delete", "1"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, ["--db-path", path, "adjustment", "delete", "1"])
    assert result.exit_code == 1
    assert "Adjustment 1 not found" in result.output


def test_report_commands(cli_runner, seeded_db, ledger_service, settlement_service, tuition_receivable):
    ledger_service.record_income(date(2024, 5, 1), "Student Fees", Decimal("1500"))
    settlement_service.record_capital_injection(date(2024, 4, 1), Decimal("50000"))
    settlement_service.record_receipt(tuition_receivable.obligation.id, date(2024, 6, 10), Decimal("4000"))
    path = seeded_db.database_path

    result = cli_runner.invoke(
        cli, ["--db-path", path, "report", "cash-pnl", "--start-date", "2024-04-01", "--end-date", "2025-03-31"]
    )
    assert result.exit_code == 0
    assert "55,500.00" in result.output

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            path,
            "report",
            "cash-pnl",
            "--start-date",
            "2024-04-01",
            "--end-date",
            "2025-03-31",
            "--operating-only",
            "--json",
        ],
    )
    assert json.loads(result.output)["revenue"]["cash"] == "5500.00"

    result = cli_runner.invoke(
        cli, ["--db-path", path, "report", "accrual-pnl", "--start-date", "2024-06-01", "--end-date", "2024-06-30"]
    )
    assert result.exit_code == 0
    assert "10,000.00" in result.output

    result = cli_runner.invoke(cli, ["--db-path", path, "report", "cash-balance-sheet", "--as-of", "2024-12-31"])
    assert result.exit_code == 0
    assert "balanced" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", path, "report", "accrual-balance-sheet", "--as-of", "2024-12-31", "--json"]
    )
    data = json.loads(result.output)
    assert data["accounts_receivable"] == "6000.00"
    assert data["check"]["difference"] == "0.00"

    result = cli_runner.invoke(cli, ["--db-path", path, "report", "shareholders", "--member", "Meera"])
    assert result.exit_code == 0
    assert "Share value (1 members)" in result.output


def test_report_requires_range(cli_runner, seeded_db):
    result = cli_runner.invoke(cli, ["--db-path", seeded_db.database_path, "report", "cash-pnl"])

    assert result.exit_code == 1
    assert "A date range is required" in result.output


def test_report_reversed_range(cli_runner, seeded_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", seeded_db.database_path, "report", "accrual-pnl", "--start-date", "2024-12-31", "--end-date", "2024-01-01"],
    )

    assert result.exit_code == 1
    assert "is after end_date" in result.output
