"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from schoolledger.domain.entities import (
    Asset,
    BalanceCheck,
    CategoryAmount,
    FinancialSummary,
    Obligation,
    ObligationKind,
    ObligationStatus,
    SettlementKind,
    SettlementRequest,
    STRAIGHT_LINE,
    AccrualSection,
    AccrualProfitAndLoss,
    derive_status,
)


class TestDeriveStatus:
    """Status is a pure function of balance and original amount."""

    def test_unpaid_when_nothing_paid(self):
        assert derive_status(Decimal("10000"), Decimal("10000")) == ObligationStatus.UNPAID

    def test_partial_when_some_paid(self):
        assert derive_status(Decimal("10000"), Decimal("6000")) == ObligationStatus.PARTIAL
        assert derive_status(Decimal("10000"), Decimal("0.01")) == ObligationStatus.PARTIAL

    def test_paid_when_balance_zero(self):
        assert derive_status(Decimal("10000"), Decimal("0")) == ObligationStatus.PAID

    def test_scale_does_not_matter(self):
        assert derive_status(Decimal("10000.00"), Decimal("10000")) == ObligationStatus.UNPAID
        assert derive_status(Decimal("10000"), Decimal("0.00")) == ObligationStatus.PAID


class TestObligation:
    def test_obligation_immutability(self):
        obligation = Obligation(
            id=1,
            kind=ObligationKind.RECEIVABLE,
            source_accrual_entry_id=1,
            counterparty_name="Aarav",
            original_amount=Decimal("100"),
            paid_amount=Decimal("0"),
            balance=Decimal("100"),
            due_date=None,
            status=ObligationStatus.UNPAID,
            description=None,
            version=1,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            obligation.balance = Decimal("0")


class TestAsset:
    def _asset(self, cost="100000", salvage="10000", life=9):
        return Asset(
            id=1,
            name="School bus",
            purchase_date=date(2024, 1, 1),
            purchase_cost=Decimal(cost),
            salvage_value=Decimal(salvage),
            useful_life_years=life,
            method=STRAIGHT_LINE,
            description=None,
            recorded_by=None,
            created_at=datetime.now(UTC),
        )

    def test_annual_depreciation(self):
        assert self._asset().annual_depreciation == Decimal("10000")

    def test_annual_depreciation_without_salvage(self):
        assert self._asset(cost="50000", salvage="0", life=5).annual_depreciation == Decimal("10000")


class TestSettlementRequest:
    def test_defaults(self):
        request = SettlementRequest(date=date(2024, 1, 1), kind=SettlementKind.RECEIPT, amount=Decimal("1"))
        assert request.payment_mode == "Cash"
        assert request.linked_obligation_id is None
        assert request.document_type is None


class TestReportAsDict:
    def test_plain_values(self):
        summary = FinancialSummary(
            total_income=Decimal("150.00"), total_expense=Decimal("50.00"), net_balance=Decimal("100.00")
        )
        assert summary.as_dict() == {
            "total_income": "150.00",
            "total_expense": "50.00",
            "net_balance": "100.00",
        }

    def test_nested_values(self):
        report = AccrualProfitAndLoss(
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            revenue=AccrualSection(
                total=Decimal("10.00"), breakdown=(CategoryAmount("Student Fees", Decimal("10.00")),)
            ),
            expenses=AccrualSection(total=Decimal("0.00"), breakdown=()),
            net_profit=Decimal("10.00"),
        )
        data = report.as_dict()
        assert data["start_date"] == "2024-01-01"
        assert data["revenue"]["breakdown"] == [{"category": "Student Fees", "amount": "10.00"}]
        assert data["expenses"]["breakdown"] == []


def test_balance_check():
    assert BalanceCheck(Decimal("10"), Decimal("10"), Decimal("0")).balanced
    assert not BalanceCheck(Decimal("10"), Decimal("9"), Decimal("1")).balanced
