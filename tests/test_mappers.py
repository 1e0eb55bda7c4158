"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from schoolledger.database.models import (
    CashEntry as ORMCashEntry,
    Obligation as ORMObligation,
    Settlement as ORMSettlement,
    Category as ORMCategory,
    Subcategory as ORMSubcategory,
    Adjustment as ORMAdjustment,
    SalaryPayment as ORMSalaryPayment,
)
from schoolledger.database.mappers import (
    cash_entry_to_domain,
    obligation_to_domain,
    settlement_to_domain,
    category_to_domain,
    adjustment_to_domain,
    salary_payment_to_domain,
)
from schoolledger.domain.entities import (
    AdjustmentType,
    CashEntry,
    CashEntryKind,
    Category,
    CategoryKind,
    IncomeCategoryType,
    Obligation,
    ObligationKind,
    ObligationStatus,
    SettlementKind,
)


class TestCashEntryMapper:
    """Tests for CashEntry mapper."""

    def test_cash_entry_to_domain(self):
        """Test converting ORM CashEntry to domain CashEntry."""
        orm_entry = ORMCashEntry(
            id=3,
            kind="income",
            date=date(2024, 5, 1),
            category="Student Fees",
            subcategory="Tuition Fees",
            amount=Decimal("1500.00"),
            description=None,
            receipt_number="R-1",
            settlement_id=None,
            recorded_by="clerk",
            created_at=datetime.now(UTC),
        )
        entry = cash_entry_to_domain(orm_entry)

        assert isinstance(entry, CashEntry)
        assert entry.kind == CashEntryKind.INCOME
        assert entry.amount == Decimal("1500.00")
        assert entry.receipt_number == "R-1"
        assert entry.created_at == orm_entry.created_at


class TestObligationMapper:
    def test_obligation_to_domain(self):
        orm_obligation = ORMObligation(
            id=1,
            kind="payable",
            source_accrual_entry_id=None,
            counterparty_name="City Power",
            original_amount=Decimal("2500.00"),
            paid_amount=Decimal("500.00"),
            balance=Decimal("2000.00"),
            due_date=date(2024, 6, 20),
            status="Partial",
            description="Payable for Utilities",
            version=2,
            created_at=datetime.now(UTC),
        )
        obligation = obligation_to_domain(orm_obligation)

        assert isinstance(obligation, Obligation)
        assert obligation.kind == ObligationKind.PAYABLE
        assert obligation.status == ObligationStatus.PARTIAL
        assert obligation.source_accrual_entry_id is None
        assert obligation.version == 2


class TestSettlementMapper:
    def test_settlement_to_domain(self):
        orm_settlement = ORMSettlement(
            id=9,
            date=date(2024, 4, 1),
            kind="Capital Injection",
            amount=Decimal("50000.00"),
            linked_obligation_id=None,
            payment_mode="Bank Transfer",
            category="Equity",
            subcategory="Capital Injection",
            created_at=datetime.now(UTC),
        )
        settlement = settlement_to_domain(orm_settlement)

        assert settlement.kind == SettlementKind.CAPITAL_INJECTION
        assert settlement.payment_mode == "Bank Transfer"
        assert settlement.document_type is None


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_with_subcategories(self):
        orm_category = ORMCategory(
            id=1,
            kind="income",
            name="Student Fees",
            category_type="income",
            is_active=True,
            created_at=datetime.now(UTC),
            subcategories=[
                ORMSubcategory(name="Tuition Fees", position=0),
                ORMSubcategory(name="Transport Fees", position=1),
            ],
        )
        category = category_to_domain(orm_category)

        assert isinstance(category, Category)
        assert category.kind == CategoryKind.INCOME
        assert category.category_type == IncomeCategoryType.INCOME
        assert category.subcategories == ("Tuition Fees", "Transport Fees")

    def test_expense_category_has_no_type(self):
        orm_category = ORMCategory(
            id=2, kind="expense", name="Utilities", category_type=None, is_active=False, created_at=datetime.now(UTC)
        )
        category = category_to_domain(orm_category)

        assert category.category_type is None
        assert category.subcategories == ()
        assert not category.is_active


def test_adjustment_to_domain():
    orm_adjustment = ORMAdjustment(
        id=4,
        type="Outstanding Expense",
        date=date(2024, 9, 30),
        amount=Decimal("700.00"),
        related_category="Utilities",
        created_at=datetime.now(UTC),
    )
    adjustment = adjustment_to_domain(orm_adjustment)

    assert adjustment.type == AdjustmentType.OUTSTANDING_EXPENSE
    assert adjustment.related_category == "Utilities"


def test_salary_payment_to_domain():
    orm_payment = ORMSalaryPayment(
        id=2,
        staff_name="Anita Rao",
        month="2024-06",
        amount=Decimal("32000.00"),
        payment_date=date(2024, 6, 30),
        payment_mode="Bank Transfer",
        remarks=None,
        cash_entry_id=11,
        recorded_by="bursar",
        created_at=datetime.now(UTC),
    )
    payment = salary_payment_to_domain(orm_payment)

    assert payment.month == "2024-06"
    assert payment.amount == Decimal("32000.00")
    assert payment.cash_entry_id == 11
