"""Tests for Database interface returning domain models and unit-of-work behaviour."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from schoolledger.domain import entities
from schoolledger.domain.errors import ConcurrencyError, NotFoundError, PersistenceError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_cash_entry_returns_domain_model(self, temp_db):
        entry_id = temp_db.create_cash_entry(
            kind="income", date=date(2024, 5, 1), category="Student Fees", amount=Decimal("1500")
        )

        entry = temp_db.get_cash_entry(entry_id)

        assert isinstance(entry, entities.CashEntry)
        assert entry.id == entry_id
        assert entry.amount == Decimal("1500")
        assert isinstance(entry.created_at, datetime)

    def test_money_keeps_cents(self, temp_db):
        entry_id = temp_db.create_cash_entry(
            kind="expense", date=date(2024, 5, 1), category="Utilities", amount=Decimal("0.10")
        )
        temp_db.create_cash_entry(kind="expense", date=date(2024, 5, 1), category="Utilities", amount=Decimal("0.20"))

        amounts = [e.amount for e in temp_db.list_cash_entries()]
        assert sum(amounts, Decimal("0")) == Decimal("0.30")
        assert isinstance(temp_db.get_cash_entry(entry_id).amount, Decimal)

    def test_missing_rows_return_none(self, temp_db):
        assert temp_db.get_cash_entry(1) is None
        assert temp_db.get_accrual_entry(1) is None
        assert temp_db.get_obligation(1) is None
        assert temp_db.get_settlement(1) is None
        assert temp_db.get_category(1) is None
        assert temp_db.get_asset(1) is None
        assert temp_db.get_adjustment(1) is None
        assert temp_db.lock_obligation(1) is None

    def test_delete_missing_rows(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_cash_entry(1)
        with pytest.raises(NotFoundError):
            temp_db.delete_adjustment(1)

    def test_create_category_with_subcategories(self, temp_db):
        category_id = temp_db.create_category(
            kind="expense", name="Transport", subcategories=("Fuel", "Tyres")
        )
        temp_db.add_subcategory(category_id, "Insurance")

        category = temp_db.get_category(category_id)
        assert isinstance(category, entities.Category)
        assert category.subcategories == ("Fuel", "Tyres", "Insurance")

    def test_list_categories_filters(self, temp_db):
        first = temp_db.create_category(kind="income", name="Zeta", category_type="capital")
        temp_db.create_category(kind="income", name="Alpha", category_type="income")
        temp_db.create_category(kind="expense", name="Utilities")
        temp_db.set_category_active(first, False)

        assert [c.name for c in temp_db.list_categories(kind="income")] == ["Alpha", "Zeta"]
        assert [c.name for c in temp_db.list_categories(kind="income", active_only=True)] == ["Alpha"]
        assert [c.name for c in temp_db.list_categories(category_type="capital")] == ["Zeta"]

    def test_obligation_version_increments(self, temp_db):
        entry_id = temp_db.create_accrual_entry(
            kind="revenue", date=date(2024, 6, 1), counterparty_name="Aarav", category="Student Fees", amount=Decimal("100")
        )
        obligation_id = temp_db.create_obligation(
            kind="receivable", source_accrual_entry_id=entry_id, counterparty_name="Aarav", amount=Decimal("100"), status="Unpaid"
        )
        assert temp_db.get_obligation(obligation_id).version == 1

        updated = temp_db.update_obligation_payment(
            obligation_id, expected_version=1, paid_amount=Decimal("40"), balance=Decimal("60"), status="Partial"
        )
        assert updated.version == 2
        assert updated.balance == Decimal("60")

        with pytest.raises(ConcurrencyError):
            temp_db.update_obligation_payment(
                obligation_id, expected_version=1, paid_amount=Decimal("80"), balance=Decimal("20"), status="Partial"
            )
        obligation = temp_db.get_obligation(obligation_id)
        assert (obligation.balance, obligation.version) == (Decimal("60"), 2)

        with pytest.raises(NotFoundError):
            temp_db.update_obligation_payment(
                999, expected_version=1, paid_amount=Decimal("1"), balance=Decimal("0"), status="Paid"
            )

    def test_list_used_classifications(self, temp_db):
        temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", subcategory="Tuition", amount=Decimal("1"))
        temp_db.create_cash_entry(kind="income", date=date(2024, 5, 2), category="Fees", subcategory="Tuition", amount=Decimal("1"))
        temp_db.create_cash_entry(kind="expense", date=date(2024, 5, 2), category="Power", amount=Decimal("1"))
        temp_db.create_accrual_entry(
            kind="revenue", date=date(2024, 5, 1), counterparty_name="A", category="Donations", amount=Decimal("1")
        )

        assert temp_db.list_used_classifications("income") == [("Donations", None), ("Fees", "Tuition")]
        assert temp_db.list_used_classifications("expense") == [("Power", None)]

    def test_salary_paid_once_per_staff_and_month(self, temp_db):
        entry_id = temp_db.create_cash_entry(
            kind="expense", date=date(2024, 6, 30), category="Operational Expenses", amount=Decimal("100")
        )
        fields = dict(
            staff_name="Anita Rao",
            month="2024-06",
            amount=Decimal("100"),
            payment_date=date(2024, 6, 30),
            payment_mode="Cash",
            cash_entry_id=entry_id,
        )
        temp_db.create_salary_payment(**fields)

        with pytest.raises(PersistenceError):
            temp_db.create_salary_payment(**fields)
        assert len(temp_db.list_salary_payments(month="2024-06")) == 1
        assert temp_db.list_salary_payments(cash_entry_id=entry_id)[0].staff_name == "Anita Rao"


class TestUnitOfWork:
    def test_commits_on_success(self, temp_db):
        with temp_db.unit_of_work():
            temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", amount=Decimal("1"))
            temp_db.create_cash_entry(kind="income", date=date(2024, 5, 2), category="Fees", amount=Decimal("2"))

        temp_db.disconnect()
        assert len(temp_db.list_cash_entries()) == 2

    def test_rolls_back_on_error(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.unit_of_work():
                temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", amount=Decimal("1"))
                raise RuntimeError("stop")

        assert temp_db.list_cash_entries() == []

    def test_nested_units_join_outer(self, temp_db):
        with pytest.raises(NotFoundError):
            with temp_db.unit_of_work():
                with temp_db.unit_of_work():
                    temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", amount=Decimal("1"))
                # Inner unit exit must not commit
                temp_db.delete_adjustment(99)

        assert temp_db.list_cash_entries() == []

    def test_constraint_violation_is_persistence_error(self, temp_db):
        with pytest.raises(PersistenceError):
            temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", amount=Decimal("-1"))

        # Session is usable again after the rollback
        temp_db.create_cash_entry(kind="income", date=date(2024, 5, 1), category="Fees", amount=Decimal("1"))
        assert len(temp_db.list_cash_entries()) == 1

    def test_obligation_balance_cannot_go_negative(self, temp_db):
        entry_id = temp_db.create_accrual_entry(
            kind="expense", date=date(2024, 6, 1), counterparty_name="V", category="Utilities", amount=Decimal("10")
        )
        obligation_id = temp_db.create_obligation(
            kind="payable", source_accrual_entry_id=entry_id, counterparty_name="V", amount=Decimal("10"), status="Unpaid"
        )

        with pytest.raises(PersistenceError):
            temp_db.update_obligation_payment(
                obligation_id, expected_version=1, paid_amount=Decimal("11"), balance=Decimal("-1"), status="Paid"
            )
        assert temp_db.get_obligation(obligation_id).balance == Decimal("10")
