"""Cash ledger domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig
from schoolledger.database.base import Database
from schoolledger.domain.category import CategoryService
from schoolledger.domain.entities import (
    CashEntry as CashEntryEntity,
    CashEntryKind,
    CategoryKind,
    FinancialSummary,
    SalaryPayment as SalaryPaymentEntity,
)
from schoolledger.domain.errors import ConflictError, NotFoundError, entry_not_found
from schoolledger.domain.validation import (
    optional_text,
    require_amount,
    require_choice,
    require_date,
    require_month,
    require_text,
)

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for raw cash income and expense entries."""

    def __init__(
        self,
        db: Database,
        config: LedgerConfig = DEFAULT_CONFIG,
        categories: Optional[CategoryService] = None,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            config: Ledger configuration
            categories: Category registry used to validate classifications
        """
        self.db = db
        self.config = config
        self.categories = categories or CategoryService(db, config)

    def record_income(
        self,
        date: date,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        description: Optional[str] = None,
        receipt_number: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> CashEntryEntity:
        """Record cash received outside of any obligation.

        Raises:
            ValidationError: If a field is missing or the amount is not positive
            NotFoundError: If the category is not registered (strict mode)
        """
        return self._record(
            CashEntryKind.INCOME,
            date=date,
            category=category,
            amount=amount,
            subcategory=subcategory,
            description=description,
            receipt_number=receipt_number,
            recorded_by=recorded_by,
        )

    def record_expense(
        self,
        date: date,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> CashEntryEntity:
        """Record cash paid outside of any obligation."""
        return self._record(
            CashEntryKind.EXPENSE,
            date=date,
            category=category,
            amount=amount,
            subcategory=subcategory,
            description=description,
            recorded_by=recorded_by,
        )

    def _record(
        self,
        kind: CashEntryKind,
        date: date,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        description: Optional[str] = None,
        receipt_number: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> CashEntryEntity:
        entry_date = require_date(date)
        amount = require_amount(amount)
        category_kind = CategoryKind.INCOME if kind == CashEntryKind.INCOME else CategoryKind.EXPENSE
        ref = self.categories.classify(category_kind, category, subcategory)

        entry_id = self.db.create_cash_entry(
            kind=kind.value,
            date=entry_date,
            category=ref.category,
            subcategory=ref.subcategory,
            amount=amount,
            description=optional_text(description),
            receipt_number=optional_text(receipt_number),
            recorded_by=recorded_by,
        )
        logger.info("Recorded cash %s %s of %s under %s", kind.value, entry_id, amount, ref.category)
        return self.db.get_cash_entry(entry_id)

    def get_entry(self, entry_id: int) -> Optional[CashEntryEntity]:
        return self.db.get_cash_entry(entry_id)

    def list_entries(
        self,
        kind: Optional[CashEntryKind | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[CashEntryEntity]:
        """List cash entries with filters, newest first."""
        kind_value = None
        if kind is not None:
            kind_value = require_choice(CashEntryKind, kind, "kind").value
        return self.db.list_cash_entries(
            kind=kind_value,
            start_date=start_date,
            end_date=end_date,
            category=category,
            recorded_by=recorded_by,
        )

    def delete_entry(self, entry_id: int) -> None:
        """Delete a manually recorded cash entry.

        Raises:
            NotFoundError: If the entry does not exist
            ConflictError: If the entry mirrors a settlement or salary payment
        """
        entry = self.db.get_cash_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        if entry.settlement_id is not None:
            raise ConflictError(
                f"Cash entry {entry_id} mirrors settlement {entry.settlement_id} and cannot be deleted"
            )
        if self.db.list_salary_payments(cash_entry_id=entry_id):
            raise ConflictError(f"Cash entry {entry_id} records a salary payment and cannot be deleted")
        self.db.delete_cash_entry(entry_id)
        logger.info("Deleted cash %s entry %s", entry.kind.value, entry_id)

    def get_financial_summary(self) -> FinancialSummary:
        """Lifetime totals of the cash ledger."""
        total_income = sum(
            (e.amount for e in self.db.list_cash_entries(kind=CashEntryKind.INCOME.value)), Decimal("0")
        )
        total_expense = sum(
            (e.amount for e in self.db.list_cash_entries(kind=CashEntryKind.EXPENSE.value)), Decimal("0")
        )
        return FinancialSummary(
            total_income=total_income,
            total_expense=total_expense,
            net_balance=total_income - total_expense,
        )

    def record_salary_payment(
        self,
        staff_name: str,
        month: str,
        amount: Decimal,
        date: date,
        payment_mode: str = "Cash",
        remarks: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> SalaryPaymentEntity:
        """Pay a staff member's salary for a month.

        Writes a cash expense under the configured payroll category together
        with the salary record, as one unit of work. A staff member can be
        paid at most once per month.

        Args:
            staff_name: Staff member being paid
            month: Payroll month, YYYY-MM
            amount: Salary amount
            date: Date the salary was paid
            payment_mode: How it was paid
            remarks: Optional note kept on the salary record
            recorded_by: User recording the payment

        Returns:
            Created salary payment

        Raises:
            ValidationError: If a field is missing or invalid
            ConflictError: If the salary for that staff member and month is
                already paid
            NotFoundError: If the payroll category is not registered (strict mode)
        """
        staff_name = require_text(staff_name, "staff_name")
        month = require_month(month)
        amount = require_amount(amount)
        payment_date = require_date(date)
        payment_mode = require_text(payment_mode, "payment_mode")

        if self.db.list_salary_payments(staff_name=staff_name, month=month):
            logger.warning("Rejected duplicate salary payment for %s (%s)", staff_name, month)
            raise ConflictError(f"Salary for {staff_name} for {month} is already paid")

        ref = self.categories.classify(
            CategoryKind.EXPENSE, self.config.payroll_category, self.config.payroll_subcategory
        )

        with self.db.unit_of_work():
            entry_id = self.db.create_cash_entry(
                kind=CashEntryKind.EXPENSE.value,
                date=payment_date,
                category=ref.category,
                subcategory=ref.subcategory,
                amount=amount,
                description=f"Monthly salary for {staff_name} ({month})",
                recorded_by=recorded_by,
            )
            payment_id = self.db.create_salary_payment(
                staff_name=staff_name,
                month=month,
                amount=amount,
                payment_date=payment_date,
                payment_mode=payment_mode,
                cash_entry_id=entry_id,
                remarks=optional_text(remarks),
                recorded_by=recorded_by,
            )

        logger.info("Paid salary %s of %s to %s for %s", payment_id, amount, staff_name, month)
        (payment,) = self.db.list_salary_payments(staff_name=staff_name, month=month)
        return payment

    def list_salary_payments(
        self, staff_name: Optional[str] = None, month: Optional[str] = None
    ) -> list[SalaryPaymentEntity]:
        """List salary payments, latest month first."""
        if month is not None:
            month = require_month(month)
        return self.db.list_salary_payments(staff_name=optional_text(staff_name), month=month)
