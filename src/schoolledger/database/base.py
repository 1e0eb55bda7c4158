"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from schoolledger.domain.entities import (
    CashEntry,
    AccrualEntry,
    Obligation,
    Settlement,
    Category,
    Asset,
    Adjustment,
    SalaryPayment,
)


class Database(ABC):
    """Abstract database interface for schoolledger.

    Mutating methods join the current unit of work when one is open and
    otherwise run in their own. A unit of work commits on normal exit and
    rolls back every write made inside it when an exception escapes.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[Any]:
        """Open an atomic unit; nested calls join the outer unit."""
        pass

    # Cash ledger operations
    @abstractmethod
    def create_cash_entry(
        self,
        kind: str,
        date: date,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        description: Optional[str] = None,
        receipt_number: Optional[str] = None,
        settlement_id: Optional[int] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create a cash income or expense entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_cash_entry(self, entry_id: int) -> Optional[CashEntry]:
        """Get cash entry by ID."""
        pass

    @abstractmethod
    def list_cash_entries(
        self,
        kind: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[CashEntry]:
        """List cash entries, newest first."""
        pass

    @abstractmethod
    def delete_cash_entry(self, entry_id: int) -> None:
        """Delete a cash entry."""
        pass

    # Accrual ledger operations
    @abstractmethod
    def create_accrual_entry(
        self,
        kind: str,
        date: date,
        counterparty_name: str,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        due_date: Optional[date] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create an accrual revenue or expense entry. Returns entry ID."""
        pass

    @abstractmethod
    def link_accrual_obligation(self, entry_id: int, obligation_id: int) -> None:
        """Back-link an accrual entry to the obligation it spawned."""
        pass

    @abstractmethod
    def get_accrual_entry(self, entry_id: int) -> Optional[AccrualEntry]:
        """Get accrual entry by ID."""
        pass

    @abstractmethod
    def list_accrual_entries(
        self,
        kind: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        counterparty: Optional[str] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        search: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[AccrualEntry]:
        """List accrual entries with optional filters, newest first.

        Args:
            counterparty: Case-insensitive substring of the counterparty name
            search: Case-insensitive substring matched against counterparty,
                description and category; takes precedence over counterparty
        """
        pass

    # Obligation operations
    @abstractmethod
    def create_obligation(
        self,
        kind: str,
        source_accrual_entry_id: int,
        counterparty_name: str,
        amount: Decimal,
        status: str,
        due_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create an obligation with nothing paid. Returns obligation ID."""
        pass

    @abstractmethod
    def get_obligation(self, obligation_id: int) -> Optional[Obligation]:
        """Get obligation by ID."""
        pass

    @abstractmethod
    def lock_obligation(self, obligation_id: int) -> Optional[Obligation]:
        """Reload an obligation under a row lock inside the current unit of work."""
        pass

    @abstractmethod
    def update_obligation_payment(
        self,
        obligation_id: int,
        expected_version: int,
        paid_amount: Decimal,
        balance: Decimal,
        status: str,
    ) -> Obligation:
        """Persist new paid amount, balance and status for an obligation.

        The write only applies if the row is still at expected_version;
        otherwise ConcurrencyError is raised and nothing is changed.
        """
        pass

    @abstractmethod
    def list_obligations(
        self,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        counterparty: Optional[str] = None,
    ) -> list[Obligation]:
        """List obligations ordered by due date (nulls last)."""
        pass

    # Settlement operations
    @abstractmethod
    def create_settlement(
        self,
        date: date,
        kind: str,
        amount: Decimal,
        payment_mode: str,
        linked_obligation_id: Optional[int] = None,
        document_type: Optional[str] = None,
        document_number: Optional[str] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create a settlement record. Returns settlement ID."""
        pass

    @abstractmethod
    def get_settlement(self, settlement_id: int) -> Optional[Settlement]:
        """Get settlement by ID."""
        pass

    @abstractmethod
    def list_settlements(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[Settlement]:
        """List settlements, newest first."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        kind: str,
        name: str,
        subcategories: tuple[str, ...] = (),
        category_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, kind: str, name: str) -> Optional[Category]:
        """Get category by kind and exact name."""
        pass

    @abstractmethod
    def list_categories(
        self,
        kind: Optional[str] = None,
        active_only: bool = False,
        category_type: Optional[str] = None,
    ) -> list[Category]:
        """List categories ordered by name."""
        pass

    @abstractmethod
    def add_subcategory(self, category_id: int, name: str) -> None:
        """Append a subcategory to a category."""
        pass

    @abstractmethod
    def set_category_active(self, category_id: int, is_active: bool) -> None:
        """Mark a category active or retired."""
        pass

    @abstractmethod
    def list_used_classifications(self, kind: str) -> list[tuple[str, Optional[str]]]:
        """Distinct (category, subcategory) labels used by ledger rows of a category kind."""
        pass

    # Asset register operations
    @abstractmethod
    def create_asset(
        self,
        name: str,
        purchase_date: date,
        purchase_cost: Decimal,
        salvage_value: Decimal,
        useful_life_years: int,
        method: str,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create an asset. Returns asset ID."""
        pass

    @abstractmethod
    def get_asset(self, asset_id: int) -> Optional[Asset]:
        """Get asset by ID."""
        pass

    @abstractmethod
    def list_assets(self, purchased_on_or_before: Optional[date] = None) -> list[Asset]:
        """List assets, most recent purchase first."""
        pass

    # Adjustment operations
    @abstractmethod
    def create_adjustment(
        self,
        type: str,
        date: date,
        amount: Decimal,
        description: Optional[str] = None,
        related_category: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create an adjustment. Returns adjustment ID."""
        pass

    @abstractmethod
    def get_adjustment(self, adjustment_id: int) -> Optional[Adjustment]:
        """Get adjustment by ID."""
        pass

    @abstractmethod
    def list_adjustments(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        types: Optional[tuple[str, ...]] = None,
    ) -> list[Adjustment]:
        """List adjustments, newest first."""
        pass

    @abstractmethod
    def delete_adjustment(self, adjustment_id: int) -> None:
        """Delete an adjustment."""
        pass

    # Payroll operations
    @abstractmethod
    def create_salary_payment(
        self,
        staff_name: str,
        month: str,
        amount: Decimal,
        payment_date: date,
        payment_mode: str,
        cash_entry_id: int,
        remarks: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> int:
        """Create a salary payment record. Returns salary payment ID."""
        pass

    @abstractmethod
    def list_salary_payments(
        self,
        staff_name: Optional[str] = None,
        month: Optional[str] = None,
        cash_entry_id: Optional[int] = None,
    ) -> list[SalaryPayment]:
        """List salary payments, latest month first."""
        pass
