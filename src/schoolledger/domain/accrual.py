"""Accrual ledger and obligation tracker domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig
from schoolledger.database.base import Database
from schoolledger.domain.category import CategoryService
from schoolledger.domain.entities import (
    OBLIGATION_KIND_FOR,
    AccrualEntry as AccrualEntryEntity,
    AccrualEntryKind,
    AccrualPosting,
    CategoryKind,
    Obligation as ObligationEntity,
    ObligationKind,
    ObligationStatus,
    derive_status,
)
from schoolledger.domain.errors import NotFoundError, obligation_not_found
from schoolledger.domain.validation import (
    optional_text,
    require_amount,
    require_choice,
    require_date,
    require_text,
)

logger = logging.getLogger(__name__)


class AccrualService:
    """Service for accrual entries and the receivables/payables they create."""

    def __init__(
        self,
        db: Database,
        config: LedgerConfig = DEFAULT_CONFIG,
        categories: Optional[CategoryService] = None,
    ):
        """Initialize accrual service.

        Args:
            db: Database instance
            config: Ledger configuration
            categories: Category registry used to validate classifications
        """
        self.db = db
        self.config = config
        self.categories = categories or CategoryService(db, config)

    def create_revenue(
        self,
        date: date,
        customer: str,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        due_date: Optional[date] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AccrualPosting:
        """Recognise revenue and open the matching receivable."""
        return self.create_entry(
            AccrualEntryKind.REVENUE,
            date=date,
            counterparty_name=customer,
            category=category,
            amount=amount,
            subcategory=subcategory,
            due_date=due_date,
            description=description,
            recorded_by=recorded_by,
        )

    def create_expense(
        self,
        date: date,
        vendor: str,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        due_date: Optional[date] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AccrualPosting:
        """Recognise an expense and open the matching payable."""
        return self.create_entry(
            AccrualEntryKind.EXPENSE,
            date=date,
            counterparty_name=vendor,
            category=category,
            amount=amount,
            subcategory=subcategory,
            due_date=due_date,
            description=description,
            recorded_by=recorded_by,
        )

    def create_entry(
        self,
        kind: AccrualEntryKind | str,
        date: date,
        counterparty_name: str,
        category: str,
        amount: Decimal,
        subcategory: Optional[str] = None,
        due_date: Optional[date] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> AccrualPosting:
        """Create an accrual entry together with its obligation.

        The entry is inserted, then the obligation (full amount outstanding),
        then the entry is linked to the obligation. The three writes form one
        unit of work; if any fails none persist.

        Args:
            kind: revenue (opens a receivable) or expense (opens a payable)
            date: Recognition date
            counterparty_name: Customer or vendor name
            category: Category name
            amount: Amount, must be positive
            subcategory: Optional subcategory name
            due_date: Optional due date of the obligation
            description: Optional description
            recorded_by: Identity of the recording user

        Returns:
            AccrualPosting with the linked entry and the new obligation

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If the category is not registered (strict mode)
            PersistenceError: If a write fails (nothing is saved)
        """
        kind = require_choice(AccrualEntryKind, kind, "kind")
        entry_date = require_date(date)
        counterparty_name = require_text(counterparty_name, "counterparty_name")
        amount = require_amount(amount)
        category_kind = CategoryKind.INCOME if kind == AccrualEntryKind.REVENUE else CategoryKind.EXPENSE
        ref = self.categories.classify(category_kind, category, subcategory)
        obligation_kind = OBLIGATION_KIND_FOR[kind]
        noun = "Receivable" if obligation_kind == ObligationKind.RECEIVABLE else "Payable"

        with self.db.unit_of_work():
            entry_id = self.db.create_accrual_entry(
                kind=kind.value,
                date=entry_date,
                counterparty_name=counterparty_name,
                category=ref.category,
                subcategory=ref.subcategory,
                amount=amount,
                due_date=due_date,
                description=optional_text(description),
                recorded_by=recorded_by,
            )
            obligation_id = self.db.create_obligation(
                kind=obligation_kind.value,
                source_accrual_entry_id=entry_id,
                counterparty_name=counterparty_name,
                amount=amount,
                status=derive_status(amount, amount).value,
                due_date=due_date,
                description=f"{noun} for {ref.category}",
            )
            self.db.link_accrual_obligation(entry_id, obligation_id)
            entry = self.db.get_accrual_entry(entry_id)
            obligation = self.db.get_obligation(obligation_id)

        logger.info(
            "Recorded accrual %s %s of %s for '%s' with %s %s",
            kind.value,
            entry_id,
            amount,
            counterparty_name,
            obligation_kind.value,
            obligation_id,
        )
        return AccrualPosting(entry=entry, obligation=obligation)

    def get_entry(self, entry_id: int) -> Optional[AccrualEntryEntity]:
        return self.db.get_accrual_entry(entry_id)

    def list_entries(
        self,
        kind: Optional[AccrualEntryKind | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        counterparty: Optional[str] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        search: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[AccrualEntryEntity]:
        """List accrual entries, newest first.

        Args:
            kind: Optional revenue/expense filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            counterparty: Case-insensitive counterparty substring
            category: Exact category filter
            subcategory: Exact subcategory filter
            search: Case-insensitive substring over counterparty, description
                and category; when given, counterparty is ignored
            recorded_by: Optional recording user filter

        Returns:
            List of accrual entry entities
        """
        kind_value = None
        if kind is not None:
            kind_value = require_choice(AccrualEntryKind, kind, "kind").value
        return self.db.list_accrual_entries(
            kind=kind_value,
            start_date=start_date,
            end_date=end_date,
            counterparty=optional_text(counterparty),
            category=category,
            subcategory=subcategory,
            search=optional_text(search),
            recorded_by=recorded_by,
        )

    def get_obligation(self, obligation_id: int) -> Optional[ObligationEntity]:
        return self.db.get_obligation(obligation_id)

    def require_obligation(self, obligation_id: int) -> ObligationEntity:
        obligation = self.db.get_obligation(obligation_id)
        if obligation is None:
            raise NotFoundError(obligation_not_found(obligation_id))
        return obligation

    def list_obligations(
        self,
        kind: Optional[ObligationKind | str] = None,
        status: Optional[ObligationStatus | str] = None,
        counterparty: Optional[str] = None,
    ) -> list[ObligationEntity]:
        """List obligations by due date ascending, undated last.

        Args:
            kind: Optional receivable/payable filter
            status: Optional Unpaid/Partial/Paid filter
            counterparty: Case-insensitive counterparty substring

        Returns:
            List of obligation entities
        """
        kind_value = None
        if kind is not None:
            kind_value = require_choice(ObligationKind, kind, "kind").value
        status_value = None
        if status is not None:
            status_value = require_choice(ObligationStatus, status, "status").value
        return self.db.list_obligations(
            kind=kind_value, status=status_value, counterparty=optional_text(counterparty)
        )

    def list_receivables(
        self, status: Optional[ObligationStatus | str] = None, customer: Optional[str] = None
    ) -> list[ObligationEntity]:
        return self.list_obligations(ObligationKind.RECEIVABLE, status=status, counterparty=customer)

    def list_payables(
        self, status: Optional[ObligationStatus | str] = None, vendor: Optional[str] = None
    ) -> list[ObligationEntity]:
        return self.list_obligations(ObligationKind.PAYABLE, status=status, counterparty=vendor)
