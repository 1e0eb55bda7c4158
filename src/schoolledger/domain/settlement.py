"""Settlement engine domain service.

A settlement is the only way an obligation's balance changes and the only
bridge from the accrual ledger back into the cash ledger. Each call updates
the obligation, inserts the settlement and inserts the mirrored cash entry
as one unit of work.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig
from schoolledger.database.base import Database
from schoolledger.domain.category import CategoryService
from schoolledger.domain.entities import (
    RECEIPT_DOCUMENT,
    CashEntryKind,
    CategoryKind,
    CategoryRef,
    Obligation as ObligationEntity,
    ObligationKind,
    Settlement as SettlementEntity,
    SettlementKind,
    SettlementRequest,
    derive_status,
)
from schoolledger.domain.errors import (
    BusinessRuleError,
    DomainError,
    InsufficientBalanceError,
    MissingDocumentNumberError,
    MissingDocumentTypeError,
    NotFoundError,
    ValidationError,
    obligation_not_found,
)
from schoolledger.domain.validation import (
    optional_text,
    require_amount,
    require_choice,
    require_date,
    require_text,
)

logger = logging.getLogger(__name__)

# Settlement kind -> obligation kind it clears
_OBLIGATION_KIND_FOR = {
    SettlementKind.RECEIPT: ObligationKind.RECEIVABLE,
    SettlementKind.PAYMENT: ObligationKind.PAYABLE,
}


class SettlementService:
    """Service for recording receipts, payments and capital injections."""

    def __init__(
        self,
        db: Database,
        config: LedgerConfig = DEFAULT_CONFIG,
        categories: Optional[CategoryService] = None,
    ):
        """Initialize settlement service.

        Args:
            db: Database instance
            config: Ledger configuration (fallback and default categories)
            categories: Category registry used to validate classifications
        """
        self.db = db
        self.config = config
        self.categories = categories or CategoryService(db, config)

    def record_settlement(self, request: SettlementRequest) -> SettlementEntity:
        """Record a settlement.

        Receipts clear receivables into cash income, payments clear payables
        into cash expense, and capital injections post cash income with no
        obligation. Every check runs before the first write.

        Args:
            request: Settlement input

        Returns:
            Created settlement entity

        Raises:
            ValidationError: If a field is missing or invalid
            MissingDocumentTypeError: If a payment has no document type
            MissingDocumentNumberError: If a payment backed by a receipt has
                no document number
            NotFoundError: If the linked obligation does not exist or is of
                the wrong kind
            InsufficientBalanceError: If the amount exceeds the balance
            ConcurrencyError: If another writer changed the obligation after
                it was read (nothing is saved)
            PersistenceError: If a write fails (nothing is saved)
        """
        try:
            kind = require_choice(SettlementKind, request.kind, "kind")
            if kind == SettlementKind.CAPITAL_INJECTION:
                return self._record_capital_injection(request)
            return self._record_obligation_settlement(kind, request)
        except DomainError as e:
            logger.warning("Rejected settlement: %s", e)
            raise

    def record_receipt(
        self,
        obligation_id: int,
        date: date,
        amount: Decimal,
        payment_mode: str = "Cash",
        document_type: Optional[str] = None,
        document_number: Optional[str] = None,
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> SettlementEntity:
        return self.record_settlement(
            SettlementRequest(
                date=date,
                kind=SettlementKind.RECEIPT,
                amount=amount,
                linked_obligation_id=obligation_id,
                payment_mode=payment_mode,
                document_type=document_type,
                document_number=document_number,
                description=description,
                recorded_by=recorded_by,
            )
        )

    def record_payment(
        self,
        obligation_id: int,
        date: date,
        amount: Decimal,
        document_type: Optional[str],
        document_number: Optional[str] = None,
        payment_mode: str = "Cash",
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> SettlementEntity:
        return self.record_settlement(
            SettlementRequest(
                date=date,
                kind=SettlementKind.PAYMENT,
                amount=amount,
                linked_obligation_id=obligation_id,
                payment_mode=payment_mode,
                document_type=document_type,
                document_number=document_number,
                description=description,
                recorded_by=recorded_by,
            )
        )

    def record_capital_injection(
        self,
        date: date,
        amount: Decimal,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        payment_mode: str = "Cash",
        description: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> SettlementEntity:
        return self.record_settlement(
            SettlementRequest(
                date=date,
                kind=SettlementKind.CAPITAL_INJECTION,
                amount=amount,
                payment_mode=payment_mode,
                category=category,
                subcategory=subcategory,
                description=description,
                recorded_by=recorded_by,
            )
        )

    def _record_obligation_settlement(
        self, kind: SettlementKind, request: SettlementRequest
    ) -> SettlementEntity:
        settle_date = require_date(request.date)
        amount = require_amount(request.amount)
        payment_mode = require_text(request.payment_mode, "payment_mode")
        if request.linked_obligation_id is None:
            raise ValidationError(
                f"linked_obligation_id is required for {kind.value}", field="linked_obligation_id"
            )

        document_type = optional_text(request.document_type)
        document_number = optional_text(request.document_number)
        if kind == SettlementKind.PAYMENT:
            if document_type is None:
                raise MissingDocumentTypeError()
            if document_type == RECEIPT_DOCUMENT and document_number is None:
                raise MissingDocumentNumberError(document_type)

        expected_kind = _OBLIGATION_KIND_FOR[kind]
        obligation_id = request.linked_obligation_id

        with self.db.unit_of_work():
            obligation = self.db.lock_obligation(obligation_id)
            if obligation is None or obligation.kind != expected_kind:
                raise NotFoundError(obligation_not_found(obligation_id, expected_kind.value))
            if amount > obligation.balance:
                raise InsufficientBalanceError(obligation.id, obligation.balance, amount)

            ref = self._mirror_classification(obligation)
            paid_amount = obligation.paid_amount + amount
            balance = obligation.original_amount - paid_amount
            updated = self.db.update_obligation_payment(
                obligation.id,
                expected_version=obligation.version,
                paid_amount=paid_amount,
                balance=balance,
                status=derive_status(obligation.original_amount, balance).value,
            )

            settlement_id = self.db.create_settlement(
                date=settle_date,
                kind=kind.value,
                amount=amount,
                payment_mode=payment_mode,
                linked_obligation_id=obligation.id,
                document_type=document_type,
                document_number=document_number,
                category=ref.category,
                subcategory=ref.subcategory,
                description=optional_text(request.description),
                recorded_by=request.recorded_by,
            )
            self.db.create_cash_entry(
                kind=(CashEntryKind.INCOME if kind == SettlementKind.RECEIPT else CashEntryKind.EXPENSE).value,
                date=settle_date,
                category=ref.category,
                subcategory=ref.subcategory,
                amount=amount,
                description=f"Settlement for {obligation.counterparty_name} (Ref: {obligation.id})",
                receipt_number=document_number,
                settlement_id=settlement_id,
                recorded_by=request.recorded_by,
            )
            settlement = self.db.get_settlement(settlement_id)

        logger.info(
            "Recorded %s %s of %s against %s %s (balance %s, %s)",
            kind.value,
            settlement_id,
            amount,
            expected_kind.value,
            obligation.id,
            updated.balance,
            updated.status.value,
        )
        return settlement

    def _record_capital_injection(self, request: SettlementRequest) -> SettlementEntity:
        settle_date = require_date(request.date)
        amount = require_amount(request.amount)
        payment_mode = require_text(request.payment_mode, "payment_mode")
        if request.linked_obligation_id is not None:
            raise BusinessRuleError("Capital injections cannot be linked to an obligation")

        category = optional_text(request.category)
        subcategory = optional_text(request.subcategory)
        if category is None:
            category = self.config.capital_injection_category
            subcategory = subcategory or self.config.capital_injection_subcategory
        ref = self.categories.classify(CategoryKind.INCOME, category, subcategory)
        description = optional_text(request.description)

        with self.db.unit_of_work():
            settlement_id = self.db.create_settlement(
                date=settle_date,
                kind=SettlementKind.CAPITAL_INJECTION.value,
                amount=amount,
                payment_mode=payment_mode,
                document_type=optional_text(request.document_type),
                document_number=optional_text(request.document_number),
                category=ref.category,
                subcategory=ref.subcategory,
                description=description,
                recorded_by=request.recorded_by,
            )
            self.db.create_cash_entry(
                kind=CashEntryKind.INCOME.value,
                date=settle_date,
                category=ref.category,
                subcategory=ref.subcategory,
                amount=amount,
                description=description or SettlementKind.CAPITAL_INJECTION.value,
                receipt_number=optional_text(request.document_number),
                settlement_id=settlement_id,
                recorded_by=request.recorded_by,
            )
            settlement = self.db.get_settlement(settlement_id)

        logger.info("Recorded capital injection %s of %s under %s", settlement_id, amount, ref.category)
        return settlement

    def _mirror_classification(self, obligation: ObligationEntity) -> CategoryRef:
        """Category pair the mirrored cash entry is filed under.

        Inherited from the obligation's source accrual entry, or the
        configured fallback pair when that entry no longer exists.
        """
        source = None
        if obligation.source_accrual_entry_id is not None:
            source = self.db.get_accrual_entry(obligation.source_accrual_entry_id)

        if obligation.kind == ObligationKind.RECEIVABLE:
            category_kind = CategoryKind.INCOME
            fallback = (
                self.config.receivable_fallback_category,
                self.config.receivable_fallback_subcategory,
            )
        else:
            category_kind = CategoryKind.EXPENSE
            fallback = (
                self.config.payable_fallback_category,
                self.config.payable_fallback_subcategory,
            )

        if source is None:
            logger.info("Source entry of %s %s is gone; using fallback category", obligation.kind.value, obligation.id)
            return CategoryRef(kind=category_kind, category=fallback[0], subcategory=fallback[1])
        return CategoryRef(kind=category_kind, category=source.category, subcategory=source.subcategory)

    def get_settlement(self, settlement_id: int) -> Optional[SettlementEntity]:
        return self.db.get_settlement(settlement_id)

    def list_settlements(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[SettlementKind | str] = None,
        recorded_by: Optional[str] = None,
    ) -> list[SettlementEntity]:
        """List settlements, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            kind: Optional Receipt/Payment/Capital Injection filter
            recorded_by: Optional recording user filter

        Returns:
            List of settlement entities
        """
        kind_value = None
        if kind is not None:
            kind_value = require_choice(SettlementKind, kind, "kind").value
        return self.db.list_settlements(
            start_date=start_date, end_date=end_date, kind=kind_value, recorded_by=recorded_by
        )
