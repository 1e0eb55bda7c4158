"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class BusinessRuleError(DomainError):
    """Input is well formed but violates a ledger rule."""


class InsufficientBalanceError(BusinessRuleError):
    """Settlement amount exceeds the obligation's outstanding balance."""

    def __init__(self, obligation_id: int, balance: Decimal, requested: Decimal):
        super().__init__(
            f"Amount {requested} exceeds outstanding balance of {balance} "
            f"on obligation {obligation_id}"
        )
        self.obligation_id = obligation_id
        self.balance = balance
        self.requested = requested


class MissingDocumentTypeError(BusinessRuleError):
    """Payment recorded without a supporting document type."""

    def __init__(self):
        super().__init__("Document type is required for payments")


class MissingDocumentNumberError(BusinessRuleError):
    """Payment backed by a receipt but with no receipt number."""

    def __init__(self, document_type: str):
        super().__init__(f"Document number is required when document type is '{document_type}'")
        self.document_type = document_type


class DuplicateSubcategoryError(BusinessRuleError):
    """Subcategory already present on the category."""

    def __init__(self, category_name: str, subcategory: str):
        super().__init__(f"Subcategory '{subcategory}' already exists in category '{category_name}'")
        self.category_name = category_name
        self.subcategory = subcategory


class PersistenceError(Exception):
    """Infrastructure failure while reading or writing the ledger.

    The unit of work that raised it has been rolled back in full.
    """


class ConcurrencyError(PersistenceError):
    """Another writer changed the same record first; resubmit the request."""


def obligation_not_found(obligation_id: int, kind: Optional[str] = None) -> str:
    """Return message for missing obligation."""
    if kind is None:
        return f"Obligation {obligation_id} not found"
    return f"{kind.capitalize()} {obligation_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(kind: str, name: str) -> str:
    """Return message for missing or inactive category by name."""
    return f"No active {kind} category named '{name}'"


def subcategory_not_found(category: str, subcategory: str) -> str:
    return f"Subcategory '{subcategory}' is not defined for category '{category}'"


def entry_not_found(entry_id: int) -> str:
    return f"Cash entry {entry_id} not found"


def adjustment_not_found(adjustment_id: int) -> str:
    return f"Adjustment {adjustment_id} not found"


def amount_not_positive(field: str = "amount") -> str:
    """Return message for a non-positive money field."""
    return f"{field} must be greater than zero"


def amount_too_precise(field: str = "amount") -> str:
    """Return message for a money field finer than whole cents."""
    return f"{field} cannot have more than two decimal places"
