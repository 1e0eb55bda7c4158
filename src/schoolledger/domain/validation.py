"""Input validation shared by the domain services.

Every check here runs before any store is touched.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, TypeVar

from schoolledger.domain.errors import ValidationError, amount_not_positive, amount_too_precise

CENT = Decimal("0.01")
# Numeric(12, 2) columns hold at most ten whole digits
MAX_AMOUNT = Decimal("9999999999.99")

EnumT = TypeVar("EnumT", bound=Enum)


def require_amount(value: Any, field: str = "amount") -> Decimal:
    """Return value as a Decimal, rejecting missing or non-positive amounts.

    Amounts finer than whole cents are rejected since money is stored to two
    decimal places.
    """
    if value is None:
        raise ValidationError(f"{field} is required", field=field)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} '{value}' is not a number", field=field)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(amount_not_positive(field), field=field)
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT:,}", field=field)
    if amount != amount.quantize(CENT):
        raise ValidationError(amount_too_precise(field), field=field)
    return amount


def require_text(value: Optional[str], field: str) -> str:
    """Return stripped text, rejecting missing or blank values."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip text, mapping blank strings to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_choice(enum_cls: type[EnumT], value: Any, field: str) -> EnumT:
    """Coerce value to a member of enum_cls by member or value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field} must be one of: {choices} (got '{value}')", field=field)


def require_date(value: Optional[date], field: str = "date") -> date:
    if value is None:
        raise ValidationError(f"{field} is required", field=field)
    if not isinstance(value, date):
        raise ValidationError(f"{field} must be a date", field=field)
    return value


def require_date_range(start_date: Optional[date], end_date: Optional[date]) -> tuple[date, date]:
    """Validate a mandatory, ordered reporting range."""
    start = require_date(start_date, "start_date")
    end = require_date(end_date, "end_date")
    if start > end:
        raise ValidationError(
            f"start_date {start.isoformat()} is after end_date {end.isoformat()}", field="start_date"
        )
    return start, end


def require_month(value: Optional[str], field: str = "month") -> str:
    """Return a payroll month in YYYY-MM form."""
    text = require_text(value, field)
    try:
        parsed = datetime.strptime(text, "%Y-%m")
    except ValueError:
        raise ValidationError(f"{field} must be in YYYY-MM format (got '{text}')", field=field)
    return parsed.strftime("%Y-%m")
