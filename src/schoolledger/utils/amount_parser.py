"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount string into a Decimal.

    Handles various formats:
    - "1234.50"
    - "₹1,234.50"
    - "$1,234.50"
    - "1,00,000" (lakh grouping)

    Ledger amounts are always positive, so signs and parenthesised
    negatives are rejected rather than interpreted.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount greater than zero

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    if amount_str.startswith(("-", "(")):
        raise ValueError(f"Amount '{amount_str}' must be positive")

    # Remove currency symbols and grouping commas
    amount_str = re.sub(r"[₹$€£¥]|Rs\.?|INR", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount '{amount_str}' must be greater than zero")
    return amount
