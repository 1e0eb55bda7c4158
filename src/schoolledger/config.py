"""Ledger configuration.

Category names the engine depends on live here instead of being embedded in
the services, so a school with a different chart of categories can override
them from a TOML file.
"""

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from schoolledger.domain.errors import ValidationError


@dataclass(frozen=True)
class LedgerConfig:
    """Engine configuration passed to services."""

    # Reject entries whose category/subcategory is not registered and active
    strict_categories: bool = True

    # Settlement mirrors when the source accrual entry has been purged
    receivable_fallback_category: str = "Accounts Receivable"
    receivable_fallback_subcategory: str = "Settlement"
    payable_fallback_category: str = "Accounts Payable"
    payable_fallback_subcategory: str = "Settlement"

    # Capital injections without caller-supplied classification
    capital_injection_category: str = "Equity"
    capital_injection_subcategory: str = "Capital Injection"

    # Cash balance sheet classification
    capital_introduced_category: str = "Capital Introduced"
    loans_category: str = "Loans Received"
    deposits_category: str = "Refundable Deposits & Advances"
    asset_sale_category: str = "Asset Sale Proceeds"
    capital_reserve_categories: tuple[str, ...] = ("Other Non-Operating Receipts",)
    capital_income_subcategories: tuple[str, ...] = (
        "Capital Donations (Restricted)",
        "Capital Grants",
    )
    capital_expenditure_subcategories: tuple[str, ...] = (
        "Building construction",
        "Furniture",
        "Classroom setup",
    )

    # Salary payments
    payroll_category: str = "Operational Expenses"
    payroll_subcategory: str = "Salary"

    # Shareholder view
    board_investment_subcategory: str = "Investment by Board Members"

    @property
    def equity_categories(self) -> tuple[str, ...]:
        """Cash income categories that count as owners' capital."""
        return (self.capital_introduced_category, self.capital_injection_category)


DEFAULT_CONFIG = LedgerConfig()

_TUPLE_FIELDS = {f.name for f in fields(LedgerConfig) if f.type == tuple[str, ...]}


def load_config(config_path: Optional[str] = None) -> LedgerConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to a TOML file. If None, checks SCHOOLLEDGER_CONFIG
            environment variable; without either, defaults are returned.

    Returns:
        LedgerConfig with file values overriding defaults

    Raises:
        ValidationError: If the file is not valid TOML or contains unknown
            keys or wrong types
    """
    if config_path is None:
        config_path = os.environ.get("SCHOOLLEDGER_CONFIG")

    if config_path is None:
        return DEFAULT_CONFIG

    with Path(config_path).open("rb") as fh:
        try:
            raw = tomllib.load(fh)
        except tomllib.TOMLDecodeError as e:
            raise ValidationError(f"Could not parse {config_path}: {e}")

    # Allow either a flat file or a [ledger] table
    values = raw.get("ledger", raw)

    known = {f.name for f in fields(LedgerConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValidationError(f"Unknown configuration keys: {', '.join(unknown)}", field=unknown[0])

    overrides = {}
    for key, value in values.items():
        if key in _TUPLE_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValidationError(f"Configuration key '{key}' must be a list of strings", field=key)
            overrides[key] = tuple(value)
        elif key == "strict_categories":
            if not isinstance(value, bool):
                raise ValidationError("Configuration key 'strict_categories' must be true or false", field=key)
            overrides[key] = value
        else:
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Configuration key '{key}' must be a non-empty string", field=key)
            overrides[key] = value

    return LedgerConfig(**overrides)
