"""Domain model entities for schoolledger.

These are pure data classes representing ledger concepts, independent of the
database schema. Services and reports work only with these; the ORM layer is
converted at the database boundary by ``schoolledger.database.mappers``.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class CashEntryKind(str, Enum):
    """Direction of a raw cash movement."""

    INCOME = "income"
    EXPENSE = "expense"


class AccrualEntryKind(str, Enum):
    """Accrual recognition type."""

    REVENUE = "revenue"
    EXPENSE = "expense"


class ObligationKind(str, Enum):
    """Receivable (owed to the school) or payable (owed by the school)."""

    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class ObligationStatus(str, Enum):
    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


class SettlementKind(str, Enum):
    RECEIPT = "Receipt"
    PAYMENT = "Payment"
    CAPITAL_INJECTION = "Capital Injection"


class CategoryKind(str, Enum):
    """Which ledger side a category classifies."""

    INCOME = "income"
    EXPENSE = "expense"


class IncomeCategoryType(str, Enum):
    """Revenue income versus capital / non-operating inflow."""

    INCOME = "income"
    CAPITAL = "capital"


class AdjustmentType(str, Enum):
    OUTSTANDING_EXPENSE = "Outstanding Expense"
    PREPAID_EXPENSE = "Prepaid Expense"
    ACCRUED_INCOME = "Accrued Income"
    UNEARNED_INCOME = "Unearned Income"


STRAIGHT_LINE = "Straight Line"

# Document type that requires a document number on payments
RECEIPT_DOCUMENT = "Receipt"

# Accrual kind -> obligation kind it spawns
OBLIGATION_KIND_FOR = {
    AccrualEntryKind.REVENUE: ObligationKind.RECEIVABLE,
    AccrualEntryKind.EXPENSE: ObligationKind.PAYABLE,
}


def derive_status(original_amount: Decimal, balance: Decimal) -> ObligationStatus:
    """Return the obligation status implied by its outstanding balance.

    This is the only place status is decided.
    """
    if balance == 0:
        return ObligationStatus.PAID
    if balance == original_amount:
        return ObligationStatus.UNPAID
    return ObligationStatus.PARTIAL


@dataclass(frozen=True)
class CategoryRef:
    """Validated (category, subcategory) pair used when posting entries."""

    kind: CategoryKind
    category: str
    subcategory: Optional[str] = None


@dataclass(frozen=True)
class CashEntry:
    """Raw cash movement in the legacy ledger."""

    id: int
    kind: CashEntryKind
    date: date
    category: str
    subcategory: Optional[str]
    amount: Decimal
    description: Optional[str]
    receipt_number: Optional[str]
    settlement_id: Optional[int]
    recorded_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class AccrualEntry:
    """Revenue or expense recognised when earned or incurred."""

    id: int
    kind: AccrualEntryKind
    date: date
    counterparty_name: str
    category: str
    subcategory: Optional[str]
    amount: Decimal
    due_date: Optional[date]
    description: Optional[str]
    linked_obligation_id: Optional[int]
    recorded_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Obligation:
    """Receivable or payable derived from exactly one accrual entry."""

    id: int
    kind: ObligationKind
    source_accrual_entry_id: Optional[int]
    counterparty_name: str
    original_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    due_date: Optional[date]
    status: ObligationStatus
    description: Optional[str]
    version: int
    created_at: datetime


@dataclass(frozen=True)
class AccrualPosting:
    """Result of creating an accrual entry: the entry and its obligation."""

    entry: AccrualEntry
    obligation: Obligation


@dataclass(frozen=True)
class SettlementRequest:
    """Input for recording a settlement."""

    date: date
    kind: SettlementKind
    amount: Decimal
    linked_obligation_id: Optional[int] = None
    payment_mode: str = "Cash"
    document_type: Optional[str] = None
    document_number: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    description: Optional[str] = None
    recorded_by: Optional[str] = None


@dataclass(frozen=True)
class Settlement:
    """Cash actually changing hands against an obligation, or a capital inflow."""

    id: int
    date: date
    kind: SettlementKind
    amount: Decimal
    linked_obligation_id: Optional[int]
    payment_mode: str
    document_type: Optional[str]
    document_number: Optional[str]
    category: Optional[str]
    subcategory: Optional[str]
    description: Optional[str]
    recorded_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Income or expense taxonomy node."""

    id: int
    kind: CategoryKind
    name: str
    subcategories: tuple[str, ...]
    category_type: Optional[IncomeCategoryType]
    is_active: bool
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Asset:
    """Fixed asset depreciated on a straight-line basis."""

    id: int
    name: str
    purchase_date: date
    purchase_cost: Decimal
    salvage_value: Decimal
    useful_life_years: int
    method: str
    description: Optional[str]
    recorded_by: Optional[str]
    created_at: datetime

    @property
    def annual_depreciation(self) -> Decimal:
        return (self.purchase_cost - self.salvage_value) / Decimal(self.useful_life_years)


@dataclass(frozen=True)
class Adjustment:
    """Manual period-scoped P&L adjustment."""

    id: int
    type: AdjustmentType
    date: date
    amount: Decimal
    description: Optional[str]
    related_category: Optional[str]
    recorded_by: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class SalaryPayment:
    """One staff member's salary for one month, paid through the cash ledger."""

    id: int
    staff_name: str
    month: str  # YYYY-MM
    amount: Decimal
    payment_date: date
    payment_mode: str
    remarks: Optional[str]
    cash_entry_id: Optional[int]
    recorded_by: Optional[str]
    created_at: datetime


# Report snapshots


class Report:
    """Mixin giving report dataclasses a stable plain-data form."""

    def as_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class CategoryAmount:
    category: str
    amount: Decimal


@dataclass(frozen=True)
class FinancialSummary(Report):
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal


@dataclass(frozen=True)
class CashRevenueSection:
    cash: Decimal
    accrued_adjustment: Decimal
    deferred_adjustment: Decimal  # display only, zero or negative
    total: Decimal
    breakdown: tuple[CategoryAmount, ...] = ()


@dataclass(frozen=True)
class CashExpenseSection:
    cash: Decimal
    outstanding_adjustment: Decimal
    prepaid_adjustment: Decimal  # display only, zero or negative
    depreciation: Decimal
    total: Decimal
    breakdown: tuple[CategoryAmount, ...] = ()


@dataclass(frozen=True)
class CashProfitAndLoss(Report):
    start_date: date
    end_date: date
    operating_only: bool
    revenue: CashRevenueSection
    expenses: CashExpenseSection
    net_profit: Decimal


@dataclass(frozen=True)
class AccrualSection:
    total: Decimal
    breakdown: tuple[CategoryAmount, ...]


@dataclass(frozen=True)
class AccrualProfitAndLoss(Report):
    start_date: date
    end_date: date
    revenue: AccrualSection
    expenses: AccrualSection
    net_profit: Decimal


@dataclass(frozen=True)
class BalanceCheck:
    """Accounting equation check; difference is zero by construction."""

    assets: Decimal
    liabilities_and_equity: Decimal
    difference: Decimal

    @property
    def balanced(self) -> bool:
        return self.difference == 0


@dataclass(frozen=True)
class CashBalanceSheet(Report):
    as_of: date
    cash: Decimal
    fixed_assets_gross: Decimal
    asset_disposals: Decimal
    fixed_assets_net: Decimal
    total_assets: Decimal
    loans: Decimal
    deposits: Decimal
    total_liabilities: Decimal
    capital_introduced: Decimal
    capital_reserves: Decimal
    surplus: Decimal  # plug
    total_equity: Decimal
    operating_surplus: Decimal  # independently computed, for audit
    surplus_discrepancy: Decimal
    check: BalanceCheck


@dataclass(frozen=True)
class AccrualBalanceSheet(Report):
    as_of: date
    cash: Decimal
    accounts_receivable: Decimal
    total_assets: Decimal
    accounts_payable: Decimal
    total_liabilities: Decimal
    capital: Decimal
    retained_earnings: Decimal  # plug
    total_equity: Decimal
    accrual_retained_earnings: Decimal  # independently computed, for audit
    retained_earnings_discrepancy: Decimal
    check: BalanceCheck


@dataclass(frozen=True)
class DepreciationLine:
    asset_id: int
    name: str
    purchase_date: date
    purchase_cost: Decimal
    annual_depreciation: Decimal
    accumulated_depreciation: Decimal
    net_book_value: Decimal


@dataclass(frozen=True)
class DepreciationSchedule(Report):
    as_of: date
    lines: tuple[DepreciationLine, ...]
    total_cost: Decimal
    total_accumulated: Decimal
    total_net_book_value: Decimal


@dataclass(frozen=True)
class ShareholderStake:
    name: str
    invested: Decimal


@dataclass(frozen=True)
class ShareholderView(Report):
    total_income: Decimal
    total_expense: Decimal
    net_worth: Decimal
    total_capital_invested: Decimal
    shareholder_count: int
    share_value: Decimal
    shareholders: tuple[ShareholderStake, ...] = field(default_factory=tuple)
