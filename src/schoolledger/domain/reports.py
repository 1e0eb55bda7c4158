"""Read-only financial reports.

Every report is computed from the ledgers on each call and returned as a
frozen snapshot; nothing here writes to the database. Equity figures on the
balance sheets are plugs (residuals that make the accounting equation hold).
The independently computed figure and its difference from the plug are
reported next to each plug for audit.
"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig
from schoolledger.database.base import Database
from schoolledger.domain.entities import (
    AccrualBalanceSheet,
    AccrualEntryKind,
    AccrualProfitAndLoss,
    AccrualSection,
    AdjustmentType,
    Asset,
    BalanceCheck,
    CashBalanceSheet,
    CashEntry,
    CashEntryKind,
    CashExpenseSection,
    CashProfitAndLoss,
    CashRevenueSection,
    CategoryAmount,
    CategoryKind,
    DepreciationLine,
    DepreciationSchedule,
    IncomeCategoryType,
    ObligationKind,
    ShareholderStake,
    ShareholderView,
)
from schoolledger.domain.validation import require_date, require_date_range

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DAYS_PER_YEAR = Decimal("365")

UNATTRIBUTED = "Unattributed"


def money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def total(amounts: Iterable[Decimal]) -> Decimal:
    return money(sum(amounts, ZERO))


def breakdown(entries: Iterable) -> tuple[CategoryAmount, ...]:
    """Sum entry amounts per category, sorted by category name."""
    sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        sums[entry.category] += entry.amount
    return tuple(CategoryAmount(category=name, amount=money(sums[name])) for name in sorted(sums))


def days_in_service(asset: Asset, start: date, end: date) -> int:
    """Days in [start, end] (both inclusive) on which the asset was in service."""
    if asset.purchase_date > end:
        return 0
    effective_start = max(asset.purchase_date, start)
    return max(0, (end - effective_start).days + 1)


def period_depreciation(asset: Asset, start: date, end: date) -> Decimal:
    """Pro-rata straight-line depreciation of one asset over a period.

    annual_depreciation * days_in_service / 365, rounded to cents.
    """
    days = days_in_service(asset, start, end)
    return money(asset.annual_depreciation * days / DAYS_PER_YEAR)


def accumulated_depreciation(asset: Asset, as_of: date) -> Decimal:
    """Depreciation from purchase to as_of, capped at the depreciable amount."""
    days = days_in_service(asset, asset.purchase_date, as_of)
    accumulated = money(asset.annual_depreciation * days / DAYS_PER_YEAR)
    return min(accumulated, money(asset.purchase_cost - asset.salvage_value))


class ReportingService:
    """Service computing profit & loss, balance sheets and related views."""

    def __init__(self, db: Database, config: LedgerConfig = DEFAULT_CONFIG):
        """Initialize reporting service.

        Args:
            db: Database instance
            config: Ledger configuration (balance-sheet category names)
        """
        self.db = db
        self.config = config

    # Cash basis

    def cash_profit_and_loss(
        self, start_date: date, end_date: date, operating_only: bool = False
    ) -> CashProfitAndLoss:
        """Cash-basis profit and loss for [start_date, end_date].

        Revenue is cash income plus Accrued Income adjustments minus Unearned
        Income adjustments. Expenses are cash expense plus Outstanding Expense
        adjustments minus Prepaid Expense adjustments plus pro-rata
        depreciation of every asset purchased on or before end_date.

        Args:
            start_date: First day of the period
            end_date: Last day of the period
            operating_only: Exclude capital income and capital expenditure

        Returns:
            CashProfitAndLoss snapshot

        Raises:
            ValidationError: If a date is missing or start_date > end_date
        """
        start, end = require_date_range(start_date, end_date)

        income = self.db.list_cash_entries(kind=CashEntryKind.INCOME.value, start_date=start, end_date=end)
        expenses = self.db.list_cash_entries(kind=CashEntryKind.EXPENSE.value, start_date=start, end_date=end)
        if operating_only:
            capital_categories = self._capital_income_categories()
            income = [e for e in income if not self._is_capital_income(e, capital_categories)]
            expenses = [e for e in expenses if not self._is_capital_expenditure(e)]

        adjustments = self.db.list_adjustments(start_date=start, end_date=end)
        adjustment_totals = {
            adjustment_type: total(a.amount for a in adjustments if a.type == adjustment_type)
            for adjustment_type in AdjustmentType
        }
        accrued = adjustment_totals[AdjustmentType.ACCRUED_INCOME]
        unearned = adjustment_totals[AdjustmentType.UNEARNED_INCOME]
        outstanding = adjustment_totals[AdjustmentType.OUTSTANDING_EXPENSE]
        prepaid = adjustment_totals[AdjustmentType.PREPAID_EXPENSE]

        depreciation = total(
            period_depreciation(asset, start, end)
            for asset in self.db.list_assets(purchased_on_or_before=end)
        )

        cash_revenue = total(e.amount for e in income)
        cash_expense = total(e.amount for e in expenses)

        revenue = CashRevenueSection(
            cash=cash_revenue,
            accrued_adjustment=accrued,
            deferred_adjustment=-unearned,
            total=cash_revenue + accrued - unearned,
            breakdown=breakdown(income),
        )
        expense = CashExpenseSection(
            cash=cash_expense,
            outstanding_adjustment=outstanding,
            prepaid_adjustment=-prepaid,
            depreciation=depreciation,
            total=cash_expense + outstanding - prepaid + depreciation,
            breakdown=breakdown(expenses),
        )
        return CashProfitAndLoss(
            start_date=start,
            end_date=end,
            operating_only=operating_only,
            revenue=revenue,
            expenses=expense,
            net_profit=revenue.total - expense.total,
        )

    def cash_balance_sheet(self, as_of: date) -> CashBalanceSheet:
        """Cash-basis balance sheet as of a date.

        Each cash income row falls in exactly one bucket: asset sale
        proceeds, loans, deposits, capital introduced, capital reserves, or
        operating income. Surplus is the plug; operating_surplus (operating
        income less non-capital expense) is the independently computed
        counterpart.

        Raises:
            ValidationError: If as_of is missing
        """
        as_of = require_date(as_of, "as_of")

        income = self.db.list_cash_entries(kind=CashEntryKind.INCOME.value, end_date=as_of)
        expenses = self.db.list_cash_entries(kind=CashEntryKind.EXPENSE.value, end_date=as_of)

        buckets: dict[str, list[CashEntry]] = defaultdict(list)
        for entry in income:
            buckets[self._income_bucket(entry)].append(entry)

        capex = [e for e in expenses if self._is_capital_expenditure(e)]
        operating_expense = [e for e in expenses if not self._is_capital_expenditure(e)]

        cash = total(e.amount for e in income) - total(e.amount for e in expenses)
        fixed_assets_gross = total(e.amount for e in capex)
        asset_disposals = total(e.amount for e in buckets["asset_sale"])
        fixed_assets_net = fixed_assets_gross - asset_disposals
        total_assets = cash + fixed_assets_net

        loans = total(e.amount for e in buckets["loans"])
        deposits = total(e.amount for e in buckets["deposits"])
        total_liabilities = loans + deposits

        capital_introduced = total(e.amount for e in buckets["capital"])
        capital_reserves = total(e.amount for e in buckets["reserves"])
        surplus = total_assets - total_liabilities - capital_introduced - capital_reserves
        total_equity = capital_introduced + capital_reserves + surplus

        operating_surplus = total(e.amount for e in buckets["operating"]) - total(
            e.amount for e in operating_expense
        )

        return CashBalanceSheet(
            as_of=as_of,
            cash=cash,
            fixed_assets_gross=fixed_assets_gross,
            asset_disposals=asset_disposals,
            fixed_assets_net=fixed_assets_net,
            total_assets=total_assets,
            loans=loans,
            deposits=deposits,
            total_liabilities=total_liabilities,
            capital_introduced=capital_introduced,
            capital_reserves=capital_reserves,
            surplus=surplus,
            total_equity=total_equity,
            operating_surplus=operating_surplus,
            surplus_discrepancy=surplus - operating_surplus,
            check=_check(total_assets, total_liabilities + total_equity),
        )

    # Accrual basis

    def accrual_profit_and_loss(self, start_date: date, end_date: date) -> AccrualProfitAndLoss:
        """Accrual revenue less accrual expense recognised in [start_date, end_date]."""
        start, end = require_date_range(start_date, end_date)

        revenue = self.db.list_accrual_entries(
            kind=AccrualEntryKind.REVENUE.value, start_date=start, end_date=end
        )
        expenses = self.db.list_accrual_entries(
            kind=AccrualEntryKind.EXPENSE.value, start_date=start, end_date=end
        )
        revenue_section = AccrualSection(total=total(e.amount for e in revenue), breakdown=breakdown(revenue))
        expense_section = AccrualSection(total=total(e.amount for e in expenses), breakdown=breakdown(expenses))
        return AccrualProfitAndLoss(
            start_date=start,
            end_date=end,
            revenue=revenue_section,
            expenses=expense_section,
            net_profit=revenue_section.total - expense_section.total,
        )

    def accrual_balance_sheet(self, as_of: date) -> AccrualBalanceSheet:
        """Accrual-basis balance sheet as of a date.

        Obligations count when their source entry was recognised on or
        before as_of, at their current outstanding balance. Retained earnings
        are the plug equity - capital.

        Raises:
            ValidationError: If as_of is missing
        """
        as_of = require_date(as_of, "as_of")

        income = self.db.list_cash_entries(kind=CashEntryKind.INCOME.value, end_date=as_of)
        expenses = self.db.list_cash_entries(kind=CashEntryKind.EXPENSE.value, end_date=as_of)
        cash = total(e.amount for e in income) - total(e.amount for e in expenses)

        entries = self.db.list_accrual_entries()
        recognised_on = {entry.id: entry.date for entry in entries}

        receivable = ZERO
        payable = ZERO
        for obligation in self.db.list_obligations():
            # Purged source entries fall back to the obligation's creation day
            recognised = recognised_on.get(obligation.source_accrual_entry_id, obligation.created_at.date())
            if recognised > as_of:
                continue
            if obligation.kind == ObligationKind.RECEIVABLE:
                receivable += obligation.balance
            else:
                payable += obligation.balance
        receivable = money(receivable)
        payable = money(payable)

        total_assets = cash + receivable
        total_liabilities = payable
        capital = total(e.amount for e in income if e.category in self.config.equity_categories)
        total_equity = total_assets - total_liabilities
        retained_earnings = total_equity - capital

        accrual_retained_earnings = total(
            e.amount for e in entries if e.kind == AccrualEntryKind.REVENUE and e.date <= as_of
        ) - total(e.amount for e in entries if e.kind == AccrualEntryKind.EXPENSE and e.date <= as_of)

        return AccrualBalanceSheet(
            as_of=as_of,
            cash=cash,
            accounts_receivable=receivable,
            total_assets=total_assets,
            accounts_payable=payable,
            total_liabilities=total_liabilities,
            capital=capital,
            retained_earnings=retained_earnings,
            total_equity=total_equity,
            accrual_retained_earnings=accrual_retained_earnings,
            retained_earnings_discrepancy=retained_earnings - accrual_retained_earnings,
            check=_check(total_assets, total_liabilities + total_equity),
        )

    # Other views

    def depreciation_schedule(self, as_of: date) -> DepreciationSchedule:
        """Accumulated depreciation and net book value per asset as of a date."""
        as_of = require_date(as_of, "as_of")

        lines = []
        for asset in sorted(self.db.list_assets(purchased_on_or_before=as_of), key=lambda a: (a.purchase_date, a.id)):
            accumulated = accumulated_depreciation(asset, as_of)
            lines.append(
                DepreciationLine(
                    asset_id=asset.id,
                    name=asset.name,
                    purchase_date=asset.purchase_date,
                    purchase_cost=money(asset.purchase_cost),
                    annual_depreciation=money(asset.annual_depreciation),
                    accumulated_depreciation=accumulated,
                    net_book_value=money(asset.purchase_cost) - accumulated,
                )
            )
        return DepreciationSchedule(
            as_of=as_of,
            lines=tuple(lines),
            total_cost=total(line.purchase_cost for line in lines),
            total_accumulated=total(line.accumulated_depreciation for line in lines),
            total_net_book_value=total(line.net_book_value for line in lines),
        )

    def shareholder_view(self, board_members: Sequence[str] = ()) -> ShareholderView:
        """Net worth of the manual cash ledger and per-member capital invested.

        Args:
            board_members: Names of the current board members; share value
                is net worth divided by their number (zero when empty)

        Returns:
            ShareholderView snapshot
        """
        income = self.db.list_cash_entries(kind=CashEntryKind.INCOME.value)
        expenses = self.db.list_cash_entries(kind=CashEntryKind.EXPENSE.value)
        total_income = total(e.amount for e in income)
        total_expense = total(e.amount for e in expenses)
        net_worth = total_income - total_expense

        members = sorted({name.strip() for name in board_members if name and name.strip()})
        invested: dict[str, Decimal] = {name: ZERO for name in members}
        for entry in income:
            if entry.subcategory != self.config.board_investment_subcategory:
                continue
            contributor = entry.recorded_by or UNATTRIBUTED
            invested[contributor] = invested.get(contributor, ZERO) + entry.amount

        shareholders = tuple(
            ShareholderStake(name=name, invested=money(invested[name])) for name in sorted(invested)
        )
        share_value = money(net_worth / len(members)) if members else ZERO

        return ShareholderView(
            total_income=total_income,
            total_expense=total_expense,
            net_worth=net_worth,
            total_capital_invested=total(stake.invested for stake in shareholders),
            shareholder_count=len(members),
            share_value=share_value,
            shareholders=shareholders,
        )

    # Classification helpers

    def _capital_income_categories(self) -> set[str]:
        return {
            category.name
            for category in self.db.list_categories(
                kind=CategoryKind.INCOME.value, category_type=IncomeCategoryType.CAPITAL.value
            )
        }

    def _is_capital_income(self, entry: CashEntry, capital_categories: set[str]) -> bool:
        return (
            entry.category in capital_categories
            or entry.category in self.config.equity_categories
            or entry.subcategory in self.config.capital_income_subcategories
        )

    def _is_capital_expenditure(self, entry: CashEntry) -> bool:
        return entry.subcategory in self.config.capital_expenditure_subcategories

    def _income_bucket(self, entry: CashEntry) -> str:
        cfg = self.config
        if entry.category == cfg.asset_sale_category:
            return "asset_sale"
        if entry.category == cfg.loans_category:
            return "loans"
        if entry.category == cfg.deposits_category:
            return "deposits"
        if entry.category in cfg.equity_categories:
            return "capital"
        if entry.category in cfg.capital_reserve_categories or entry.subcategory in cfg.capital_income_subcategories:
            return "reserves"
        return "operating"


def _check(assets: Decimal, liabilities_and_equity: Decimal) -> BalanceCheck:
    return BalanceCheck(
        assets=assets,
        liabilities_and_equity=liabilities_and_equity,
        difference=assets - liabilities_and_equity,
    )

