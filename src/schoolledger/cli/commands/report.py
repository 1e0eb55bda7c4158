"""Financial report commands."""

from datetime import date

import click

from schoolledger.cli.date_filters import parse_cli_date, period_options, resolve_cli_date_range
from schoolledger.cli.error_handling import handle_domain_error
from schoolledger.cli.output import echo_json, echo_line, echo_rule
from schoolledger.domain.errors import DomainError
from schoolledger.domain.reports import ReportingService


@click.group()
def report_group():
    """Profit & loss statements, balance sheets and shareholder view."""
    pass


def _period(ctx, start_date, end_date, period_flags):
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    if start is None or end is None:
        click.echo("Error: A date range is required (--start-date and --end-date, or a period option).", err=True)
        ctx.exit(1)
    return start, end


def _echo_breakdown(breakdown) -> None:
    for item in breakdown:
        echo_line(item.category, item.amount, indent=6, width=36)


def _echo_check(check) -> None:
    status = "balanced" if check.balanced else f"OUT BY {check.difference}"
    click.echo(f"\nAssets = Liabilities + Equity: {status}")


@report_group.command("cash-pnl")
@click.option("--start-date", help="First day of the period")
@click.option("--end-date", help="Last day of the period")
@period_options
@click.option("--operating-only", is_flag=True, help="Exclude capital income and capital expenditure")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def cash_pnl(ctx, start_date, end_date, period_flags, operating_only, as_json):
    """Cash-basis profit & loss with adjustments and depreciation.

    Examples:
        schoolledger report cash-pnl --start-date 2024-07-01 --end-date 2024-12-31
        schoolledger report cash-pnl --last-fiscal-year --operating-only
    """
    service = ReportingService(ctx.obj["db"], ctx.obj["config"])
    start, end = _period(ctx, start_date, end_date, period_flags)

    try:
        result = service.cash_profit_and_loss(start, end, operating_only=operating_only)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    mode = " (operating only)" if operating_only else ""
    click.echo(f"\nCash-basis profit & loss {result.start_date} to {result.end_date}{mode}")
    echo_rule()
    click.echo("Revenue")
    echo_line("Cash received", result.revenue.cash)
    _echo_breakdown(result.revenue.breakdown)
    echo_line("Accrued income", result.revenue.accrued_adjustment)
    echo_line("Unearned income", result.revenue.deferred_adjustment)
    echo_line("Total revenue", result.revenue.total)
    click.echo("Expenses")
    echo_line("Cash paid", result.expenses.cash)
    _echo_breakdown(result.expenses.breakdown)
    echo_line("Outstanding expenses", result.expenses.outstanding_adjustment)
    echo_line("Prepaid expenses", result.expenses.prepaid_adjustment)
    echo_line("Depreciation", result.expenses.depreciation)
    echo_line("Total expenses", result.expenses.total)
    echo_rule()
    echo_line("Net profit", result.net_profit, indent=0, width=42)


@report_group.command("accrual-pnl")
@click.option("--start-date", help="First day of the period")
@click.option("--end-date", help="Last day of the period")
@period_options
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def accrual_pnl(ctx, start_date, end_date, period_flags, as_json):
    """Accrual-basis profit & loss by category."""
    service = ReportingService(ctx.obj["db"], ctx.obj["config"])
    start, end = _period(ctx, start_date, end_date, period_flags)

    try:
        result = service.accrual_profit_and_loss(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    click.echo(f"\nAccrual-basis profit & loss {result.start_date} to {result.end_date}")
    echo_rule()
    click.echo("Revenue")
    _echo_breakdown(result.revenue.breakdown)
    echo_line("Total revenue", result.revenue.total)
    click.echo("Expenses")
    _echo_breakdown(result.expenses.breakdown)
    echo_line("Total expenses", result.expenses.total)
    echo_rule()
    echo_line("Net profit", result.net_profit, indent=0, width=42)


@report_group.command("cash-balance-sheet")
@click.option("--as-of", help="Balance sheet date (default today)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def cash_balance_sheet(ctx, as_of, as_json):
    """Cash-basis balance sheet."""
    service = ReportingService(ctx.obj["db"], ctx.obj["config"])
    when = parse_cli_date(ctx, as_of, "as-of date") if as_of else date.today()

    try:
        result = service.cash_balance_sheet(when)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    click.echo(f"\nCash-basis balance sheet as of {result.as_of}")
    echo_rule()
    click.echo("Assets")
    echo_line("Cash", result.cash)
    echo_line("Fixed assets (capital expenditure)", result.fixed_assets_gross)
    echo_line("Asset sale proceeds (deducted)", result.asset_disposals)
    echo_line("Total assets", result.total_assets)
    click.echo("Liabilities")
    echo_line("Loans", result.loans)
    echo_line("Refundable deposits", result.deposits)
    echo_line("Total liabilities", result.total_liabilities)
    click.echo("Equity")
    echo_line("Capital introduced", result.capital_introduced)
    echo_line("Capital reserves", result.capital_reserves)
    echo_line("Surplus (balancing figure)", result.surplus)
    echo_line("Total equity", result.total_equity)
    if result.surplus_discrepancy != 0:
        echo_line("Operating surplus (computed)", result.operating_surplus)
        echo_line("Discrepancy", result.surplus_discrepancy)
    _echo_check(result.check)


@report_group.command("accrual-balance-sheet")
@click.option("--as-of", help="Balance sheet date (default today)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def accrual_balance_sheet(ctx, as_of, as_json):
    """Accrual-basis balance sheet including receivables and payables."""
    service = ReportingService(ctx.obj["db"], ctx.obj["config"])
    when = parse_cli_date(ctx, as_of, "as-of date") if as_of else date.today()

    try:
        result = service.accrual_balance_sheet(when)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    click.echo(f"\nAccrual-basis balance sheet as of {result.as_of}")
    echo_rule()
    click.echo("Assets")
    echo_line("Cash", result.cash)
    echo_line("Accounts receivable", result.accounts_receivable)
    echo_line("Total assets", result.total_assets)
    click.echo("Liabilities")
    echo_line("Accounts payable", result.accounts_payable)
    echo_line("Total liabilities", result.total_liabilities)
    click.echo("Equity")
    echo_line("Capital", result.capital)
    echo_line("Retained earnings (balancing figure)", result.retained_earnings)
    echo_line("Total equity", result.total_equity)
    echo_line("Accrual retained earnings (computed)", result.accrual_retained_earnings)
    echo_line("Discrepancy", result.retained_earnings_discrepancy)
    _echo_check(result.check)


@report_group.command("shareholders")
@click.option("--member", "members", multiple=True, help="Board member name (repeat for each member)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def shareholders(ctx, members, as_json):
    """Net worth, capital invested per board member and share value."""
    service = ReportingService(ctx.obj["db"], ctx.obj["config"])
    result = service.shareholder_view(members)

    if as_json:
        echo_json(result)
        return

    click.echo("\nShareholder view")
    echo_rule()
    echo_line("Total income", result.total_income)
    echo_line("Total expense", result.total_expense)
    echo_line("Net worth", result.net_worth)
    echo_line("Capital invested", result.total_capital_invested)
    for stake in result.shareholders:
        echo_line(stake.name, stake.invested, indent=6, width=36)
    echo_line(f"Share value ({result.shareholder_count} members)", result.share_value)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
