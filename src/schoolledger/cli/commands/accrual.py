"""Accrual ledger and obligation commands."""

from datetime import date

import click

from schoolledger.cli.date_filters import parse_cli_date, period_options, resolve_cli_date_range
from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.cli.output import echo_rule, format_amount
from schoolledger.domain.accrual import AccrualService
from schoolledger.domain.errors import DomainError, PersistenceError
from schoolledger.utils.amount_parser import parse_amount


@click.group()
def accrual_group():
    """Recognise revenue and expenses and track what is owed."""
    pass


def _create(ctx, kind, entry_date, counterparty, category, subcategory, amount, due_date, description):
    db = ctx.obj["db"]
    service = AccrualService(db, ctx.obj["config"])

    when = parse_cli_date(ctx, entry_date) if entry_date else date.today()
    due = parse_cli_date(ctx, due_date, "due date")
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        posting = service.create_entry(
            kind,
            date=when,
            counterparty_name=counterparty,
            category=category,
            amount=value,
            subcategory=subcategory,
            due_date=due,
            description=description,
            recorded_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    obligation = posting.obligation
    click.echo(
        f"Recorded {kind} {format_amount(posting.entry.amount)} for '{posting.entry.counterparty_name}' "
        f"(entry ID: {posting.entry.id})"
    )
    click.echo(f"Opened {obligation.kind.value} {obligation.id}: balance {format_amount(obligation.balance)}")


@accrual_group.command("revenue")
@click.option("--date", "entry_date", help="Date earned (default today)")
@click.option("--customer", required=True, help="Customer (e.g., student or parent name)")
@click.option("--category", required=True, help="Income category name")
@click.option("--subcategory", help="Subcategory name")
@click.option("--amount", required=True, help="Amount earned")
@click.option("--due-date", help="Date payment is due")
@click.option("--description", help="Description")
@click.pass_context
def create_revenue(ctx, entry_date, customer, category, subcategory, amount, due_date, description):
    """Recognise revenue and open a receivable.

    Examples:
        schoolledger accrual revenue --customer "Aarav" --category "Student Fees" --subcategory "Tuition Fees" --amount 10000
    """
    _create(ctx, "revenue", entry_date, customer, category, subcategory, amount, due_date, description)


@accrual_group.command("expense")
@click.option("--date", "entry_date", help="Date incurred (default today)")
@click.option("--vendor", required=True, help="Vendor or staff member")
@click.option("--category", required=True, help="Expense category name")
@click.option("--subcategory", help="Subcategory name")
@click.option("--amount", required=True, help="Amount incurred")
@click.option("--due-date", help="Date payment is due")
@click.option("--description", help="Description")
@click.pass_context
def create_expense(ctx, entry_date, vendor, category, subcategory, amount, due_date, description):
    """Recognise an expense and open a payable."""
    _create(ctx, "expense", entry_date, vendor, category, subcategory, amount, due_date, description)


@accrual_group.command("list")
@click.option("--kind", type=click.Choice(["revenue", "expense"]), help="Only revenue or only expenses")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.option("--counterparty", help="Customer or vendor name contains (case-insensitive)")
@click.option("--category", help="Exact category name")
@click.option("--search", help="Text contained in counterparty, description or category")
@click.pass_context
def list_entries(ctx, kind, start_date, end_date, period_flags, counterparty, category, search):
    """List accrual entries, newest first."""
    db = ctx.obj["db"]
    service = AccrualService(db, ctx.obj["config"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    try:
        entries = service.list_entries(
            kind=kind,
            start_date=start,
            end_date=end,
            counterparty=counterparty,
            category=category,
            search=search,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No accrual entries found.")
        return

    click.echo(f"\nFound {len(entries)} accrual entr{'y' if len(entries) == 1 else 'ies'}:")
    echo_rule(100)
    for entry in entries:
        path = entry.category if not entry.subcategory else f"{entry.category} > {entry.subcategory}"
        click.echo(
            f"{entry.id:5d} | {entry.date} | {entry.kind.value:7s} | {format_amount(entry.amount):>14} | "
            f"{entry.counterparty_name} | {path} | obligation {entry.linked_obligation_id}"
        )


@accrual_group.command("obligations")
@click.option("--kind", type=click.Choice(["receivable", "payable"]), help="Only receivables or only payables")
@click.option("--status", type=click.Choice(["Unpaid", "Partial", "Paid"]), help="Filter by status")
@click.option("--counterparty", help="Customer or vendor name contains (case-insensitive)")
@click.pass_context
def list_obligations(ctx, kind, status, counterparty):
    """List receivables and payables by due date (undated last)."""
    db = ctx.obj["db"]
    service = AccrualService(db, ctx.obj["config"])

    try:
        obligations = service.list_obligations(kind=kind, status=status, counterparty=counterparty)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not obligations:
        click.echo("No obligations found.")
        return

    click.echo(f"\nFound {len(obligations)} obligation(s):")
    echo_rule(110)
    for ob in obligations:
        due = ob.due_date.isoformat() if ob.due_date else "-"
        click.echo(
            f"{ob.id:5d} | {ob.kind.value:10s} | {ob.counterparty_name:20s} | due {due:10s} | "
            f"{format_amount(ob.original_amount):>12} | paid {format_amount(ob.paid_amount):>12} | "
            f"balance {format_amount(ob.balance):>12} | {ob.status.value}"
        )


def register_commands(cli):
    """Register accrual commands with main CLI."""
    cli.add_command(accrual_group, name="accrual")
