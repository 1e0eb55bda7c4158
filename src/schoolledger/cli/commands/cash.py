"""Cash ledger commands."""

from datetime import date
from decimal import Decimal

import click

from schoolledger.cli.date_filters import parse_cli_date, period_options, resolve_cli_date_range
from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.cli.output import echo_line, echo_rule, format_amount
from schoolledger.domain.errors import DomainError, PersistenceError
from schoolledger.domain.ledger import LedgerService
from schoolledger.utils.amount_parser import parse_amount


@click.group()
def cash_group():
    """Record and review raw cash income and expenses."""
    pass


def _record(ctx, kind: str, entry_date, category, subcategory, amount, description, receipt_number=None):
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    when = parse_cli_date(ctx, entry_date) if entry_date else date.today()
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        if kind == "income":
            entry = service.record_income(
                date=when,
                category=category,
                amount=value,
                subcategory=subcategory,
                description=description,
                receipt_number=receipt_number,
                recorded_by=ctx.obj["user"],
            )
        else:
            entry = service.record_expense(
                date=when,
                category=category,
                amount=value,
                subcategory=subcategory,
                description=description,
                recorded_by=ctx.obj["user"],
            )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(f"Recorded {kind} {format_amount(entry.amount)} under '{entry.category}' (ID: {entry.id})")


@cash_group.command("income")
@click.option("--date", "entry_date", help="Date received (YYYY-MM-DD or 'today'; default today)")
@click.option("--category", required=True, help="Income category name")
@click.option("--subcategory", help="Subcategory name")
@click.option("--amount", required=True, help="Amount received (e.g., 1500 or 1,500.00)")
@click.option("--description", help="Description")
@click.option("--receipt-number", help="Receipt number issued")
@click.pass_context
def record_income(ctx, entry_date, category, subcategory, amount, description, receipt_number):
    """Record cash income that is not tied to a receivable.

    Examples:
        schoolledger cash income --category "Donations" --subcategory "General Donations (Revenue)" --amount 5000
    """
    _record(ctx, "income", entry_date, category, subcategory, amount, description, receipt_number)


@cash_group.command("expense")
@click.option("--date", "entry_date", help="Date paid (YYYY-MM-DD or 'today'; default today)")
@click.option("--category", required=True, help="Expense category name")
@click.option("--subcategory", help="Subcategory name")
@click.option("--amount", required=True, help="Amount paid")
@click.option("--description", help="Description")
@click.pass_context
def record_expense(ctx, entry_date, category, subcategory, amount, description):
    """Record a cash expense that is not tied to a payable."""
    _record(ctx, "expense", entry_date, category, subcategory, amount, description)


@cash_group.command("list")
@click.option("--kind", type=click.Choice(["income", "expense"]), help="Only income or only expenses")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--category", help="Exact category name")
@click.option("--recorded-by", help="Only entries recorded by this user")
@click.pass_context
def list_entries(ctx, kind, start_date, end_date, period_flags, category, recorded_by):
    """List cash entries, newest first."""
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    try:
        entries = service.list_entries(
            kind=kind, start_date=start, end_date=end, category=category, recorded_by=recorded_by
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No cash entries found.")
        return

    click.echo(f"\nFound {len(entries)} cash entr{'y' if len(entries) == 1 else 'ies'}:")
    echo_rule(100)
    for entry in entries:
        path = entry.category if not entry.subcategory else f"{entry.category} > {entry.subcategory}"
        marker = f" [settlement {entry.settlement_id}]" if entry.settlement_id else ""
        click.echo(
            f"{entry.id:5d} | {entry.date} | {entry.kind.value:7s} | {format_amount(entry.amount):>14} | "
            f"{path}{marker}"
        )
        if entry.description:
            click.echo(f"      {entry.description}")


@cash_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a manually recorded cash entry.

    Entries created by a settlement or a salary payment cannot be deleted.
    """
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    if not yes:
        click.confirm(f"Delete cash entry {entry_id}?", abort=True)

    try:
        service.delete_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(f"Deleted cash entry {entry_id}")


@cash_group.command("summary")
@click.pass_context
def summary(ctx):
    """Show lifetime cash income, expense and net balance."""
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    result = service.get_financial_summary()
    click.echo("\nCash summary:")
    echo_line("Total income", result.total_income)
    echo_line("Total expense", result.total_expense)
    echo_rule()
    echo_line("Net balance", result.net_balance)


@cash_group.command("salary")
@click.option("--staff", "staff_name", required=True, help="Staff member being paid")
@click.option("--month", required=True, help="Payroll month (YYYY-MM)")
@click.option("--amount", required=True, help="Salary amount")
@click.option("--date", "paid_on", help="Date paid (YYYY-MM-DD or 'today'; default today)")
@click.option("--mode", "payment_mode", default="Cash", show_default=True, help="Payment mode")
@click.option("--remarks", help="Remarks kept on the salary record")
@click.pass_context
def pay_salary(ctx, staff_name, month, amount, paid_on, payment_mode, remarks):
    """Pay a staff member's monthly salary as a cash expense.

    Examples:
        schoolledger cash salary --staff "Anita Rao" --month 2024-06 --amount 32000
    """
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    when = parse_cli_date(ctx, paid_on) if paid_on else date.today()
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        payment = service.record_salary_payment(
            staff_name=staff_name,
            month=month,
            amount=value,
            date=when,
            payment_mode=payment_mode,
            remarks=remarks,
            recorded_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(
        f"Paid salary {format_amount(payment.amount)} to '{payment.staff_name}' for {payment.month} "
        f"(cash entry {payment.cash_entry_id})"
    )


@cash_group.command("salaries")
@click.option("--month", help="Only this payroll month (YYYY-MM)")
@click.option("--staff", "staff_name", help="Only this staff member")
@click.pass_context
def list_salaries(ctx, month, staff_name):
    """List salary payments, latest month first."""
    db = ctx.obj["db"]
    service = LedgerService(db, ctx.obj["config"])

    try:
        payments = service.list_salary_payments(staff_name=staff_name, month=month)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not payments:
        click.echo("No salary payments found.")
        return

    click.echo(f"\nFound {len(payments)} salary payment(s):")
    echo_rule(80)
    total = sum((p.amount for p in payments), Decimal("0"))
    for payment in payments:
        click.echo(
            f"{payment.month} | {payment.payment_date} | {format_amount(payment.amount):>14} | "
            f"{payment.payment_mode:13s} | {payment.staff_name}"
        )
    echo_rule(80)
    echo_line("Total", total)


def register_commands(cli):
    """Register cash commands with main CLI."""
    cli.add_command(cash_group, name="cash")
