"""Manual adjustment commands."""

from datetime import date

import click

from schoolledger.cli.date_filters import parse_cli_date, period_options, resolve_cli_date_range
from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.cli.output import echo_rule, format_amount
from schoolledger.domain.assets import AssetService
from schoolledger.domain.entities import AdjustmentType
from schoolledger.domain.errors import DomainError, PersistenceError
from schoolledger.utils.amount_parser import parse_amount


@click.group()
def adjustment_group():
    """Manage period adjustments used by the cash-basis P&L."""
    pass


@adjustment_group.command("add")
@click.option("--type", "adjustment_type", type=click.Choice([t.value for t in AdjustmentType]), required=True, help="Adjustment type")
@click.option("--amount", required=True, help="Amount")
@click.option("--date", "entry_date", help="Adjustment date (default today)")
@click.option("--description", help="Description")
@click.option("--related-category", help="Category the adjustment concerns")
@click.pass_context
def add_adjustment(ctx, adjustment_type, amount, entry_date, description, related_category):
    """Record an adjustment.

    Accrued Income adds to revenue, Unearned Income is deducted from it;
    Outstanding Expense adds to expenses, Prepaid Expense is deducted.
    """
    db = ctx.obj["db"]
    service = AssetService(db)

    when = parse_cli_date(ctx, entry_date) if entry_date else date.today()
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        adjustment = service.add_adjustment(
            type=adjustment_type,
            date=when,
            amount=value,
            description=description,
            related_category=related_category,
            recorded_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(f"Recorded {adjustment.type.value} {format_amount(adjustment.amount)} (ID: {adjustment.id})")


@adjustment_group.command("list")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.pass_context
def list_adjustments(ctx, start_date, end_date, period_flags):
    """List adjustments, newest first."""
    db = ctx.obj["db"]
    service = AssetService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    adjustments = service.list_adjustments(start_date=start, end_date=end)
    if not adjustments:
        click.echo("No adjustments found.")
        return

    click.echo(f"\nFound {len(adjustments)} adjustment(s):")
    echo_rule(90)
    for adj in adjustments:
        click.echo(
            f"{adj.id:4d} | {adj.date} | {adj.type.value:20s} | {format_amount(adj.amount):>12} | "
            f"{adj.description or ''}".rstrip()
        )


@adjustment_group.command("delete")
@click.argument("adjustment_id", type=int)
@click.pass_context
def delete_adjustment(ctx, adjustment_id: int):
    """Delete an adjustment."""
    db = ctx.obj["db"]
    service = AssetService(db)

    try:
        service.delete_adjustment(adjustment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(f"Deleted adjustment {adjustment_id}")


def register_commands(cli):
    """Register adjustment commands with main CLI."""
    cli.add_command(adjustment_group, name="adjustment")
