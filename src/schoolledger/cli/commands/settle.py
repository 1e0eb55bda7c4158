"""Settlement commands."""

from datetime import date

import click

from schoolledger.cli.date_filters import parse_cli_date, period_options, resolve_cli_date_range
from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.cli.output import echo_rule, format_amount
from schoolledger.domain.entities import SettlementKind, SettlementRequest
from schoolledger.domain.errors import DomainError, PersistenceError
from schoolledger.domain.settlement import SettlementService
from schoolledger.utils.amount_parser import parse_amount


@click.group()
def settle_group():
    """Record cash received or paid against obligations."""
    pass


def _settle(ctx, request_fields: dict, entry_date: str | None, amount: str) -> None:
    db = ctx.obj["db"]
    service = SettlementService(db, ctx.obj["config"])

    when = parse_cli_date(ctx, entry_date) if entry_date else date.today()
    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    request = SettlementRequest(date=when, amount=value, recorded_by=ctx.obj["user"], **request_fields)
    try:
        settlement = service.record_settlement(request)
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(f"Recorded {settlement.kind.value} {format_amount(settlement.amount)} (ID: {settlement.id})")
    if settlement.linked_obligation_id is not None:
        obligation = db.get_obligation(settlement.linked_obligation_id)
        click.echo(
            f"{obligation.kind.value.capitalize()} {obligation.id}: balance "
            f"{format_amount(obligation.balance)} ({obligation.status.value})"
        )


@settle_group.command("receipt")
@click.argument("obligation_id", type=int)
@click.option("--amount", required=True, help="Amount received")
@click.option("--date", "entry_date", help="Date received (default today)")
@click.option("--mode", "payment_mode", default="Cash", show_default=True, help="Payment mode (Cash, UPI, Cheque, ...)")
@click.option("--document-type", help="Supporting document type")
@click.option("--document-number", help="Supporting document number")
@click.option("--description", help="Description")
@click.pass_context
def record_receipt(ctx, obligation_id, amount, entry_date, payment_mode, document_type, document_number, description):
    """Record money received against a receivable.

    Examples:
        schoolledger settle receipt 1 --amount 4000 --mode UPI
    """
    _settle(
        ctx,
        {
            "kind": SettlementKind.RECEIPT,
            "linked_obligation_id": obligation_id,
            "payment_mode": payment_mode,
            "document_type": document_type,
            "document_number": document_number,
            "description": description,
        },
        entry_date,
        amount,
    )


@settle_group.command("payment")
@click.argument("obligation_id", type=int)
@click.option("--amount", required=True, help="Amount paid")
@click.option("--date", "entry_date", help="Date paid (default today)")
@click.option("--mode", "payment_mode", default="Cash", show_default=True, help="Payment mode")
@click.option("--document-type", help="Supporting document type (required, e.g. Receipt, Invoice)")
@click.option("--document-number", help="Supporting document number (required for Receipt)")
@click.option("--description", help="Description")
@click.pass_context
def record_payment(ctx, obligation_id, amount, entry_date, payment_mode, document_type, document_number, description):
    """Record money paid against a payable."""
    _settle(
        ctx,
        {
            "kind": SettlementKind.PAYMENT,
            "linked_obligation_id": obligation_id,
            "payment_mode": payment_mode,
            "document_type": document_type,
            "document_number": document_number,
            "description": description,
        },
        entry_date,
        amount,
    )


@settle_group.command("capital")
@click.option("--amount", required=True, help="Amount injected")
@click.option("--date", "entry_date", help="Date received (default today)")
@click.option("--category", help="Income category (default from configuration)")
@click.option("--subcategory", help="Subcategory")
@click.option("--mode", "payment_mode", default="Cash", show_default=True, help="Payment mode")
@click.option("--description", help="Description")
@click.pass_context
def record_capital(ctx, amount, entry_date, category, subcategory, payment_mode, description):
    """Record a capital injection (no obligation involved)."""
    _settle(
        ctx,
        {
            "kind": SettlementKind.CAPITAL_INJECTION,
            "payment_mode": payment_mode,
            "category": category,
            "subcategory": subcategory,
            "description": description,
        },
        entry_date,
        amount,
    )


@settle_group.command("list")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@period_options
@click.option("--kind", type=click.Choice([k.value for k in SettlementKind]), help="Filter by settlement kind")
@click.option("--recorded-by", help="Only settlements recorded by this user")
@click.pass_context
def list_settlements(ctx, start_date, end_date, period_flags, kind, recorded_by):
    """List settlements, newest first."""
    db = ctx.obj["db"]
    service = SettlementService(db, ctx.obj["config"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    try:
        settlements = service.list_settlements(
            start_date=start, end_date=end, kind=kind, recorded_by=recorded_by
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not settlements:
        click.echo("No settlements found.")
        return

    click.echo(f"\nFound {len(settlements)} settlement(s):")
    echo_rule(100)
    for s in settlements:
        ref = f"obligation {s.linked_obligation_id}" if s.linked_obligation_id else "-"
        doc = f"{s.document_type} {s.document_number or ''}".strip() if s.document_type else ""
        click.echo(
            f"{s.id:5d} | {s.date} | {s.kind.value:17s} | {format_amount(s.amount):>14} | "
            f"{s.payment_mode:8s} | {ref} | {s.category} {doc}".rstrip()
        )


def register_commands(cli):
    """Register settlement commands with main CLI."""
    cli.add_command(settle_group, name="settle")
