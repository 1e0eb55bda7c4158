"""Fixed asset commands."""

from datetime import date
from decimal import Decimal, InvalidOperation

import click

from schoolledger.cli.date_filters import parse_cli_date
from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.cli.output import echo_json, echo_rule, format_amount
from schoolledger.domain.assets import AssetService
from schoolledger.domain.errors import DomainError, PersistenceError
from schoolledger.domain.reports import ReportingService
from schoolledger.utils.amount_parser import parse_amount


@click.group()
def asset_group():
    """Manage the fixed asset register."""
    pass


@asset_group.command("add")
@click.argument("name")
@click.option("--purchase-date", required=True, help="Date the asset was bought")
@click.option("--cost", required=True, help="Purchase cost")
@click.option("--life", "useful_life_years", type=int, required=True, help="Useful life in years")
@click.option("--salvage", help="Salvage value at end of life (default 0)")
@click.option("--description", help="Description")
@click.pass_context
def add_asset(ctx, name, purchase_date, cost, useful_life_years, salvage, description):
    """Register an asset depreciated on a straight-line basis.

    Examples:
        schoolledger asset add "School bus" --purchase-date 2024-01-01 --cost 100000 --salvage 10000 --life 9
    """
    db = ctx.obj["db"]
    service = AssetService(db)

    bought = parse_cli_date(ctx, purchase_date, "purchase date")
    try:
        purchase_cost = parse_amount(cost)
        salvage_value = Decimal(salvage.replace(",", "").strip()) if salvage else None
    except (ValueError, InvalidOperation) as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    try:
        asset = service.add_asset(
            name=name,
            purchase_date=bought,
            purchase_cost=purchase_cost,
            useful_life_years=useful_life_years,
            salvage_value=salvage_value,
            description=description,
            recorded_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    click.echo(
        f"Registered asset '{asset.name}' (ID: {asset.id}); "
        f"annual depreciation {format_amount(asset.annual_depreciation)}"
    )


@asset_group.command("list")
@click.pass_context
def list_assets(ctx):
    """List assets, most recent purchase first."""
    db = ctx.obj["db"]
    service = AssetService(db)

    assets = service.list_assets()
    if not assets:
        click.echo("No assets found.")
        return

    click.echo("\nAssets:")
    echo_rule(90)
    for asset in assets:
        click.echo(
            f"{asset.id:4d} | {asset.name:25s} | {asset.purchase_date} | cost {format_amount(asset.purchase_cost):>12} | "
            f"{asset.useful_life_years} yrs | per year {format_amount(asset.annual_depreciation):>10}"
        )


@asset_group.command("schedule")
@click.option("--as-of", help="Schedule date (default today)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def schedule(ctx, as_of, as_json):
    """Show accumulated depreciation and net book value per asset."""
    db = ctx.obj["db"]
    service = ReportingService(db, ctx.obj["config"])

    when = parse_cli_date(ctx, as_of, "as-of date") if as_of else date.today()
    try:
        result = service.depreciation_schedule(when)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    click.echo(f"\nDepreciation schedule as of {result.as_of}:")
    echo_rule(90)
    for line in result.lines:
        click.echo(
            f"{line.name:25s} | cost {format_amount(line.purchase_cost):>12} | "
            f"accumulated {format_amount(line.accumulated_depreciation):>12} | "
            f"book value {format_amount(line.net_book_value):>12}"
        )
    echo_rule(90)
    click.echo(
        f"{'Total':25s} | cost {format_amount(result.total_cost):>12} | "
        f"accumulated {format_amount(result.total_accumulated):>12} | "
        f"book value {format_amount(result.total_net_book_value):>12}"
    )


def register_commands(cli):
    """Register asset commands with main CLI."""
    cli.add_command(asset_group, name="asset")
