"""CLI helpers for date options and date range resolution."""

from datetime import date
from functools import wraps

import click

from schoolledger.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(func):
    """Add --this-month, --last-month, ... flags collected into period_flags."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        kwargs["period_flags"] = {period: kwargs.pop(period.replace("-", "_")) for period in PERIODS}
        return func(*args, **kwargs)

    for period in reversed(PERIODS):
        wrapper = click.option(
            f"--{period}", is_flag=True, help=f"Limit to {period.replace('-', ' ')}"
        )(wrapper)
    return wrapper


def parse_cli_date(ctx: click.Context, value: str | None, label: str = "date") -> date | None:
    """Parse an optional date option, exiting with an error message on bad input."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates.

    Either bound may be None when neither a period nor that date is given.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            f"Error: Only one period option ({', '.join('--' + p for p in PERIODS)}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_cli_date(ctx, start_date, "start date")
    end = parse_cli_date(ctx, end_date, "end date")
    return start, end
