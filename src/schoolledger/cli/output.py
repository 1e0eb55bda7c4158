"""CLI output formatting helpers."""

import json
from decimal import Decimal

import click

from schoolledger.domain.entities import Report


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def echo_json(report: Report) -> None:
    """Print a report's plain-data form as JSON."""
    click.echo(json.dumps(report.as_dict(), indent=2))


def echo_line(label: str, amount: Decimal, indent: int = 2, width: int = 40) -> None:
    click.echo(f"{' ' * indent}{label:<{width}} {format_amount(amount):>16}")


def echo_rule(width: int = 60) -> None:
    click.echo("-" * width)
