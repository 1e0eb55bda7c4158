"""CLI error handling helpers."""

import click

from schoolledger.domain.errors import DomainError, PersistenceError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_persistence_error(ctx: click.Context, error: PersistenceError) -> None:
    """Render an infrastructure failure; nothing from the command was saved."""
    click.echo(f"Error: Could not save changes, nothing was recorded ({error})", err=True)
    ctx.exit(2)
