"""Initialize default categories."""

import click

from schoolledger.cli.error_handling import handle_persistence_error
from schoolledger.domain.category import CategoryService
from schoolledger.domain.errors import PersistenceError


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Initialize database with the default school category taxonomy.

    Categories that already exist are left untouched.
    """
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    click.echo("Creating default categories...")
    try:
        created = service.seed_defaults()
    except PersistenceError as e:
        handle_persistence_error(ctx, e)

    if created == 0:
        click.echo("Categories already exist; nothing to do.")
    else:
        click.echo(f"Successfully created {created} categories.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
