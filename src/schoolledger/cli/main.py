"""Main CLI entry point."""

import logging

import click

from schoolledger.config import load_config
from schoolledger.database.factories import create_sqlite_database
from schoolledger.domain.errors import DomainError

# Import and register all commands at module level
from schoolledger.cli.commands import (
    cash,
    accrual,
    settle,
    category,
    init_categories,
    asset,
    adjustment,
    report,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SCHOOLLEDGER_DB_PATH environment variable)",
    envvar="SCHOOLLEDGER_DB_PATH",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a TOML configuration file (overrides SCHOOLLEDGER_CONFIG environment variable)",
    envvar="SCHOOLLEDGER_CONFIG",
)
@click.option(
    "--user",
    help="Name recorded as the author of new entries",
    envvar="SCHOOLLEDGER_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log to stderr at this level",
)
@click.pass_context
def cli(ctx, db_path: str | None, config_path: str | None, user: str | None, log_level: str | None):
    """Schoolledger - accrual accounting for a school.

    Record cash and accrual entries, settle receivables and payables, and
    produce profit & loss statements and balance sheets.
    """
    ctx.ensure_object(dict)

    if log_level is not None:
        logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=True)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["config"] = load_config(config_path)
        except DomainError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user
        ctx.call_on_close(db.disconnect)


# Register all commands
cash.register_commands(cli)
accrual.register_commands(cli)
settle.register_commands(cli)
category.register_commands(cli)
init_categories.register_commands(cli)
asset.register_commands(cli)
adjustment.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
