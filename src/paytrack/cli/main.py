"""Main CLI entry point."""

import logging

import click
from paytrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from paytrack.cli.commands import (
    backup,
    budget,
    employment,
    export,
    import_cmd,
    record,
    summary,
    template,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYTRACK_DB_PATH environment variable)",
    envvar="PAYTRACK_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default="local",
    show_default=True,
    help="User whose salary data to work with (PAYTRACK_USER)",
    envvar="PAYTRACK_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for messages on stderr (PAYTRACK_LOG_LEVEL)",
    envvar="PAYTRACK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, log_level: str):
    """Paytrack - Salary and payslip tracker.

    Import payslip spreadsheets, keep per-employer category templates,
    summarize earnings by organization and financial year, and back up
    everything to a single JSON file.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id


# Register all commands
import_cmd.register_commands(cli)
export.register_commands(cli)
backup.register_commands(cli)
template.register_commands(cli)
record.register_commands(cli)
summary.register_commands(cli)
budget.register_commands(cli)
employment.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
