"""CLI error handling helpers."""

import logging

import click

from paytrack.domain.errors import DomainError, ImportAbortedError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Render a domain, file or storage error on stderr and exit with failure.

    An aborted import also reports how many records were written before the
    failure, since those stay in the database.
    """
    logger.debug(f"'{ctx.command_path}' failed", exc_info=error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ImportAbortedError):
        click.echo(f"{error.processed} records were imported before the failure.", err=True)
    ctx.exit(1)
