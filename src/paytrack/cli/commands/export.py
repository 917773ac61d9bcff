"""Workbook export commands."""

from pathlib import Path

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.domain.workbook_export import WorkbookExportService


@click.command("export")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--year-from", type=int, help="First year to export")
@click.option("--year-to", type=int, help="Last year to export")
@click.option(
    "--exclude-rare-earnings",
    is_flag=True,
    help="Leave out earning categories used in fewer than 3 months",
)
@click.option(
    "--exclude-rare-deductions",
    is_flag=True,
    help="Leave out deduction categories used in fewer than 3 months",
)
@click.pass_context
def export_workbook(
    ctx,
    output: str,
    year_from: int | None,
    year_to: int | None,
    exclude_rare_earnings: bool,
    exclude_rare_deductions: bool,
):
    """Export salary records to an .xlsx workbook that can be imported again."""
    db = ctx.obj["db"]
    service = WorkbookExportService(db)

    try:
        data = service.export_workbook(
            ctx.obj["user_id"],
            year_from=year_from,
            year_to=year_to,
            include_rare_earnings=not exclude_rare_earnings,
            include_rare_deductions=not exclude_rare_deductions,
        )
        Path(output).write_bytes(data)
    except (ValueError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Exported salary data to {output}")


@click.command("sample-workbook")
@click.argument("output", type=click.Path(dir_okay=False), default="SalaryTemplate.xlsx")
@click.pass_context
def sample_workbook(ctx, output: str):
    """Write a one-row sample workbook showing the import layout."""
    service = WorkbookExportService(ctx.obj["db"])

    try:
        Path(output).write_bytes(service.sample_workbook())
    except OSError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Wrote sample workbook to {output}")


def register_commands(cli):
    """Register export commands with main CLI."""
    cli.add_command(export_workbook)
    cli.add_command(sample_workbook)
