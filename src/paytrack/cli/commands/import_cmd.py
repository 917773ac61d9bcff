"""Workbook import command."""

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.cli.formatting import print_import_plan, print_import_summary
from paytrack.domain.errors import ImportAbortedError
from paytrack.domain.workbook_import import WorkbookImportService


@click.command("import")
@click.argument("workbook", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Import without asking for confirmation")
@click.pass_context
def import_workbook(ctx, workbook: str, yes: bool):
    """Import salary records from an .xlsx workbook (one sheet per organization).

    A preview of what will be imported is always shown first.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = WorkbookImportService(db)

    try:
        plan = service.plan_import(workbook, user_id)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    print_import_plan(plan)
    if plan.total_records_to_import == 0:
        click.echo("\nNothing to import.")
        return

    if not yes and not click.confirm(
        f"\nImport {plan.total_records_to_import} records? Existing records for the same months are overwritten"
    ):
        click.echo("Import cancelled.")
        return

    try:
        with click.progressbar(length=plan.records_to_write, label="Importing") as bar:
            result = service.execute(
                plan, user_id, progress=lambda processed, total: bar.update(processed - bar.pos)
            )
    except ImportAbortedError as e:
        handle_domain_error(ctx, e)
        return

    print_import_summary(result)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_workbook)
