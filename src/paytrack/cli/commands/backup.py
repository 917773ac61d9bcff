"""Backup and restore commands."""

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.domain.backup import DEFAULT_BACKUP_FILENAME, BackupService
from paytrack.domain.entities import BackupCounts


def print_counts(counts: BackupCounts) -> None:
    click.echo(f"  Organization templates: {counts.templates}")
    click.echo(f"  Salary records:         {counts.salary_records}")
    click.echo(f"  Employment history:     {counts.employment_history}")
    click.echo(f"  Profile:                {counts.profile_entries}")
    click.echo(f"  Budget history:         {counts.budget_history}")


@click.group()
def backup_group():
    """Export or restore a complete JSON backup."""
    pass


@backup_group.command("export")
@click.argument("output", type=click.Path(dir_okay=False), default=DEFAULT_BACKUP_FILENAME)
@click.pass_context
def export_backup(ctx, output: str):
    """Write all salary data to a JSON backup file."""
    service = BackupService(ctx.obj["db"])

    try:
        counts = service.write_backup(ctx.obj["user_id"], output)
    except (ValueError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Backup written to {output}:")
    print_counts(counts)


@backup_group.command("restore")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Restore without asking for confirmation")
@click.pass_context
def restore_backup(ctx, backup_file: str, yes: bool):
    """Replace all salary data with the contents of a JSON backup."""
    user_id = ctx.obj["user_id"]
    service = BackupService(ctx.obj["db"])

    try:
        document = service.load_backup(backup_file)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)
        return

    counts = document.counts
    click.echo(
        f"This permanently deletes all salary records, line items, organization "
        f"templates and budget history of user '{user_id}'."
    )
    click.echo("The backup will then restore:")
    print_counts(counts)

    if not yes and not click.confirm("Continue?"):
        click.echo("Restore cancelled.")
        return

    try:
        with click.progressbar(length=counts.total, label="Restoring") as bar:
            service.restore_backup(document, user_id, progress=lambda processed, total: bar.update(1))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Restored {counts.total} items from {backup_file}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
