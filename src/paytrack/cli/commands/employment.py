"""Employment history commands."""

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.domain.employment import EmploymentService

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _as_date(value):
    return value.date() if value is not None else None


@click.group()
def employment_group():
    """Keep track of past and current employers."""
    pass


@employment_group.command("add")
@click.argument("organization")
@click.option("--joined", type=DATE, required=True, help="Joining date (YYYY-MM-DD)")
@click.option("--left", type=DATE, help="Leaving date (YYYY-MM-DD)")
@click.option("--employee-id", help="Employee ID at this organization")
@click.option("--notes", help="Optional notes")
@click.pass_context
def add_employment(ctx, organization: str, joined, left, employee_id: str | None, notes: str | None):
    """Add an employer to the employment history."""
    service = EmploymentService(ctx.obj["db"])

    try:
        entry_id = service.add_entry(
            ctx.obj["user_id"],
            organization,
            _as_date(joined),
            leaving_date=_as_date(left),
            employee_id=employee_id,
            notes=notes,
        )
        click.echo(f"Added employment at '{organization.strip()}' (ID: {entry_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@employment_group.command("list")
@click.pass_context
def list_employment(ctx):
    """List employment history by joining date."""
    service = EmploymentService(ctx.obj["db"])

    entries = service.list_entries(ctx.obj["user_id"])
    if not entries:
        click.echo("No employment history found.")
        return

    click.echo(f"\n{'ID':<6} {'Organization':<25} {'Employee ID':<14} {'Joined':<12} {'Left':<12}")
    click.echo("-" * 73)
    for e in entries:
        left = e.leaving_date.isoformat() if e.leaving_date else "present"
        click.echo(
            f"{e.id:<6} {e.organization[:25]:<25} {(e.employee_id or '-')[:14]:<14} "
            f"{e.joining_date.isoformat():<12} {left:<12}"
        )
        if e.notes:
            click.echo(f"       {e.notes}")


@employment_group.command("edit")
@click.argument("entry_id", type=int)
@click.option("--organization", help="New organization name")
@click.option("--joined", type=DATE, help="New joining date (YYYY-MM-DD)")
@click.option("--left", type=DATE, help="New leaving date (YYYY-MM-DD)")
@click.option("--current", is_flag=True, help="Clear the leaving date")
@click.option("--employee-id", help="New employee ID (empty to clear)")
@click.option("--notes", help="New notes (empty to clear)")
@click.pass_context
def edit_employment(
    ctx,
    entry_id: int,
    organization: str | None,
    joined,
    left,
    current: bool,
    employee_id: str | None,
    notes: str | None,
):
    """Edit an employment history entry."""
    service = EmploymentService(ctx.obj["db"])

    try:
        entry = service.update_entry(
            ctx.obj["user_id"],
            entry_id,
            organization=organization,
            joining_date=_as_date(joined),
            leaving_date=_as_date(left),
            employee_id=employee_id,
            notes=notes,
            clear_leaving_date=current,
        )
        click.echo(f"Updated employment at '{entry.organization}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@employment_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_employment(ctx, entry_id: int, yes: bool):
    """Delete an employment history entry."""
    service = EmploymentService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete employment entry {entry_id}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_entry(ctx.obj["user_id"], entry_id)
        click.echo(f"Deleted employment entry {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register employment history commands with main CLI."""
    cli.add_command(employment_group, name="employment")
