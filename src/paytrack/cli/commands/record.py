"""Salary record commands."""

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.cli.formatting import format_amount, parse_month_year_option, print_line_items
from paytrack.domain.entities import LineItem
from paytrack.domain.salary_record import SalaryRecordService
from paytrack.utils.amount_parser import parse_amount
from paytrack.utils.month_parser import financial_year_label, format_month_year


def _parse_items(values: tuple[str, ...], option: str) -> list[LineItem]:
    """Parse repeated "Category=amount" option values."""
    items = []
    for value in values:
        category, sep, amount = value.rpartition("=")
        if not sep or not category.strip():
            raise click.BadParameter(f"'{value}' must look like 'Category=amount'", param_hint=option)
        try:
            items.append(LineItem(category=category.strip(), amount=parse_amount(amount)))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint=option) from e
    return items


@click.group()
def record_group():
    """Add, view and delete monthly salary records."""
    pass


@record_group.command("add")
@click.argument("period")
@click.option("--organization", "-o", help="Employer name")
@click.option("--earning", "-e", multiple=True, help="Earning as 'Category=amount' (repeatable)")
@click.option("--deduction", "-d", multiple=True, help="Deduction as 'Category=amount' (repeatable)")
@click.option("--notes", help="Optional notes")
@click.pass_context
def add_record(
    ctx,
    period: str,
    organization: str | None,
    earning: tuple[str, ...],
    deduction: tuple[str, ...],
    notes: str | None,
):
    """Add or replace the salary record for PERIOD (e.g. 01/2025 or 'JAN 2025').

    Totals and net pay are computed from the line items.
    """
    month, year = parse_month_year_option(period)
    earnings = _parse_items(earning, "--earning")
    deductions = _parse_items(deduction, "--deduction")
    service = SalaryRecordService(ctx.obj["db"])

    try:
        record_id = service.save_record(
            ctx.obj["user_id"], month, year, organization, earnings, deductions, notes=notes
        )
        click.echo(f"Saved salary record for {format_month_year(month, year)} (ID: {record_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@record_group.command("list")
@click.option("--organization", "-o", help="Only this organization")
@click.option("--financial-year", "--fy", "financial_year", help="Only this financial year, e.g. 'FY 2024-25'")
@click.option("--year-from", type=int, help="First calendar year")
@click.option("--year-to", type=int, help="Last calendar year")
@click.pass_context
def list_records(
    ctx,
    organization: str | None,
    financial_year: str | None,
    year_from: int | None,
    year_to: int | None,
):
    """List salary records, newest first."""
    service = SalaryRecordService(ctx.obj["db"])

    records = service.list_records(
        ctx.obj["user_id"],
        organization=organization,
        financial_year=financial_year,
        year_from=year_from,
        year_to=year_to,
    )
    if not records:
        click.echo("No salary records found.")
        return

    click.echo(
        f"\n{'ID':<6} {'Month':<9} {'FY':<11} {'Organization':<20} "
        f"{'Earnings':>14} {'Deductions':>14} {'Net':>14}"
    )
    click.echo("-" * 94)
    for r in records:
        org = (r.organization or "-")[:20]
        click.echo(
            f"{r.id:<6} {format_month_year(r.month, r.year):<9} "
            f"{financial_year_label(r.month, r.year):<11} {org:<20} "
            f"{format_amount(r.total_earnings):>14} {format_amount(r.total_deductions):>14} "
            f"{format_amount(r.net_salary):>14}"
        )


@record_group.command("show")
@click.argument("record_id", type=int)
@click.pass_context
def show_record(ctx, record_id: int):
    """Show one salary record with its earnings and deductions."""
    service = SalaryRecordService(ctx.obj["db"])

    record = service.get_record(ctx.obj["user_id"], record_id)
    if record is None:
        click.echo(f"Error: Salary record {record_id} not found", err=True)
        ctx.exit(1)
        return

    click.echo(f"\n{format_month_year(record.month, record.year)} - {record.organization or 'Not specified'}")
    print_line_items("Earnings", record.earnings)
    print_line_items("Deductions", record.deductions)
    click.echo(f"  {'Total Earnings':<42} {format_amount(record.total_earnings):>15}")
    click.echo(f"  {'Total Deductions':<42} {format_amount(record.total_deductions):>15}")
    click.echo(f"  {'Net Salary':<42} {format_amount(record.net_salary):>15}")
    if record.notes:
        click.echo(f"  Notes: {record.notes}")


@record_group.command("delete")
@click.argument("record_id", type=int)
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_record(ctx, record_id: int, yes: bool):
    """Delete a salary record and its line items."""
    service = SalaryRecordService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete salary record {record_id}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_record(ctx.obj["user_id"], record_id)
        click.echo(f"Deleted salary record {record_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register salary record commands with main CLI."""
    cli.add_command(record_group, name="record")
