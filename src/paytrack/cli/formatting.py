"""Text rendering helpers shared by CLI commands."""

from decimal import Decimal

import click

from paytrack.domain.entities import ImportPlan, ImportSummary, LineItem
from paytrack.utils.month_parser import parse_month_year

# Invalid rows listed before the rest are summarized
MAX_LISTED_ROWS = 20


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def parse_month_year_option(value: str) -> tuple[int, int]:
    """Parse a "MM/YYYY" or "JAN 2025" command-line period."""
    if "/" in value:
        month_str, _, year_str = value.partition("/")
        if month_str.strip().isdigit() and year_str.strip().isdigit():
            return int(month_str), int(year_str)

    period = parse_month_year(value)
    if period is None:
        raise click.BadParameter(f"'{value}' is not a period like 01/2025 or 'JAN 2025'")
    return period


def print_line_items(title: str, items: tuple[LineItem, ...]) -> None:
    """Print one list of line items with right-aligned amounts."""
    click.echo(f"  {title}:")
    if not items:
        click.echo("    (none)")
    for item in items:
        click.echo(f"    {item.category:<40} {format_amount(item.amount):>15}")


def print_import_plan(plan: ImportPlan) -> None:
    """Print the dry-run plan of a workbook import."""
    click.echo("\nImport preview:")
    if plan.is_empty:
        click.echo("  No salary rows found in any sheet.")
        return

    for sheet in plan.sheets:
        click.echo(
            f"  {sheet.sheet_name:<31} {len(sheet.records):>5} records {sheet.skipped_rows:>5} skipped rows"
        )
    click.echo(f"  Total records to import: {plan.total_records_to_import}")
    click.echo(f"  Total skipped rows: {plan.total_skipped_rows}")

    if plan.invalid_rows:
        click.echo("\nRows that will be skipped:")
        for row in plan.invalid_rows[:MAX_LISTED_ROWS]:
            click.echo(f"  {row.sheet_name} row {row.excel_row_number}: {row.reason}")
        if len(plan.invalid_rows) > MAX_LISTED_ROWS:
            click.echo(f"  ... and {len(plan.invalid_rows) - MAX_LISTED_ROWS} more")

    if plan.bound_violations:
        click.echo("\nRecords that will not be written (values out of range):")
        for row in plan.bound_violations[:MAX_LISTED_ROWS]:
            click.echo(f"  {row.sheet_name} row {row.excel_row_number}: {row.reason}")
        if len(plan.bound_violations) > MAX_LISTED_ROWS:
            click.echo(f"  ... and {len(plan.bound_violations) - MAX_LISTED_ROWS} more")


def print_import_summary(summary: ImportSummary) -> None:
    """Print the outcome of an executed import."""
    click.echo("\nImport complete:")
    for sheet in summary.sheets:
        click.echo(f"  {sheet.sheet_name}: {sheet.records_imported} records imported")
    click.echo(f"  Templates updated: {summary.total_templates}")
    click.echo(f"  Records imported: {summary.total_records}")
    click.echo(f"  Rows skipped: {summary.total_skipped_rows}")
    if summary.skipped_records:
        click.echo(f"  Records not written: {len(summary.skipped_records)}")
