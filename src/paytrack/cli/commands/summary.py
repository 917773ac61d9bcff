"""Summary command."""

import click
from paytrack.cli.formatting import format_amount
from paytrack.domain.entities import ColumnKind, SalarySummary, SummaryGroupBy
from paytrack.domain.summary import SummaryService


def _print_by_organization(report: SalarySummary) -> None:
    click.echo(f"{'Organization':<31} {'Months':>6} {'Gross':>16} {'Deductions':>16} {'Net':>16}")
    click.echo("-" * 89)
    for row in report.rows:
        click.echo(
            f"{row.organization[:31]:<31} {row.months:>6} {format_amount(row.gross):>16} "
            f"{format_amount(row.deductions):>16} {format_amount(row.net):>16}"
        )


def _print_by_financial_year(report: SalarySummary) -> None:
    click.echo(
        f"{'Financial year':<15} {'Months':>6} {'Gross':>16} {'Deductions':>16} "
        f"{'Income tax':>16} {'Net':>16}"
    )
    click.echo("-" * 90)
    for row in report.rows:
        click.echo(
            f"{row.financial_year:<15} {row.months:>6} {format_amount(row.gross):>16} "
            f"{format_amount(row.deductions):>16} {format_amount(row.income_tax):>16} "
            f"{format_amount(row.net):>16}"
        )


def _print_by_category(report: SalarySummary) -> None:
    for kind, title in ((ColumnKind.EARNING, "Earnings"), (ColumnKind.DEDUCTION, "Deductions")):
        rows = [r for r in report.rows if r.kind is kind]
        if not rows:
            continue
        click.echo(f"\n{title}")
        click.echo(f"{'Category':<50} {'Months':>6} {'Total':>20}")
        click.echo("-" * 78)
        for row in rows:
            click.echo(f"{row.category[:50]:<50} {row.occurrences:>6} {format_amount(row.amount):>20}")


@click.command("summary")
@click.option(
    "--by",
    "group_by",
    type=click.Choice([g.value for g in SummaryGroupBy], case_sensitive=False),
    default=SummaryGroupBy.ORGANIZATION.value,
    show_default=True,
    help="How to group the totals",
)
@click.option("--organization", "-o", help="Only this organization")
@click.option("--financial-year", "--fy", "financial_year", help="Only this financial year, e.g. 'FY 2024-25'")
@click.pass_context
def summary(ctx, group_by: str, organization: str | None, financial_year: str | None):
    """Show salary totals by organization, financial year or category."""
    service = SummaryService(ctx.obj["db"])

    report = service.build_summary(
        ctx.obj["user_id"],
        group_by=SummaryGroupBy(group_by.lower()),
        organization=organization,
        financial_year=financial_year,
    )
    if not report.rows:
        click.echo("No salary records found.")
        return

    click.echo()
    if report.group_by == SummaryGroupBy.FINANCIAL_YEAR:
        _print_by_financial_year(report)
    elif report.group_by == SummaryGroupBy.CATEGORY:
        _print_by_category(report)
    else:
        _print_by_organization(report)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
