"""Monthly budget commands."""

from decimal import Decimal, InvalidOperation

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.cli.formatting import format_amount, parse_month_year_option
from paytrack.domain.budget import BudgetService, parse_allocation
from paytrack.domain.errors import ValidationError
from paytrack.utils.amount_parser import parse_amount
from paytrack.utils.month_parser import format_month_year


def _parse_net_income(value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--net-income") from e


def _amount_text(value) -> str:
    try:
        return format_amount(Decimal(str(value or 0)))
    except InvalidOperation:
        return str(value)


def _parse_allocations(values: tuple[str, ...]):
    try:
        return [parse_allocation(v) for v in values]
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--allocate") from e


@click.group()
def budget_group():
    """Plan how a month's net income is spent."""
    pass


@budget_group.command("save")
@click.argument("period")
@click.option("--net-income", "-n", required=True, help="Net income to distribute")
@click.option(
    "--allocate",
    "-a",
    multiple=True,
    help="Allocation as 'Category/Subcategory=amount' (repeatable)",
)
@click.pass_context
def save_budget(ctx, period: str, net_income: str, allocate: tuple[str, ...]):
    """Save the budget for PERIOD (e.g. 01/2025 or 'JAN 2025').

    A budget already saved for PERIOD is replaced. Only the six most recent
    months are kept.
    """
    month, year = parse_month_year_option(period)
    service = BudgetService(ctx.obj["db"])

    try:
        entry_id = service.save_budget(
            ctx.obj["user_id"], month, year, _parse_net_income(net_income), _parse_allocations(allocate)
        )
        click.echo(f"Saved budget for {format_month_year(month, year)} (ID: {entry_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List saved budgets, newest first."""
    service = BudgetService(ctx.obj["db"])

    budgets = service.list_budgets(ctx.obj["user_id"])
    if not budgets:
        click.echo("No budgets saved.")
        return

    click.echo(f"\n{'ID':<6} {'Month':<9} {'Net Income':>14} {'Allocated':>14} {'Remaining':>14}")
    click.echo("-" * 61)
    for b in budgets:
        click.echo(
            f"{b.id:<6} {format_month_year(b.month, b.year):<9} "
            f"{format_amount(b.net_income):>14} {format_amount(b.total_allocated):>14} "
            f"{format_amount(b.remaining):>14}"
        )


@budget_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_budget(ctx, entry_id: int):
    """Show one budget with its category allocations."""
    service = BudgetService(ctx.obj["db"])

    budget = service.get_budget(ctx.obj["user_id"], entry_id)
    if budget is None:
        click.echo(f"Error: Budget entry {entry_id} not found", err=True)
        ctx.exit(1)
        return

    click.echo(f"\nBudget for {format_month_year(budget.month, budget.year)}")
    for category in budget.categories:
        click.echo(f"  {category.get('name', '-')}:")
        for sub in category.get("subcategories") or []:
            click.echo(f"    {sub.get('name', '-'):<40} {_amount_text(sub.get('amount')):>15}")
    click.echo(f"  {'Net Income':<42} {format_amount(budget.net_income):>15}")
    click.echo(f"  {'Allocated':<42} {format_amount(budget.total_allocated):>15}")
    click.echo(f"  {'Remaining':<42} {format_amount(budget.remaining):>15}")


@budget_group.command("edit")
@click.argument("entry_id", type=int)
@click.option("--net-income", "-n", help="New net income")
@click.option("--allocate", "-a", multiple=True, help="Replace all allocations (repeatable)")
@click.pass_context
def edit_budget(ctx, entry_id: int, net_income: str | None, allocate: tuple[str, ...]):
    """Change the net income or allocations of a saved budget."""
    service = BudgetService(ctx.obj["db"])
    income = _parse_net_income(net_income) if net_income is not None else None

    try:
        budget = service.update_budget(
            ctx.obj["user_id"], entry_id, net_income=income, allocations=_parse_allocations(allocate)
        )
        click.echo(
            f"Updated budget for {format_month_year(budget.month, budget.year)}: "
            f"{format_amount(budget.remaining)} remaining"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@budget_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_budget(ctx, entry_id: int, yes: bool):
    """Delete a saved budget."""
    service = BudgetService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete budget {entry_id}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_budget(ctx.obj["user_id"], entry_id)
        click.echo(f"Deleted budget {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
