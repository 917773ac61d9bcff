"""Organization template commands."""

import click
from paytrack.cli.error_handling import handle_domain_error
from paytrack.domain.entities import ColumnKind
from paytrack.domain.template import TemplateService

KIND_CHOICE = click.Choice(["earning", "deduction"], case_sensitive=False)


def _split(value: str | None) -> list[str]:
    return [c.strip() for c in value.split(",")] if value else []


@click.group()
def template_group():
    """Manage per-organization earning and deduction categories."""
    pass


@template_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List organization templates."""
    service = TemplateService(ctx.obj["db"])

    templates = service.list_templates(ctx.obj["user_id"])
    if not templates:
        click.echo("No templates found. Run 'template init' or import a workbook to create some.")
        return

    click.echo(f"\n{'Organization':<31} {'Earnings':>10} {'Deductions':>10}")
    click.echo("-" * 53)
    for t in templates:
        click.echo(f"{t.name:<31} {len(t.earning_categories):>10} {len(t.deduction_categories):>10}")


@template_group.command("show")
@click.argument("name")
@click.pass_context
def show_template(ctx, name: str):
    """Show the categories of a template."""
    service = TemplateService(ctx.obj["db"])

    template = service.get_template(ctx.obj["user_id"], name)
    if template is None:
        click.echo(f"Error: Organization template '{name}' not found", err=True)
        ctx.exit(1)
        return

    click.echo(f"\n{template.name}")
    click.echo("  Earnings:")
    for category in template.earning_categories:
        click.echo(f"    {category}")
    click.echo("  Deductions:")
    for category in template.deduction_categories:
        click.echo(f"    {category}")


@template_group.command("create")
@click.argument("name")
@click.option("--earnings", help="Comma-separated earning categories")
@click.option("--deductions", help="Comma-separated deduction categories")
@click.pass_context
def create_template(ctx, name: str, earnings: str | None, deductions: str | None):
    """Create a template."""
    service = TemplateService(ctx.obj["db"])

    try:
        template_id = service.create_template(
            ctx.obj["user_id"], name, _split(earnings), _split(deductions)
        )
        click.echo(f"Created template '{name.strip()}' (ID: {template_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@template_group.command("delete")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_template(ctx, name: str, yes: bool):
    """Delete a template. Salary records are kept."""
    service = TemplateService(ctx.obj["db"])

    if not yes and not click.confirm(f"Are you sure you want to delete template '{name}'?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_template(ctx.obj["user_id"], name)
        click.echo(f"Deleted template '{name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@template_group.command("init")
@click.pass_context
def init_templates(ctx):
    """Create templates for the built-in organizations."""
    service = TemplateService(ctx.obj["db"])

    try:
        created = service.init_default_templates(ctx.obj["user_id"])
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not created:
        click.echo("All built-in templates already exist.")
        return
    click.echo(f"Created {len(created)} templates: {', '.join(created)}")


@template_group.command("move")
@click.argument("name")
@click.argument("category")
@click.option("--from", "from_kind", type=KIND_CHOICE, required=True, help="List the category is in now")
@click.pass_context
def move_category(ctx, name: str, category: str, from_kind: str):
    """Move a category between earnings and deductions.

    Existing salary records of the organization are updated too.
    """
    service = TemplateService(ctx.obj["db"])

    try:
        moved = service.move_category(ctx.obj["user_id"], name, category, ColumnKind(from_kind.lower()))
        target = "deductions" if from_kind.lower() == "earning" else "earnings"
        click.echo(f"Moved '{category}' to {target} ({moved} salary record entries updated)")
    except ValueError as e:
        handle_domain_error(ctx, e)


@template_group.command("rename")
@click.argument("name")
@click.argument("old_category")
@click.argument("new_category")
@click.option("--kind", type=KIND_CHOICE, required=True, help="List the category is in")
@click.pass_context
def rename_category(ctx, name: str, old_category: str, new_category: str, kind: str):
    """Rename a category in a template and its organization's salary records."""
    service = TemplateService(ctx.obj["db"])

    try:
        renamed = service.rename_category(
            ctx.obj["user_id"], name, ColumnKind(kind.lower()), old_category, new_category
        )
        click.echo(
            f"Renamed '{old_category}' to '{new_category.strip()}' ({renamed} salary record entries updated)"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@template_group.command("reorder")
@click.argument("name")
@click.argument("category")
@click.option("--kind", type=KIND_CHOICE, required=True, help="List the category is in")
@click.option(
    "--direction",
    type=click.Choice(["up", "down"], case_sensitive=False),
    default="down",
    show_default=True,
    help="Direction to move",
)
@click.pass_context
def reorder_category(ctx, name: str, category: str, kind: str, direction: str):
    """Move a category one place up or down within its list."""
    service = TemplateService(ctx.obj["db"])

    try:
        offset = -1 if direction.lower() == "up" else 1
        service.reorder_category(ctx.obj["user_id"], name, ColumnKind(kind.lower()), category, offset)
        click.echo(f"Moved '{category}' {direction.lower()}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
