"""Category management commands."""

import click

from schoolledger.cli.error_handling import handle_domain_error, handle_persistence_error
from schoolledger.domain.category import CategoryService
from schoolledger.domain.errors import DomainError, PersistenceError


def print_category(cat) -> None:
    """Print a category with its subcategories."""
    flags = []
    if cat.category_type is not None:
        flags.append(cat.category_type.value)
    if not cat.is_active:
        flags.append("retired")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    click.echo(f"{cat.name} (ID: {cat.id}){suffix}")
    for sub in cat.subcategories:
        click.echo(f"  {sub}")


@click.group()
def category_group():
    """Manage income and expense categories."""
    pass


@category_group.command("list")
@click.option("--kind", type=click.Choice(["income", "expense"]), help="Only income or expense categories")
@click.option("--all", "include_retired", is_flag=True, help="Include retired categories")
@click.pass_context
def list_categories(ctx, kind: str | None, include_retired: bool):
    """List categories and their subcategories."""
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    kinds = [kind] if kind else ["income", "expense"]
    found = False
    for k in kinds:
        categories = service.list_categories(k) if include_retired else service.list_active(k)
        if not categories:
            continue
        found = True
        click.echo(f"\n{k.capitalize()} categories:")
        for cat in categories:
            print_category(cat)

    if not found:
        click.echo("No categories found. Run 'init-categories' to create default categories.")


@category_group.command("create")
@click.argument("name")
@click.option("--kind", type=click.Choice(["income", "expense"]), required=True, help="Category kind")
@click.option("--sub", "subcategories", multiple=True, help="Subcategory (repeat for several)")
@click.option("--type", "category_type", type=click.Choice(["income", "capital"]), help="Income categories only: revenue or capital inflow")
@click.option("--description", help="Description")
@click.pass_context
def create_category(ctx, name: str, kind: str, subcategories: tuple[str, ...], category_type: str | None, description: str | None):
    """Create a new category.

    Examples:
        schoolledger category create "Transport" --kind expense --sub Fuel --sub "Bus maintenance"
    """
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    try:
        category = service.create_category(
            kind=kind,
            name=name,
            subcategories=subcategories,
            category_type=category_type,
            description=description,
        )
        click.echo(f"Created {kind} category '{category.name}' (ID: {category.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)


@category_group.command("add-sub")
@click.argument("category_id", type=int)
@click.argument("name")
@click.pass_context
def add_subcategory(ctx, category_id: int, name: str):
    """Append a subcategory to a category."""
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    try:
        category = service.add_subcategory(category_id, name)
        click.echo(f"Added subcategory '{name}' to '{category.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)
    except PersistenceError as e:
        handle_persistence_error(ctx, e)


@category_group.command("retire")
@click.argument("category_id", type=int)
@click.pass_context
def retire_category(ctx, category_id: int):
    """Retire a category; existing entries keep their labels."""
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    try:
        category = service.retire(category_id)
        click.echo(f"Retired category '{category.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("activate")
@click.argument("category_id", type=int)
@click.pass_context
def activate_category(ctx, category_id: int):
    """Reactivate a retired category."""
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    try:
        category = service.activate(category_id)
        click.echo(f"Activated category '{category.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("check-legacy")
@click.option("--kind", type=click.Choice(["income", "expense"]), required=True, help="Category kind to check")
@click.option("--register", is_flag=True, help="Register the unknown labels as categories")
@click.pass_context
def check_legacy(ctx, kind: str, register: bool):
    """Find ledger labels that are not registered categories.

    With --register, the missing categories and subcategories are created so
    older free-text entries resolve against the registry.
    """
    db = ctx.obj["db"]
    service = CategoryService(db, ctx.obj["config"])

    missing = service.find_unregistered(kind)
    if not missing:
        click.echo(f"All {kind} labels are registered.")
        return

    click.echo(f"\nUnregistered {kind} labels:")
    for category, subcategory in missing:
        click.echo(f"  {service.format_category_path(category, subcategory)}")

    if register:
        try:
            changes = service.register_legacy_labels(kind)
        except PersistenceError as e:
            handle_persistence_error(ctx, e)
        click.echo(f"Registered {changes} categories/subcategories.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
