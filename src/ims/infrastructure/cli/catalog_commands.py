"""CLI commands for products and categories."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.infrastructure.cli.context import CliState, pass_state


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--sku", required=True, help="Unique stock keeping unit.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--threshold", type=int, default=10, show_default=True,
              help="Minimum stock threshold.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--warehouse", "warehouse_id", default=None,
              help="Open an inventory row in this warehouse.")
@click.option("--initial-stock", type=int, default=None,
              help="Units for the new inventory row (default: the threshold).")
@pass_state
def product_add(
    state: CliState,
    name: str,
    sku: str,
    price: str,
    threshold: int,
    category_id: str | None,
    description: str,
    warehouse_id: str | None,
    initial_stock: int | None,
) -> None:
    """Add a new product to the catalog."""
    try:
        product = state.services.products.create(
            name=name,
            sku=sku,
            unit_price=price,
            minimum_stock_threshold=threshold,
            category_id=category_id,
            description=description,
            warehouse_id=warehouse_id,
            initial_stock=initial_stock,
            actor=state.actor,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' ({product.sku}) added at {product.unit_price}")


@click.command("list")
@click.option("--search", default=None, help="Filter by name, description or model.")
@click.option("--category", "category_name", default=None, help="Filter by category name.")
@pass_state
def product_list(state: CliState, search: str | None, category_name: str | None) -> None:
    """List products in the catalog."""
    service = state.services.products
    try:
        if search:
            products = service.search(search)
        elif category_name:
            products = service.list_by_category_name(category_name)
        else:
            products = service.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<36} {'SKU':<12} {'Name':<20} {'Price':>10} {'Min':>5}")
    click.echo("-" * 87)
    for p in products:
        click.echo(
            f"{p.id:<36} {p.sku:<12} {p.name:<20} {str(p.unit_price):>10} "
            f"{p.minimum_stock_threshold:>5}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--sku", default=None, help="New SKU.")
@click.option("--price", default=None, help="New unit price.")
@click.option("--threshold", type=int, default=None, help="New minimum stock threshold.")
@pass_state
def product_update(
    state: CliState,
    product_id: str,
    name: str | None,
    sku: str | None,
    price: str | None,
    threshold: int | None,
) -> None:
    """Update a product's details."""
    try:
        product = state.services.products.update(
            product_id,
            name=name,
            sku=sku,
            unit_price=price,
            minimum_stock_threshold=threshold,
            actor=state.actor,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} updated")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@pass_state
def product_delete(state: CliState, product_id: str) -> None:
    """Delete a product and its inventory rows."""
    try:
        state.services.products.delete(product_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted")


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default="", help="Description.")
@click.option("--order", "display_order", type=int, default=0, help="Display order.")
@pass_state
def category_add(state: CliState, name: str, description: str, display_order: int) -> None:
    """Add a product category."""
    try:
        category = state.services.categories.create(
            name, description, display_order, actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category.id} '{category.name}' added")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive categories.")
@pass_state
def category_list(state: CliState, include_inactive: bool) -> None:
    """List categories."""
    service = state.services.categories
    try:
        categories = (
            service.list_all(actor=state.actor) if include_inactive else service.list_active()
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not categories:
        click.echo("No categories found.")
        return
    for c in categories:
        flag = "" if c.is_active else " (inactive)"
        click.echo(f"{c.id}  {c.name}{flag}")


@click.command("deactivate")
@click.option("--id", "category_id", required=True, help="Category ID.")
@pass_state
def category_deactivate(state: CliState, category_id: str) -> None:
    """Hide a category from the active list."""
    try:
        state.services.categories.deactivate(category_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category_id} deactivated")


@click.command("delete")
@click.option("--id", "category_id", required=True, help="Category ID.")
@pass_state
def category_delete(state: CliState, category_id: str) -> None:
    """Delete a category."""
    try:
        state.services.categories.delete(category_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category_id} deleted")
