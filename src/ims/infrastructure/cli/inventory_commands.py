"""CLI commands for inventory rows. Every write goes through the ledger."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.domain.model.inventory import Inventory
from ims.infrastructure.cli.context import CliState, pass_state


def _echo_rows(rows: list[Inventory]) -> None:
    click.echo(
        f"{'ID':<36} {'Product':<36} {'Warehouse':<36} {'Avail':>6} {'Resv':>6} {'Dmg':>6}"
    )
    click.echo("-" * 131)
    for row in rows:
        click.echo(
            f"{row.id:<36} {row.product_id:<36} {row.warehouse_id:<36} "
            f"{row.quantity_available:>6} {row.quantity_reserved:>6} {row.quantity_damaged:>6}"
        )


@click.command("create")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--warehouse", "warehouse_id", required=True, help="Warehouse ID.")
@click.option("--qty", type=int, required=True, help="Initial available quantity.")
@pass_state
def inventory_create(state: CliState, product_id: str, warehouse_id: str, qty: int) -> None:
    """Open a stock row for a product in a warehouse."""
    try:
        row = state.services.ledger.create(product_id, warehouse_id, qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory {row.id} opened with {row.quantity_available} units")


@click.command("show")
@click.option("--product", "product_id", default=None, help="Filter by product ID.")
@click.option("--warehouse", "warehouse_id", default=None, help="Filter by warehouse ID.")
@click.option("--low", is_flag=True, help="Only rows at or below their threshold.")
@pass_state
def inventory_show(
    state: CliState, product_id: str | None, warehouse_id: str | None, low: bool
) -> None:
    """Show stock levels."""
    ledger = state.services.ledger
    try:
        if low:
            rows = ledger.list_low_stock()
        elif product_id and warehouse_id:
            rows = [ledger.get_for_pair(product_id, warehouse_id)]
        elif product_id:
            rows = ledger.list_by_product(product_id)
        elif warehouse_id:
            rows = ledger.list_by_warehouse(warehouse_id)
        else:
            rows = ledger.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No inventory found.")
        return
    _echo_rows(rows)


def _adjust(state: CliState, operation: str, inventory_id: str, qty: int) -> None:
    ledger = state.services.ledger
    try:
        row = getattr(ledger, operation)(inventory_id, qty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Inventory {row.id}: available={row.quantity_available} "
        f"reserved={row.quantity_reserved} damaged={row.quantity_damaged}"
    )


@click.command("reserve")
@click.option("--id", "inventory_id", required=True, help="Inventory ID.")
@click.option("--qty", type=int, required=True, help="Units to reserve.")
@pass_state
def inventory_reserve(state: CliState, inventory_id: str, qty: int) -> None:
    """Move units from available to reserved."""
    _adjust(state, "reserve", inventory_id, qty)


@click.command("release")
@click.option("--id", "inventory_id", required=True, help="Inventory ID.")
@click.option("--qty", type=int, required=True, help="Units to release.")
@pass_state
def inventory_release(state: CliState, inventory_id: str, qty: int) -> None:
    """Move units from reserved back to available."""
    _adjust(state, "release", inventory_id, qty)


@click.command("damage")
@click.option("--id", "inventory_id", required=True, help="Inventory ID.")
@click.option("--qty", type=int, required=True, help="Units found damaged.")
@pass_state
def inventory_damage(state: CliState, inventory_id: str, qty: int) -> None:
    """Move units from available to damaged."""
    _adjust(state, "mark_damaged", inventory_id, qty)


@click.command("receive")
@click.option("--id", "inventory_id", required=True, help="Inventory ID.")
@click.option("--qty", type=int, required=True, help="Units received.")
@pass_state
def inventory_receive(state: CliState, inventory_id: str, qty: int) -> None:
    """Add received units to available stock."""
    _adjust(state, "receive", inventory_id, qty)


@click.command("set")
@click.option("--id", "inventory_id", required=True, help="Inventory ID.")
@click.option("--available", type=int, required=True, help="Available units.")
@click.option("--reserved", type=int, default=0, show_default=True, help="Reserved units.")
@click.option("--damaged", type=int, default=0, show_default=True, help="Damaged units.")
@pass_state
def inventory_set(
    state: CliState, inventory_id: str, available: int, reserved: int, damaged: int
) -> None:
    """Overwrite all three stock buckets."""
    try:
        row = state.services.ledger.set_stock(inventory_id, available, reserved, damaged)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Inventory {row.id} set: available={row.quantity_available} "
        f"reserved={row.quantity_reserved} damaged={row.quantity_damaged}"
    )
