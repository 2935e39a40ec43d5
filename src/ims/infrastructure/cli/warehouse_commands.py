"""CLI commands for warehouses."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.infrastructure.cli.context import CliState, pass_state


@click.command("add")
@click.option("--name", required=True, help="Warehouse name.")
@click.option("--location", default="", help="Location.")
@click.option("--contact", default="", help="Contact details.")
@pass_state
def warehouse_add(state: CliState, name: str, location: str, contact: str) -> None:
    """Register a warehouse."""
    try:
        warehouse = state.services.warehouses.create(name, location, contact)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Warehouse {warehouse.id} '{warehouse.name}' added")


@click.command("list")
@pass_state
def warehouse_list(state: CliState) -> None:
    """List warehouses."""
    warehouses = state.services.warehouses.list_all()
    if not warehouses:
        click.echo("No warehouses found.")
        return

    click.echo(f"{'ID':<36} {'Name':<20} {'Location':<20}")
    click.echo("-" * 78)
    for w in warehouses:
        click.echo(f"{w.id:<36} {w.name:<20} {w.location:<20}")


@click.command("update")
@click.option("--id", "warehouse_id", required=True, help="Warehouse ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--location", default=None, help="New location.")
@click.option("--contact", default=None, help="New contact details.")
@pass_state
def warehouse_update(
    state: CliState,
    warehouse_id: str,
    name: str | None,
    location: str | None,
    contact: str | None,
) -> None:
    """Update a warehouse."""
    try:
        state.services.warehouses.update(warehouse_id, name, location, contact)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Warehouse {warehouse_id} updated")


@click.command("delete")
@click.option("--id", "warehouse_id", required=True, help="Warehouse ID.")
@click.confirmation_option(
    prompt="This removes the warehouse's inventory, alerts and orders. Continue?"
)
@pass_state
def warehouse_delete(state: CliState, warehouse_id: str) -> None:
    """Delete a warehouse and everything stored in it."""
    try:
        state.services.warehouses.delete(warehouse_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Warehouse {warehouse_id} deleted")
