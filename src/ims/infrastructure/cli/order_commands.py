"""CLI commands for purchase orders and sales orders."""

from __future__ import annotations

from datetime import datetime

import click

from ims.application.dto import PurchaseOrderItemSpec, ReceivedItemSpec, SalesOrderItemSpec
from ims.domain.exceptions import DomainException
from ims.domain.model.purchase_order import PurchaseOrder, PurchaseOrderStatus
from ims.domain.model.sales_order import SalesOrder, SalesOrderStatus
from ims.infrastructure.cli.context import (
    CliState,
    as_utc,
    parse_int,
    parse_pairs,
    pass_state,
)

_PO_STATUS = click.Choice([s.value for s in PurchaseOrderStatus], case_sensitive=False)
_SO_STATUS = click.Choice([s.value for s in SalesOrderStatus], case_sensitive=False)


def _display_purchase_order(order: PurchaseOrder) -> None:
    click.echo(f"Purchase order {order.id}  (status={order.status.value})")
    click.echo(f"Supplier:  {order.supplier_name}")
    click.echo(f"Warehouse: {order.warehouse_id}")
    click.echo(f"Created:   {order.created_at:%Y-%m-%d %H:%M:%S}")
    click.echo()
    click.echo(f"  {'Item':<36} {'Product':<36} {'Ord':>5} {'Rcvd':>5} {'Price':>10}")
    click.echo(f"  {'-' * 96}")
    for item in order.items:
        click.echo(
            f"  {item.id:<36} {item.product_id:<36} {item.quantity_ordered.value:>5} "
            f"{item.quantity_received:>5} {str(item.unit_price):>10}"
        )
    click.echo(f"  {'-' * 96}")
    click.echo(f"  {'Order Total':<80} {str(order.total_amount):>15}")


def _display_sales_order(order: SalesOrder) -> None:
    click.echo(f"Sales order {order.id}  (status={order.status.value})")
    click.echo(f"Customer:  {order.customer_name} <{order.customer_email}>")
    click.echo(f"Warehouse: {order.warehouse_id}")
    click.echo()
    click.echo(f"  {'Product':<36} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-' * 53}")
    for item in order.items:
        click.echo(
            f"  {item.product_id:<36} {item.quantity.value:>5} {str(item.unit_price):>10}"
        )
    click.echo(f"  {'-' * 53}")
    click.echo(f"  {'Order Total':<36} {str(order.total_amount):>16}")


# --- Purchase orders ----------------------------------------------------------


@click.command("create")
@click.option("--warehouse", "warehouse_id", required=True, help="Receiving warehouse ID.")
@click.option("--supplier", required=True, help="Supplier name.")
@click.option("--item", "items", multiple=True, required=True,
              help="Item as 'ProductID:Qty:UnitPrice'. Repeatable.")
@click.option("--contact", default="", help="Supplier contact info.")
@click.option("--notes", default="", help="Notes.")
@pass_state
def purchase_order_create(
    state: CliState,
    warehouse_id: str,
    supplier: str,
    items: tuple[str, ...],
    contact: str,
    notes: str,
) -> None:
    """Create a PENDING purchase order."""
    specs = []
    for parts in parse_pairs(items, "ProductID:Qty:UnitPrice"):
        if len(parts) != 3:
            raise click.BadParameter("Purchase order items need 'ProductID:Qty:UnitPrice'.")
        specs.append(
            PurchaseOrderItemSpec(
                product_id=parts[0],
                quantity_ordered=parse_int(parts[1], "quantity"),
                unit_price=parts[2],
            )
        )

    try:
        order = state.services.purchase_orders.create(
            warehouse_id, supplier, specs, contact_info=contact, notes=notes
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_purchase_order(order)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Purchase order ID.")
@pass_state
def purchase_order_show(state: CliState, order_id: str) -> None:
    """Show a purchase order."""
    try:
        order = state.services.purchase_orders.get(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_purchase_order(order)


@click.command("list")
@click.option("--status", type=_PO_STATUS, default=None, help="Filter by status.")
@click.option("--warehouse", "warehouse_id", default=None, help="Filter by warehouse ID.")
@pass_state
def purchase_order_list(state: CliState, status: str | None, warehouse_id: str | None) -> None:
    """List purchase orders."""
    workflow = state.services.purchase_orders
    try:
        if status:
            orders = workflow.list_by_status(PurchaseOrderStatus(status.upper()))
        elif warehouse_id:
            orders = workflow.list_by_warehouse(warehouse_id)
        else:
            orders = workflow.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No purchase orders found.")
        return
    for o in orders:
        click.echo(f"{o.id}  {o.status.value:<9} {o.supplier_name:<20} {o.total_amount}")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Purchase order ID.")
@click.option("--to", "new_status", type=_PO_STATUS, required=True, help="New status.")
@pass_state
def purchase_order_status(state: CliState, order_id: str, new_status: str) -> None:
    """Advance a purchase order (RECEIVED credits inventory)."""
    try:
        order = state.services.purchase_orders.update_status(
            order_id, PurchaseOrderStatus(new_status.upper()), actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order {order.id} is now {order.status.value}")


@click.command("receive")
@click.option("--id", "order_id", required=True, help="Purchase order ID.")
@click.option("--item", "items", multiple=True, required=True,
              help="Received as 'ItemID:CumulativeQty'. Repeatable.")
@pass_state
def purchase_order_receive(state: CliState, order_id: str, items: tuple[str, ...]) -> None:
    """Record partial receipts for an APPROVED order."""
    received = [
        ReceivedItemSpec(item_id=parts[0], quantity_received=parse_int(parts[1], "quantity"))
        for parts in parse_pairs(items, "ItemID:Qty")
    ]
    try:
        order = state.services.purchase_orders.receive_items(
            order_id, received, actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_purchase_order(order)


@click.command("delete")
@click.option("--id", "order_id", required=True, help="Purchase order ID.")
@pass_state
def purchase_order_delete(state: CliState, order_id: str) -> None:
    """Delete a PENDING purchase order."""
    try:
        state.services.purchase_orders.delete(order_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order {order_id} deleted")


@click.command("auto-approve")
@pass_state
def purchase_order_auto_approve(state: CliState) -> None:
    """Push aged PENDING orders through to RECEIVED now."""
    processed = state.services.purchase_orders.auto_approve_pending()
    click.echo(f"Auto-approved {len(processed)} purchase orders")


@click.command("received-between")
@click.option("--start", type=click.DateTime(), required=True, help="Start (UTC).")
@click.option("--end", type=click.DateTime(), required=True, help="End (UTC).")
@pass_state
def purchase_order_between(state: CliState, start: datetime, end: datetime) -> None:
    """List purchase orders created in a date range."""
    orders = state.services.purchase_orders.list_created_between(as_utc(start), as_utc(end))
    if not orders:
        click.echo("No purchase orders found.")
        return
    for o in orders:
        click.echo(f"{o.id}  {o.status.value:<9} {o.created_at:%Y-%m-%d %H:%M}")


# --- Sales orders -------------------------------------------------------------


@click.command("create")
@click.option("--warehouse", "warehouse_id", required=True, help="Shipping warehouse ID.")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--email", required=True, help="Customer email.")
@click.option("--item", "items", multiple=True, required=True,
              help="Item as 'ProductID:Qty[:UnitPrice]'. Repeatable.")
@click.option("--ship-to", default="", help="Shipping address.")
@click.option("--bill-to", default="", help="Billing address.")
@pass_state
def sales_order_create(
    state: CliState,
    warehouse_id: str,
    customer: str,
    email: str,
    items: tuple[str, ...],
    ship_to: str,
    bill_to: str,
) -> None:
    """Create a PENDING sales order (stock is checked, not reserved)."""
    specs = [
        SalesOrderItemSpec(
            product_id=parts[0],
            quantity=parse_int(parts[1], "quantity"),
            unit_price=parts[2] if len(parts) > 2 else None,
        )
        for parts in parse_pairs(items, "ProductID:Qty[:UnitPrice]")
    ]
    try:
        order = state.services.sales_orders.create(
            warehouse_id, customer, email, specs,
            shipping_address=ship_to, billing_address=bill_to,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_sales_order(order)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Sales order ID.")
@pass_state
def sales_order_show(state: CliState, order_id: str) -> None:
    """Show a sales order."""
    try:
        order = state.services.sales_orders.get(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_sales_order(order)


@click.command("list")
@click.option("--status", type=_SO_STATUS, default=None, help="Filter by status.")
@click.option("--email", default=None, help="Filter by customer email.")
@pass_state
def sales_order_list(state: CliState, status: str | None, email: str | None) -> None:
    """List sales orders."""
    workflow = state.services.sales_orders
    if status:
        orders = workflow.list_by_status(SalesOrderStatus(status.upper()))
    elif email:
        orders = workflow.list_by_customer(email)
    else:
        orders = workflow.list_all()

    if not orders:
        click.echo("No sales orders found.")
        return
    for o in orders:
        click.echo(f"{o.id}  {o.status.value:<10} {o.customer_email:<25} {o.total_amount}")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Sales order ID.")
@click.option("--to", "new_status", type=_SO_STATUS, required=True, help="New status.")
@pass_state
def sales_order_status(state: CliState, order_id: str, new_status: str) -> None:
    """Move a sales order (CONFIRMED reserves stock)."""
    try:
        order = state.services.sales_orders.update_status(
            order_id, SalesOrderStatus(new_status.upper()), actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order {order.id} is now {order.status.value}")


@click.command("delete")
@click.option("--id", "order_id", required=True, help="Sales order ID.")
@pass_state
def sales_order_delete(state: CliState, order_id: str) -> None:
    """Delete a sales order."""
    try:
        state.services.sales_orders.delete(order_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales order {order_id} deleted")
