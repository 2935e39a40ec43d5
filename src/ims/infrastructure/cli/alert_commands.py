"""CLI commands for low-stock alerts."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.domain.model.alert import AlertStatus
from ims.infrastructure.cli.context import CliState, pass_state

_STATUS_CHOICE = click.Choice([s.value for s in AlertStatus], case_sensitive=False)


@click.command("list")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Filter by status.")
@click.option("--product", "product_id", default=None, help="Filter by product ID.")
@click.option("--warehouse", "warehouse_id", default=None, help="Filter by warehouse ID.")
@pass_state
def alert_list(
    state: CliState, status: str | None, product_id: str | None, warehouse_id: str | None
) -> None:
    """List alerts."""
    service = state.services.alerts
    try:
        if status:
            alerts = service.list_by_status(AlertStatus(status.upper()))
        elif product_id:
            alerts = service.list_by_product(product_id)
        elif warehouse_id:
            alerts = service.list_by_warehouse(warehouse_id)
        else:
            alerts = service.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not alerts:
        click.echo("No alerts found.")
        return

    click.echo(f"{'ID':<36} {'Status':<12} {'Stock':>6} {'Min':>5} {'Reorder':>8}")
    click.echo("-" * 71)
    for a in alerts:
        click.echo(
            f"{a.id:<36} {a.status.value:<12} {a.current_stock:>6} "
            f"{a.threshold:>5} {a.suggested_reorder_quantity:>8}"
        )


@click.command("create")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--warehouse", "warehouse_id", required=True, help="Warehouse ID.")
@click.option("--threshold", type=int, required=True, help="Threshold for this alert.")
@click.option("--notes", default="", help="Notes.")
@pass_state
def alert_create(
    state: CliState, product_id: str, warehouse_id: str, threshold: int, notes: str
) -> None:
    """Raise an alert by hand."""
    try:
        alert = state.services.alerts.create_alert(product_id, warehouse_id, threshold, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Alert {alert.id} raised (stock {alert.current_stock}, "
        f"suggested reorder {alert.suggested_reorder_quantity})"
    )


@click.command("status")
@click.option("--id", "alert_id", required=True, help="Alert ID.")
@click.option("--to", "new_status", type=_STATUS_CHOICE, required=True, help="New status.")
@click.option("--notes", default=None, help="Replace the alert's notes.")
@pass_state
def alert_status(state: CliState, alert_id: str, new_status: str, notes: str | None) -> None:
    """Change an alert's status."""
    try:
        alert = state.services.alerts.update_status(
            alert_id, AlertStatus(new_status.upper()), notes
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Alert {alert.id} is now {alert.status.value}")


@click.command("ack")
@click.option("--id", "alert_id", required=True, help="Alert ID.")
@pass_state
def alert_ack(state: CliState, alert_id: str) -> None:
    """Acknowledge an active alert."""
    try:
        state.services.alerts.acknowledge(alert_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Alert {alert_id} acknowledged")


@click.command("delete")
@click.option("--id", "alert_id", required=True, help="Alert ID.")
@pass_state
def alert_delete(state: CliState, alert_id: str) -> None:
    """Delete an acknowledged or resolved alert."""
    try:
        state.services.alerts.delete(alert_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Alert {alert_id} deleted")


@click.command("check")
@pass_state
def alert_check(state: CliState) -> None:
    """Run the low-stock sweep now."""
    report = state.services.alerts.trigger_check()
    click.echo(
        f"Scanned {report.scanned} low rows: {report.created} created, "
        f"{report.resolved} resolved, {report.failed} failed"
    )


@click.command("diagnostics")
@pass_state
def alert_diagnostics(state: CliState) -> None:
    """Explain which rows are low and how many alerts are open."""
    diag = state.services.alerts.low_stock_diagnostics()
    click.echo(f"Inventory rows:  {diag.total_inventories}")
    click.echo(f"Low-stock rows:  {diag.low_stock_inventories}")
    click.echo(f"Active alerts:   {diag.active_alerts}")
    for d in diag.details:
        click.echo(
            f"  {d.product_name} @ {d.warehouse_name or d.warehouse_id}: "
            f"{d.current_stock} <= {d.threshold}"
        )
