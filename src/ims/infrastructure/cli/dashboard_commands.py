"""CLI commands for dashboard reports."""

from __future__ import annotations

from datetime import timedelta

import click

from ims.domain.model.common import utcnow
from ims.infrastructure.cli.context import CliState, pass_state


@click.command("overview")
@pass_state
def dashboard_overview(state: CliState) -> None:
    """Totals across the whole catalog."""
    o = state.services.dashboard.inventory_overview()
    click.echo(f"Products:        {o.total_products}")
    click.echo(f"Stock value:     ${o.total_stock_value:.2f}")
    click.echo(f"Low stock rows:  {o.low_stock_items}")
    click.echo(f"Out of stock:    {o.out_of_stock_items}")


@click.command("turnover")
@click.option("--days", type=int, default=30, show_default=True, help="Look-back window.")
@pass_state
def dashboard_turnover(state: CliState, days: int) -> None:
    """Units received relative to average stock."""
    end = utcnow()
    report = state.services.dashboard.inventory_turnover(end - timedelta(days=days), end)
    click.echo(f"Received:        {report.total_received}")
    click.echo(f"Average level:   {report.average_inventory_level:.2f}")
    click.echo(f"Turnover ratio:  {report.turnover_ratio:.2f}")


@click.command("reorder")
@pass_state
def dashboard_reorder(state: CliState) -> None:
    """What to order to bring low rows back to twice their threshold."""
    recommendations = state.services.dashboard.reorder_recommendations()
    if not recommendations:
        click.echo("Nothing to reorder.")
        return

    click.echo(f"{'Product':<20} {'Warehouse':<36} {'Stock':>6} {'Order':>6} {'Cost':>12}")
    click.echo("-" * 84)
    for r in recommendations:
        click.echo(
            f"{r.product_name:<20} {r.warehouse_id:<36} {r.current_stock:>6} "
            f"{r.recommended_quantity:>6} {r.estimated_cost:>12.2f}"
        )


@click.command("warehouses")
@pass_state
def dashboard_warehouses(state: CliState) -> None:
    """Per-warehouse row counts and stock value."""
    for w in state.services.dashboard.warehouse_utilization():
        click.echo(
            f"{w.warehouse_name:<20} products={w.total_products} "
            f"low={w.low_stock_items} value=${w.total_value:.2f}"
        )


@click.command("alerts")
@pass_state
def dashboard_alerts(state: CliState) -> None:
    """Alert counts by status and the most-alerted products."""
    metrics = state.services.dashboard.alert_metrics()
    for status, count in metrics.status_counts.items():
        click.echo(f"{status:<13} {count}")
    if metrics.frequent_products:
        click.echo()
        click.echo("Most alerted products:")
        for p in metrics.frequent_products:
            click.echo(f"  {p.product_name or p.product_id:<20} {p.alert_count}")


@click.command("aging")
@pass_state
def dashboard_aging(state: CliState) -> None:
    """Stock on hand, least recently touched first."""
    for line in state.services.dashboard.inventory_aging():
        click.echo(
            f"{line.last_updated:%Y-%m-%d %H:%M}  {line.product_name:<20} "
            f"qty={line.quantity} value=${line.value:.2f}"
        )
