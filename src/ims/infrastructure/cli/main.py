import click

from ims.config import settings
from ims.domain.model.user import Principal, Role
from ims.infrastructure.cli.alert_commands import (
    alert_ack,
    alert_check,
    alert_create,
    alert_delete,
    alert_diagnostics,
    alert_list,
    alert_status,
)
from ims.infrastructure.cli.catalog_commands import (
    category_add,
    category_deactivate,
    category_delete,
    category_list,
    product_add,
    product_delete,
    product_list,
    product_update,
)
from ims.infrastructure.cli.context import CliState
from ims.infrastructure.cli.dashboard_commands import (
    dashboard_aging,
    dashboard_alerts,
    dashboard_overview,
    dashboard_reorder,
    dashboard_turnover,
    dashboard_warehouses,
)
from ims.infrastructure.cli.inventory_commands import (
    inventory_create,
    inventory_damage,
    inventory_receive,
    inventory_release,
    inventory_reserve,
    inventory_set,
    inventory_show,
)
from ims.infrastructure.cli.order_commands import (
    purchase_order_auto_approve,
    purchase_order_between,
    purchase_order_create,
    purchase_order_delete,
    purchase_order_list,
    purchase_order_receive,
    purchase_order_show,
    purchase_order_status,
    sales_order_create,
    sales_order_delete,
    sales_order_list,
    sales_order_show,
    sales_order_status,
)
from ims.infrastructure.cli.scheduler_commands import scheduler_run
from ims.infrastructure.cli.user_commands import (
    user_add,
    user_change_password,
    user_delete,
    user_list,
    user_reset_password,
    user_toggle,
)
from ims.infrastructure.cli.warehouse_commands import (
    warehouse_add,
    warehouse_delete,
    warehouse_list,
    warehouse_update,
)
from ims.logging_config import configure_logging


@click.group()
@click.option("--as-user", "username", default="admin", show_default=True,
              help="Name recorded for the acting user.")
@click.option("--role", type=click.Choice([r.value for r in Role], case_sensitive=False),
              default=Role.ADMIN.value, show_default=True, help="Role of the acting user.")
@click.pass_context
def cli(ctx: click.Context, username: str, role: str) -> None:
    """IMS: Warehouse Inventory Management"""
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    ctx.obj = CliState(Principal(username=username, role=Role(role.upper())))


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def category() -> None:
    """Manage product categories."""


@cli.group()
def warehouse() -> None:
    """Manage warehouses."""


@cli.group()
def inventory() -> None:
    """Manage stock levels."""


@cli.group()
def alert() -> None:
    """Manage low-stock alerts."""


@cli.group("purchase-order")
def purchase_order() -> None:
    """Manage purchase orders."""


@cli.group("sales-order")
def sales_order() -> None:
    """Manage sales orders."""


@cli.group()
def user() -> None:
    """Manage user accounts."""


@cli.group()
def dashboard() -> None:
    """Inventory reports."""


@cli.group()
def scheduler() -> None:
    """Run housekeeping jobs."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_update)
category.add_command(category_add)
category.add_command(category_deactivate)
category.add_command(category_delete)
category.add_command(category_list)
warehouse.add_command(warehouse_add)
warehouse.add_command(warehouse_delete)
warehouse.add_command(warehouse_list)
warehouse.add_command(warehouse_update)
inventory.add_command(inventory_create)
inventory.add_command(inventory_damage)
inventory.add_command(inventory_receive)
inventory.add_command(inventory_release)
inventory.add_command(inventory_reserve)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
alert.add_command(alert_ack)
alert.add_command(alert_check)
alert.add_command(alert_create)
alert.add_command(alert_delete)
alert.add_command(alert_diagnostics)
alert.add_command(alert_list)
alert.add_command(alert_status)
purchase_order.add_command(purchase_order_auto_approve)
purchase_order.add_command(purchase_order_between)
purchase_order.add_command(purchase_order_create)
purchase_order.add_command(purchase_order_delete)
purchase_order.add_command(purchase_order_list)
purchase_order.add_command(purchase_order_receive)
purchase_order.add_command(purchase_order_show)
purchase_order.add_command(purchase_order_status)
sales_order.add_command(sales_order_create)
sales_order.add_command(sales_order_delete)
sales_order.add_command(sales_order_list)
sales_order.add_command(sales_order_show)
sales_order.add_command(sales_order_status)
user.add_command(user_add)
user.add_command(user_change_password)
user.add_command(user_delete)
user.add_command(user_list)
user.add_command(user_reset_password)
user.add_command(user_toggle)
dashboard.add_command(dashboard_aging)
dashboard.add_command(dashboard_alerts)
dashboard.add_command(dashboard_overview)
dashboard.add_command(dashboard_reorder)
dashboard.add_command(dashboard_turnover)
dashboard.add_command(dashboard_warehouses)
scheduler.add_command(scheduler_run)
