"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from ims.application.alert_service import AlertService
from ims.application.catalog import CategoryService, ProductService
from ims.application.dashboard_service import DashboardService
from ims.application.housekeeping import HousekeepingJobs
from ims.application.purchase_order_workflow import PurchaseOrderWorkflow
from ims.application.sales_order_workflow import SalesOrderWorkflow
from ims.application.users import PasswordHasher, UserService
from ims.application.warehouses import WarehouseService
from ims.config import Settings, settings
from ims.domain.service.alert_reconciler import AlertReconciler
from ims.domain.service.inventory_ledger import InventoryLedger
from ims.infrastructure.persistence.json_alert_repository import JsonAlertRepository
from ims.infrastructure.persistence.json_category_repository import JsonCategoryRepository
from ims.infrastructure.persistence.json_inventory_repository import JsonInventoryRepository
from ims.infrastructure.persistence.json_product_repository import JsonProductRepository
from ims.infrastructure.persistence.json_purchase_order_repository import (
    JsonPurchaseOrderRepository,
)
from ims.infrastructure.persistence.json_sales_order_repository import (
    JsonSalesOrderRepository,
)
from ims.infrastructure.persistence.json_user_repository import JsonUserRepository
from ims.infrastructure.persistence.json_warehouse_repository import (
    JsonWarehouseRepository,
)
from ims.infrastructure.scheduling.scheduler import Scheduler


@dataclass(frozen=True)
class Services:
    ledger: InventoryLedger
    reconciler: AlertReconciler
    products: ProductService
    categories: CategoryService
    warehouses: WarehouseService
    alerts: AlertService
    purchase_orders: PurchaseOrderWorkflow
    sales_orders: SalesOrderWorkflow
    users: UserService
    dashboard: DashboardService
    housekeeping: HousekeepingJobs


def build_services(config: Settings | None = None) -> Services:
    """Build the service graph over JSON files in ``config.DATA_DIR``."""
    config = config or settings
    data_dir = Path(config.DATA_DIR)

    products = JsonProductRepository(data_dir / "products.json")
    categories = JsonCategoryRepository(data_dir / "categories.json")
    warehouses = JsonWarehouseRepository(data_dir / "warehouses.json")
    inventory = JsonInventoryRepository(data_dir / "inventory.json")
    alerts = JsonAlertRepository(data_dir / "alerts.json")
    purchase_orders = JsonPurchaseOrderRepository(data_dir / "purchase_orders.json")
    sales_orders = JsonSalesOrderRepository(data_dir / "sales_orders.json")
    users = JsonUserRepository(data_dir / "users.json")

    ledger = InventoryLedger(
        inventory, products, warehouses, retry_attempts=config.LEDGER_RETRY_ATTEMPTS
    )
    reconciler = AlertReconciler(alerts, inventory, products, warehouses)
    ledger.add_hook(reconciler.reconcile)

    po_workflow = PurchaseOrderWorkflow(
        purchase_orders,
        products,
        warehouses,
        ledger,
        auto_approve_after=timedelta(seconds=config.AUTO_APPROVE_AFTER_SECONDS),
    )

    return Services(
        ledger=ledger,
        reconciler=reconciler,
        products=ProductService(products, categories, ledger, alerts),
        categories=CategoryService(categories),
        warehouses=WarehouseService(warehouses, inventory, alerts, purchase_orders, sales_orders),
        alerts=AlertService(alerts, products, warehouses, inventory, reconciler),
        purchase_orders=po_workflow,
        sales_orders=SalesOrderWorkflow(sales_orders, products, warehouses, ledger),
        users=UserService(users, PasswordHasher(config.BCRYPT_ROUNDS)),
        dashboard=DashboardService(inventory, products, purchase_orders, warehouses, alerts),
        housekeeping=HousekeepingJobs(reconciler, po_workflow),
    )


def build_scheduler(services: Services, config: Settings | None = None) -> Scheduler:
    config = config or settings
    scheduler = Scheduler()
    scheduler.every(
        config.LOW_STOCK_SWEEP_INTERVAL_SECONDS,
        "low-stock-sweep",
        services.housekeeping.sweep_low_stock,
        run_immediately=True,
    )
    scheduler.every(
        config.AUTO_APPROVE_INTERVAL_SECONDS,
        "purchase-order-auto-approve",
        services.housekeeping.auto_approve_pending_orders,
    )
    return scheduler
