"""Application service: warehouse management.

A warehouse owns its inventory rows, alerts, and purchase and sales
orders. Deleting it removes those children first, explicitly, in an
order that never leaves an alert or order pointing at a missing row.
"""

from __future__ import annotations

import logging

from ims.domain.exceptions import EntityNotFoundError
from ims.domain.model.warehouse import Warehouse
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.purchase_order_repository import PurchaseOrderRepository
from ims.domain.repository.sales_order_repository import SalesOrderRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository

logger = logging.getLogger(__name__)


class WarehouseService:

    def __init__(
        self,
        warehouse_repo: WarehouseRepository,
        inventory_repo: InventoryRepository,
        alert_repo: AlertRepository,
        purchase_order_repo: PurchaseOrderRepository,
        sales_order_repo: SalesOrderRepository,
    ) -> None:
        self._warehouse_repo = warehouse_repo
        self._inventory_repo = inventory_repo
        self._alert_repo = alert_repo
        self._purchase_order_repo = purchase_order_repo
        self._sales_order_repo = sales_order_repo

    def create(self, name: str, location: str = "", contact_details: str = "") -> Warehouse:
        warehouse = Warehouse.create(name, location, contact_details)
        self._warehouse_repo.save(warehouse)
        logger.info("Warehouse %s created: %s", warehouse.id, warehouse.name)
        return warehouse

    def update(
        self,
        warehouse_id: str,
        name: str | None = None,
        location: str | None = None,
        contact_details: str | None = None,
    ) -> Warehouse:
        warehouse = self.get(warehouse_id)
        warehouse.update_details(
            name=warehouse.name if name is None else name,
            location=warehouse.location if location is None else location,
            contact_details=(
                warehouse.contact_details if contact_details is None else contact_details
            ),
        )
        self._warehouse_repo.save(warehouse)
        return warehouse

    def delete(self, warehouse_id: str) -> None:
        self.get(warehouse_id)

        alerts = self._alert_repo.delete_by_warehouse(warehouse_id)
        sales_orders = self._sales_order_repo.delete_by_warehouse(warehouse_id)
        purchase_orders = self._purchase_order_repo.delete_by_warehouse(warehouse_id)
        rows = self._inventory_repo.delete_by_warehouse(warehouse_id)
        self._warehouse_repo.delete(warehouse_id)

        logger.info(
            "Warehouse %s deleted with %d alerts, %d sales orders, "
            "%d purchase orders and %d inventory rows",
            warehouse_id, alerts, sales_orders, purchase_orders, rows,
        )

    def get(self, warehouse_id: str) -> Warehouse:
        warehouse = self._warehouse_repo.get_by_id(warehouse_id)
        if warehouse is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")
        return warehouse

    def list_all(self) -> list[Warehouse]:
        return self._warehouse_repo.list_all()

    def has_products(self, warehouse_id: str) -> bool:
        self.get(warehouse_id)
        return bool(self._inventory_repo.list_by_warehouse(warehouse_id))

    def has_products_with_stock(self, warehouse_id: str) -> bool:
        self.get(warehouse_id)
        return any(
            row.quantity_available > 0
            for row in self._inventory_repo.list_by_warehouse(warehouse_id)
        )
