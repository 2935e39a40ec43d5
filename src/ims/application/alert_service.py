"""Application service: alert management.

Manual alert operations (raise, acknowledge, change status, delete) and
alert queries. Automatic raising and resolving is the reconciler's job;
this service exposes it on demand through ``trigger_check``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ims.application.dto import LowStockDetail, LowStockDiagnostics
from ims.domain.exceptions import EntityNotFoundError
from ims.domain.model.alert import Alert, AlertStatus
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.alert_reconciler import AlertReconciler, SweepReport

logger = logging.getLogger(__name__)


class AlertService:

    def __init__(
        self,
        alert_repo: AlertRepository,
        product_repo: ProductRepository,
        warehouse_repo: WarehouseRepository,
        inventory_repo: InventoryRepository,
        reconciler: AlertReconciler,
    ) -> None:
        self._alert_repo = alert_repo
        self._product_repo = product_repo
        self._warehouse_repo = warehouse_repo
        self._inventory_repo = inventory_repo
        self._reconciler = reconciler

    # --- Commands -------------------------------------------------------------

    def create_alert(
        self, product_id: str, warehouse_id: str, threshold: int, notes: str = ""
    ) -> Alert:
        return self._reconciler.create_alert(product_id, warehouse_id, threshold, notes)

    def update_status(
        self, alert_id: str, new_status: AlertStatus, notes: str | None = None
    ) -> Alert:
        alert = self.get(alert_id)
        alert.change_status(new_status, notes)
        self._alert_repo.save(alert)
        logger.info("Alert %s set to %s", alert.id, alert.status.value)
        return alert

    def acknowledge(self, alert_id: str) -> Alert:
        alert = self.get(alert_id)
        alert.acknowledge()
        self._alert_repo.save(alert)
        return alert

    def resolve(self, alert_id: str, notes: str | None = None) -> Alert:
        return self.update_status(alert_id, AlertStatus.RESOLVED, notes)

    def delete(self, alert_id: str) -> None:
        alert = self.get(alert_id)
        alert.ensure_deletable()
        self._alert_repo.delete(alert_id)

    def trigger_check(self) -> SweepReport:
        """Run the low-stock sweep now instead of waiting for the next tick."""
        return self._reconciler.sweep()

    def refresh_stock_level(self, product_id: str, warehouse_id: str, new_level: int) -> int:
        return self._reconciler.refresh_open_alerts(product_id, warehouse_id, new_level)

    # --- Queries --------------------------------------------------------------

    def get(self, alert_id: str) -> Alert:
        alert = self._alert_repo.get_by_id(alert_id)
        if alert is None:
            raise EntityNotFoundError(f"Alert not found with id: {alert_id}")
        return alert

    def list_all(self) -> list[Alert]:
        return self._alert_repo.list_all()

    def list_active(self) -> list[Alert]:
        return self._alert_repo.list_by_status(AlertStatus.ACTIVE)

    def list_by_status(self, status: AlertStatus) -> list[Alert]:
        return self._alert_repo.list_by_status(status)

    def list_by_product(self, product_id: str) -> list[Alert]:
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product not found with id: {product_id}")
        return self._alert_repo.list_by_product(product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Alert]:
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")
        return self._alert_repo.list_by_warehouse(warehouse_id)

    def list_created_after(self, moment: datetime) -> list[Alert]:
        return self._alert_repo.list_created_after(moment)

    def list_active_below_threshold(self) -> list[Alert]:
        """ACTIVE alerts whose snapshot is at or below threshold, newest first."""
        alerts = [a for a in self.list_active() if a.is_stock_below_threshold]
        return sorted(alerts, key=lambda a: a.created_at, reverse=True)

    def count_active(self) -> int:
        return len(self.list_active())

    def low_stock_diagnostics(self) -> LowStockDiagnostics:
        products = {p.id: p for p in self._product_repo.list_all()}
        warehouses = {w.id: w for w in self._warehouse_repo.list_all()}
        low_rows = self._inventory_repo.list_at_or_below(
            {pid: p.minimum_stock_threshold for pid, p in products.items()}
        )

        details = [
            LowStockDetail(
                product_id=row.product_id,
                product_name=products[row.product_id].name,
                warehouse_id=row.warehouse_id,
                warehouse_name=warehouses[row.warehouse_id].name
                if row.warehouse_id in warehouses else "",
                current_stock=row.quantity_available,
                threshold=products[row.product_id].minimum_stock_threshold,
            )
            for row in low_rows
        ]
        return LowStockDiagnostics(
            total_inventories=len(self._inventory_repo.list_all()),
            low_stock_inventories=len(low_rows),
            active_alerts=self.count_active(),
            details=details,
        )
