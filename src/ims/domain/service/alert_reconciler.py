"""Domain service: Alert Reconciler.

Keeps low-stock alerts in line with inventory. For any (product,
warehouse) pair there is at most one ACTIVE alert: one is raised when
available stock is at or below the product's minimum threshold, and it
is resolved once stock climbs back above it.

All work on a pair runs under a per-pair lock so concurrent post-commit
hooks and the scheduled sweep never raise duplicate alerts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ims.domain.exceptions import AlreadyExistsError, EntityNotFoundError, InvalidStateError
from ims.domain.model.alert import Alert, AlertStatus
from ims.domain.model.inventory import Inventory
from ims.domain.model.product import Product
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.concurrency import KeyedLock

logger = logging.getLogger(__name__)

AUTO_ALERT_NOTE = "Automatically generated alert for low stock product"
SWEEP_ALERT_NOTE = "Automatically generated low stock alert with reorder suggestions"
RESOLVED_NOTE = "Stock restored above threshold - automatically resolved"
REFRESH_RESOLVED_NOTE = "Resolved automatically - Stock level above threshold"


class ReconcileOutcome(Enum):
    CREATED = "CREATED"
    RESOLVED = "RESOLVED"
    UNCHANGED = "UNCHANGED"


@dataclass(frozen=True)
class SweepReport:
    scanned: int = 0
    created: int = 0
    resolved: int = 0
    failed: int = 0


class AlertReconciler:

    def __init__(
        self,
        alert_repo: AlertRepository,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
        warehouse_repo: WarehouseRepository,
    ) -> None:
        self._alert_repo = alert_repo
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo
        self._warehouse_repo = warehouse_repo
        self._pair_locks = KeyedLock()

    # --- Per-pair reconciliation ----------------------------------------------

    def reconcile(self, product_id: str, warehouse_id: str) -> ReconcileOutcome:
        """Raise or resolve the alert of one pair to match current stock."""
        product = self._require_product(product_id)
        self._require_warehouse(warehouse_id)

        with self._pair_locks.hold((product_id, warehouse_id)):
            inventory = self._inventory_repo.get_by_product_and_warehouse(
                product_id, warehouse_id
            )
            if inventory is None:
                return ReconcileOutcome.UNCHANGED

            active = self._alert_repo.find_by_pair_and_status(
                product_id, warehouse_id, AlertStatus.ACTIVE
            )
            threshold = product.minimum_stock_threshold

            if inventory.is_at_or_below(threshold):
                if active is None:
                    self._open_alert(product, inventory, threshold, AUTO_ALERT_NOTE)
                    return ReconcileOutcome.CREATED
            elif active is not None:
                active.resolve_automatically(inventory.quantity_available, RESOLVED_NOTE)
                self._alert_repo.save(active)
                logger.info(
                    "Alert %s resolved: product %s in warehouse %s back to %d",
                    active.id, product_id, warehouse_id, inventory.quantity_available,
                )
                return ReconcileOutcome.RESOLVED

        return ReconcileOutcome.UNCHANGED

    # --- Batch sweep ----------------------------------------------------------

    def sweep(self) -> SweepReport:
        """Raise alerts for every low-stock row lacking one, and resolve
        ACTIVE alerts whose pair has recovered.

        Failures are counted per item and never stop the sweep.
        """
        products = {p.id: p for p in self._product_repo.list_all()}
        thresholds = {pid: p.minimum_stock_threshold for pid, p in products.items()}
        low_stock = self._inventory_repo.list_at_or_below(thresholds)

        created = resolved = failed = 0

        for inventory in low_stock:
            try:
                if self._sweep_low_row(products[inventory.product_id], inventory):
                    created += 1
            except Exception:
                failed += 1
                logger.exception(
                    "Low-stock sweep failed for product %s in warehouse %s",
                    inventory.product_id, inventory.warehouse_id,
                )

        for alert in self._alert_repo.list_by_status(AlertStatus.ACTIVE):
            try:
                if self._sweep_active_alert(products.get(alert.product_id), alert):
                    resolved += 1
            except Exception:
                failed += 1
                logger.exception("Low-stock sweep failed to re-check alert %s", alert.id)

        report = SweepReport(
            scanned=len(low_stock), created=created, resolved=resolved, failed=failed
        )
        logger.info(
            "Low-stock sweep finished: %d low rows, %d alerts created, %d resolved, %d failed",
            report.scanned, report.created, report.resolved, report.failed,
        )
        return report

    def _sweep_low_row(self, product: Product, inventory: Inventory) -> bool:
        key = (inventory.product_id, inventory.warehouse_id)
        with self._pair_locks.hold(key):
            existing = self._alert_repo.find_by_pair_and_status(*key, AlertStatus.ACTIVE)
            if existing is not None:
                return False
            self._open_alert(
                product, inventory, product.minimum_stock_threshold, SWEEP_ALERT_NOTE
            )
            return True

    def _sweep_active_alert(self, product: Product | None, alert: Alert) -> bool:
        if product is None:
            return False
        key = (alert.product_id, alert.warehouse_id)
        with self._pair_locks.hold(key):
            inventory = self._inventory_repo.get_by_product_and_warehouse(*key)
            if inventory is None or inventory.is_at_or_below(product.minimum_stock_threshold):
                return False
            current = self._alert_repo.get_by_id(alert.id)
            if current is None or current.status != AlertStatus.ACTIVE:
                return False
            current.resolve_automatically(inventory.quantity_available, RESOLVED_NOTE)
            self._alert_repo.save(current)
            return True

    # --- Explicit alert creation and refresh ----------------------------------

    def create_alert(
        self,
        product_id: str,
        warehouse_id: str,
        threshold: int,
        notes: str = "",
    ) -> Alert:
        """Raise an alert by hand with a caller-chosen threshold."""
        product = self._require_product(product_id)
        self._require_warehouse(warehouse_id)

        with self._pair_locks.hold((product_id, warehouse_id)):
            if self._alert_repo.find_by_pair_and_status(
                product_id, warehouse_id, AlertStatus.ACTIVE
            ) is not None:
                raise AlreadyExistsError(
                    "Active alert already exists for this product in the warehouse"
                )
            inventory = self._inventory_repo.get_by_product_and_warehouse(
                product_id, warehouse_id
            )
            if inventory is None:
                raise InvalidStateError("No inventory found for this product in the warehouse")
            return self._open_alert(product, inventory, threshold, notes)

    def refresh_open_alerts(self, product_id: str, warehouse_id: str, new_level: int) -> int:
        """Update the stock snapshot of ACTIVE/ACKNOWLEDGED alerts of a pair.

        Alerts whose threshold is now exceeded are resolved. Returns the
        number of alerts touched.
        """
        self._require_product(product_id)
        self._require_warehouse(warehouse_id)

        with self._pair_locks.hold((product_id, warehouse_id)):
            open_alerts = self._alert_repo.list_by_pair_and_statuses(
                product_id,
                warehouse_id,
                [AlertStatus.ACTIVE, AlertStatus.ACKNOWLEDGED],
            )
            for alert in open_alerts:
                if new_level > alert.threshold:
                    alert.resolve_automatically(new_level, REFRESH_RESOLVED_NOTE)
                else:
                    alert.refresh_stock(new_level)
                self._alert_repo.save(alert)
            return len(open_alerts)

    # --- Internal helpers -----------------------------------------------------

    def _open_alert(
        self, product: Product, inventory: Inventory, threshold: int, notes: str
    ) -> Alert:
        alert = Alert.raise_for(
            product_id=product.id,
            warehouse_id=inventory.warehouse_id,
            unit_price=product.unit_price,
            threshold=threshold,
            current_stock=inventory.quantity_available,
            notes=notes,
        )
        self._alert_repo.save(alert)
        logger.info(
            "Low-stock alert %s raised for product %s in warehouse %s "
            "(available=%d, threshold=%d, suggested reorder=%d)",
            alert.id, product.id, inventory.warehouse_id,
            alert.current_stock, threshold, alert.suggested_reorder_quantity,
        )
        return alert

    def _require_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found with id: {product_id}")
        return product

    def _require_warehouse(self, warehouse_id: str) -> None:
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")
