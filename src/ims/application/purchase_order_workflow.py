"""Application service: Purchase Order workflow.

Drives purchase orders through PENDING -> APPROVED -> RECEIVED. Entering
RECEIVED (directly or by receiving every item) credits the warehouse's
inventory through the Inventory Ledger, whose post-commit hook then
reconciles low-stock alerts.

Status changes and receipts of one order are serialized by a per-order
lock, and the order save is a compare-and-swap. Credits made before a
failed save are taken back with ``revoke_receipt``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from ims.application.dto import PurchaseOrderItemSpec, ReceivedItemSpec
from ims.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)
from ims.domain.model.common import utcnow
from ims.domain.model.inventory import Inventory
from ims.domain.model.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    new_purchase_order_item,
)
from ims.domain.model.user import SYSTEM, Principal
from ims.domain.model.value_objects import Money
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.purchase_order_repository import PurchaseOrderRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.concurrency import KeyedLock
from ims.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

DEFAULT_AUTO_APPROVE_AFTER = timedelta(minutes=1)


class PurchaseOrderWorkflow:

    def __init__(
        self,
        order_repo: PurchaseOrderRepository,
        product_repo: ProductRepository,
        warehouse_repo: WarehouseRepository,
        ledger: InventoryLedger,
        *,
        auto_approve_after: timedelta = DEFAULT_AUTO_APPROVE_AFTER,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._warehouse_repo = warehouse_repo
        self._ledger = ledger
        self._auto_approve_after = auto_approve_after
        self._order_locks = KeyedLock()

    # --- Commands -------------------------------------------------------------

    def create(
        self,
        warehouse_id: str,
        supplier_name: str,
        item_specs: list[PurchaseOrderItemSpec],
        contact_info: str = "",
        notes: str = "",
    ) -> PurchaseOrder:
        """Create a PENDING order after checking the warehouse and every product."""
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")

        items: list[PurchaseOrderItem] = []
        for spec in item_specs:
            if self._product_repo.get_by_id(spec.product_id) is None:
                raise EntityNotFoundError(f"Product not found with id: {spec.product_id}")
            items.append(
                new_purchase_order_item(
                    product_id=spec.product_id,
                    quantity_ordered=spec.quantity_ordered,
                    unit_price=Money.of(spec.unit_price),
                    notes=spec.notes,
                )
            )

        order = PurchaseOrder.create(
            warehouse_id=warehouse_id,
            supplier_name=supplier_name,
            items=items,
            contact_info=contact_info,
            notes=notes,
        )
        self._order_repo.save(order)
        logger.info(
            "Purchase order %s created for warehouse %s (%d items, total %s)",
            order.id, warehouse_id, len(items), order.total_amount,
        )
        return order

    def update_status(
        self,
        order_id: str,
        new_status: PurchaseOrderStatus,
        *,
        actor: Principal = SYSTEM,
    ) -> PurchaseOrder:
        """Advance the order one step; entering RECEIVED credits inventory
        with whatever each item has not received yet."""
        actor.require_admin("Updating purchase order status")
        with self._order_locks.hold(order_id):
            order = self.get(order_id)

            order.validate_transition(new_status)
            if order.status == new_status:
                return order

            credited: list[tuple[Inventory, int]] = []
            if new_status == PurchaseOrderStatus.RECEIVED:
                credited = self._receive_outstanding(order)

            order.transition_to(new_status)
            self._save_or_revoke(order, credited)
        logger.info("Purchase order %s moved to %s", order.id, new_status.value)
        return order

    def receive_items(
        self,
        order_id: str,
        received: list[ReceivedItemSpec],
        *,
        actor: Principal = SYSTEM,
    ) -> PurchaseOrder:
        """Record partial receipts; the ledger is credited with each increase.

        The whole batch is validated before the first credit, and credits
        are taken back if a later step fails. When every item is fully
        received the order moves to RECEIVED.
        """
        actor.require_admin("Receiving purchase order items")
        with self._order_locks.hold(order_id):
            order = self.get(order_id)
            order.ensure_receivable()

            # Phase 1: validate every entry and resolve its inventory row
            planned: list[tuple[PurchaseOrderItem, int, Inventory]] = []
            seen: set[str] = set()
            for spec in received:
                if spec.item_id in seen:
                    raise ValidationError(
                        f"Order item '{spec.item_id}' is listed more than once"
                    )
                seen.add(spec.item_id)
                item = order.find_item(spec.item_id)
                if spec.quantity_received > item.quantity_ordered.value:
                    raise ValidationError("Received quantity cannot exceed ordered quantity")
                if spec.quantity_received < item.quantity_received:
                    raise ValidationError(
                        f"Received quantity cannot decrease "
                        f"(already received {item.quantity_received})"
                    )
                planned.append(
                    (item, spec.quantity_received, self._inventory_for(order, item))
                )

            # Phase 2: credit the increases, then record quantities
            credited = self._credit([
                (inventory, total - item.quantity_received)
                for item, total, inventory in planned
                if total > item.quantity_received
            ])
            for item, total, _ in planned:
                item.record_received(total)

            if order.is_fully_received:
                order.transition_to(PurchaseOrderStatus.RECEIVED)
                logger.info("Purchase order %s fully received", order.id)

            self._save_or_revoke(order, credited)
        return order

    def delete(self, order_id: str, *, actor: Principal = SYSTEM) -> None:
        actor.require_admin("Deleting purchase orders")
        with self._order_locks.hold(order_id):
            order = self.get(order_id)
            order.ensure_deletable()
            self._order_repo.delete(order_id)
        logger.info("Purchase order %s deleted", order_id)

    def auto_approve_pending(self, now: datetime | None = None) -> list[str]:
        """Advance every PENDING order older than the configured age to RECEIVED.

        Each order goes through both transitions (APPROVED, then RECEIVED).
        A failing order is logged and skipped. Returns the ids of the
        orders that reached RECEIVED.
        """
        cutoff = (now or utcnow()) - self._auto_approve_after
        processed: list[str] = []

        for order in self._order_repo.list_by_status(PurchaseOrderStatus.PENDING):
            if order.created_at >= cutoff:
                continue
            try:
                self.update_status(order.id, PurchaseOrderStatus.APPROVED)
                self.update_status(order.id, PurchaseOrderStatus.RECEIVED)
            except Exception:
                logger.exception("Failed to auto-approve purchase order %s", order.id)
                continue
            processed.append(order.id)

        if processed:
            logger.info("Auto-approved %d purchase orders", len(processed))
        return processed

    # --- Queries --------------------------------------------------------------

    def get(self, order_id: str) -> PurchaseOrder:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Purchase Order not found with id: {order_id}")
        return order

    def list_all(self) -> list[PurchaseOrder]:
        return self._order_repo.list_all()

    def list_by_status(self, status: PurchaseOrderStatus) -> list[PurchaseOrder]:
        return self._order_repo.list_by_status(status)

    def list_by_warehouse(self, warehouse_id: str) -> list[PurchaseOrder]:
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")
        return self._order_repo.list_by_warehouse(warehouse_id)

    def list_created_between(self, start: datetime, end: datetime) -> list[PurchaseOrder]:
        return self._order_repo.list_created_between(start, end)

    # --- Internal helpers -----------------------------------------------------

    def _receive_outstanding(self, order: PurchaseOrder) -> list[tuple[Inventory, int]]:
        """Credit what each item still lacks and mark the order fully received.

        Every inventory row is resolved before the first credit, so a
        missing row leaves stock untouched.
        """
        planned = [
            (self._inventory_for(order, item), item.outstanding)
            for item in order.items
            if item.outstanding > 0
        ]
        credited = self._credit(planned)
        order.mark_all_received()
        return credited

    def _credit(self, planned: list[tuple[Inventory, int]]) -> list[tuple[Inventory, int]]:
        """Receive each quantity; on failure take back what was credited."""
        credited: list[tuple[Inventory, int]] = []
        try:
            for inventory, qty in planned:
                self._ledger.receive(inventory.id, qty)
                credited.append((inventory, qty))
        except Exception:
            self._revoke(credited)
            raise
        return credited

    def _save_or_revoke(
        self, order: PurchaseOrder, credited: list[tuple[Inventory, int]]
    ) -> None:
        try:
            self._order_repo.save(order)
        except Exception:
            self._revoke(credited)
            raise

    def _revoke(self, credited: list[tuple[Inventory, int]]) -> None:
        for inventory, qty in reversed(credited):
            try:
                self._ledger.revoke_receipt(inventory.id, qty)
            except DomainException:
                logger.exception(
                    "Could not take back %d units credited to inventory %s",
                    qty, inventory.id,
                )

    def _inventory_for(self, order: PurchaseOrder, item: PurchaseOrderItem) -> Inventory:
        inventory = self._ledger.find_for_pair(item.product_id, order.warehouse_id)
        if inventory is None:
            raise InvalidStateError(
                f"No inventory found for product {item.product_id} "
                f"in warehouse {order.warehouse_id}"
            )
        return inventory
