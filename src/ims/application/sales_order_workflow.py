"""Application service: Sales Order workflow.

Orders are accepted only when the warehouse currently holds enough
available stock. Stock is not touched at creation; it is reserved
through the Inventory Ledger when the order is confirmed, and released
again if a confirmed order is cancelled.
"""

from __future__ import annotations

import logging

from ims.application.dto import SalesOrderItemSpec
from ims.domain.exceptions import EntityNotFoundError, InsufficientStockError
from ims.domain.model.inventory import Inventory
from ims.domain.model.sales_order import (
    SalesOrder,
    SalesOrderItem,
    SalesOrderStatus,
    new_sales_order_item,
)
from ims.domain.model.user import SYSTEM, Principal
from ims.domain.model.value_objects import Money
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.sales_order_repository import SalesOrderRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class SalesOrderWorkflow:

    def __init__(
        self,
        order_repo: SalesOrderRepository,
        product_repo: ProductRepository,
        warehouse_repo: WarehouseRepository,
        ledger: InventoryLedger,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._warehouse_repo = warehouse_repo
        self._ledger = ledger

    # --- Commands -------------------------------------------------------------

    def create(
        self,
        warehouse_id: str,
        customer_name: str,
        customer_email: str,
        item_specs: list[SalesOrderItemSpec],
        shipping_address: str = "",
        billing_address: str = "",
        notes: str = "",
    ) -> SalesOrder:
        """Create a PENDING order.

        Every item must name an existing product stocked in the warehouse
        with at least the requested quantity available. Inventory is not
        modified.
        """
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")

        items: list[SalesOrderItem] = []
        for spec in item_specs:
            product = self._product_repo.get_by_id(spec.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found: {spec.product_id}")

            inventory = self._ledger.find_for_pair(product.id, warehouse_id)
            if inventory is None:
                raise EntityNotFoundError(f"Inventory not found for product: {product.id}")
            if inventory.quantity_available < spec.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for product: {product.name} "
                    f"(need {spec.quantity}, have {inventory.quantity_available} available)"
                )

            unit_price = product.unit_price if spec.unit_price is None else Money.of(spec.unit_price)
            items.append(
                new_sales_order_item(
                    product_id=product.id,
                    quantity=spec.quantity,
                    unit_price=unit_price,
                    notes=spec.notes,
                )
            )

        order = SalesOrder.create(
            warehouse_id=warehouse_id,
            customer_name=customer_name,
            customer_email=customer_email,
            items=items,
            shipping_address=shipping_address,
            billing_address=billing_address,
            notes=notes,
        )
        self._order_repo.save(order)
        logger.info(
            "Sales order %s created for %s (%d items, total %s)",
            order.id, order.customer_email, len(items), order.total_amount,
        )
        return order

    def update_status(
        self,
        order_id: str,
        new_status: SalesOrderStatus,
        *,
        actor: Principal = SYSTEM,
    ) -> SalesOrder:
        """Move the order to ``new_status``.

        Confirming reserves stock for every item; cancelling a confirmed
        order gives the reservations back. The order is saved only after
        the stock side effects succeeded.
        """
        actor.require_admin("Updating sales order status")
        order = self.get(order_id)

        previous = order.status
        if not order.transition_to(new_status):
            return order

        if new_status == SalesOrderStatus.CONFIRMED:
            try:
                self.process_confirmed_order(order)
            except Exception:
                order.status = previous
                raise
        elif new_status == SalesOrderStatus.CANCELLED and previous == SalesOrderStatus.CONFIRMED:
            self._release_reservations(order)

        self._order_repo.save(order)
        logger.info(
            "Sales order %s moved from %s to %s", order.id, previous.value, new_status.value
        )
        return order

    def process_confirmed_order(self, order: SalesOrder) -> None:
        """Reserve stock for every item of a CONFIRMED order.

        All rows are checked before the first reservation. If a
        reservation still fails (stock taken concurrently), reservations
        already made for this order are released before re-raising.
        Alert reconciliation per pair happens in the ledger's
        post-commit hook.
        """
        order.ensure_confirmed()

        # Phase 1: load and validate
        planned: list[tuple[Inventory, int]] = []
        for item in order.items:
            inventory = self._ledger.find_for_pair(item.product_id, order.warehouse_id)
            if inventory is None:
                logger.error(
                    "Inventory not found for product %s in warehouse %s",
                    item.product_id, order.warehouse_id,
                )
                raise EntityNotFoundError(
                    f"Inventory not found for product {item.product_id} "
                    f"in warehouse {order.warehouse_id}"
                )
            qty = item.quantity.value
            if qty > inventory.quantity_available:
                raise InsufficientStockError(
                    f"Not enough available stock to reserve for product {item.product_id} "
                    f"(need {qty}, have {inventory.quantity_available} available)"
                )
            planned.append((inventory, qty))

        # Phase 2: reserve, compensating on failure
        reserved: list[tuple[Inventory, int]] = []
        try:
            for inventory, qty in planned:
                self._ledger.reserve(inventory.id, qty)
                reserved.append((inventory, qty))
        except Exception:
            for inventory, qty in reversed(reserved):
                self._ledger.release(inventory.id, qty)
            raise

    def delete(self, order_id: str, *, actor: Principal = SYSTEM) -> None:
        """Delete an order regardless of status; reservations are left as-is."""
        actor.require_admin("Deleting sales orders")
        self.get(order_id)
        self._order_repo.delete(order_id)
        logger.info("Sales order %s deleted", order_id)

    # --- Queries --------------------------------------------------------------

    def get(self, order_id: str) -> SalesOrder:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Sales order not found with id: {order_id}")
        return order

    def list_all(self) -> list[SalesOrder]:
        return self._order_repo.list_all()

    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        return self._order_repo.list_by_status(status)

    def list_by_customer(self, customer_email: str) -> list[SalesOrder]:
        return self._order_repo.list_by_customer_email(customer_email)

    def list_by_warehouse(self, warehouse_id: str) -> list[SalesOrder]:
        return self._order_repo.list_by_warehouse(warehouse_id)

    # --- Internal helpers -----------------------------------------------------

    def _release_reservations(self, order: SalesOrder) -> None:
        for item in order.items:
            inventory = self._ledger.find_for_pair(item.product_id, order.warehouse_id)
            if inventory is None:
                logger.warning(
                    "Cannot release reservation of cancelled order %s: "
                    "no inventory for product %s",
                    order.id, item.product_id,
                )
                continue
            self._ledger.release(inventory.id, item.quantity.value)
