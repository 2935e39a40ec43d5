"""Domain service: Inventory Ledger.

The ledger is the only writer of inventory rows. Each mutation is one
unit of work against a single row: read, validate on the aggregate,
compare-and-swap save. Conflicting concurrent writers are detected by
the repository's version check and the whole unit is retried from a
fresh read, so two reservations racing on the same row can never both
pass the availability check.

After a write commits, the ledger fires its post-commit hooks with the
row's (product_id, warehouse_id). Hooks are best-effort: a failing hook
is logged and recorded in ``hook_failures`` and the mutation still
succeeds.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from ims.domain.exceptions import AlreadyExistsError, EntityNotFoundError
from ims.domain.model.common import utcnow
from ims.domain.model.inventory import Inventory
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.concurrency import run_with_retry

logger = logging.getLogger(__name__)

StockChangeHook = Callable[[str, str], None]

MAX_RECORDED_HOOK_FAILURES = 100


@dataclass(frozen=True)
class HookFailure:
    product_id: str
    warehouse_id: str
    hook: str
    error: str
    occurred_at: datetime = field(default_factory=utcnow)


class InventoryLedger:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
        warehouse_repo: WarehouseRepository,
        *,
        retry_attempts: int = 3,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo
        self._warehouse_repo = warehouse_repo
        self._retry_attempts = retry_attempts
        self._hooks: list[StockChangeHook] = []
        self.hook_failures: deque[HookFailure] = deque(maxlen=MAX_RECORDED_HOOK_FAILURES)

    def add_hook(self, hook: StockChangeHook) -> None:
        """Register a callable fired after every committed stock change."""
        self._hooks.append(hook)

    # --- Queries --------------------------------------------------------------

    def get(self, inventory_id: str) -> Inventory:
        inventory = self._inventory_repo.get_by_id(inventory_id)
        if inventory is None:
            raise EntityNotFoundError(f"Inventory not found with id: {inventory_id}")
        return inventory

    def find_for_pair(self, product_id: str, warehouse_id: str) -> Inventory | None:
        return self._inventory_repo.get_by_product_and_warehouse(product_id, warehouse_id)

    def get_for_pair(self, product_id: str, warehouse_id: str) -> Inventory:
        self._require_product(product_id)
        self._require_warehouse(warehouse_id)
        inventory = self.find_for_pair(product_id, warehouse_id)
        if inventory is None:
            raise EntityNotFoundError(
                f"Inventory not found for product {product_id} in warehouse {warehouse_id}"
            )
        return inventory

    def list_all(self) -> list[Inventory]:
        return self._inventory_repo.list_all()

    def list_by_product(self, product_id: str) -> list[Inventory]:
        self._require_product(product_id)
        return self._inventory_repo.list_by_product(product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Inventory]:
        self._require_warehouse(warehouse_id)
        return self._inventory_repo.list_by_warehouse(warehouse_id)

    def total_available(self, product_id: str) -> int:
        return sum(inv.quantity_available for inv in self.list_by_product(product_id))

    def list_low_stock(self) -> list[Inventory]:
        thresholds = {
            p.id: p.minimum_stock_threshold for p in self._product_repo.list_all()
        }
        return self._inventory_repo.list_at_or_below(thresholds)

    # --- Mutations ------------------------------------------------------------

    def create(self, product_id: str, warehouse_id: str, initial_quantity: int) -> Inventory:
        """Open a stock row for a (product, warehouse) pair."""
        self._require_product(product_id)
        self._require_warehouse(warehouse_id)

        if self.find_for_pair(product_id, warehouse_id) is not None:
            raise AlreadyExistsError(
                "Inventory already exists for this product in the warehouse"
            )

        inventory = Inventory.create(product_id, warehouse_id, initial_quantity)
        self._inventory_repo.add(inventory)
        logger.info(
            "Inventory %s opened for product %s in warehouse %s with %d units",
            inventory.id, product_id, warehouse_id, initial_quantity,
        )
        self._after_commit(inventory)
        return inventory

    def reserve(self, inventory_id: str, quantity: int) -> Inventory:
        return self._mutate(inventory_id, "reserve", lambda inv: inv.reserve(quantity))

    def release(self, inventory_id: str, quantity: int) -> Inventory:
        return self._mutate(inventory_id, "release", lambda inv: inv.release(quantity))

    def mark_damaged(self, inventory_id: str, quantity: int) -> Inventory:
        return self._mutate(inventory_id, "mark_damaged", lambda inv: inv.mark_damaged(quantity))

    def receive(self, inventory_id: str, quantity: int) -> Inventory:
        return self._mutate(inventory_id, "receive", lambda inv: inv.receive(quantity))

    def revoke_receipt(self, inventory_id: str, quantity: int) -> Inventory:
        return self._mutate(
            inventory_id, "revoke_receipt", lambda inv: inv.revoke_receipt(quantity)
        )

    def set_stock(
        self, inventory_id: str, available: int, reserved: int, damaged: int
    ) -> Inventory:
        return self._mutate(
            inventory_id,
            "set_stock",
            lambda inv: inv.set_stock(available, reserved, damaged),
        )

    def delete(self, inventory_id: str) -> None:
        self.get(inventory_id)
        self._inventory_repo.delete(inventory_id)

    # --- Internal helpers -----------------------------------------------------

    def _mutate(
        self,
        inventory_id: str,
        operation: str,
        action: Callable[[Inventory], None],
    ) -> Inventory:
        def unit_of_work() -> Inventory:
            inventory = self.get(inventory_id)
            action(inventory)
            self._inventory_repo.save(inventory)
            return inventory

        inventory = run_with_retry(unit_of_work, attempts=self._retry_attempts)
        logger.debug(
            "%s on inventory %s -> available=%d reserved=%d damaged=%d",
            operation, inventory.id, inventory.quantity_available,
            inventory.quantity_reserved, inventory.quantity_damaged,
        )
        self._after_commit(inventory)
        return inventory

    def _after_commit(self, inventory: Inventory) -> None:
        for hook in self._hooks:
            try:
                hook(inventory.product_id, inventory.warehouse_id)
            except Exception as exc:
                name = getattr(hook, "__qualname__", repr(hook))
                logger.warning(
                    "Post-commit hook %s failed for product %s in warehouse %s: %s",
                    name, inventory.product_id, inventory.warehouse_id, exc,
                    exc_info=True,
                )
                self.hook_failures.append(
                    HookFailure(
                        product_id=inventory.product_id,
                        warehouse_id=inventory.warehouse_id,
                        hook=name,
                        error=str(exc),
                    )
                )

    def _require_product(self, product_id: str) -> None:
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product not found with id: {product_id}")

    def _require_warehouse(self, warehouse_id: str) -> None:
        if self._warehouse_repo.get_by_id(warehouse_id) is None:
            raise EntityNotFoundError(f"Warehouse not found with id: {warehouse_id}")
