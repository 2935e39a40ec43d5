"""Abstract repository for Inventory aggregate.

``add`` and ``save`` carry the store-level guarantees the ledger relies
on: the (product, warehouse) pair is unique, and ``save`` is a
compare-and-swap on ``version``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from ims.domain.model.inventory import Inventory


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, inventory_id: str) -> Inventory | None:
        """Return an inventory row by its ID, or None."""

    @abstractmethod
    def get_by_product_and_warehouse(
        self, product_id: str, warehouse_id: str
    ) -> Inventory | None:
        """Return the row for a (product, warehouse) pair, or None."""

    @abstractmethod
    def list_all(self) -> list[Inventory]:
        """Return every inventory row."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[Inventory]:
        """Return the rows holding a product across warehouses."""

    @abstractmethod
    def list_by_warehouse(self, warehouse_id: str) -> list[Inventory]:
        """Return the rows held by a warehouse."""

    @abstractmethod
    def list_at_or_below(self, thresholds: Mapping[str, int]) -> list[Inventory]:
        """Return rows whose available quantity is <= their product's threshold.

        ``thresholds`` maps product id to minimum stock threshold; rows
        for products missing from the mapping are skipped.
        """

    @abstractmethod
    def add(self, item: Inventory) -> None:
        """Insert a new row.

        Raises AlreadyExistsError if a row for the same pair exists.
        """

    @abstractmethod
    def save(self, item: Inventory) -> None:
        """Update an existing row if its stored version equals ``item.version``.

        On success ``item.version`` is incremented. Raises
        ConcurrencyConflictError when the stored version differs and
        EntityNotFoundError when the row is gone.
        """

    @abstractmethod
    def delete(self, inventory_id: str) -> None:
        """Remove a row. Unknown ids are ignored."""

    @abstractmethod
    def delete_by_warehouse(self, warehouse_id: str) -> int:
        """Remove all rows of a warehouse; returns how many were removed."""
