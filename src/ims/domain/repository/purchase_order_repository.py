"""Abstract repository for PurchaseOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ims.domain.model.purchase_order import PurchaseOrder, PurchaseOrderStatus


class PurchaseOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> PurchaseOrder | None:
        """Return an order with its items, or None."""

    @abstractmethod
    def list_all(self) -> list[PurchaseOrder]:
        """Return every purchase order."""

    @abstractmethod
    def list_by_status(self, status: PurchaseOrderStatus) -> list[PurchaseOrder]:
        """Return orders in a given status."""

    @abstractmethod
    def list_by_warehouse(self, warehouse_id: str) -> list[PurchaseOrder]:
        """Return orders delivering into a warehouse."""

    @abstractmethod
    def list_created_between(self, start: datetime, end: datetime) -> list[PurchaseOrder]:
        """Return orders created in the inclusive range [start, end]."""

    @abstractmethod
    def save(self, order: PurchaseOrder) -> None:
        """Persist a new or updated order together with its items.

        Updates are a compare-and-swap on ``version``: raises
        ConcurrencyConflictError if the stored order has moved on,
        otherwise increments ``order.version``.
        """

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order and its items. Unknown ids are ignored."""

    @abstractmethod
    def delete_by_warehouse(self, warehouse_id: str) -> int:
        """Remove all orders of a warehouse; returns how many were removed."""
