"""Abstract repository for SalesOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.sales_order import SalesOrder, SalesOrderStatus


class SalesOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> SalesOrder | None:
        """Return an order with its items, or None."""

    @abstractmethod
    def list_all(self) -> list[SalesOrder]:
        """Return every sales order."""

    @abstractmethod
    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        """Return orders in a given status."""

    @abstractmethod
    def list_by_customer_email(self, email: str) -> list[SalesOrder]:
        """Return orders placed by a customer email."""

    @abstractmethod
    def list_by_warehouse(self, warehouse_id: str) -> list[SalesOrder]:
        """Return orders shipped from a warehouse."""

    @abstractmethod
    def save(self, order: SalesOrder) -> None:
        """Persist a new or updated order together with its items."""

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove an order and its items. Unknown ids are ignored."""

    @abstractmethod
    def delete_by_warehouse(self, warehouse_id: str) -> int:
        """Remove all orders of a warehouse; returns how many were removed."""
