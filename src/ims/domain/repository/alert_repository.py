"""Abstract repository for Alert aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ims.domain.model.alert import Alert, AlertStatus


class AlertRepository(ABC):

    @abstractmethod
    def get_by_id(self, alert_id: str) -> Alert | None:
        """Return an alert by its ID, or None."""

    @abstractmethod
    def find_by_pair_and_status(
        self, product_id: str, warehouse_id: str, status: AlertStatus
    ) -> Alert | None:
        """Return the alert of a (product, warehouse) pair in ``status``, or None."""

    @abstractmethod
    def list_by_pair_and_statuses(
        self, product_id: str, warehouse_id: str, statuses: list[AlertStatus]
    ) -> list[Alert]:
        """Return alerts of a pair whose status is one of ``statuses``."""

    @abstractmethod
    def list_all(self) -> list[Alert]:
        """Return every alert."""

    @abstractmethod
    def list_by_status(self, status: AlertStatus) -> list[Alert]:
        """Return alerts in a given status."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[Alert]:
        """Return alerts raised for a product."""

    @abstractmethod
    def list_by_warehouse(self, warehouse_id: str) -> list[Alert]:
        """Return alerts raised in a warehouse."""

    @abstractmethod
    def list_created_after(self, moment: datetime) -> list[Alert]:
        """Return alerts created at or after ``moment``."""

    @abstractmethod
    def save(self, alert: Alert) -> None:
        """Persist a new or updated alert."""

    @abstractmethod
    def delete(self, alert_id: str) -> None:
        """Remove an alert. Unknown ids are ignored."""

    @abstractmethod
    def delete_by_warehouse(self, warehouse_id: str) -> int:
        """Remove all alerts of a warehouse; returns how many were removed."""

    @abstractmethod
    def delete_by_product(self, product_id: str) -> int:
        """Remove all alerts of a product; returns how many were removed."""
