"""JSON-file-backed implementation of AlertRepository."""

from __future__ import annotations

from datetime import datetime

from ims.domain.model.alert import Alert, AlertStatus
from ims.domain.repository.alert_repository import AlertRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
)


class JsonAlertRepository(JsonFileRepository[Alert], AlertRepository):

    def get_by_id(self, alert_id: str) -> Alert | None:
        return self._find_one(lambda raw: raw["id"] == alert_id)

    def find_by_pair_and_status(
        self, product_id: str, warehouse_id: str, status: AlertStatus
    ) -> Alert | None:
        return self._find_one(
            lambda raw: raw["product_id"] == product_id
            and raw["warehouse_id"] == warehouse_id
            and raw["status"] == status.value
        )

    def list_by_pair_and_statuses(
        self, product_id: str, warehouse_id: str, statuses: list[AlertStatus]
    ) -> list[Alert]:
        wanted = {s.value for s in statuses}
        return self._find_all(
            lambda raw: raw["product_id"] == product_id
            and raw["warehouse_id"] == warehouse_id
            and raw["status"] in wanted
        )

    def list_all(self) -> list[Alert]:
        return self._find_all()

    def list_by_status(self, status: AlertStatus) -> list[Alert]:
        return self._find_all(lambda raw: raw["status"] == status.value)

    def list_by_product(self, product_id: str) -> list[Alert]:
        return self._find_all(lambda raw: raw["product_id"] == product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Alert]:
        return self._find_all(lambda raw: raw["warehouse_id"] == warehouse_id)

    def list_created_after(self, moment: datetime) -> list[Alert]:
        return [a for a in self._find_all() if a.created_at > moment]

    def save(self, alert: Alert) -> None:
        self._upsert(alert.id, alert)

    def delete(self, alert_id: str) -> None:
        self._remove(lambda raw: raw["id"] == alert_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._remove(lambda raw: raw["warehouse_id"] == warehouse_id)

    def delete_by_product(self, product_id: str) -> int:
        return self._remove(lambda raw: raw["product_id"] == product_id)

    @staticmethod
    def _to_raw(alert: Alert) -> dict:
        return {
            "id": alert.id,
            "product_id": alert.product_id,
            "warehouse_id": alert.warehouse_id,
            "threshold": alert.threshold,
            "current_stock": alert.current_stock,
            "suggested_reorder_quantity": alert.suggested_reorder_quantity,
            "optimal_stock_level": alert.optimal_stock_level,
            "status": alert.status.value,
            "notes": alert.notes,
            "created_at": datetime_to_raw(alert.created_at),
            "updated_at": datetime_to_raw(alert.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Alert:
        return Alert(
            id=raw["id"],
            product_id=raw["product_id"],
            warehouse_id=raw["warehouse_id"],
            threshold=raw["threshold"],
            current_stock=raw["current_stock"],
            suggested_reorder_quantity=raw["suggested_reorder_quantity"],
            optimal_stock_level=raw["optimal_stock_level"],
            status=AlertStatus(raw["status"]),
            notes=raw.get("notes", ""),
            created_at=datetime_from_raw(raw["created_at"]),
            updated_at=datetime_from_raw(raw["updated_at"]),
        )
