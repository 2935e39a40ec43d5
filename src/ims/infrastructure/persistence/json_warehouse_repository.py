"""JSON-file-backed implementation of WarehouseRepository."""

from __future__ import annotations

from ims.domain.model.warehouse import Warehouse
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.infrastructure.persistence.json_file import JsonFileRepository


class JsonWarehouseRepository(JsonFileRepository[Warehouse], WarehouseRepository):

    def get_by_id(self, warehouse_id: str) -> Warehouse | None:
        return self._find_one(lambda raw: raw["id"] == warehouse_id)

    def list_all(self) -> list[Warehouse]:
        return self._find_all()

    def save(self, warehouse: Warehouse) -> None:
        self._upsert(warehouse.id, warehouse)

    def delete(self, warehouse_id: str) -> None:
        self._remove(lambda raw: raw["id"] == warehouse_id)

    @staticmethod
    def _to_raw(warehouse: Warehouse) -> dict:
        return {
            "id": warehouse.id,
            "name": warehouse.name,
            "location": warehouse.location,
            "contact_details": warehouse.contact_details,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Warehouse:
        return Warehouse(
            id=raw["id"],
            name=raw["name"],
            location=raw.get("location", ""),
            contact_details=raw.get("contact_details", ""),
        )
