"""JSON-file-backed implementation of InventoryRepository.

``save`` is a compare-and-swap on the ``version`` field, evaluated
under the file lock.
"""

from __future__ import annotations

from collections.abc import Mapping

from ims.domain.exceptions import (
    AlreadyExistsError,
    ConcurrencyConflictError,
    EntityNotFoundError,
)
from ims.domain.model.inventory import Inventory
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
)


class JsonInventoryRepository(JsonFileRepository[Inventory], InventoryRepository):

    def get_by_id(self, inventory_id: str) -> Inventory | None:
        return self._find_one(lambda raw: raw["id"] == inventory_id)

    def get_by_product_and_warehouse(
        self, product_id: str, warehouse_id: str
    ) -> Inventory | None:
        return self._find_one(
            lambda raw: raw["product_id"] == product_id
            and raw["warehouse_id"] == warehouse_id
        )

    def list_all(self) -> list[Inventory]:
        return self._find_all()

    def list_by_product(self, product_id: str) -> list[Inventory]:
        return self._find_all(lambda raw: raw["product_id"] == product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Inventory]:
        return self._find_all(lambda raw: raw["warehouse_id"] == warehouse_id)

    def list_at_or_below(self, thresholds: Mapping[str, int]) -> list[Inventory]:
        return self._find_all(
            lambda raw: raw["product_id"] in thresholds
            and raw["quantity_available"] <= thresholds[raw["product_id"]]
        )

    def add(self, item: Inventory) -> None:
        with self._transaction() as records:
            for raw in records:
                if (
                    raw["product_id"] == item.product_id
                    and raw["warehouse_id"] == item.warehouse_id
                ):
                    raise AlreadyExistsError(
                        "Inventory already exists for this product in the warehouse"
                    )
            records.append(self._to_raw(item))

    def save(self, item: Inventory) -> None:
        with self._transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] != item.id:
                    continue
                if raw["version"] != item.version:
                    raise ConcurrencyConflictError(
                        f"Inventory {item.id} was modified concurrently "
                        f"(expected version {item.version}, found {raw['version']})"
                    )
                item.version += 1
                records[i] = self._to_raw(item)
                return
            raise EntityNotFoundError(f"Inventory not found with id: {item.id}")

    def delete(self, inventory_id: str) -> None:
        self._remove(lambda raw: raw["id"] == inventory_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._remove(lambda raw: raw["warehouse_id"] == warehouse_id)

    @staticmethod
    def _to_raw(item: Inventory) -> dict:
        return {
            "id": item.id,
            "product_id": item.product_id,
            "warehouse_id": item.warehouse_id,
            "quantity_available": item.quantity_available,
            "quantity_reserved": item.quantity_reserved,
            "quantity_damaged": item.quantity_damaged,
            "last_updated": datetime_to_raw(item.last_updated),
            "version": item.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Inventory:
        return Inventory(
            id=raw["id"],
            product_id=raw["product_id"],
            warehouse_id=raw["warehouse_id"],
            quantity_available=raw["quantity_available"],
            quantity_reserved=raw["quantity_reserved"],
            quantity_damaged=raw["quantity_damaged"],
            last_updated=datetime_from_raw(raw["last_updated"]),
            version=raw.get("version", 0),
        )
