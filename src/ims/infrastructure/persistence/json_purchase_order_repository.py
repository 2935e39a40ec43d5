"""JSON-file-backed implementation of PurchaseOrderRepository.

An order and its items are stored as one record, so an order is always
written together with its items. Updates compare the stored ``version``
as the inventory repository does.
"""

from __future__ import annotations

from datetime import datetime

from ims.domain.exceptions import ConcurrencyConflictError
from ims.domain.model.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from ims.domain.model.value_objects import Quantity
from ims.domain.repository.purchase_order_repository import PurchaseOrderRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonPurchaseOrderRepository(JsonFileRepository[PurchaseOrder], PurchaseOrderRepository):

    def get_by_id(self, order_id: str) -> PurchaseOrder | None:
        return self._find_one(lambda raw: raw["id"] == order_id)

    def list_all(self) -> list[PurchaseOrder]:
        return self._find_all()

    def list_by_status(self, status: PurchaseOrderStatus) -> list[PurchaseOrder]:
        return self._find_all(lambda raw: raw["status"] == status.value)

    def list_by_warehouse(self, warehouse_id: str) -> list[PurchaseOrder]:
        return self._find_all(lambda raw: raw["warehouse_id"] == warehouse_id)

    def list_created_between(self, start: datetime, end: datetime) -> list[PurchaseOrder]:
        return [o for o in self._find_all() if start <= o.created_at <= end]

    def save(self, order: PurchaseOrder) -> None:
        with self._transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] != order.id:
                    continue
                if raw.get("version", 0) != order.version:
                    raise ConcurrencyConflictError(
                        f"Purchase order {order.id} was modified concurrently "
                        f"(expected version {order.version}, found {raw.get('version', 0)})"
                    )
                order.version += 1
                records[i] = self._to_raw(order)
                return
            records.append(self._to_raw(order))

    def delete(self, order_id: str) -> None:
        self._remove(lambda raw: raw["id"] == order_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._remove(lambda raw: raw["warehouse_id"] == warehouse_id)

    @staticmethod
    def _to_raw(order: PurchaseOrder) -> dict:
        return {
            "id": order.id,
            "warehouse_id": order.warehouse_id,
            "supplier_name": order.supplier_name,
            "status": order.status.value,
            "contact_info": order.contact_info,
            "notes": order.notes,
            "created_at": datetime_to_raw(order.created_at),
            "updated_at": datetime_to_raw(order.updated_at),
            "version": order.version,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "quantity_ordered": item.quantity_ordered.value,
                    "quantity_received": item.quantity_received,
                    "unit_price": money_to_raw(item.unit_price),
                    "notes": item.notes,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> PurchaseOrder:
        items = [
            PurchaseOrderItem(
                id=i["id"],
                product_id=i["product_id"],
                quantity_ordered=Quantity(i["quantity_ordered"]),
                unit_price=money_from_raw(i["unit_price"]),
                quantity_received=i.get("quantity_received", 0),
                notes=i.get("notes", ""),
            )
            for i in raw["items"]
        ]
        return PurchaseOrder(
            id=raw["id"],
            warehouse_id=raw["warehouse_id"],
            supplier_name=raw["supplier_name"],
            items=items,
            status=PurchaseOrderStatus(raw["status"]),
            contact_info=raw.get("contact_info", ""),
            notes=raw.get("notes", ""),
            created_at=datetime_from_raw(raw["created_at"]),
            updated_at=datetime_from_raw(raw["updated_at"]),
            version=raw.get("version", 0),
        )
