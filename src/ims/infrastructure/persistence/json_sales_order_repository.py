"""JSON-file-backed implementation of SalesOrderRepository."""

from __future__ import annotations

from ims.domain.model.sales_order import SalesOrder, SalesOrderItem, SalesOrderStatus
from ims.domain.model.value_objects import Quantity
from ims.domain.repository.sales_order_repository import SalesOrderRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonSalesOrderRepository(JsonFileRepository[SalesOrder], SalesOrderRepository):

    def get_by_id(self, order_id: str) -> SalesOrder | None:
        return self._find_one(lambda raw: raw["id"] == order_id)

    def list_all(self) -> list[SalesOrder]:
        return self._find_all()

    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        return self._find_all(lambda raw: raw["status"] == status.value)

    def list_by_customer_email(self, email: str) -> list[SalesOrder]:
        return self._find_all(lambda raw: raw["customer_email"].lower() == email.lower())

    def list_by_warehouse(self, warehouse_id: str) -> list[SalesOrder]:
        return self._find_all(lambda raw: raw["warehouse_id"] == warehouse_id)

    def save(self, order: SalesOrder) -> None:
        self._upsert(order.id, order)

    def delete(self, order_id: str) -> None:
        self._remove(lambda raw: raw["id"] == order_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._remove(lambda raw: raw["warehouse_id"] == warehouse_id)

    @staticmethod
    def _to_raw(order: SalesOrder) -> dict:
        return {
            "id": order.id,
            "warehouse_id": order.warehouse_id,
            "customer_name": order.customer_name,
            "customer_email": order.customer_email,
            "status": order.status.value,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "notes": order.notes,
            "created_at": datetime_to_raw(order.created_at),
            "updated_at": datetime_to_raw(order.updated_at),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "quantity": item.quantity.value,
                    "unit_price": money_to_raw(item.unit_price),
                    "notes": item.notes,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> SalesOrder:
        items = [
            SalesOrderItem(
                id=i["id"],
                product_id=i["product_id"],
                quantity=Quantity(i["quantity"]),
                unit_price=money_from_raw(i["unit_price"]),
                notes=i.get("notes", ""),
            )
            for i in raw["items"]
        ]
        return SalesOrder(
            id=raw["id"],
            warehouse_id=raw["warehouse_id"],
            customer_name=raw["customer_name"],
            customer_email=raw["customer_email"],
            items=items,
            status=SalesOrderStatus(raw["status"]),
            shipping_address=raw.get("shipping_address", ""),
            billing_address=raw.get("billing_address", ""),
            notes=raw.get("notes", ""),
            created_at=datetime_from_raw(raw["created_at"]),
            updated_at=datetime_from_raw(raw["updated_at"]),
        )
