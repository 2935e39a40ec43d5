"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from ims.domain.model.product import Product
from ims.domain.repository.product_repository import ProductRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonProductRepository(JsonFileRepository[Product], ProductRepository):

    def get_by_id(self, product_id: str) -> Product | None:
        return self._find_one(lambda raw: raw["id"] == product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        return self._find_one(lambda raw: raw["sku"] == sku)

    def list_all(self) -> list[Product]:
        return self._find_all()

    def list_by_category(self, category_id: str) -> list[Product]:
        return self._find_all(lambda raw: raw.get("category_id") == category_id)

    def save(self, product: Product) -> None:
        self._upsert(product.id, product)

    def delete(self, product_id: str) -> None:
        self._remove(lambda raw: raw["id"] == product_id)

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "unit_price": money_to_raw(product.unit_price),
            "minimum_stock_threshold": product.minimum_stock_threshold,
            "category_id": product.category_id,
            "description": product.description,
            "brand": product.brand,
            "model": product.model,
            "created_at": datetime_to_raw(product.created_at),
            "updated_at": datetime_to_raw(product.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            sku=raw["sku"],
            unit_price=money_from_raw(raw["unit_price"]),
            minimum_stock_threshold=raw["minimum_stock_threshold"],
            category_id=raw.get("category_id"),
            description=raw.get("description", ""),
            brand=raw.get("brand", ""),
            model=raw.get("model", ""),
            created_at=datetime_from_raw(raw["created_at"]),
            updated_at=datetime_from_raw(raw["updated_at"]),
        )
