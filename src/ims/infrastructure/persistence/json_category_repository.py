"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from ims.domain.model.category import Category
from ims.domain.repository.category_repository import CategoryRepository
from ims.infrastructure.persistence.json_file import (
    JsonFileRepository,
    datetime_from_raw,
    datetime_to_raw,
)


class JsonCategoryRepository(JsonFileRepository[Category], CategoryRepository):

    def get_by_id(self, category_id: str) -> Category | None:
        return self._find_one(lambda raw: raw["id"] == category_id)

    def get_by_name(self, name: str) -> Category | None:
        return self._find_one(lambda raw: raw["name"].lower() == name.lower())

    def list_all(self) -> list[Category]:
        return self._find_all()

    def save(self, category: Category) -> None:
        self._upsert(category.id, category)

    def delete(self, category_id: str) -> None:
        self._remove(lambda raw: raw["id"] == category_id)

    @staticmethod
    def _to_raw(category: Category) -> dict:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "display_order": category.display_order,
            "is_active": category.is_active,
            "created_at": datetime_to_raw(category.created_at),
            "updated_at": datetime_to_raw(category.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Category:
        return Category(
            id=raw["id"],
            name=raw["name"],
            description=raw.get("description", ""),
            display_order=raw.get("display_order", 0),
            is_active=raw.get("is_active", True),
            created_at=datetime_from_raw(raw["created_at"]),
            updated_at=datetime_from_raw(raw["updated_at"]),
        )
