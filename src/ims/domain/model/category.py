"""Category aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ims.domain.exceptions import ValidationError
from ims.domain.model.common import new_id, utcnow


@dataclass
class Category:

    id: str
    name: str
    description: str = ""
    display_order: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @staticmethod
    def create(name: str, description: str = "", display_order: int = 0) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        return Category(
            id=new_id(),
            name=name.strip(),
            description=description,
            display_order=display_order,
        )

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        self.name = name.strip()
        self.updated_at = utcnow()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = utcnow()
