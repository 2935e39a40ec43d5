"""Product aggregate.

Products live independently of inventory and orders: inventory rows and
order items reference a product by id but never own it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ims.domain.exceptions import ValidationError
from ims.domain.model.common import new_id, utcnow
from ims.domain.model.value_objects import Money

DEFAULT_MINIMUM_STOCK_THRESHOLD = 10


@dataclass
class Product:
    """A product in the catalog.

    ``minimum_stock_threshold`` is the available quantity at or below which
    a low-stock alert is raised for any warehouse holding the product.
    """

    id: str
    name: str
    sku: str
    unit_price: Money
    minimum_stock_threshold: int = DEFAULT_MINIMUM_STOCK_THRESHOLD
    category_id: str | None = None
    description: str = ""
    brand: str = ""
    model: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @staticmethod
    def create(
        name: str,
        sku: str,
        unit_price: Money,
        minimum_stock_threshold: int = DEFAULT_MINIMUM_STOCK_THRESHOLD,
        category_id: str | None = None,
        description: str = "",
        brand: str = "",
        model: str = "",
    ) -> Product:
        """Create a new product, enforcing field rules."""
        product = Product(
            id=new_id(),
            name="",
            sku="",
            unit_price=unit_price,
            category_id=category_id,
            description=description,
            brand=brand,
            model=model,
        )
        product.update_details(
            name=name,
            sku=sku,
            unit_price=unit_price,
            minimum_stock_threshold=minimum_stock_threshold,
        )
        return product

    def update_details(
        self,
        name: str,
        sku: str,
        unit_price: Money,
        minimum_stock_threshold: int,
    ) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not sku or not sku.strip():
            raise ValidationError("SKU is required")
        if unit_price.amount <= 0:
            raise ValidationError("Unit price must be positive")
        if minimum_stock_threshold < 0:
            raise ValidationError("Minimum stock threshold cannot be negative")

        self.name = name.strip()
        self.sku = sku.strip()
        self.unit_price = unit_price
        self.minimum_stock_threshold = minimum_stock_threshold
        self.updated_at = utcnow()

    def matches(self, term: str) -> bool:
        """Case-insensitive search over name, description and model."""
        needle = term.lower()
        return any(
            needle in value.lower()
            for value in (self.name, self.description, self.model)
        )
