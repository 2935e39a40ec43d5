"""Application services: product and category catalog.

Catalog mutations are restricted to ADMIN principals. Creating a product
can open its first inventory row in a warehouse; the row goes through
the Inventory Ledger like every other stock write.
"""

from __future__ import annotations

import logging

from ims.domain.exceptions import AlreadyExistsError, EntityNotFoundError
from ims.domain.model.category import Category
from ims.domain.model.product import DEFAULT_MINIMUM_STOCK_THRESHOLD, Product
from ims.domain.model.user import SYSTEM, Principal
from ims.domain.model.value_objects import Money
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.category_repository import CategoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        ledger: InventoryLedger,
        alert_repo: AlertRepository,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._ledger = ledger
        self._alert_repo = alert_repo

    def create(
        self,
        name: str,
        sku: str,
        unit_price: str,
        minimum_stock_threshold: int = DEFAULT_MINIMUM_STOCK_THRESHOLD,
        category_id: str | None = None,
        description: str = "",
        brand: str = "",
        model: str = "",
        warehouse_id: str | None = None,
        initial_stock: int | None = None,
        *,
        actor: Principal = SYSTEM,
    ) -> Product:
        """Add a product to the catalog.

        When ``warehouse_id`` is given an inventory row is opened there
        with ``initial_stock`` units, or with the threshold if omitted.
        """
        actor.require_admin("Creating products")
        self._ensure_sku_free(sku)
        if category_id is not None:
            self._require_category(category_id)

        product = Product.create(
            name=name,
            sku=sku,
            unit_price=Money.of(unit_price),
            minimum_stock_threshold=minimum_stock_threshold,
            category_id=category_id,
            description=description,
            brand=brand,
            model=model,
        )
        self._product_repo.save(product)
        logger.info("Product %s created with SKU %s", product.id, product.sku)

        if warehouse_id is not None:
            quantity = (
                product.minimum_stock_threshold if initial_stock is None else initial_stock
            )
            self._ledger.create(product.id, warehouse_id, quantity)
        return product

    def update(
        self,
        product_id: str,
        name: str | None = None,
        sku: str | None = None,
        unit_price: str | None = None,
        minimum_stock_threshold: int | None = None,
        category_id: str | None = None,
        description: str | None = None,
        *,
        actor: Principal = SYSTEM,
    ) -> Product:
        """Change the given fields; omitted ones keep their value."""
        actor.require_admin("Updating products")
        product = self.get(product_id)

        if sku is not None and sku.strip() != product.sku:
            self._ensure_sku_free(sku)
        if category_id is not None:
            self._require_category(category_id)
            product.category_id = category_id
        if description is not None:
            product.description = description

        product.update_details(
            name=product.name if name is None else name,
            sku=product.sku if sku is None else sku,
            unit_price=product.unit_price if unit_price is None else Money.of(unit_price),
            minimum_stock_threshold=(
                product.minimum_stock_threshold
                if minimum_stock_threshold is None
                else minimum_stock_threshold
            ),
        )
        self._product_repo.save(product)
        return product

    def delete(self, product_id: str, *, actor: Principal = SYSTEM) -> None:
        """Remove a product together with its alerts and inventory rows."""
        actor.require_admin("Deleting products")
        self.get(product_id)
        alerts = self._alert_repo.delete_by_product(product_id)
        for inventory in self._ledger.list_by_product(product_id):
            self._ledger.delete(inventory.id)
        self._product_repo.delete(product_id)
        logger.info("Product %s deleted with %d alerts", product_id, alerts)

    # --- Queries --------------------------------------------------------------

    def get(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found with id: {product_id}")
        return product

    def get_by_sku(self, sku: str) -> Product:
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product not found with SKU: {sku}")
        return product

    def list_all(self) -> list[Product]:
        return self._product_repo.list_all()

    def search(self, term: str) -> list[Product]:
        return [p for p in self._product_repo.list_all() if p.matches(term)]

    def list_by_category_name(self, category_name: str) -> list[Product]:
        category = self._category_repo.get_by_name(category_name)
        if category is None:
            raise EntityNotFoundError(f"Category not found with name: {category_name}")
        return self._product_repo.list_by_category(category.id)

    # --- Internal helpers -----------------------------------------------------

    def _ensure_sku_free(self, sku: str) -> None:
        if self._product_repo.get_by_sku(sku.strip()) is not None:
            raise AlreadyExistsError(f"Product with SKU {sku.strip()} already exists")

    def _require_category(self, category_id: str) -> None:
        if self._category_repo.get_by_id(category_id) is None:
            raise EntityNotFoundError(f"Category not found with id: {category_id}")


class CategoryService:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def create(
        self,
        name: str,
        description: str = "",
        display_order: int = 0,
        *,
        actor: Principal = SYSTEM,
    ) -> Category:
        actor.require_admin("Creating categories")
        self._ensure_name_free(name)
        category = Category.create(name, description, display_order)
        self._category_repo.save(category)
        return category

    def update(
        self,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
        display_order: int | None = None,
        *,
        actor: Principal = SYSTEM,
    ) -> Category:
        actor.require_admin("Updating categories")
        category = self.get(category_id)
        if name is not None and name.strip() != category.name:
            self._ensure_name_free(name)
            category.rename(name)
        if description is not None:
            category.description = description
        if display_order is not None:
            category.display_order = display_order
        self._category_repo.save(category)
        return category

    def deactivate(self, category_id: str, *, actor: Principal = SYSTEM) -> Category:
        actor.require_admin("Deactivating categories")
        category = self.get(category_id)
        category.deactivate()
        self._category_repo.save(category)
        return category

    def delete(self, category_id: str, *, actor: Principal = SYSTEM) -> None:
        actor.require_admin("Deleting categories")
        self.get(category_id)
        self._category_repo.delete(category_id)

    def get(self, category_id: str) -> Category:
        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundError(f"Category not found with id: {category_id}")
        return category

    def get_by_name(self, name: str) -> Category:
        category = self._category_repo.get_by_name(name)
        if category is None:
            raise EntityNotFoundError(f"Category not found with name: {name}")
        return category

    def list_all(self, *, actor: Principal = SYSTEM) -> list[Category]:
        actor.require_admin("Listing all categories")
        return sorted(self._category_repo.list_all(), key=lambda c: c.display_order)

    def list_active(self) -> list[Category]:
        return sorted(
            (c for c in self._category_repo.list_all() if c.is_active),
            key=lambda c: c.display_order,
        )

    def _ensure_name_free(self, name: str) -> None:
        if self._category_repo.get_by_name(name.strip()) is not None:
            raise AlreadyExistsError(f"Category with name {name.strip()} already exists")
