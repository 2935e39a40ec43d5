"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Entities are copied on the way in and out, like a real store, so a
caller mutating a loaded entity does not touch the stored one until it
saves.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from datetime import datetime

from ims.domain.exceptions import (
    AlreadyExistsError,
    ConcurrencyConflictError,
    EntityNotFoundError,
)
from ims.domain.model.alert import Alert, AlertStatus
from ims.domain.model.category import Category
from ims.domain.model.inventory import Inventory
from ims.domain.model.product import Product
from ims.domain.model.purchase_order import PurchaseOrder, PurchaseOrderStatus
from ims.domain.model.sales_order import SalesOrder, SalesOrderStatus
from ims.domain.model.user import User
from ims.domain.model.value_objects import Money
from ims.domain.model.warehouse import Warehouse
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.category_repository import CategoryRepository
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.purchase_order_repository import PurchaseOrderRepository
from ims.domain.repository.sales_order_repository import SalesOrderRepository
from ims.domain.repository.user_repository import UserRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository
from ims.domain.service.alert_reconciler import AlertReconciler
from ims.domain.service.inventory_ledger import InventoryLedger


class _DictStore:

    def __init__(self, entities=None) -> None:
        self._store: dict = {}
        self._lock = threading.RLock()
        for entity in entities or []:
            self._store[entity.id] = copy.deepcopy(entity)

    def _get(self, entity_id):
        with self._lock:
            entity = self._store.get(entity_id)
            return copy.deepcopy(entity) if entity is not None else None

    def _all(self, predicate=None) -> list:
        with self._lock:
            return [
                copy.deepcopy(e)
                for e in self._store.values()
                if predicate is None or predicate(e)
            ]

    def _first(self, predicate):
        found = self._all(predicate)
        return found[0] if found else None

    def _put(self, entity) -> None:
        with self._lock:
            self._store[entity.id] = copy.deepcopy(entity)

    def _pop(self, entity_id) -> None:
        with self._lock:
            self._store.pop(entity_id, None)

    def _pop_where(self, predicate) -> int:
        with self._lock:
            doomed = [k for k, e in self._store.items() if predicate(e)]
            for key in doomed:
                del self._store[key]
            return len(doomed)


class FakeProductRepository(_DictStore, ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        super().__init__(products)

    def get_by_id(self, product_id: str) -> Product | None:
        return self._get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        return self._first(lambda p: p.sku == sku)

    def list_all(self) -> list[Product]:
        return self._all()

    def list_by_category(self, category_id: str) -> list[Product]:
        return self._all(lambda p: p.category_id == category_id)

    def save(self, product: Product) -> None:
        self._put(product)

    def delete(self, product_id: str) -> None:
        self._pop(product_id)


class FakeCategoryRepository(_DictStore, CategoryRepository):

    def __init__(self, categories: list[Category] | None = None) -> None:
        super().__init__(categories)

    def get_by_id(self, category_id: str) -> Category | None:
        return self._get(category_id)

    def get_by_name(self, name: str) -> Category | None:
        return self._first(lambda c: c.name.lower() == name.lower())

    def list_all(self) -> list[Category]:
        return self._all()

    def save(self, category: Category) -> None:
        self._put(category)

    def delete(self, category_id: str) -> None:
        self._pop(category_id)


class FakeWarehouseRepository(_DictStore, WarehouseRepository):

    def __init__(self, warehouses: list[Warehouse] | None = None) -> None:
        super().__init__(warehouses)

    def get_by_id(self, warehouse_id: str) -> Warehouse | None:
        return self._get(warehouse_id)

    def list_all(self) -> list[Warehouse]:
        return self._all()

    def save(self, warehouse: Warehouse) -> None:
        self._put(warehouse)

    def delete(self, warehouse_id: str) -> None:
        self._pop(warehouse_id)


class FakeInventoryRepository(_DictStore, InventoryRepository):

    def __init__(self, items: list[Inventory] | None = None) -> None:
        super().__init__(items)
        self.save_calls = 0

    def get_by_id(self, inventory_id: str) -> Inventory | None:
        return self._get(inventory_id)

    def get_by_product_and_warehouse(
        self, product_id: str, warehouse_id: str
    ) -> Inventory | None:
        return self._first(
            lambda i: i.product_id == product_id and i.warehouse_id == warehouse_id
        )

    def list_all(self) -> list[Inventory]:
        return self._all()

    def list_by_product(self, product_id: str) -> list[Inventory]:
        return self._all(lambda i: i.product_id == product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Inventory]:
        return self._all(lambda i: i.warehouse_id == warehouse_id)

    def list_at_or_below(self, thresholds: Mapping[str, int]) -> list[Inventory]:
        return self._all(
            lambda i: i.product_id in thresholds
            and i.quantity_available <= thresholds[i.product_id]
        )

    def add(self, item: Inventory) -> None:
        with self._lock:
            if self.get_by_product_and_warehouse(item.product_id, item.warehouse_id):
                raise AlreadyExistsError(
                    "Inventory already exists for this product in the warehouse"
                )
            self._put(item)

    def save(self, item: Inventory) -> None:
        with self._lock:
            self.save_calls += 1
            stored = self._store.get(item.id)
            if stored is None:
                raise EntityNotFoundError(f"Inventory not found with id: {item.id}")
            if stored.version != item.version:
                raise ConcurrencyConflictError(f"Inventory {item.id} was modified concurrently")
            item.version += 1
            self._put(item)

    def delete(self, inventory_id: str) -> None:
        self._pop(inventory_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._pop_where(lambda i: i.warehouse_id == warehouse_id)


class FakeAlertRepository(_DictStore, AlertRepository):

    def __init__(self, alerts: list[Alert] | None = None) -> None:
        super().__init__(alerts)

    def get_by_id(self, alert_id: str) -> Alert | None:
        return self._get(alert_id)

    def find_by_pair_and_status(
        self, product_id: str, warehouse_id: str, status: AlertStatus
    ) -> Alert | None:
        return self._first(
            lambda a: a.product_id == product_id
            and a.warehouse_id == warehouse_id
            and a.status == status
        )

    def list_by_pair_and_statuses(
        self, product_id: str, warehouse_id: str, statuses: list[AlertStatus]
    ) -> list[Alert]:
        return self._all(
            lambda a: a.product_id == product_id
            and a.warehouse_id == warehouse_id
            and a.status in statuses
        )

    def list_all(self) -> list[Alert]:
        return self._all()

    def list_by_status(self, status: AlertStatus) -> list[Alert]:
        return self._all(lambda a: a.status == status)

    def list_by_product(self, product_id: str) -> list[Alert]:
        return self._all(lambda a: a.product_id == product_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Alert]:
        return self._all(lambda a: a.warehouse_id == warehouse_id)

    def list_created_after(self, moment: datetime) -> list[Alert]:
        return self._all(lambda a: a.created_at > moment)

    def save(self, alert: Alert) -> None:
        self._put(alert)

    def delete(self, alert_id: str) -> None:
        self._pop(alert_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._pop_where(lambda a: a.warehouse_id == warehouse_id)

    def delete_by_product(self, product_id: str) -> int:
        return self._pop_where(lambda a: a.product_id == product_id)


class FakePurchaseOrderRepository(_DictStore, PurchaseOrderRepository):

    def __init__(self, orders: list[PurchaseOrder] | None = None) -> None:
        super().__init__(orders)

    def get_by_id(self, order_id: str) -> PurchaseOrder | None:
        return self._get(order_id)

    def list_all(self) -> list[PurchaseOrder]:
        return self._all()

    def list_by_status(self, status: PurchaseOrderStatus) -> list[PurchaseOrder]:
        return self._all(lambda o: o.status == status)

    def list_by_warehouse(self, warehouse_id: str) -> list[PurchaseOrder]:
        return self._all(lambda o: o.warehouse_id == warehouse_id)

    def list_created_between(self, start: datetime, end: datetime) -> list[PurchaseOrder]:
        return self._all(lambda o: start <= o.created_at <= end)

    def save(self, order: PurchaseOrder) -> None:
        with self._lock:
            stored = self._store.get(order.id)
            if stored is not None and stored.version != order.version:
                raise ConcurrencyConflictError(
                    f"Purchase order {order.id} was modified concurrently"
                )
            if stored is not None:
                order.version += 1
            self._put(order)

    def delete(self, order_id: str) -> None:
        self._pop(order_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._pop_where(lambda o: o.warehouse_id == warehouse_id)


class FakeSalesOrderRepository(_DictStore, SalesOrderRepository):

    def __init__(self, orders: list[SalesOrder] | None = None) -> None:
        super().__init__(orders)

    def get_by_id(self, order_id: str) -> SalesOrder | None:
        return self._get(order_id)

    def list_all(self) -> list[SalesOrder]:
        return self._all()

    def list_by_status(self, status: SalesOrderStatus) -> list[SalesOrder]:
        return self._all(lambda o: o.status == status)

    def list_by_customer_email(self, email: str) -> list[SalesOrder]:
        return self._all(lambda o: o.customer_email.lower() == email.lower())

    def list_by_warehouse(self, warehouse_id: str) -> list[SalesOrder]:
        return self._all(lambda o: o.warehouse_id == warehouse_id)

    def save(self, order: SalesOrder) -> None:
        self._put(order)

    def delete(self, order_id: str) -> None:
        self._pop(order_id)

    def delete_by_warehouse(self, warehouse_id: str) -> int:
        return self._pop_where(lambda o: o.warehouse_id == warehouse_id)


class FakeUserRepository(_DictStore, UserRepository):

    def __init__(self, users: list[User] | None = None) -> None:
        super().__init__(users)

    def get_by_id(self, user_id: str) -> User | None:
        return self._get(user_id)

    def get_by_username(self, username: str) -> User | None:
        return self._first(lambda u: u.username == username)

    def get_by_email(self, email: str) -> User | None:
        return self._first(lambda u: u.email.lower() == email.lower())

    def list_all(self) -> list[User]:
        return self._all()

    def save(self, user: User) -> None:
        self._put(user)

    def delete(self, user_id: str) -> None:
        self._pop(user_id)


class FakeWorld:
    """Every fake repository plus the ledger and reconciler wired as in
    production, with one warehouse ("w1") and no products."""

    def __init__(self) -> None:
        self.products = FakeProductRepository()
        self.categories = FakeCategoryRepository()
        self.warehouses = FakeWarehouseRepository([Warehouse(id="w1", name="Main")])
        self.inventory = FakeInventoryRepository()
        self.alerts = FakeAlertRepository()
        self.purchase_orders = FakePurchaseOrderRepository()
        self.sales_orders = FakeSalesOrderRepository()
        self.users = FakeUserRepository()

        self.ledger = InventoryLedger(self.inventory, self.products, self.warehouses)
        self.reconciler = AlertReconciler(
            self.alerts, self.inventory, self.products, self.warehouses
        )
        self.ledger.add_hook(self.reconciler.reconcile)

    def add_product(
        self,
        product_id: str,
        price: str = "15.00",
        threshold: int = 10,
        stock: int | None = None,
        warehouse_id: str = "w1",
    ) -> Product:
        """Register a product; with ``stock`` also open an inventory row."""
        product = Product(
            id=product_id,
            name=product_id.title(),
            sku=f"SKU-{product_id}",
            unit_price=Money.of(price),
            minimum_stock_threshold=threshold,
        )
        self.products.save(product)
        if stock is not None:
            self.inventory.add(
                Inventory(
                    id=f"inv-{product_id}-{warehouse_id}",
                    product_id=product_id,
                    warehouse_id=warehouse_id,
                    quantity_available=stock,
                )
            )
        return product

    def stock(self, product_id: str, warehouse_id: str = "w1") -> Inventory:
        return self.inventory.get_by_product_and_warehouse(product_id, warehouse_id)
