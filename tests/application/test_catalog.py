"""Integration tests for the product and category services."""

import pytest

from ims.application.catalog import CategoryService, ProductService
from ims.domain.exceptions import (
    AlreadyExistsError,
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ims.domain.model.alert import AlertStatus
from ims.domain.model.user import Principal, Role
from ims.domain.model.value_objects import Money
from tests.fakes import FakeWorld

CUSTOMER = Principal("bob", Role.CUSTOMER)


def _setup():
    world = FakeWorld()
    products = ProductService(world.products, world.categories, world.ledger, world.alerts)
    categories = CategoryService(world.categories)
    return world, products, categories


class TestProductService:

    def test_create_product(self):
        world, products, _ = _setup()
        product = products.create("Widget", "W-1", "15.00", description="Blue widget")

        assert world.products.get_by_sku("W-1").id == product.id
        assert product.unit_price == Money.of("15.00")
        assert product.minimum_stock_threshold == 10

    def test_duplicate_sku_rejected(self):
        _, products, _ = _setup()
        products.create("Widget", "W-1", "15.00")
        with pytest.raises(AlreadyExistsError, match="W-1"):
            products.create("Other", "W-1", "3.00")

    def test_non_positive_price_rejected(self):
        _, products, _ = _setup()
        with pytest.raises(ValidationError, match="Unit price must be positive"):
            products.create("Widget", "W-1", "0")

    def test_create_can_seed_inventory(self):
        world, products, _ = _setup()
        product = products.create("Widget", "W-1", "15.00", warehouse_id="w1", initial_stock=40)
        assert world.stock(product.id).quantity_available == 40

    def test_seeded_stock_defaults_to_threshold_and_alerts(self):
        world, products, _ = _setup()
        product = products.create(
            "Widget", "W-1", "15.00", minimum_stock_threshold=7, warehouse_id="w1"
        )
        assert world.stock(product.id).quantity_available == 7
        assert len(world.alerts.list_by_status(AlertStatus.ACTIVE)) == 1

    def test_customer_cannot_create(self):
        _, products, _ = _setup()
        with pytest.raises(PermissionDeniedError, match="Creating products requires the ADMIN role"):
            products.create("Widget", "W-1", "15.00", actor=CUSTOMER)

    def test_update_keeps_unspecified_fields(self):
        _, products, _ = _setup()
        product = products.create("Widget", "W-1", "15.00")
        updated = products.update(product.id, unit_price="17.50")
        assert updated.name == "Widget"
        assert updated.unit_price == Money.of("17.50")

    def test_update_to_taken_sku_rejected(self):
        _, products, _ = _setup()
        products.create("Widget", "W-1", "15.00")
        gadget = products.create("Gadget", "G-1", "5.00")
        with pytest.raises(AlreadyExistsError):
            products.update(gadget.id, sku="W-1")

    def test_delete_removes_inventory_rows(self):
        world, products, _ = _setup()
        product = products.create("Widget", "W-1", "15.00", warehouse_id="w1", initial_stock=40)
        products.delete(product.id)
        assert world.products.get_by_id(product.id) is None
        assert world.inventory.list_by_product(product.id) == []

    def test_delete_removes_alerts(self):
        world, products, _ = _setup()
        product = products.create("Widget", "W-1", "15.00", warehouse_id="w1", initial_stock=2)
        assert len(world.alerts.list_by_product(product.id)) == 1

        products.delete(product.id)

        assert world.alerts.list_by_product(product.id) == []
        assert world.alerts.list_by_status(AlertStatus.ACTIVE) == []

    def test_search_is_case_insensitive(self):
        _, products, _ = _setup()
        products.create("Widget", "W-1", "15.00", description="Blue")
        products.create("Gadget", "G-1", "5.00")
        assert [p.sku for p in products.search("blue")] == ["W-1"]

    def test_list_by_category_name(self):
        _, products, categories = _setup()
        tools = categories.create("Tools")
        products.create("Hammer", "H-1", "9.00", category_id=tools.id)
        products.create("Widget", "W-1", "15.00")
        assert [p.sku for p in products.list_by_category_name("tools")] == ["H-1"]

    def test_unknown_category_rejected(self):
        _, products, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Category not found"):
            products.create("Hammer", "H-1", "9.00", category_id="nope")


class TestCategoryService:

    def test_duplicate_name_rejected(self):
        _, _, categories = _setup()
        categories.create("Tools")
        with pytest.raises(AlreadyExistsError):
            categories.create("tools")

    def test_deactivated_categories_hidden_from_active_list(self):
        _, _, categories = _setup()
        tools = categories.create("Tools", display_order=2)
        categories.create("Garden", display_order=1)
        categories.deactivate(tools.id)

        assert [c.name for c in categories.list_active()] == ["Garden"]
        assert [c.name for c in categories.list_all()] == ["Garden", "Tools"]

    def test_listing_all_requires_admin(self):
        _, _, categories = _setup()
        with pytest.raises(PermissionDeniedError):
            categories.list_all(actor=CUSTOMER)

    def test_rename(self):
        _, _, categories = _setup()
        tools = categories.create("Tools")
        assert categories.update(tools.id, name="Hand Tools").name == "Hand Tools"
