"""Integration tests for the sales order workflow."""

import pytest

from ims.application.dto import SalesOrderItemSpec
from ims.application.sales_order_workflow import SalesOrderWorkflow
from ims.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidStateError,
    PermissionDeniedError,
)
from ims.domain.model.alert import AlertStatus
from ims.domain.model.sales_order import SalesOrderStatus
from ims.domain.model.user import Principal, Role
from ims.domain.model.value_objects import Money
from tests.fakes import FakeWorld


def _setup():
    world = FakeWorld()
    world.add_product("widget", price="15.00", stock=100)
    world.add_product("gadget", price="25.00", stock=50)
    workflow = SalesOrderWorkflow(
        world.sales_orders, world.products, world.warehouses, world.ledger
    )
    return world, workflow


def _create(workflow, widget=10, gadget=5):
    return workflow.create(
        "w1",
        "Alice",
        "alice@example.com",
        [SalesOrderItemSpec("widget", widget), SalesOrderItemSpec("gadget", gadget)],
    )


class TestCreateSalesOrder:

    def test_creates_pending_without_touching_stock(self):
        world, workflow = _setup()
        order = _create(workflow)

        assert order.status == SalesOrderStatus.PENDING
        assert order.total_amount == Money.of("275.00")
        assert world.stock("widget").quantity_reserved == 0
        assert world.stock("widget").quantity_available == 100

    def test_explicit_price_overrides_catalog(self):
        _, workflow = _setup()
        order = workflow.create(
            "w1", "Alice", "alice@example.com", [SalesOrderItemSpec("widget", 1, "9.99")]
        )
        assert order.items[0].unit_price == Money.of("9.99")

    def test_oversized_order_rejected_without_mutation(self):
        world, workflow = _setup()
        with pytest.raises(InsufficientStockError, match="Insufficient stock for product: Widget"):
            _create(workflow, widget=101)

        assert world.sales_orders.list_all() == []
        assert world.stock("widget").quantity_available == 100

    def test_product_without_inventory_rejected(self):
        world, workflow = _setup()
        world.add_product("gizmo")
        with pytest.raises(EntityNotFoundError, match="Inventory not found"):
            workflow.create("w1", "Alice", "a@example.com", [SalesOrderItemSpec("gizmo", 1)])


class TestConfirmSalesOrder:

    def test_confirm_reserves_every_item(self):
        world, workflow = _setup()
        order = _create(workflow)

        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)

        assert workflow.get(order.id).status == SalesOrderStatus.CONFIRMED
        assert world.stock("widget").quantity_reserved == 10
        assert world.stock("gadget").quantity_reserved == 5
        assert world.stock("gadget").quantity_available == 45

    def test_confirm_twice_does_not_double_reserve(self):
        world, workflow = _setup()
        order = _create(workflow)
        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)
        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)
        assert world.stock("widget").quantity_reserved == 10

    def test_failed_confirmation_keeps_pending_and_stock(self):
        world, workflow = _setup()
        order = _create(workflow, widget=10, gadget=30)
        # Stock drained after the order was accepted
        world.ledger.reserve(world.stock("gadget").id, 40)

        with pytest.raises(InsufficientStockError):
            workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)

        assert workflow.get(order.id).status == SalesOrderStatus.PENDING
        assert world.stock("widget").quantity_reserved == 0

    def test_confirmation_raises_low_stock_alert(self):
        world, workflow = _setup()
        order = _create(workflow, widget=95, gadget=1)
        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)

        [alert] = world.alerts.list_by_status(AlertStatus.ACTIVE)
        assert alert.product_id == "widget"
        assert alert.current_stock == 5

    def test_process_requires_confirmed_order(self):
        _, workflow = _setup()
        order = _create(workflow)
        with pytest.raises(InvalidStateError, match="Order must be confirmed to process"):
            workflow.process_confirmed_order(order)


class TestCancelAndDelete:

    def test_cancelling_confirmed_order_releases_stock(self):
        world, workflow = _setup()
        order = _create(workflow)
        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)

        workflow.update_status(order.id, SalesOrderStatus.CANCELLED)

        assert world.stock("widget").quantity_reserved == 0
        assert world.stock("widget").quantity_available == 100

    def test_cancelling_pending_order_leaves_stock(self):
        world, workflow = _setup()
        order = _create(workflow)
        workflow.update_status(order.id, SalesOrderStatus.CANCELLED)
        assert world.stock("widget").quantity_available == 100

    def test_status_cannot_go_back_to_pending(self):
        _, workflow = _setup()
        order = _create(workflow)
        workflow.update_status(order.id, SalesOrderStatus.CONFIRMED)
        with pytest.raises(InvalidStateError, match="back to PENDING"):
            workflow.update_status(order.id, SalesOrderStatus.PENDING)

    def test_customer_cannot_delete(self):
        _, workflow = _setup()
        order = _create(workflow)
        with pytest.raises(PermissionDeniedError):
            workflow.delete(order.id, actor=Principal("bob", Role.CUSTOMER))

    def test_list_by_customer_is_case_insensitive(self):
        _, workflow = _setup()
        _create(workflow)
        assert len(workflow.list_by_customer("ALICE@example.com")) == 1
