"""Unit tests for the SalesOrder aggregate."""

import pytest

from ims.domain.exceptions import InvalidStateError, ValidationError
from ims.domain.model.sales_order import SalesOrder, SalesOrderStatus, new_sales_order_item
from ims.domain.model.value_objects import Money


def _order(status: SalesOrderStatus = SalesOrderStatus.PENDING) -> SalesOrder:
    order = SalesOrder.create(
        "w1", "Alice", "alice@example.com",
        [new_sales_order_item("p1", 2, Money.of("15.00"))],
    )
    order.status = status
    return order


class TestSalesOrderCreation:

    def test_total(self):
        assert _order().total_amount == Money.of("30.00")

    def test_email_required(self):
        with pytest.raises(ValidationError, match="Customer email is required"):
            SalesOrder.create("w1", "Alice", "", [new_sales_order_item("p1", 1, Money.of("1"))])

    def test_zero_quantity_item_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            new_sales_order_item("p1", 0, Money.of("1"))


class TestSalesOrderTransitions:

    @pytest.mark.parametrize(
        "start,target",
        [
            (SalesOrderStatus.PENDING, SalesOrderStatus.CONFIRMED),
            (SalesOrderStatus.CONFIRMED, SalesOrderStatus.SHIPPED),
            (SalesOrderStatus.SHIPPED, SalesOrderStatus.DELIVERED),
            (SalesOrderStatus.PENDING, SalesOrderStatus.CANCELLED),
            (SalesOrderStatus.CONFIRMED, SalesOrderStatus.CANCELLED),
        ],
    )
    def test_allowed(self, start, target):
        order = _order(start)
        assert order.transition_to(target)
        assert order.status == target

    def test_cannot_return_to_pending(self):
        with pytest.raises(InvalidStateError, match="back to PENDING"):
            _order(SalesOrderStatus.CONFIRMED).transition_to(SalesOrderStatus.PENDING)

    def test_cannot_skip_forward(self):
        with pytest.raises(InvalidStateError, match="cannot be moved to SHIPPED"):
            _order().transition_to(SalesOrderStatus.SHIPPED)

    def test_shipped_cannot_be_cancelled(self):
        with pytest.raises(InvalidStateError, match="Cannot cancel SHIPPED orders"):
            _order(SalesOrderStatus.SHIPPED).transition_to(SalesOrderStatus.CANCELLED)

    def test_cancelled_is_terminal(self):
        with pytest.raises(InvalidStateError, match="Cannot change status of CANCELLED"):
            _order(SalesOrderStatus.CANCELLED).transition_to(SalesOrderStatus.CONFIRMED)

    def test_same_status_is_a_no_op(self):
        assert _order(SalesOrderStatus.CONFIRMED).transition_to(SalesOrderStatus.CONFIRMED) is False

    def test_processing_requires_confirmed(self):
        with pytest.raises(InvalidStateError, match="Order must be confirmed to process"):
            _order().ensure_confirmed()
