"""SalesOrder aggregate: stock promised to a customer from one warehouse.

Status flow::

    PENDING -> CONFIRMED -> SHIPPED -> DELIVERED
       \\          \\
        +-----------+--> CANCELLED

Stock is reserved when the order enters CONFIRMED (coordinated by the
workflow through the Inventory Ledger). No status may move back to
PENDING; DELIVERED and CANCELLED are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ims.domain.exceptions import InvalidStateError, ValidationError
from ims.domain.model.common import new_id, utcnow
from ims.domain.model.value_objects import Money, Quantity


class SalesOrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


_FORWARD_ORDER = [
    SalesOrderStatus.PENDING,
    SalesOrderStatus.CONFIRMED,
    SalesOrderStatus.SHIPPED,
    SalesOrderStatus.DELIVERED,
]
_TERMINAL = {SalesOrderStatus.DELIVERED, SalesOrderStatus.CANCELLED}
_CANCELLABLE = {SalesOrderStatus.PENDING, SalesOrderStatus.CONFIRMED}


@dataclass
class SalesOrderItem:

    id: str
    product_id: str
    quantity: Quantity
    unit_price: Money  # snapshot at order-creation time
    notes: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class SalesOrder:
    """Aggregate root for customer orders."""

    id: str
    warehouse_id: str
    customer_name: str
    customer_email: str
    items: list[SalesOrderItem]
    status: SalesOrderStatus = SalesOrderStatus.PENDING
    shipping_address: str = ""
    billing_address: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @staticmethod
    def create(
        warehouse_id: str,
        customer_name: str,
        customer_email: str,
        items: list[SalesOrderItem],
        shipping_address: str = "",
        billing_address: str = "",
        notes: str = "",
    ) -> SalesOrder:
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if not customer_email or not customer_email.strip():
            raise ValidationError("Customer email is required")
        if not items:
            raise ValidationError("Sales order must contain at least one item")
        return SalesOrder(
            id=new_id(),
            warehouse_id=warehouse_id,
            customer_name=customer_name.strip(),
            customer_email=customer_email.strip(),
            items=list(items),
            shipping_address=shipping_address,
            billing_address=billing_address,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def validate_transition(self, new_status: SalesOrderStatus) -> None:
        if self.status == new_status:
            return
        if new_status == SalesOrderStatus.PENDING:
            raise InvalidStateError(
                f"Cannot change {self.status.value} order back to PENDING"
            )
        if self.status in _TERMINAL:
            raise InvalidStateError(f"Cannot change status of {self.status.value} orders")
        if new_status == SalesOrderStatus.CANCELLED:
            if self.status not in _CANCELLABLE:
                raise InvalidStateError(f"Cannot cancel {self.status.value} orders")
            return
        if _FORWARD_ORDER.index(new_status) != _FORWARD_ORDER.index(self.status) + 1:
            raise InvalidStateError(
                f"{self.status.value} orders cannot be moved to {new_status.value}"
            )

    def transition_to(self, new_status: SalesOrderStatus) -> bool:
        """Apply a validated transition. Returns False for a same-state no-op."""
        self.validate_transition(new_status)
        if self.status == new_status:
            return False
        self.status = new_status
        self.updated_at = utcnow()
        return True

    def ensure_confirmed(self) -> None:
        if self.status != SalesOrderStatus.CONFIRMED:
            raise InvalidStateError("Order must be confirmed to process")

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result


def new_sales_order_item(
    product_id: str,
    quantity: int,
    unit_price: Money,
    notes: str = "",
) -> SalesOrderItem:
    return SalesOrderItem(
        id=new_id(),
        product_id=product_id,
        quantity=Quantity(quantity),
        unit_price=unit_price,
        notes=notes,
    )
