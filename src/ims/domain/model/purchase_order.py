"""PurchaseOrder aggregate: stock ordered from a supplier into a warehouse.

The order owns its items. The status machine is strictly forward:
PENDING -> APPROVED -> RECEIVED. Crediting inventory on receipt is done
by the workflow through the Inventory Ledger; the aggregate only tracks
quantities and status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ims.domain.exceptions import EntityNotFoundError, InvalidStateError, ValidationError
from ims.domain.model.common import new_id, utcnow
from ims.domain.model.value_objects import Money, Quantity


class PurchaseOrderStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    RECEIVED = "RECEIVED"


@dataclass
class PurchaseOrderItem:
    """One ordered product. ``quantity_ordered`` and ``unit_price`` never
    change after creation; ``quantity_received`` grows on receipt."""

    id: str
    product_id: str
    quantity_ordered: Quantity
    unit_price: Money
    quantity_received: int = 0
    notes: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity_ordered.value

    @property
    def outstanding(self) -> int:
        return self.quantity_ordered.value - self.quantity_received

    @property
    def is_fully_received(self) -> bool:
        return self.quantity_received >= self.quantity_ordered.value

    def record_received(self, total_received: int) -> int:
        """Set the cumulative received quantity; returns the increase."""
        if total_received > self.quantity_ordered.value:
            raise ValidationError("Received quantity cannot exceed ordered quantity")
        if total_received < self.quantity_received:
            raise ValidationError(
                f"Received quantity cannot decrease "
                f"(already received {self.quantity_received})"
            )
        delta = total_received - self.quantity_received
        self.quantity_received = total_received
        return delta


@dataclass
class PurchaseOrder:
    """Aggregate root for purchase orders.

    Use ``PurchaseOrder.create()`` for new orders; ``__init__`` stays
    plain so repositories can reconstitute stored orders. ``version`` is
    bumped by the repository on every save.
    """

    id: str
    warehouse_id: str
    supplier_name: str
    items: list[PurchaseOrderItem]
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING
    contact_info: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        warehouse_id: str,
        supplier_name: str,
        items: list[PurchaseOrderItem],
        contact_info: str = "",
        notes: str = "",
    ) -> PurchaseOrder:
        if not supplier_name or not supplier_name.strip():
            raise ValidationError("Supplier name is required")
        if not items:
            raise ValidationError("Purchase order must contain at least one item")
        return PurchaseOrder(
            id=new_id(),
            warehouse_id=warehouse_id,
            supplier_name=supplier_name.strip(),
            items=list(items),
            contact_info=contact_info,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def validate_transition(self, new_status: PurchaseOrderStatus) -> None:
        """Raise InvalidStateError unless ``new_status`` is the next state.

        Re-applying the current status is allowed (a no-op).
        """
        if self.status == new_status:
            return
        if self.status == PurchaseOrderStatus.PENDING:
            if new_status != PurchaseOrderStatus.APPROVED:
                raise InvalidStateError("PENDING orders can only be moved to APPROVED")
        elif self.status == PurchaseOrderStatus.APPROVED:
            if new_status != PurchaseOrderStatus.RECEIVED:
                raise InvalidStateError("APPROVED orders can only be moved to RECEIVED")
        else:
            raise InvalidStateError("Cannot change status of RECEIVED orders")

    def transition_to(self, new_status: PurchaseOrderStatus) -> bool:
        """Apply a validated transition. Returns False for a same-state no-op."""
        self.validate_transition(new_status)
        if self.status == new_status:
            return False
        self.status = new_status
        self.updated_at = utcnow()
        return True

    def mark_all_received(self) -> None:
        for item in self.items:
            item.quantity_received = item.quantity_ordered.value

    def ensure_receivable(self) -> None:
        if self.status != PurchaseOrderStatus.APPROVED:
            raise InvalidStateError("Can only receive items for APPROVED orders")

    def ensure_deletable(self) -> None:
        if self.status != PurchaseOrderStatus.PENDING:
            raise InvalidStateError("Can only delete PENDING orders")

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def is_fully_received(self) -> bool:
        return all(item.is_fully_received for item in self.items)

    def find_item(self, item_id: str) -> PurchaseOrderItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundError(f"Order item '{item_id}' not found in purchase order {self.id}")


def new_purchase_order_item(
    product_id: str,
    quantity_ordered: int,
    unit_price: Money,
    notes: str = "",
) -> PurchaseOrderItem:
    return PurchaseOrderItem(
        id=new_id(),
        product_id=product_id,
        quantity_ordered=Quantity(quantity_ordered),
        unit_price=unit_price,
        notes=notes,
    )
