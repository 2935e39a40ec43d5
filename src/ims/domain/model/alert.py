"""Alert aggregate and the reorder sizing rules used when one is raised.

An alert records that a product's available stock in a warehouse fell to
or below the product's minimum threshold, together with a suggested
reorder quantity computed at creation time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ims.domain.exceptions import InvalidStateError
from ims.domain.model.common import new_id, utcnow
from ims.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Reorder sizing
# ---------------------------------------------------------------------------
SAFETY_STOCK_MULTIPLIER = 3
MINIMUM_OPTIMAL_MULTIPLIER = 2
HIGH_VALUE_PRICE = 1000
HIGH_VALUE_FACTOR = 1.5
SAFETY_BUFFER_RATIO = 0.2


def optimal_stock_level(unit_price: Money, threshold: int) -> int:
    """Target stock level: three times the threshold, 50% more for items
    priced above 1000, never less than twice the threshold."""
    base = threshold * SAFETY_STOCK_MULTIPLIER
    if unit_price.exceeds(HIGH_VALUE_PRICE):
        base = int(base * HIGH_VALUE_FACTOR)
    return max(base, threshold * MINIMUM_OPTIMAL_MULTIPLIER)


def suggested_reorder_quantity(current_stock: int, optimal_level: int) -> int:
    """Deficit to the optimal level plus a 20% buffer, at least one unit.

    ``int()`` truncates toward zero, so negative deficits round the same
    way as positive ones.
    """
    deficit = optimal_level - current_stock
    buffer = int(deficit * SAFETY_BUFFER_RATIO)
    return max(deficit + buffer, 1)


class AlertStatus(Enum):
    ACTIVE = "ACTIVE"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"


_ALLOWED_TRANSITIONS = {
    AlertStatus.ACTIVE: {AlertStatus.ACKNOWLEDGED, AlertStatus.RESOLVED},
    AlertStatus.ACKNOWLEDGED: {AlertStatus.RESOLVED},
    AlertStatus.RESOLVED: set(),
}


@dataclass
class Alert:
    """Low-stock alert for one (product, warehouse) pair."""

    id: str
    product_id: str
    warehouse_id: str
    threshold: int
    current_stock: int
    suggested_reorder_quantity: int
    optimal_stock_level: int
    status: AlertStatus = AlertStatus.ACTIVE
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @staticmethod
    def raise_for(
        product_id: str,
        warehouse_id: str,
        unit_price: Money,
        threshold: int,
        current_stock: int,
        notes: str = "",
    ) -> Alert:
        """Open a new ACTIVE alert with reorder suggestions filled in."""
        optimal = optimal_stock_level(unit_price, threshold)
        return Alert(
            id=new_id(),
            product_id=product_id,
            warehouse_id=warehouse_id,
            threshold=threshold,
            current_stock=current_stock,
            suggested_reorder_quantity=suggested_reorder_quantity(current_stock, optimal),
            optimal_stock_level=optimal,
            notes=notes,
        )

    @property
    def is_stock_below_threshold(self) -> bool:
        return self.current_stock <= self.threshold

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: AlertStatus, notes: str | None = None) -> None:
        """ACTIVE -> ACKNOWLEDGED -> RESOLVED, or ACTIVE -> RESOLVED.

        RESOLVED is terminal. Re-applying the current status only
        replaces the notes.
        """
        if self.status == AlertStatus.RESOLVED:
            raise InvalidStateError("Cannot update a resolved alert")
        if new_status != self.status and new_status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateError(
                f"Cannot move alert from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
        if notes:
            self.notes = notes
        self.updated_at = utcnow()

    def acknowledge(self) -> None:
        if self.status != AlertStatus.ACTIVE:
            raise InvalidStateError("Can only acknowledge active alerts")
        self.change_status(AlertStatus.ACKNOWLEDGED)

    def resolve_automatically(self, current_stock: int, note: str) -> None:
        """Close the alert because stock recovered; ``note`` is appended."""
        self.current_stock = current_stock
        self.notes = f"{self.notes}\n{note}" if self.notes else note
        self.change_status(AlertStatus.RESOLVED)

    def refresh_stock(self, current_stock: int) -> None:
        self.current_stock = current_stock
        self.updated_at = utcnow()

    def ensure_deletable(self) -> None:
        if self.status == AlertStatus.ACTIVE:
            raise InvalidStateError("Cannot delete active alerts")
