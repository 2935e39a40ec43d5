"""Inventory aggregate: stock of one product held in one warehouse.

Stock is split into three exclusive buckets: available, reserved (held
for confirmed sales orders) and damaged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ims.domain.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    ValidationError,
)
from ims.domain.model.common import new_id, utcnow


@dataclass
class Inventory:
    """Aggregate root for stock tracking per (product, warehouse).

    Invariants:
    - every bucket is >= 0 after every mutation
    - ``version`` only moves forward; the repository bumps it on save
    """

    id: str
    product_id: str
    warehouse_id: str
    quantity_available: int = 0
    quantity_reserved: int = 0
    quantity_damaged: int = 0
    last_updated: datetime = field(default_factory=utcnow)
    version: int = 0

    @staticmethod
    def create(product_id: str, warehouse_id: str, initial_quantity: int) -> Inventory:
        if initial_quantity < 0:
            raise ValidationError("Initial quantity cannot be negative")
        return Inventory(
            id=new_id(),
            product_id=product_id,
            warehouse_id=warehouse_id,
            quantity_available=initial_quantity,
        )

    @property
    def total_quantity(self) -> int:
        return self.quantity_available + self.quantity_reserved + self.quantity_damaged

    def reserve(self, quantity: int) -> None:
        """Move stock from available to reserved."""
        _require_positive(quantity, "Reservation")
        if quantity > self.quantity_available:
            raise InsufficientStockError(
                f"Not enough available stock to reserve "
                f"(need {quantity}, have {self.quantity_available} available)"
            )
        self.quantity_available -= quantity
        self.quantity_reserved += quantity
        self._touch()

    def release(self, quantity: int) -> None:
        """Move previously reserved stock back to available."""
        _require_positive(quantity, "Release")
        if quantity > self.quantity_reserved:
            raise InvalidStateError(
                f"Cannot release {quantity} "
                f"- only {self.quantity_reserved} currently reserved"
            )
        self.quantity_reserved -= quantity
        self.quantity_available += quantity
        self._touch()

    def mark_damaged(self, quantity: int) -> None:
        """Move stock from available to damaged."""
        _require_positive(quantity, "Damaged")
        if quantity > self.quantity_available:
            raise InsufficientStockError(
                f"Cannot mark {quantity} as damaged "
                f"- only {self.quantity_available} available"
            )
        self.quantity_available -= quantity
        self.quantity_damaged += quantity
        self._touch()

    def receive(self, quantity: int) -> None:
        """Add incoming stock (e.g. a purchase receipt) to available."""
        _require_positive(quantity, "Received")
        self.quantity_available += quantity
        self._touch()

    def revoke_receipt(self, quantity: int) -> None:
        """Take back units credited by a receipt that was not recorded."""
        _require_positive(quantity, "Revoked")
        if quantity > self.quantity_available:
            raise InsufficientStockError(
                f"Cannot revoke receipt of {quantity} "
                f"- only {self.quantity_available} available"
            )
        self.quantity_available -= quantity
        self._touch()

    def set_stock(self, available: int, reserved: int, damaged: int) -> None:
        """Overwrite all three buckets.

        No comparison against the previous values is made; only the
        non-negative rule applies.
        """
        if available < 0 or reserved < 0 or damaged < 0:
            raise ValidationError("Stock quantities cannot be negative")
        self.quantity_available = available
        self.quantity_reserved = reserved
        self.quantity_damaged = damaged
        self._touch()

    def is_at_or_below(self, threshold: int) -> bool:
        return self.quantity_available <= threshold

    def _touch(self) -> None:
        self.last_updated = utcnow()


def _require_positive(quantity: int, label: str) -> None:
    if quantity <= 0:
        raise ValidationError(f"{label} quantity must be positive")
