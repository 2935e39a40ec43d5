"""Unit tests for the Inventory aggregate."""

import pytest

from ims.domain.exceptions import InsufficientStockError, InvalidStateError, ValidationError
from ims.domain.model.inventory import Inventory


def _row(available: int = 100, reserved: int = 0, damaged: int = 0) -> Inventory:
    return Inventory(
        id="inv-1",
        product_id="p1",
        warehouse_id="w1",
        quantity_available=available,
        quantity_reserved=reserved,
        quantity_damaged=damaged,
    )


class TestInventoryCreate:

    def test_starts_with_available_only(self):
        inv = Inventory.create("p1", "w1", 25)
        assert (inv.quantity_available, inv.quantity_reserved, inv.quantity_damaged) == (25, 0, 0)
        assert inv.version == 0

    def test_negative_initial_quantity_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Inventory.create("p1", "w1", -1)


class TestInventoryReserve:

    def test_reserve_moves_available_to_reserved(self):
        inv = _row(100)
        inv.reserve(30)
        assert inv.quantity_available == 70
        assert inv.quantity_reserved == 30

    def test_reserve_all_available(self):
        inv = _row(10)
        inv.reserve(10)
        assert inv.quantity_available == 0

    def test_reserve_more_than_available_rejected(self):
        inv = _row(10)
        with pytest.raises(InsufficientStockError, match="Not enough available stock"):
            inv.reserve(11)
        assert inv.quantity_available == 10
        assert inv.quantity_reserved == 0

    def test_reserve_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _row().reserve(0)

    def test_reserve_then_release_restores_buckets(self):
        inv = _row(40, reserved=5)
        inv.reserve(15)
        inv.release(15)
        assert inv.quantity_available == 40
        assert inv.quantity_reserved == 5


class TestInventoryRelease:

    def test_release_more_than_reserved_rejected(self):
        inv = _row(10, reserved=3)
        with pytest.raises(InvalidStateError, match="Cannot release 4"):
            inv.release(4)

    def test_release_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _row(reserved=5).release(-1)


class TestInventoryDamageAndReceive:

    def test_mark_damaged_moves_available_to_damaged(self):
        inv = _row(10)
        inv.mark_damaged(4)
        assert inv.quantity_available == 6
        assert inv.quantity_damaged == 4
        assert inv.total_quantity == 10

    def test_mark_damaged_beyond_available_rejected(self):
        with pytest.raises(InsufficientStockError):
            _row(3).mark_damaged(4)

    def test_receive_adds_to_available(self):
        inv = _row(3, reserved=2)
        inv.receive(7)
        assert inv.quantity_available == 10
        assert inv.quantity_reserved == 2

    def test_revoke_receipt_takes_back_available(self):
        inv = _row(10)
        inv.revoke_receipt(4)
        assert inv.quantity_available == 6

    def test_revoke_receipt_beyond_available_rejected(self):
        inv = _row(3, reserved=5)
        with pytest.raises(InsufficientStockError, match="Cannot revoke"):
            inv.revoke_receipt(4)
        assert inv.quantity_available == 3


class TestInventorySetStock:

    def test_overwrites_all_buckets(self):
        inv = _row(100, reserved=10, damaged=1)
        inv.set_stock(5, 0, 0)
        assert (inv.quantity_available, inv.quantity_reserved, inv.quantity_damaged) == (5, 0, 0)

    def test_negative_values_rejected(self):
        inv = _row(100)
        with pytest.raises(ValidationError, match="cannot be negative"):
            inv.set_stock(1, -1, 0)
        assert inv.quantity_available == 100

    def test_threshold_check_is_inclusive(self):
        assert _row(10).is_at_or_below(10)
        assert not _row(11).is_at_or_below(10)
