"""Unit tests for the Alert aggregate and reorder sizing."""

import pytest

from ims.domain.exceptions import InvalidStateError
from ims.domain.model.alert import (
    Alert,
    AlertStatus,
    optimal_stock_level,
    suggested_reorder_quantity,
)
from ims.domain.model.value_objects import Money


def _alert(status: AlertStatus = AlertStatus.ACTIVE, notes: str = "") -> Alert:
    alert = Alert.raise_for("p1", "w1", Money.of("500"), threshold=10, current_stock=0, notes=notes)
    alert.status = status
    return alert


class TestReorderSizing:

    def test_regular_price_uses_three_times_threshold(self):
        assert optimal_stock_level(Money.of("500"), 10) == 30

    def test_high_value_adds_half_again(self):
        assert optimal_stock_level(Money.of("1500"), 10) == 45

    def test_price_of_exactly_1000_is_not_high_value(self):
        assert optimal_stock_level(Money.of("1000"), 10) == 30

    def test_zero_threshold_gives_zero_optimal(self):
        assert optimal_stock_level(Money.of("5"), 0) == 0

    def test_documented_example_current_stock_five(self):
        optimal = optimal_stock_level(Money.of("500"), 10)
        assert optimal == 30
        assert suggested_reorder_quantity(5, optimal) == 30

    def test_suggested_quantity_adds_twenty_percent_buffer(self):
        # deficit 30, buffer 6
        assert suggested_reorder_quantity(0, 30) == 36

    def test_suggested_quantity_truncates_buffer(self):
        # deficit 27, buffer int(5.4) = 5
        assert suggested_reorder_quantity(3, 30) == 32

    def test_suggested_quantity_is_at_least_one(self):
        assert suggested_reorder_quantity(50, 30) == 1

    def test_raise_for_fills_in_suggestions(self):
        alert = Alert.raise_for("p1", "w1", Money.of("500"), threshold=10, current_stock=0)
        assert alert.status == AlertStatus.ACTIVE
        assert alert.optimal_stock_level == 30
        assert alert.suggested_reorder_quantity == 36


class TestAlertTransitions:

    def test_active_to_acknowledged_to_resolved(self):
        alert = _alert()
        alert.acknowledge()
        alert.change_status(AlertStatus.RESOLVED)
        assert alert.status == AlertStatus.RESOLVED

    def test_resolved_is_terminal(self):
        alert = _alert(AlertStatus.RESOLVED)
        with pytest.raises(InvalidStateError, match="Cannot update a resolved alert"):
            alert.change_status(AlertStatus.ACTIVE)

    def test_acknowledged_cannot_go_back_to_active(self):
        with pytest.raises(InvalidStateError, match="Cannot move alert"):
            _alert(AlertStatus.ACKNOWLEDGED).change_status(AlertStatus.ACTIVE)

    def test_only_active_alerts_can_be_acknowledged(self):
        with pytest.raises(InvalidStateError, match="Can only acknowledge active alerts"):
            _alert(AlertStatus.ACKNOWLEDGED).acknowledge()

    def test_same_status_only_replaces_notes(self):
        alert = _alert(notes="old")
        alert.change_status(AlertStatus.ACTIVE, "new")
        assert alert.status == AlertStatus.ACTIVE
        assert alert.notes == "new"

    def test_automatic_resolution_appends_note(self):
        alert = _alert(notes="first")
        alert.resolve_automatically(42, "back in stock")
        assert alert.status == AlertStatus.RESOLVED
        assert alert.current_stock == 42
        assert alert.notes == "first\nback in stock"

    def test_active_alert_cannot_be_deleted(self):
        with pytest.raises(InvalidStateError, match="Cannot delete active alerts"):
            _alert().ensure_deletable()
        _alert(AlertStatus.RESOLVED).ensure_deletable()
