"""Integration tests for the alert service."""

import pytest

from ims.application.alert_service import AlertService
from ims.domain.exceptions import EntityNotFoundError, InvalidStateError
from ims.domain.model.alert import AlertStatus
from tests.fakes import FakeWorld


def _setup():
    world = FakeWorld()
    world.add_product("widget", price="500", stock=3)
    world.add_product("gadget", stock=80)
    service = AlertService(
        world.alerts, world.products, world.warehouses, world.inventory, world.reconciler
    )
    return world, service


class TestAlertLifecycle:

    def test_trigger_check_raises_alert_for_low_row(self):
        _, service = _setup()
        report = service.trigger_check()

        assert report.created == 1
        [alert] = service.list_active()
        assert alert.product_id == "widget"
        assert service.count_active() == 1

    def test_acknowledge_then_delete(self):
        world, service = _setup()
        service.trigger_check()
        [alert] = service.list_active()

        with pytest.raises(InvalidStateError, match="Cannot delete active alerts"):
            service.delete(alert.id)

        service.acknowledge(alert.id)
        service.delete(alert.id)
        assert world.alerts.list_all() == []

    def test_resolved_alert_is_frozen(self):
        _, service = _setup()
        alert = service.create_alert("gadget", "w1", threshold=100, notes="watch this")
        service.resolve(alert.id)
        with pytest.raises(InvalidStateError, match="Cannot update a resolved alert"):
            service.update_status(alert.id, AlertStatus.ACKNOWLEDGED)

    def test_update_status_can_replace_notes(self):
        _, service = _setup()
        alert = service.create_alert("gadget", "w1", threshold=100)
        updated = service.update_status(alert.id, AlertStatus.ACKNOWLEDGED, "ordered more")
        assert updated.notes == "ordered more"

    def test_unknown_alert(self):
        _, service = _setup()
        with pytest.raises(EntityNotFoundError, match="Alert not found"):
            service.acknowledge("missing")


class TestAlertQueries:

    def test_list_by_product_requires_product(self):
        _, service = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            service.list_by_product("ghost")

    def test_below_threshold_excludes_stale_snapshots(self):
        _, service = _setup()
        service.trigger_check()
        manual = service.create_alert("gadget", "w1", threshold=50)

        below = service.list_active_below_threshold()
        assert [a.product_id for a in below] == ["widget"]
        assert manual.id not in {a.id for a in below}

    def test_refresh_stock_level(self):
        _, service = _setup()
        service.trigger_check()
        touched = service.refresh_stock_level("widget", "w1", 2)
        assert touched == 1
        assert service.list_active()[0].current_stock == 2

    def test_low_stock_diagnostics(self):
        _, service = _setup()
        service.trigger_check()
        diag = service.low_stock_diagnostics()

        assert diag.total_inventories == 2
        assert diag.low_stock_inventories == 1
        assert diag.active_alerts == 1
        [detail] = diag.details
        assert (detail.product_name, detail.warehouse_name) == ("Widget", "Main")
        assert (detail.current_stock, detail.threshold) == (3, 10)
