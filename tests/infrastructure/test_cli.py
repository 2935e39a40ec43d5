"""End-to-end CLI tests over a temporary data directory."""

import re

import pytest
from click.testing import CliRunner

from ims.config import settings
from ims.infrastructure.cli.main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path)
    return CliRunner()


def _add_warehouse(runner, name="North"):
    result = runner.invoke(cli, ["warehouse", "add", "--name", name])
    assert result.exit_code == 0, result.output
    return re.search(r"Warehouse (\S+) ", result.output).group(1)


def test_warehouse_add_and_list(runner):
    warehouse_id = _add_warehouse(runner)

    result = runner.invoke(cli, ["warehouse", "list"])

    assert result.exit_code == 0
    assert warehouse_id in result.output
    assert "North" in result.output


def test_product_add_opens_inventory(runner):
    warehouse_id = _add_warehouse(runner)

    result = runner.invoke(cli, [
        "product", "add", "--name", "Widget", "--sku", "W-1", "--price", "15.00",
        "--warehouse", warehouse_id, "--initial-stock", "40",
    ])
    assert result.exit_code == 0, result.output
    assert "(W-1) added at $15.00" in result.output

    shown = runner.invoke(cli, ["inventory", "show", "--warehouse", warehouse_id])
    assert shown.exit_code == 0
    assert "    40" in shown.output


def test_low_stock_product_raises_alert(runner):
    warehouse_id = _add_warehouse(runner)
    runner.invoke(cli, [
        "product", "add", "--name", "Widget", "--sku", "W-1", "--price", "15.00",
        "--warehouse", warehouse_id, "--initial-stock", "2",
    ])

    result = runner.invoke(cli, ["alert", "list"])

    assert result.exit_code == 0
    assert "ACTIVE" in result.output


def test_customer_cannot_add_products(runner):
    result = runner.invoke(cli, [
        "--role", "CUSTOMER",
        "product", "add", "--name", "Widget", "--sku", "W-1", "--price", "15.00",
    ])

    assert result.exit_code == 1
    assert "requires the ADMIN role" in result.output


def test_domain_errors_become_click_errors(runner):
    result = runner.invoke(cli, ["inventory", "reserve", "--id", "missing", "--qty", "1"])

    assert result.exit_code == 1
    assert "Inventory not found" in result.output


def test_scheduler_run_once(runner):
    result = runner.invoke(cli, ["scheduler", "run", "--once"])

    assert result.exit_code == 0
    assert "Housekeeping jobs finished" in result.output
