"""Data Transfer Objects: plain containers that cross layer boundaries.

Input specs carry what a caller asked for; read models carry computed
dashboard figures out to the CLI (or any other adapter) without
exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


# ── Inputs ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PurchaseOrderItemSpec:
    """Input: one product to order from a supplier."""

    product_id: str
    quantity_ordered: int
    unit_price: str | Decimal
    notes: str = ""


@dataclass(frozen=True)
class SalesOrderItemSpec:
    """Input: one product a customer wants. ``unit_price`` defaults to the
    product's catalog price."""

    product_id: str
    quantity: int
    unit_price: str | Decimal | None = None
    notes: str = ""


@dataclass(frozen=True)
class ReceivedItemSpec:
    """Input: cumulative quantity received so far for one order item."""

    item_id: str
    quantity_received: int


# ── Read models ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class InventoryOverview:
    total_products: int
    total_stock_value: Decimal
    low_stock_items: int
    out_of_stock_items: int


@dataclass(frozen=True)
class TurnoverReport:
    total_received: int
    average_inventory_level: float
    turnover_ratio: float


@dataclass(frozen=True)
class ReorderRecommendation:
    product_id: str
    product_name: str
    warehouse_id: str
    current_stock: int
    threshold: int
    recommended_quantity: int
    estimated_cost: Decimal


@dataclass(frozen=True)
class WarehouseUtilization:
    warehouse_id: str
    warehouse_name: str
    total_products: int
    low_stock_items: int
    total_value: Decimal


@dataclass(frozen=True)
class FrequentAlertProduct:
    product_id: str
    product_name: str
    alert_count: int


@dataclass(frozen=True)
class AlertMetrics:
    status_counts: dict[str, int] = field(default_factory=dict)
    frequent_products: list[FrequentAlertProduct] = field(default_factory=list)


@dataclass(frozen=True)
class AgingLine:
    product_id: str
    product_name: str
    warehouse_id: str
    quantity: int
    value: Decimal
    last_updated: datetime


@dataclass(frozen=True)
class LowStockDetail:
    product_id: str
    product_name: str
    warehouse_id: str
    warehouse_name: str
    current_stock: int
    threshold: int


@dataclass(frozen=True)
class LowStockDiagnostics:
    total_inventories: int
    low_stock_inventories: int
    active_alerts: int
    details: list[LowStockDetail] = field(default_factory=list)
