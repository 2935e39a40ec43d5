"""Application service: dashboard rollups (queries only)."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from decimal import Decimal

from ims.application.dto import (
    AgingLine,
    AlertMetrics,
    FrequentAlertProduct,
    InventoryOverview,
    ReorderRecommendation,
    TurnoverReport,
    WarehouseUtilization,
)
from ims.domain.model.alert import AlertStatus
from ims.domain.model.inventory import Inventory
from ims.domain.model.product import Product
from ims.domain.model.purchase_order import PurchaseOrderStatus
from ims.domain.repository.alert_repository import AlertRepository
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.purchase_order_repository import PurchaseOrderRepository
from ims.domain.repository.warehouse_repository import WarehouseRepository

TOP_ALERT_PRODUCTS = 5
REORDER_UP_TO_MULTIPLIER = 2


class DashboardService:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        product_repo: ProductRepository,
        purchase_order_repo: PurchaseOrderRepository,
        warehouse_repo: WarehouseRepository,
        alert_repo: AlertRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._product_repo = product_repo
        self._purchase_order_repo = purchase_order_repo
        self._warehouse_repo = warehouse_repo
        self._alert_repo = alert_repo

    def inventory_overview(self) -> InventoryOverview:
        products = self._products()
        rows = self._inventory_repo.list_all()
        return InventoryOverview(
            total_products=len(products),
            total_stock_value=sum(
                (_stock_value(row, products) for row in rows), Decimal("0")
            ),
            low_stock_items=len(self._low_stock_rows(products)),
            out_of_stock_items=sum(1 for row in rows if row.quantity_available == 0),
        )

    def inventory_turnover(self, start: datetime, end: datetime) -> TurnoverReport:
        """Units received by RECEIVED orders created in [start, end] relative
        to the mean available quantity per inventory row."""
        received_orders = [
            order
            for order in self._purchase_order_repo.list_created_between(start, end)
            if order.status == PurchaseOrderStatus.RECEIVED
        ]
        total_received = sum(
            item.quantity_received for order in received_orders for item in order.items
        )

        rows = self._inventory_repo.list_all()
        average = (
            sum(row.quantity_available for row in rows) / len(rows) if rows else 0.0
        )
        ratio = total_received / average if average > 0 else 0.0
        return TurnoverReport(
            total_received=total_received,
            average_inventory_level=average,
            turnover_ratio=ratio,
        )

    def reorder_recommendations(self) -> list[ReorderRecommendation]:
        """Order up to twice the threshold for every low-stock row."""
        products = self._products()
        recommendations = []
        for row in self._low_stock_rows(products):
            product = products[row.product_id]
            threshold = product.minimum_stock_threshold
            quantity = threshold * REORDER_UP_TO_MULTIPLIER - row.quantity_available
            recommendations.append(
                ReorderRecommendation(
                    product_id=product.id,
                    product_name=product.name,
                    warehouse_id=row.warehouse_id,
                    current_stock=row.quantity_available,
                    threshold=threshold,
                    recommended_quantity=quantity,
                    estimated_cost=product.unit_price.amount * quantity,
                )
            )
        return recommendations

    def warehouse_utilization(self) -> list[WarehouseUtilization]:
        products = self._products()
        stats = []
        for warehouse in self._warehouse_repo.list_all():
            rows = self._inventory_repo.list_by_warehouse(warehouse.id)
            stats.append(
                WarehouseUtilization(
                    warehouse_id=warehouse.id,
                    warehouse_name=warehouse.name,
                    total_products=len(rows),
                    low_stock_items=sum(
                        1
                        for row in rows
                        if row.product_id in products
                        and row.is_at_or_below(products[row.product_id].minimum_stock_threshold)
                    ),
                    total_value=sum(
                        (_stock_value(row, products) for row in rows), Decimal("0")
                    ),
                )
            )
        return stats

    def alert_metrics(self) -> AlertMetrics:
        alerts = self._alert_repo.list_all()
        status_counts = {status.value: 0 for status in AlertStatus}
        status_counts.update(Counter(alert.status.value for alert in alerts))

        products = self._products()
        per_product = Counter(alert.product_id for alert in alerts)
        frequent = [
            FrequentAlertProduct(
                product_id=product_id,
                product_name=products[product_id].name if product_id in products else "",
                alert_count=count,
            )
            for product_id, count in per_product.most_common(TOP_ALERT_PRODUCTS)
        ]
        return AlertMetrics(status_counts=status_counts, frequent_products=frequent)

    def inventory_aging(self) -> list[AgingLine]:
        """Rows with stock on hand, least recently updated first."""
        products = self._products()
        lines = [
            AgingLine(
                product_id=row.product_id,
                product_name=products[row.product_id].name if row.product_id in products else "",
                warehouse_id=row.warehouse_id,
                quantity=row.quantity_available,
                value=_stock_value(row, products),
                last_updated=row.last_updated,
            )
            for row in self._inventory_repo.list_all()
            if row.quantity_available > 0
        ]
        return sorted(lines, key=lambda line: line.last_updated)

    # --- Internal helpers -----------------------------------------------------

    def _products(self) -> dict[str, Product]:
        return {p.id: p for p in self._product_repo.list_all()}

    def _low_stock_rows(self, products: dict[str, Product]) -> list[Inventory]:
        return self._inventory_repo.list_at_or_below(
            {pid: p.minimum_stock_threshold for pid, p in products.items()}
        )


def _stock_value(row: Inventory, products: dict[str, Product]) -> Decimal:
    product = products.get(row.product_id)
    if product is None:
        return Decimal("0")
    return product.unit_price.amount * row.quantity_available
