"""Scheduled housekeeping jobs.

Each job is a plain method so the scheduler, the CLI and tests can run
it the same way. Jobs never raise for a single bad item; the services
they call log and count per-item failures.
"""

from __future__ import annotations

import logging

from ims.application.purchase_order_workflow import PurchaseOrderWorkflow
from ims.domain.service.alert_reconciler import AlertReconciler, SweepReport

logger = logging.getLogger(__name__)


class HousekeepingJobs:

    def __init__(
        self,
        reconciler: AlertReconciler,
        purchase_orders: PurchaseOrderWorkflow,
    ) -> None:
        self._reconciler = reconciler
        self._purchase_orders = purchase_orders

    def sweep_low_stock(self) -> SweepReport:
        logger.debug("Running low-stock sweep")
        return self._reconciler.sweep()

    def auto_approve_pending_orders(self) -> list[str]:
        logger.debug("Running purchase order auto-approval")
        return self._purchase_orders.auto_approve_pending()
