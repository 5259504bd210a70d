"""
Order cancellation hook for the ERP orders export.

When an order is canceled, its entry in the exported orders file is marked
with status "canceled" so the ERP picks the change up on its next read.
"""
import json
import logging
import os
from typing import Any, Optional

from erp_integration.core.config import settings
from erp_integration.core.erp_logger import ErpIntegrationLogger
from erp_integration.schemas.orders import OrderCancelResult, OrderCancelStatus

logger = logging.getLogger(__name__)

CANCELED_STATUS = "canceled"


class OrderCancelService:
    """Marks a single order as canceled in the ERP orders JSON file."""

    def __init__(self, erp_logger: Optional[ErpIntegrationLogger] = None, orders_path: Optional[str] = None):
        self.erp_logger = erp_logger or ErpIntegrationLogger()
        self.orders_path = orders_path or settings.orders_json_path

    def mark_order_canceled(self, increment_id: Any) -> OrderCancelResult:
        """
        Mark the order with this increment id as canceled.

        Args:
            increment_id: Public order number

        Returns:
            OrderCancelResult describing what happened
        """
        if increment_id is None or str(increment_id).strip() == "":
            msg = "Order increment_id is missing, cannot update ERP JSON on cancel."
            self.erp_logger.error(msg)
            return OrderCancelResult(status=OrderCancelStatus.INVALID, message=msg)

        increment_id = str(increment_id).strip()
        if not os.path.exists(self.orders_path):
            msg = f"ERP JSON file does not exist, nothing to update for order #{increment_id}."
            self.erp_logger.comment(msg)
            return OrderCancelResult(
                increment_id=increment_id, status=OrderCancelStatus.FILE_MISSING, message=msg
            )

        orders = self._load_orders()
        found = False
        for order in orders:
            if isinstance(order, dict) and str(order.get("increment_id")) == increment_id:
                order["status"] = CANCELED_STATUS
                found = True
                break

        if not found:
            msg = f"Order #{increment_id} not found in ERP JSON file, cannot mark as canceled."
            self.erp_logger.comment(msg)
            return OrderCancelResult(
                increment_id=increment_id, status=OrderCancelStatus.NOT_FOUND, message=msg
            )

        try:
            content = json.dumps(orders, indent=4, ensure_ascii=False)
            with open(self.orders_path, "w", encoding="utf-8") as fh:
                fh.write(content)
        except (OSError, TypeError, ValueError) as e:
            msg = f"Failed to update ERP JSON for canceled order #{increment_id}: {e}"
            self.erp_logger.error(msg)
            return OrderCancelResult(
                increment_id=increment_id, status=OrderCancelStatus.ERROR, message=msg
            )

        msg = f"Order #{increment_id} marked as canceled in ERP JSON file."
        self.erp_logger.info(msg)
        return OrderCancelResult(
            increment_id=increment_id, status=OrderCancelStatus.CANCELED, message=msg
        )

    def _load_orders(self) -> list:
        """Orders from the export file; unreadable content counts as no orders."""
        try:
            with open(self.orders_path, encoding="utf-8") as fh:
                orders = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Cannot decode ERP orders file {self.orders_path}: {e}")
            return []
        return orders if isinstance(orders, list) else []
