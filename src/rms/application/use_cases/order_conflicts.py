from __future__ import annotations

import logging

from rms.application.errors import OrderConflictError
from rms.application.metrics.order_lifecycle import record_order_conflict
from rms.domain.common.ids import OrderId

logger = logging.getLogger(__name__)


def order_conflict(order_id: OrderId, operation: str) -> OrderConflictError:
    """Build the error for a write that lost a race on the order row."""
    record_order_conflict(operation)
    logger.warning("order_conflict", extra={"order_id": str(order_id), "reason": operation})
    return OrderConflictError(
        f"order {order_id} was changed by another request; reload and retry",
        details={"orderId": str(order_id)},
    )
