from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rms.domain.common.ids import OrderId, TableId, UserId
from rms.domain.order.entities import OrderStatus
from rms.domain.table.entities import TableStatus


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    table_id: TableId
    waiter_id: UserId
    from_status: OrderStatus
    to_status: OrderStatus
    table_status: TableStatus | None
    occurred_at: datetime
