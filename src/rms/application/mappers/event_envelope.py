from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from rms.application.use_cases.context import TraceContext
from rms.domain.common.ids import OrderId, TableId
from rms.domain.order.entities import Order
from rms.domain.order.events import OrderStatusChanged
from rms.domain.user.entities import User

ORDER_EVENTS_CHANNEL = "events:orders"
AUTH_EVENTS_CHANNEL = "events:auth"


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_ctx: TraceContext,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        **trace_ctx.envelope_fields(),
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_ctx: TraceContext,
) -> str:
    return _serialize_event(
        event_type=event_type,
        occurred_at=occurred_at,
        trace_ctx=trace_ctx,
        payload={
            "orderId": str(order.order_id),
            "tableId": str(order.table_id),
            "waiterId": str(order.waiter_id),
            "status": order.status.value,
            "total": str(order.total.to_decimal()),
            "items": [
                {
                    "itemId": str(item.item_id),
                    "dishId": str(item.dish_id),
                    "quantity": item.quantity,
                    "unitPrice": str(item.unit_price.to_decimal()),
                }
                for item in order.items
            ],
        },
    )


def serialize_status_changed_event(
    *,
    event: OrderStatusChanged,
    trace_ctx: TraceContext,
) -> str:
    return _serialize_event(
        event_type="order.status_changed",
        occurred_at=event.occurred_at,
        trace_ctx=trace_ctx,
        payload={
            "orderId": str(event.order_id),
            "tableId": str(event.table_id),
            "waiterId": str(event.waiter_id),
            "fromStatus": event.from_status.value,
            "toStatus": event.to_status.value,
            "tableStatus": event.table_status.value if event.table_status else None,
        },
    )


def serialize_order_deleted_event(
    *,
    occurred_at: datetime,
    order_id: OrderId,
    table_id: TableId,
    table_released: bool,
    trace_ctx: TraceContext,
) -> str:
    return _serialize_event(
        event_type="order.deleted",
        occurred_at=occurred_at,
        trace_ctx=trace_ctx,
        payload={
            "orderId": str(order_id),
            "tableId": str(table_id),
            "tableReleased": table_released,
        },
    )


def serialize_password_reset_requested_event(
    *,
    occurred_at: datetime,
    user: User,
    reset_token: str,
    trace_ctx: TraceContext,
) -> str:
    # Consumed by the mailer, which owns delivery of the reset link.
    return _serialize_event(
        event_type="password_reset.requested",
        occurred_at=occurred_at,
        trace_ctx=trace_ctx,
        payload={
            "userId": str(user.user_id),
            "name": user.name,
            "email": user.email,
            "resetToken": reset_token,
        },
    )
