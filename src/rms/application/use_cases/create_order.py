from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from rms.application.dto.requests import CreateOrderRequest
from rms.application.dto.responses import OrderCreatedResponse
from rms.application.errors import InvalidOrderTransitionError
from rms.application.mappers.event_envelope import serialize_order_event
from rms.application.mappers.order_mapper import to_order_created_response
from rms.application.metrics.order_lifecycle import record_order_created
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import UnitOfWork
from rms.application.use_cases.context import TraceContext
from rms.application.use_cases.order_pricing import price_order_items
from rms.application.use_cases.publishing import publish_order_event
from rms.application.use_cases.table_availability import (
    ensure_table_available,
    lock_table,
    occupy_table,
)
from rms.domain.common.ids import OrderId, TableId
from rms.domain.order.entities import INITIAL_STATUSES, OrderStatus, create_order
from rms.domain.user.entities import Identity

logger = logging.getLogger(__name__)


class CreateOrder:
    def __init__(self, uow: UnitOfWork, publisher: EventPublisher) -> None:
        self._uow = uow
        self._publisher = publisher

    def execute(
        self,
        request_dto: CreateOrderRequest,
        identity: Identity,
        trace_ctx: TraceContext,
    ) -> OrderCreatedResponse:
        status = request_dto.status
        if status not in INITIAL_STATUSES:
            raise InvalidOrderTransitionError(
                f"orders cannot be created with status={status.value}"
            )

        with self._uow:
            table = lock_table(self._uow.tables, TableId(request_dto.table_id))
            if status != OrderStatus.DRAFT:
                ensure_table_available(table, operation="create_order")

            items = price_order_items(self._uow.dishes, request_dto.items)
            order = create_order(
                order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
                table_id=table.table_id,
                waiter_id=identity.user_id,
                status=status,
                items=items,
                now=datetime.now(timezone.utc),
            )
            self._uow.orders.add(order)

            if status != OrderStatus.DRAFT:
                occupy_table(self._uow.tables, table, operation="create_order")

            self._uow.commit()

        record_order_created(order.status)
        logger.info(
            "order_created",
            extra={
                "order_id": str(order.order_id),
                "table_id": str(order.table_id),
                "user_id": str(identity.user_id),
                "status": order.status.value,
            },
        )
        publish_order_event(
            self._publisher,
            serialize_order_event(
                event_type="order.created",
                occurred_at=order.created_at,
                order=order,
                trace_ctx=trace_ctx,
            ),
        )
        return to_order_created_response(order)
