from __future__ import annotations

import logging
from datetime import datetime, timezone

from rms.application.errors import OrderNotFoundError
from rms.application.mappers.event_envelope import serialize_order_deleted_event
from rms.application.metrics.order_lifecycle import record_order_deleted
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import OptimisticConcurrencyError, UnitOfWork
from rms.application.use_cases.context import TraceContext
from rms.application.use_cases.order_conflicts import order_conflict
from rms.application.use_cases.publishing import publish_order_event
from rms.application.use_cases.table_availability import release_table
from rms.domain.common.ids import OrderId
from rms.domain.user.entities import Identity

logger = logging.getLogger(__name__)


class DeleteOrder:
    def __init__(self, uow: UnitOfWork, publisher: EventPublisher) -> None:
        self._uow = uow
        self._publisher = publisher

    def execute(self, order_id: OrderId, identity: Identity, trace_ctx: TraceContext) -> None:
        with self._uow:
            order = self._uow.orders.get(
                order_id, waiter_id=identity.order_scope(), for_update=True
            )
            if order is None:
                raise OrderNotFoundError(f"order {order_id} not found")

            try:
                self._uow.orders.delete(order.order_id, expected_version=order.version)
            except OptimisticConcurrencyError as exc:
                raise order_conflict(order_id, operation="delete_order") from exc

            # Only an active order holds its table; drafts and served orders never do.
            table_released = order.status.is_active
            if table_released:
                release_table(self._uow.tables, order.table_id)
            self._uow.commit()

        record_order_deleted(order.status)
        logger.info(
            "order_deleted",
            extra={
                "order_id": str(order_id),
                "table_id": str(order.table_id),
                "user_id": str(identity.user_id),
                "status": order.status.value,
            },
        )
        publish_order_event(
            self._publisher,
            serialize_order_deleted_event(
                occurred_at=datetime.now(timezone.utc),
                order_id=order.order_id,
                table_id=order.table_id,
                table_released=table_released,
                trace_ctx=trace_ctx,
            ),
        )
