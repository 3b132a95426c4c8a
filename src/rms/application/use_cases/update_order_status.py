from __future__ import annotations

import logging
from datetime import datetime, timezone

from rms.application.dto.responses import OrderStatusResponse
from rms.application.errors import InvalidOrderTransitionError, OrderNotFoundError
from rms.application.mappers.event_envelope import serialize_status_changed_event
from rms.application.mappers.order_mapper import to_order_status_response
from rms.application.metrics.order_lifecycle import record_transition, record_transition_rejected
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import OptimisticConcurrencyError, UnitOfWork
from rms.application.use_cases.context import TraceContext
from rms.application.use_cases.order_conflicts import order_conflict
from rms.application.use_cases.publishing import publish_order_event
from rms.application.use_cases.table_availability import lock_table, occupy_table, release_table
from rms.domain.common.ids import OrderId
from rms.domain.order.entities import OrderStatus, OrderTransitionError
from rms.domain.order.events import OrderStatusChanged
from rms.domain.table.entities import TableStatus
from rms.domain.user.entities import Identity

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    def __init__(self, uow: UnitOfWork, publisher: EventPublisher) -> None:
        self._uow = uow
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        identity: Identity,
        trace_ctx: TraceContext,
    ) -> OrderStatusResponse:
        with self._uow:
            order = self._uow.orders.get(
                order_id, waiter_id=identity.order_scope(), for_update=True
            )
            if order is None:
                raise OrderNotFoundError(f"order {order_id} not found")

            if order.status == new_status:
                return to_order_status_response(order)

            now = datetime.now(timezone.utc)
            try:
                updated = order.transition_to(new_status, now=now)
            except OrderTransitionError as exc:
                record_transition_rejected(from_status=order.status, to_status=new_status)
                raise InvalidOrderTransitionError(str(exc)) from exc

            try:
                self._uow.orders.update_status(updated, expected_version=order.version)
            except OptimisticConcurrencyError as exc:
                raise order_conflict(order_id, operation="update_order_status") from exc

            table_status: TableStatus | None = None
            if order.status == OrderStatus.DRAFT and new_status == OrderStatus.PENDING:
                table = lock_table(self._uow.tables, order.table_id)
                table_status = occupy_table(
                    self._uow.tables, table, operation="activate_draft"
                ).status
            elif new_status == OrderStatus.SERVED:
                released = release_table(self._uow.tables, order.table_id)
                table_status = released.status if released else None

            self._uow.commit()

        record_transition(from_status=order.status, to_status=updated.status)
        logger.info(
            "order_status_changed",
            extra={
                "order_id": str(order_id),
                "table_id": str(order.table_id),
                "user_id": str(identity.user_id),
                "status": updated.status.value,
            },
        )
        event = OrderStatusChanged(
            order_id=updated.order_id,
            table_id=updated.table_id,
            waiter_id=updated.waiter_id,
            from_status=order.status,
            to_status=updated.status,
            table_status=table_status,
            occurred_at=now,
        )
        publish_order_event(
            self._publisher,
            serialize_status_changed_event(
                event=event,
                trace_ctx=trace_ctx,
            ),
        )
        return to_order_status_response(updated)
