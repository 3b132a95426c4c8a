from __future__ import annotations

import logging
from datetime import datetime, timezone

from rms.application.dto.requests import UpdateOrderRequest
from rms.application.dto.responses import OrderUpdatedResponse
from rms.application.errors import OrderNotFoundError
from rms.application.mappers.event_envelope import serialize_order_event
from rms.application.mappers.order_mapper import to_order_updated_response
from rms.application.metrics.order_lifecycle import record_draft_edit
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import OptimisticConcurrencyError, UnitOfWork
from rms.application.use_cases.context import TraceContext
from rms.application.use_cases.order_conflicts import order_conflict
from rms.application.use_cases.order_pricing import price_order_items
from rms.application.use_cases.publishing import publish_order_event
from rms.domain.common.ids import OrderId
from rms.domain.order.entities import OrderStatus
from rms.domain.user.entities import Identity

logger = logging.getLogger(__name__)


class UpdateDraftOrder:
    """Replace every item of a draft order with freshly priced ones.

    Existing items are deleted and recreated, so repeating the same request yields
    the same total and the same set of dish/quantity/price lines. The table is
    never touched.
    """

    def __init__(self, uow: UnitOfWork, publisher: EventPublisher) -> None:
        self._uow = uow
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        request_dto: UpdateOrderRequest,
        identity: Identity,
        trace_ctx: TraceContext,
    ) -> OrderUpdatedResponse:
        with self._uow:
            order = self._uow.orders.get(
                order_id,
                waiter_id=identity.order_scope(),
                status=OrderStatus.DRAFT,
                for_update=True,
            )
            if order is None:
                raise OrderNotFoundError(f"order {order_id} not found or not editable")

            items = price_order_items(self._uow.dishes, request_dto.items)
            updated = order.with_items(items, now=datetime.now(timezone.utc))
            try:
                self._uow.orders.replace_items(updated, expected_version=order.version)
            except OptimisticConcurrencyError as exc:
                raise order_conflict(order_id, operation="update_draft_order") from exc
            self._uow.commit()

        record_draft_edit()
        logger.info(
            "order_draft_updated",
            extra={"order_id": str(updated.order_id), "user_id": str(identity.user_id)},
        )
        publish_order_event(
            self._publisher,
            serialize_order_event(
                event_type="order.updated",
                occurred_at=updated.updated_at,
                order=updated,
                trace_ctx=trace_ctx,
            ),
        )
        return to_order_updated_response(updated)
