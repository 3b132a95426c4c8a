from __future__ import annotations

from rms.application.dto.responses import OrderSummaryResponse
from rms.application.mappers.order_mapper import to_order_summary_response
from rms.application.ports.repositories import UnitOfWork
from rms.domain.user.entities import Identity


class ListOrders:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, identity: Identity) -> list[OrderSummaryResponse]:
        with self._uow:
            rows = self._uow.orders.list_summaries(waiter_id=identity.order_scope())
        return [to_order_summary_response(row) for row in rows]
