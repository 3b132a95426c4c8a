from __future__ import annotations

from rms.application.dto.responses import OrderDetailResponse
from rms.application.errors import OrderNotFoundError
from rms.application.mappers.order_mapper import to_order_detail_response
from rms.application.ports.repositories import UnitOfWork
from rms.domain.common.ids import OrderId
from rms.domain.user.entities import Identity


class GetOrder:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, order_id: OrderId, identity: Identity) -> OrderDetailResponse:
        # Orders of other waiters are reported exactly like missing ones.
        with self._uow:
            detail = self._uow.orders.get_detail(order_id, waiter_id=identity.order_scope())
        if detail is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_detail_response(detail)
