from __future__ import annotations

from fastapi import APIRouter, Response, status

from rms.api.dependencies import (
    AdminIdentity,
    CurrentIdentity,
    PublisherDep,
    StaffIdentity,
    TraceContextDep,
    UnitOfWorkDep,
    WaiterOrAdminIdentity,
)
from rms.application.dto.requests import (
    CreateOrderRequest,
    UpdateOrderRequest,
    UpdateOrderStatusRequest,
)
from rms.application.dto.responses import (
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
    OrderUpdatedResponse,
)
from rms.application.use_cases.create_order import CreateOrder
from rms.application.use_cases.delete_order import DeleteOrder
from rms.application.use_cases.get_order import GetOrder
from rms.application.use_cases.list_orders import ListOrders
from rms.application.use_cases.update_draft_order import UpdateDraftOrder
from rms.application.use_cases.update_order_status import UpdateOrderStatus
from rms.domain.common.ids import OrderId

router = APIRouter(prefix="/v1/orders", tags=["orders"])


@router.get("", response_model=list[OrderSummaryResponse])
def list_orders(uow: UnitOfWorkDep, identity: CurrentIdentity) -> list[OrderSummaryResponse]:
    return ListOrders(uow).execute(identity=identity)


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(order_id: str, uow: UnitOfWorkDep, identity: CurrentIdentity) -> OrderDetailResponse:
    return GetOrder(uow).execute(order_id=OrderId(order_id), identity=identity)


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request_dto: CreateOrderRequest,
    uow: UnitOfWorkDep,
    publisher: PublisherDep,
    identity: WaiterOrAdminIdentity,
    trace_ctx: TraceContextDep,
) -> OrderCreatedResponse:
    return CreateOrder(uow, publisher).execute(
        request_dto=request_dto,
        identity=identity,
        trace_ctx=trace_ctx,
    )


@router.put("/{order_id}", response_model=OrderUpdatedResponse)
def update_order(
    order_id: str,
    request_dto: UpdateOrderRequest,
    uow: UnitOfWorkDep,
    publisher: PublisherDep,
    identity: WaiterOrAdminIdentity,
    trace_ctx: TraceContextDep,
) -> OrderUpdatedResponse:
    return UpdateDraftOrder(uow, publisher).execute(
        order_id=OrderId(order_id),
        request_dto=request_dto,
        identity=identity,
        trace_ctx=trace_ctx,
    )


@router.put("/{order_id}/status", response_model=OrderStatusResponse)
def update_order_status(
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
    uow: UnitOfWorkDep,
    publisher: PublisherDep,
    identity: StaffIdentity,
    trace_ctx: TraceContextDep,
) -> OrderStatusResponse:
    return UpdateOrderStatus(uow, publisher).execute(
        order_id=OrderId(order_id),
        new_status=request_dto.status,
        identity=identity,
        trace_ctx=trace_ctx,
    )


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: str,
    uow: UnitOfWorkDep,
    publisher: PublisherDep,
    identity: AdminIdentity,
    trace_ctx: TraceContextDep,
) -> Response:
    DeleteOrder(uow, publisher).execute(
        order_id=OrderId(order_id),
        identity=identity,
        trace_ctx=trace_ctx,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
