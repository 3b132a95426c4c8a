from __future__ import annotations

from rms.application.dto.responses import (
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderItemResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
    OrderUpdatedResponse,
)
from rms.application.ports.repositories import OrderDetailData, OrderSummaryData
from rms.domain.order.entities import Order


def to_order_summary_response(data: OrderSummaryData) -> OrderSummaryResponse:
    order = data.order
    return OrderSummaryResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        tableNumber=data.table_number,
        waiterId=str(order.waiter_id),
        waiterName=data.waiter_name,
        status=order.status.value,
        total=order.total.to_decimal(),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def to_order_detail_response(data: OrderDetailData) -> OrderDetailResponse:
    order = data.order
    return OrderDetailResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        tableNumber=data.table_number,
        waiterId=str(order.waiter_id),
        waiterName=data.waiter_name,
        status=order.status.value,
        total=order.total.to_decimal(),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        items=[
            OrderItemResponse(
                itemId=str(detail.item.item_id),
                dishId=str(detail.item.dish_id),
                dishName=detail.dish_name,
                quantity=detail.item.quantity,
                unitPrice=detail.item.unit_price.to_decimal(),
                currentDishPrice=detail.current_dish_price.to_decimal(),
                lineTotal=detail.item.line_total.to_decimal(),
            )
            for detail in data.items
        ],
    )


def to_order_created_response(order: Order) -> OrderCreatedResponse:
    return OrderCreatedResponse(
        orderId=str(order.order_id),
        status=order.status.value,
        total=order.total.to_decimal(),
    )


def to_order_updated_response(order: Order) -> OrderUpdatedResponse:
    return OrderUpdatedResponse(orderId=str(order.order_id), total=order.total.to_decimal())


def to_order_status_response(order: Order) -> OrderStatusResponse:
    return OrderStatusResponse(orderId=str(order.order_id), status=order.status.value)
