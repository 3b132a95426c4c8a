from __future__ import annotations

from uuid import uuid4

from rms.application.dto.requests import OrderItemRequest
from rms.application.errors import DishUnavailableError, EmptyOrderError, InvalidQuantityError
from rms.application.ports.repositories import DishRepository
from rms.domain.common.ids import DishId, OrderItemId
from rms.domain.order.entities import OrderItem


def new_order_item_id() -> OrderItemId:
    return OrderItemId(f"itm_{uuid4().hex[:12]}")


def price_order_items(
    dishes: DishRepository,
    requested_items: list[OrderItemRequest],
) -> list[OrderItem]:
    """Snapshot the current price of every requested dish into new order items.

    Only dishes flagged as available are accepted; the first missing or unavailable
    dish aborts the whole request.
    """
    if not requested_items:
        raise EmptyOrderError("order must contain at least one item")

    items: list[OrderItem] = []
    for requested in requested_items:
        if requested.quantity < 1:
            raise InvalidQuantityError(
                f"quantity for dish {requested.dish_id} must be >= 1",
                details={"dishId": requested.dish_id},
            )

        dish = dishes.get_available(DishId(requested.dish_id))
        if dish is None:
            raise DishUnavailableError(
                f"dish {requested.dish_id} not found or not available",
                details={"dishId": requested.dish_id},
            )

        items.append(
            OrderItem(
                item_id=new_order_item_id(),
                dish_id=dish.dish_id,
                quantity=requested.quantity,
                unit_price=dish.price,
            )
        )
    return items
