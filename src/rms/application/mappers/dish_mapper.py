from __future__ import annotations

from rms.application.dto.responses import DishResponse
from rms.domain.dish.entities import Dish


def to_dish_response(dish: Dish) -> DishResponse:
    return DishResponse(
        dishId=str(dish.dish_id),
        name=dish.name,
        description=dish.description,
        price=dish.price.to_decimal(),
        isAvailable=dish.is_available,
        createdAt=dish.created_at,
    )
