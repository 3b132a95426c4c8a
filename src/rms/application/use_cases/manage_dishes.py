from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

from rms.application.dto.requests import CreateDishRequest, UpdateDishRequest
from rms.application.dto.responses import DishResponse
from rms.application.errors import DishInUseError, DishNotFoundError
from rms.application.mappers.dish_mapper import to_dish_response
from rms.application.ports.repositories import UnitOfWork
from rms.domain.common.ids import DishId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish


class ListDishes:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[DishResponse]:
        with self._uow:
            dishes = self._uow.dishes.list_all()
        return [to_dish_response(dish) for dish in dishes]


class GetDish:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, dish_id: DishId) -> DishResponse:
        with self._uow:
            dish = self._uow.dishes.get(dish_id)
        if dish is None:
            raise DishNotFoundError(f"dish {dish_id} not found")
        return to_dish_response(dish)


class CreateDish:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, request_dto: CreateDishRequest) -> DishResponse:
        dish = Dish(
            dish_id=DishId(f"dsh_{uuid4().hex[:12]}"),
            name=request_dto.name.strip(),
            description=request_dto.description,
            price=Money.from_decimal(request_dto.price),
            is_available=request_dto.is_available,
            created_at=datetime.now(timezone.utc),
        )
        with self._uow:
            self._uow.dishes.add(dish)
            self._uow.commit()
        return to_dish_response(dish)


class UpdateDish:
    """Catalog edits never reach existing orders; their items keep the snapshot price."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, dish_id: DishId, request_dto: UpdateDishRequest) -> DishResponse:
        with self._uow:
            dish = self._uow.dishes.get(dish_id)
            if dish is None:
                raise DishNotFoundError(f"dish {dish_id} not found")

            changes = request_dto.model_dump(exclude_unset=True)
            updated = replace(
                dish,
                name=changes["name"].strip() if changes.get("name") else dish.name,
                description=changes.get("description", dish.description),
                price=(
                    Money.from_decimal(changes["price"])
                    if changes.get("price") is not None
                    else dish.price
                ),
                is_available=(
                    changes["is_available"]
                    if changes.get("is_available") is not None
                    else dish.is_available
                ),
            )
            self._uow.dishes.update(updated)
            self._uow.commit()
        return to_dish_response(updated)


class DeleteDish:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, dish_id: DishId) -> None:
        with self._uow:
            if self._uow.dishes.get(dish_id) is None:
                raise DishNotFoundError(f"dish {dish_id} not found")
            if self._uow.orders.exists_for_dish(dish_id):
                raise DishInUseError(f"dish {dish_id} is referenced by order items")
            self._uow.dishes.delete(dish_id)
            self._uow.commit()
