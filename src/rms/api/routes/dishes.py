from __future__ import annotations

from fastapi import APIRouter, Response, status

from rms.api.dependencies import AdminIdentity, CurrentIdentity, UnitOfWorkDep
from rms.application.dto.requests import CreateDishRequest, UpdateDishRequest
from rms.application.dto.responses import DishResponse
from rms.application.use_cases.manage_dishes import (
    CreateDish,
    DeleteDish,
    GetDish,
    ListDishes,
    UpdateDish,
)
from rms.domain.common.ids import DishId

router = APIRouter(prefix="/v1/dishes", tags=["dishes"])


@router.get("", response_model=list[DishResponse])
def list_dishes(uow: UnitOfWorkDep, _: CurrentIdentity) -> list[DishResponse]:
    return ListDishes(uow).execute()


@router.get("/{dish_id}", response_model=DishResponse)
def get_dish(dish_id: str, uow: UnitOfWorkDep, _: CurrentIdentity) -> DishResponse:
    return GetDish(uow).execute(dish_id=DishId(dish_id))


@router.post("", response_model=DishResponse, status_code=status.HTTP_201_CREATED)
def create_dish(request_dto: CreateDishRequest, uow: UnitOfWorkDep, _: AdminIdentity) -> DishResponse:
    return CreateDish(uow).execute(request_dto=request_dto)


@router.put("/{dish_id}", response_model=DishResponse)
def update_dish(
    dish_id: str,
    request_dto: UpdateDishRequest,
    uow: UnitOfWorkDep,
    _: AdminIdentity,
) -> DishResponse:
    return UpdateDish(uow).execute(dish_id=DishId(dish_id), request_dto=request_dto)


@router.delete("/{dish_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_dish(dish_id: str, uow: UnitOfWorkDep, _: AdminIdentity) -> Response:
    DeleteDish(uow).execute(dish_id=DishId(dish_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
