from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from rms.application.ports.repositories import DishRepository
from rms.domain.common.ids import DishId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish
from rms.infrastructure.db.models.dish import DishModel
from rms.infrastructure.db.repositories._timestamps import as_utc


class SqlAlchemyDishRepository(DishRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, dish_id: DishId) -> Dish | None:
        statement = select(DishModel).where(DishModel.id == str(dish_id))
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_available(self, dish_id: DishId) -> Dish | None:
        statement = select(DishModel).where(
            DishModel.id == str(dish_id),
            DishModel.is_available.is_(True),
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_all(self) -> list[Dish]:
        statement = select(DishModel).order_by(DishModel.created_at.desc(), DishModel.id.desc())
        return [self._to_domain(model) for model in self._session.execute(statement).scalars()]

    def add(self, dish: Dish) -> None:
        self._session.add(
            DishModel(
                id=str(dish.dish_id),
                name=dish.name,
                description=dish.description,
                price_cents=dish.price.amount_cents,
                is_available=dish.is_available,
                created_at=dish.created_at,
            )
        )
        self._session.flush()

    def update(self, dish: Dish) -> None:
        self._session.execute(
            update(DishModel)
            .where(DishModel.id == str(dish.dish_id))
            .values(
                name=dish.name,
                description=dish.description,
                price_cents=dish.price.amount_cents,
                is_available=dish.is_available,
            )
        )

    def delete(self, dish_id: DishId) -> None:
        self._session.execute(delete(DishModel).where(DishModel.id == str(dish_id)))

    def _to_domain(self, model: DishModel) -> Dish:
        return Dish(
            dish_id=DishId(model.id),
            name=model.name,
            description=model.description,
            price=Money(amount_cents=model.price_cents),
            is_available=model.is_available,
            created_at=as_utc(model.created_at),
        )
