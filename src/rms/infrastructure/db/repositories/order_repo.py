from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, joinedload, selectinload

from rms.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderDetailData,
    OrderItemDetailData,
    OrderRepository,
    OrderSummaryData,
)
from rms.domain.common.ids import DishId, OrderId, OrderItemId, TableId, UserId
from rms.domain.common.money import Money
from rms.domain.order.entities import Order, OrderItem, OrderStatus
from rms.infrastructure.db.models.order import OrderItemModel, OrderModel
from rms.infrastructure.db.repositories._timestamps import as_utc


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_summaries(self, waiter_id: UserId | None) -> list[OrderSummaryData]:
        statement = (
            select(OrderModel)
            .options(
                joinedload(OrderModel.table),
                joinedload(OrderModel.waiter),
                selectinload(OrderModel.items),
            )
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        if waiter_id is not None:
            statement = statement.where(OrderModel.waiter_id == str(waiter_id))

        models = self._session.execute(statement).unique().scalars().all()
        return [
            OrderSummaryData(
                order=self._to_domain(model),
                table_number=model.table.number,
                waiter_name=model.waiter.name,
            )
            for model in models
        ]

    def get_detail(self, order_id: OrderId, waiter_id: UserId | None) -> OrderDetailData | None:
        statement = (
            select(OrderModel)
            .options(
                joinedload(OrderModel.table),
                joinedload(OrderModel.waiter),
                selectinload(OrderModel.items).joinedload(OrderItemModel.dish),
            )
            .where(OrderModel.id == str(order_id))
        )
        if waiter_id is not None:
            statement = statement.where(OrderModel.waiter_id == str(waiter_id))

        model = self._session.execute(statement).unique().scalar_one_or_none()
        if model is None:
            return None

        return OrderDetailData(
            order=self._to_domain(model),
            table_number=model.table.number,
            waiter_name=model.waiter.name,
            items=[
                OrderItemDetailData(
                    item=self._item_to_domain(item),
                    dish_name=item.dish.name,
                    current_dish_price=Money(amount_cents=item.dish.price_cents),
                )
                for item in model.items
            ],
        )

    def get(
        self,
        order_id: OrderId,
        waiter_id: UserId | None = None,
        status: OrderStatus | None = None,
        for_update: bool = False,
    ) -> Order | None:
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == str(order_id))
        )
        if waiter_id is not None:
            statement = statement.where(OrderModel.waiter_id == str(waiter_id))
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        if for_update:
            # Items come from a separate selectin query and stay unlocked.
            statement = statement.with_for_update(of=OrderModel).execution_options(
                populate_existing=True
            )

        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, order: Order) -> None:
        self._session.add(
            OrderModel(
                id=str(order.order_id),
                table_id=str(order.table_id),
                waiter_id=str(order.waiter_id),
                status=order.status.value,
                total_cents=order.total.amount_cents,
                version=order.version,
                created_at=order.created_at,
                updated_at=order.updated_at,
            )
        )
        self._session.flush()
        self._session.add_all(self._item_models(order))
        self._session.flush()

    def replace_items(self, order: Order, expected_version: int) -> None:
        self._versioned_update(
            order.order_id,
            expected_version,
            total_cents=order.total.amount_cents,
            updated_at=order.updated_at,
            version=order.version,
        )
        self._delete_items(order.order_id)
        self._session.add_all(self._item_models(order))
        self._session.flush()

    def update_status(self, order: Order, expected_version: int) -> None:
        self._versioned_update(
            order.order_id,
            expected_version,
            status=order.status.value,
            updated_at=order.updated_at,
            version=order.version,
        )

    def delete(self, order_id: OrderId, expected_version: int) -> None:
        self._delete_items(order_id)
        result = self._session.execute(
            delete(OrderModel)
            .where(OrderModel.id == str(order_id), OrderModel.version == expected_version)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")

    def exists_for_table(self, table_id: TableId) -> bool:
        statement = select(OrderModel.id).where(OrderModel.table_id == str(table_id)).limit(1)
        return self._session.execute(statement).scalar_one_or_none() is not None

    def exists_for_dish(self, dish_id: DishId) -> bool:
        statement = (
            select(OrderItemModel.id).where(OrderItemModel.dish_id == str(dish_id)).limit(1)
        )
        return self._session.execute(statement).scalar_one_or_none() is not None

    def exists_for_waiter(self, waiter_id: UserId) -> bool:
        statement = select(OrderModel.id).where(OrderModel.waiter_id == str(waiter_id)).limit(1)
        return self._session.execute(statement).scalar_one_or_none() is not None

    def _versioned_update(self, order_id: OrderId, expected_version: int, **values) -> None:
        result = self._session.execute(
            update(OrderModel)
            .where(OrderModel.id == str(order_id), OrderModel.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")

    def _delete_items(self, order_id: OrderId) -> None:
        self._session.execute(
            delete(OrderItemModel)
            .where(OrderItemModel.order_id == str(order_id))
            .execution_options(synchronize_session=False)
        )

    def _item_models(self, order: Order) -> list[OrderItemModel]:
        return [
            OrderItemModel(
                id=str(item.item_id),
                order_id=str(order.order_id),
                dish_id=str(item.dish_id),
                quantity=item.quantity,
                unit_price_cents=item.unit_price.amount_cents,
            )
            for item in order.items
        ]

    def _item_to_domain(self, model: OrderItemModel) -> OrderItem:
        return OrderItem(
            item_id=OrderItemId(model.id),
            dish_id=DishId(model.dish_id),
            quantity=model.quantity,
            unit_price=Money(amount_cents=model.unit_price_cents),
        )

    def _to_domain(self, model: OrderModel) -> Order:
        return Order(
            order_id=OrderId(model.id),
            table_id=TableId(model.table_id),
            waiter_id=UserId(model.waiter_id),
            status=OrderStatus(model.status),
            items=[self._item_to_domain(item) for item in model.items],
            total=Money(amount_cents=model.total_cents),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            version=model.version,
        )
