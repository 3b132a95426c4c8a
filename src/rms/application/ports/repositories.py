from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from rms.domain.common.ids import DishId, OrderId, TableId, UserId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish
from rms.domain.order.entities import Order, OrderItem, OrderStatus
from rms.domain.table.entities import Table, TableStatus
from rms.domain.user.entities import User


class OptimisticConcurrencyError(Exception):
    """Raised when a versioned write finds the row changed since it was read."""


@dataclass(frozen=True)
class OrderSummaryData:
    order: Order
    table_number: int
    waiter_name: str


@dataclass(frozen=True)
class OrderItemDetailData:
    item: OrderItem
    dish_name: str
    current_dish_price: Money


@dataclass(frozen=True)
class OrderDetailData:
    order: Order
    table_number: int
    waiter_name: str
    items: list[OrderItemDetailData]


class OrderRepository(Protocol):
    def list_summaries(self, waiter_id: UserId | None) -> list[OrderSummaryData]: ...

    def get_detail(self, order_id: OrderId, waiter_id: UserId | None) -> OrderDetailData | None: ...

    def get(
        self,
        order_id: OrderId,
        waiter_id: UserId | None = None,
        status: OrderStatus | None = None,
        for_update: bool = False,
    ) -> Order | None: ...

    def add(self, order: Order) -> None: ...

    def replace_items(self, order: Order, expected_version: int) -> None: ...

    def update_status(self, order: Order, expected_version: int) -> None: ...

    def delete(self, order_id: OrderId, expected_version: int) -> None: ...

    def exists_for_table(self, table_id: TableId) -> bool: ...

    def exists_for_dish(self, dish_id: DishId) -> bool: ...

    def exists_for_waiter(self, waiter_id: UserId) -> bool: ...


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def get_for_update(self, table_id: TableId) -> Table | None: ...

    def get_by_number(self, number: int) -> Table | None: ...

    def list_all(self) -> list[Table]: ...

    def add(self, table: Table) -> None: ...

    def update(self, table: Table) -> None: ...

    def update_if_status(self, table: Table, expected_status: TableStatus) -> bool: ...

    def delete(self, table_id: TableId) -> None: ...


class DishRepository(Protocol):
    def get(self, dish_id: DishId) -> Dish | None: ...

    def get_available(self, dish_id: DishId) -> Dish | None: ...

    def list_all(self) -> list[Dish]: ...

    def add(self, dish: Dish) -> None: ...

    def update(self, dish: Dish) -> None: ...

    def delete(self, dish_id: DishId) -> None: ...


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def list_all(self) -> list[User]: ...

    def add(self, user: User) -> None: ...

    def update(self, user: User) -> None: ...

    def delete(self, user_id: UserId) -> None: ...


class UnitOfWork(Protocol):
    """One transaction spanning every repository it exposes.

    Leaving the ``with`` block without ``commit()`` rolls back; an exception raised
    inside the block rolls back and propagates unchanged.
    """

    orders: OrderRepository
    tables: TableRepository
    dishes: DishRepository
    users: UserRepository

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
