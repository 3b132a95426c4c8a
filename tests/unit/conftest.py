from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from rms.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderDetailData,
    OrderItemDetailData,
    OrderSummaryData,
)
from rms.application.use_cases.context import TraceContext
from rms.domain.common.ids import DishId, OrderId, TableId, UserId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish
from rms.domain.order.entities import Order, OrderStatus
from rms.domain.table.entities import Table, TableStatus
from rms.domain.user.entities import Identity, Role, User

SEEDED_AT = datetime(2020, 1, 5, 12, 0, tzinfo=timezone.utc)


@dataclass
class InMemoryState:
    orders: dict[str, Order] = field(default_factory=dict)
    tables: dict[str, Table] = field(default_factory=dict)
    dishes: dict[str, Dish] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)

    def copy(self) -> InMemoryState:
        return InMemoryState(
            orders=dict(self.orders),
            tables=dict(self.tables),
            dishes=dict(self.dishes),
            users=dict(self.users),
        )


class FakeOrderRepository:
    def __init__(self, state: InMemoryState) -> None:
        self._state = state

    def list_summaries(self, waiter_id: UserId | None) -> list[OrderSummaryData]:
        orders = [
            order
            for order in self._state.orders.values()
            if waiter_id is None or order.waiter_id == waiter_id
        ]
        orders.sort(key=lambda order: (order.created_at, order.order_id), reverse=True)
        return [
            OrderSummaryData(
                order=order,
                table_number=self._state.tables[order.table_id].number,
                waiter_name=self._state.users[order.waiter_id].name,
            )
            for order in orders
        ]

    def get_detail(self, order_id: OrderId, waiter_id: UserId | None) -> OrderDetailData | None:
        order = self.get(order_id, waiter_id=waiter_id)
        if order is None:
            return None
        return OrderDetailData(
            order=order,
            table_number=self._state.tables[order.table_id].number,
            waiter_name=self._state.users[order.waiter_id].name,
            items=[
                OrderItemDetailData(
                    item=item,
                    dish_name=self._state.dishes[item.dish_id].name,
                    current_dish_price=self._state.dishes[item.dish_id].price,
                )
                for item in order.items
            ],
        )

    def get(
        self,
        order_id: OrderId,
        waiter_id: UserId | None = None,
        status: OrderStatus | None = None,
        for_update: bool = False,
    ) -> Order | None:
        order = self._state.orders.get(order_id)
        if order is None:
            return None
        if waiter_id is not None and order.waiter_id != waiter_id:
            return None
        if status is not None and order.status != status:
            return None
        return order

    def add(self, order: Order) -> None:
        self._state.orders[order.order_id] = order

    def replace_items(self, order: Order, expected_version: int) -> None:
        self._check_version(order.order_id, expected_version)
        self._state.orders[order.order_id] = order

    def update_status(self, order: Order, expected_version: int) -> None:
        self._check_version(order.order_id, expected_version)
        self._state.orders[order.order_id] = order

    def delete(self, order_id: OrderId, expected_version: int) -> None:
        self._check_version(order_id, expected_version)
        del self._state.orders[order_id]

    def _check_version(self, order_id: OrderId, expected_version: int) -> None:
        stored = self._state.orders.get(order_id)
        if stored is None or stored.version != expected_version:
            raise OptimisticConcurrencyError(f"order {order_id} version conflict")

    def exists_for_table(self, table_id: TableId) -> bool:
        return any(order.table_id == table_id for order in self._state.orders.values())

    def exists_for_dish(self, dish_id: DishId) -> bool:
        return any(
            item.dish_id == dish_id
            for order in self._state.orders.values()
            for item in order.items
        )

    def exists_for_waiter(self, waiter_id: UserId) -> bool:
        return any(order.waiter_id == waiter_id for order in self._state.orders.values())


class FakeTableRepository:
    def __init__(self, state: InMemoryState) -> None:
        self._state = state
        self.locked: list[TableId] = []

    def get(self, table_id: TableId) -> Table | None:
        return self._state.tables.get(table_id)

    def get_for_update(self, table_id: TableId) -> Table | None:
        self.locked.append(table_id)
        return self._state.tables.get(table_id)

    def get_by_number(self, number: int) -> Table | None:
        return next((t for t in self._state.tables.values() if t.number == number), None)

    def list_all(self) -> list[Table]:
        return sorted(self._state.tables.values(), key=lambda table: table.number)

    def add(self, table: Table) -> None:
        self._state.tables[table.table_id] = table

    def update(self, table: Table) -> None:
        self._state.tables[table.table_id] = table

    def update_if_status(self, table: Table, expected_status: TableStatus) -> bool:
        if self._state.tables[table.table_id].status != expected_status:
            return False
        self._state.tables[table.table_id] = table
        return True

    def delete(self, table_id: TableId) -> None:
        self._state.tables.pop(table_id, None)


class FakeDishRepository:
    def __init__(self, state: InMemoryState) -> None:
        self._state = state

    def get(self, dish_id: DishId) -> Dish | None:
        return self._state.dishes.get(dish_id)

    def get_available(self, dish_id: DishId) -> Dish | None:
        dish = self._state.dishes.get(dish_id)
        if dish is None or not dish.is_available:
            return None
        return dish

    def list_all(self) -> list[Dish]:
        return sorted(
            self._state.dishes.values(),
            key=lambda dish: (dish.created_at, dish.dish_id),
            reverse=True,
        )

    def add(self, dish: Dish) -> None:
        self._state.dishes[dish.dish_id] = dish

    def update(self, dish: Dish) -> None:
        self._state.dishes[dish.dish_id] = dish

    def delete(self, dish_id: DishId) -> None:
        self._state.dishes.pop(dish_id, None)


class FakeUserRepository:
    def __init__(self, state: InMemoryState) -> None:
        self._state = state

    def get(self, user_id: UserId) -> User | None:
        return self._state.users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._state.users.values() if u.email == email), None)

    def list_all(self) -> list[User]:
        return sorted(self._state.users.values(), key=lambda user: (user.name, user.user_id))

    def add(self, user: User) -> None:
        self._state.users[user.user_id] = user

    def update(self, user: User) -> None:
        self._state.users[user.user_id] = user

    def delete(self, user_id: UserId) -> None:
        self._state.users.pop(user_id, None)


class FakeUnitOfWork:
    """Works on a copy of the committed state; only commit() makes changes visible."""

    def __init__(self, state: InMemoryState) -> None:
        self.committed = state
        self.commits = 0
        self.rollbacks = 0
        self._working: InMemoryState | None = None

    def __enter__(self) -> FakeUnitOfWork:
        self._working = self.committed.copy()
        self.orders = FakeOrderRepository(self._working)
        self.tables = FakeTableRepository(self._working)
        self.dishes = FakeDishRepository(self._working)
        self.users = FakeUserRepository(self._working)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    def commit(self) -> None:
        assert self._working is not None
        self.committed.orders = dict(self._working.orders)
        self.committed.tables = dict(self._working.tables)
        self.committed.dishes = dict(self._working.dishes)
        self.committed.users = dict(self._working.users)
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1
        if self._working is not None:
            self._working = self.committed.copy()
            self.orders = FakeOrderRepository(self._working)
            self.tables = FakeTableRepository(self._working)
            self.dishes = FakeDishRepository(self._working)
            self.users = FakeUserRepository(self._working)


class RecordingPublisher:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.messages.append((channel, message))


class PlainTextHasher:
    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"plain${password}"


ADMIN_ID = UserId("usr_admin")
WAITER_ID = UserId("usr_waiter")
OTHER_WAITER_ID = UserId("usr_waiter2")
COOK_ID = UserId("usr_cook")
TABLE_1 = TableId("tbl_one")
TABLE_2 = TableId("tbl_two")
BURGER = DishId("dsh_burger")
FRIES = DishId("dsh_fries")
SOUP = DishId("dsh_soup")


def _user(user_id: UserId, name: str, role: Role) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=f"{user_id.removeprefix('usr_')}@rms.test",
        role=role,
        is_active=True,
        password_hash="plain$secret-password",
    )


def _dish(dish_id: DishId, name: str, price: str, is_available: bool, offset: int) -> Dish:
    return Dish(
        dish_id=dish_id,
        name=name,
        description=None,
        price=Money.from_decimal(price),
        is_available=is_available,
        created_at=SEEDED_AT + timedelta(minutes=offset),
    )


@pytest.fixture
def state() -> InMemoryState:
    users = [
        _user(ADMIN_ID, "Ada Admin", Role.ADMIN),
        _user(WAITER_ID, "Walt Waiter", Role.WAITER),
        _user(OTHER_WAITER_ID, "Wren Waiter", Role.WAITER),
        _user(COOK_ID, "Cora Cook", Role.COOK),
    ]
    tables = [
        Table(table_id=TABLE_1, number=1, capacity=4, status=TableStatus.AVAILABLE),
        Table(table_id=TABLE_2, number=2, capacity=2, status=TableStatus.AVAILABLE),
    ]
    dishes = [
        _dish(BURGER, "Burger", "12.50", True, 0),
        _dish(FRIES, "Fries", "4.00", True, 1),
        _dish(SOUP, "Soup", "6.00", False, 2),
    ]
    return InMemoryState(
        tables={table.table_id: table for table in tables},
        dishes={dish.dish_id: dish for dish in dishes},
        users={user.user_id: user for user in users},
    )


@pytest.fixture
def uow(state: InMemoryState) -> FakeUnitOfWork:
    return FakeUnitOfWork(state)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def hasher() -> PlainTextHasher:
    return PlainTextHasher()


@pytest.fixture
def trace_ctx() -> TraceContext:
    return TraceContext(trace_id="0" * 32, request_id="req-test")


@pytest.fixture
def waiter() -> Identity:
    return Identity(user_id=WAITER_ID, role=Role.WAITER)


@pytest.fixture
def other_waiter() -> Identity:
    return Identity(user_id=OTHER_WAITER_ID, role=Role.WAITER)


@pytest.fixture
def admin() -> Identity:
    return Identity(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def cook() -> Identity:
    return Identity(user_id=COOK_ID, role=Role.COOK)


@pytest.fixture
def failing_publisher() -> RecordingPublisher:
    return RecordingPublisher(fail=True)
