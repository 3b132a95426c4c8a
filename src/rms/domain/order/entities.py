from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from rms.domain.common.ids import DishId, OrderId, OrderItemId, TableId, UserId
from rms.domain.common.money import Money


class OrderStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    SERVED = "served"

    @property
    def is_active(self) -> bool:
        """Active orders hold their table."""
        return self in (OrderStatus.PENDING, OrderStatus.IN_PREPARATION)


INITIAL_STATUSES = frozenset({OrderStatus.DRAFT, OrderStatus.PENDING})

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.DRAFT: frozenset({OrderStatus.PENDING}),
    OrderStatus.PENDING: frozenset({OrderStatus.IN_PREPARATION, OrderStatus.SERVED}),
    OrderStatus.IN_PREPARATION: frozenset({OrderStatus.SERVED}),
    OrderStatus.SERVED: frozenset(),
}


@dataclass(frozen=True)
class OrderItem:
    item_id: OrderItemId
    dish_id: DishId
    quantity: int
    unit_price: Money

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    table_id: TableId
    waiter_id: UserId
    status: OrderStatus
    items: list[OrderItem]
    total: Money
    created_at: datetime
    updated_at: datetime
    # Bumped on every change; writers compare it to detect concurrent updates.
    version: int = 1

    def __post_init__(self) -> None:
        if self.total != total_of(self.items):
            raise ValueError("order total must equal sum of quantity * unit_price")

    def with_items(self, items: list[OrderItem], now: datetime) -> Order:
        if self.status != OrderStatus.DRAFT:
            raise OrderTransitionError(
                f"cannot edit items of order in status={self.status.value}"
            )
        return replace(
            self,
            items=items,
            total=total_of(items),
            updated_at=now,
            version=self.version + 1,
        )

    def transition_to(self, new_status: OrderStatus, now: datetime) -> Order:
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to {new_status.value}"
            )
        return replace(self, status=new_status, updated_at=now, version=self.version + 1)


def total_of(items: list[OrderItem]) -> Money:
    total = Money.zero()
    for item in items:
        total = total + item.line_total
    return total


def create_order(
    order_id: OrderId,
    table_id: TableId,
    waiter_id: UserId,
    status: OrderStatus,
    items: list[OrderItem],
    now: datetime,
) -> Order:
    if not items:
        raise ValueError("order must contain at least one item")
    if status not in INITIAL_STATUSES:
        raise OrderTransitionError(f"orders cannot be created with status={status.value}")

    return Order(
        order_id=order_id,
        table_id=table_id,
        waiter_id=waiter_id,
        status=status,
        items=items,
        total=total_of(items),
        created_at=now,
        updated_at=now,
    )


class OrderTransitionError(Exception):
    pass
