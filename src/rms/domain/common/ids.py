from __future__ import annotations

from typing import NewType

UserId = NewType("UserId", str)
DishId = NewType("DishId", str)
TableId = NewType("TableId", str)
OrderId = NewType("OrderId", str)
OrderItemId = NewType("OrderItemId", str)
