from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rms.domain.common.ids import DishId
from rms.domain.common.money import Money


@dataclass(frozen=True)
class Dish:
    dish_id: DishId
    name: str
    description: str | None
    price: Money
    is_available: bool
    created_at: datetime

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price.amount_cents < 1:
            raise ValueError("price must be positive")
