from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from rms.domain.common.ids import TableId


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    CLEANING = "cleaning"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: int
    capacity: int
    status: TableStatus

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("number must be >= 1")
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    @property
    def is_available(self) -> bool:
        return self.status == TableStatus.AVAILABLE

    def ensure_available(self) -> None:
        if not self.is_available:
            raise TableUnavailableError(
                f"table {self.number} is not available (status={self.status.value})"
            )

    def occupy(self) -> Table:
        self.ensure_available()
        return replace(self, status=TableStatus.OCCUPIED)

    def release(self) -> Table:
        return replace(self, status=TableStatus.AVAILABLE)

    def with_manual_status(self, status: TableStatus) -> Table:
        """Status change requested by staff rather than by an order transition."""
        if status == TableStatus.OCCUPIED or self.status == TableStatus.OCCUPIED:
            raise TableStatusLockedError(
                f"table {self.number} occupancy is controlled by its orders"
            )
        return replace(self, status=status)


class TableUnavailableError(Exception):
    pass


class TableStatusLockedError(Exception):
    pass
