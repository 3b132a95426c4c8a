from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rms.domain.common.ids import UserId


class Role(str, Enum):
    ADMIN = "admin"
    COOK = "cook"
    WAITER = "waiter"


@dataclass(frozen=True)
class User:
    user_id: UserId
    name: str
    email: str
    role: Role
    is_active: bool
    password_hash: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if "@" not in self.email:
            raise ValueError("email must contain '@'")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a request."""

    user_id: UserId
    role: Role

    @property
    def owned_orders_only(self) -> bool:
        match self.role:
            case Role.WAITER:
                return True
            case Role.ADMIN | Role.COOK:
                return False

    def order_scope(self) -> UserId | None:
        """Waiter id every order query must be filtered by, or None for unrestricted."""
        return self.user_id if self.owned_orders_only else None
