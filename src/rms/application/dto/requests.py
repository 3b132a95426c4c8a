from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rms.domain.order.entities import OrderStatus
from rms.domain.table.entities import TableStatus
from rms.domain.user.entities import Role


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class OrderItemRequest(CamelBaseModel):
    dish_id: str
    quantity: int = Field(ge=1)


class CreateOrderRequest(CamelBaseModel):
    table_id: str
    items: list[OrderItemRequest] = Field(min_length=1)
    status: OrderStatus = OrderStatus.PENDING


class UpdateOrderRequest(CamelBaseModel):
    items: list[OrderItemRequest] = Field(min_length=1)


class UpdateOrderStatusRequest(CamelBaseModel):
    status: OrderStatus


class CreateTableRequest(CamelBaseModel):
    number: int = Field(ge=1)
    capacity: int = Field(ge=1)


class UpdateTableRequest(CamelBaseModel):
    number: int | None = Field(default=None, ge=1)
    capacity: int | None = Field(default=None, ge=1)
    status: TableStatus | None = None


class CreateDishRequest(CamelBaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    is_available: bool = True


class UpdateDishRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_available: bool | None = None


class CreateUserRequest(CamelBaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8)
    role: Role


class UpdateUserRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(
        default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    password: str | None = Field(default=None, min_length=8)
    role: Role | None = None
    is_active: bool | None = None


class LoginRequest(CamelBaseModel):
    email: str
    password: str


class ForgotPasswordRequest(CamelBaseModel):
    email: str = Field(min_length=3, max_length=255)


class ResetPasswordRequest(CamelBaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
