from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrderSummaryResponse(BaseModel):
    orderId: str
    tableId: str
    tableNumber: int
    waiterId: str
    waiterName: str
    status: str
    total: Decimal
    createdAt: datetime
    updatedAt: datetime


class OrderItemResponse(BaseModel):
    itemId: str
    dishId: str
    dishName: str
    quantity: int
    unitPrice: Decimal
    currentDishPrice: Decimal
    lineTotal: Decimal


class OrderDetailResponse(OrderSummaryResponse):
    items: list[OrderItemResponse] = Field(default_factory=list)


class OrderCreatedResponse(BaseModel):
    orderId: str
    status: str
    total: Decimal


class OrderUpdatedResponse(BaseModel):
    orderId: str
    total: Decimal


class OrderStatusResponse(BaseModel):
    orderId: str
    status: str


class TableResponse(BaseModel):
    tableId: str
    number: int
    capacity: int
    status: str


class DishResponse(BaseModel):
    dishId: str
    name: str
    description: str | None = None
    price: Decimal
    isAvailable: bool
    createdAt: datetime


class UserResponse(BaseModel):
    userId: str
    name: str
    email: str
    role: str
    isActive: bool


class LoginResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    user: UserResponse


class PasswordResetRequestedResponse(BaseModel):
    message: str = "if the account exists, reset instructions have been sent"
