from __future__ import annotations

import pytest

from rms.application.dto.requests import CreateOrderRequest, CreateUserRequest, UpdateUserRequest
from rms.application.errors import DuplicateEmailError, UserInUseError, UserNotFoundError
from rms.application.use_cases.create_order import CreateOrder
from rms.application.use_cases.manage_users import (
    CreateUser,
    DeleteUser,
    GetUser,
    ListUsers,
    UpdateUser,
)
from rms.domain.common.ids import UserId
from rms.domain.user.entities import Role


def test_create_user_hashes_password_and_normalizes_email(uow, state, hasher) -> None:
    response = CreateUser(uow, hasher).execute(
        CreateUserRequest(
            name="Nina New",
            email="Nina@RMS.test",
            password="long-enough",
            role=Role.COOK,
        )
    )

    stored = state.users[response.userId]
    assert response.email == "nina@rms.test"
    assert response.role == "cook"
    assert stored.password_hash == "plain$long-enough"


def test_emails_are_unique(uow, hasher) -> None:
    with pytest.raises(DuplicateEmailError):
        CreateUser(uow, hasher).execute(
            CreateUserRequest(
                name="Copy", email="ADMIN@rms.test", password="long-enough", role=Role.ADMIN
            )
        )

    with pytest.raises(DuplicateEmailError):
        UpdateUser(uow, hasher).execute(
            UserId("usr_cook"), UpdateUserRequest(email="waiter@rms.test")
        )


def test_update_changes_role_activity_and_password(uow, state, hasher) -> None:
    response = UpdateUser(uow, hasher).execute(
        UserId("usr_cook"),
        UpdateUserRequest(role=Role.WAITER, is_active=False, password="new-password"),
    )

    assert response.role == "waiter"
    assert response.isActive is False
    assert state.users["usr_cook"].password_hash == "plain$new-password"
    assert state.users["usr_cook"].name == "Cora Cook"


def test_list_and_get(uow) -> None:
    assert [user.name for user in ListUsers(uow).execute()] == [
        "Ada Admin",
        "Cora Cook",
        "Walt Waiter",
        "Wren Waiter",
    ]
    assert GetUser(uow).execute(UserId("usr_admin")).role == "admin"
    with pytest.raises(UserNotFoundError):
        GetUser(uow).execute(UserId("usr_missing"))


def test_users_with_orders_cannot_be_deleted(
    uow, state, publisher, waiter, trace_ctx
) -> None:
    CreateOrder(uow, publisher).execute(
        request_dto=CreateOrderRequest.model_validate(
            {"tableId": "tbl_one", "items": [{"dishId": "dsh_fries", "quantity": 1}]}
        ),
        identity=waiter,
        trace_ctx=trace_ctx,
    )

    with pytest.raises(UserInUseError):
        DeleteUser(uow).execute(UserId("usr_waiter"))

    DeleteUser(uow).execute(UserId("usr_cook"))
    assert "usr_cook" not in state.users
