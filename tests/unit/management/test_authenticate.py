from __future__ import annotations

from dataclasses import replace

import pytest

from rms.application.dto.requests import LoginRequest
from rms.application.errors import InvalidCredentialsError
from rms.application.use_cases.authenticate import GetCurrentUser, Login
from rms.domain.user.entities import Identity, User


class StubTokenService:
    def issue(self, user: User) -> str:
        return f"token-for-{user.user_id}"

    def decode(self, token: str) -> Identity:
        raise NotImplementedError


def test_login_returns_token_and_user(uow, hasher) -> None:
    response = Login(uow, hasher, StubTokenService()).execute(
        LoginRequest(email=" Waiter@rms.test ", password="secret-password")
    )

    assert response.accessToken == "token-for-usr_waiter"
    assert response.tokenType == "bearer"
    assert response.user.userId == "usr_waiter"


@pytest.mark.parametrize(
    ("email", "password"),
    [("waiter@rms.test", "wrong-password"), ("nobody@rms.test", "secret-password")],
)
def test_bad_credentials(uow, hasher, email: str, password: str) -> None:
    with pytest.raises(InvalidCredentialsError):
        Login(uow, hasher, StubTokenService()).execute(LoginRequest(email=email, password=password))


def test_inactive_users_cannot_log_in(uow, state, hasher) -> None:
    state.users["usr_waiter"] = replace(state.users["usr_waiter"], is_active=False)

    with pytest.raises(InvalidCredentialsError):
        Login(uow, hasher, StubTokenService()).execute(
            LoginRequest(email="waiter@rms.test", password="secret-password")
        )


def test_current_user(uow, cook) -> None:
    assert GetCurrentUser(uow).execute(cook).name == "Cora Cook"
