from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from rms.api.dependencies import (
    get_publisher,
    get_rate_limiter,
    get_token_service,
    get_unit_of_work,
)
from rms.api.main import app
from rms.domain.common.ids import DishId, TableId, UserId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish
from rms.domain.table.entities import Table, TableStatus
from rms.domain.user.entities import Role, User
from rms.infrastructure.db.models.base import Base
from rms.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from rms.infrastructure.security.passwords import WerkzeugPasswordHasher
from rms.infrastructure.security.rate_limiter import LimitsRateLimiter
from rms.infrastructure.security.tokens import JwtTokenService

PASSWORD = "correct-horse"
STAFF = {
    Role.ADMIN: ("usr_admin", "Ada Admin", "admin@rms.test"),
    Role.WAITER: ("usr_waiter", "Walt Waiter", "waiter@rms.test"),
    Role.COOK: ("usr_cook", "Cora Cook", "cook@rms.test"),
}


class RecordingPublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded(engine: Engine) -> SqlAlchemyUnitOfWork:
    hasher = WerkzeugPasswordHasher()
    started = datetime(2020, 2, 1, 9, 0, tzinfo=timezone.utc)
    uow = SqlAlchemyUnitOfWork(engine)
    with uow:
        for role, (user_id, name, email) in STAFF.items():
            uow.users.add(
                User(
                    user_id=UserId(user_id),
                    name=name,
                    email=email,
                    role=role,
                    is_active=True,
                    password_hash=hasher.hash(PASSWORD),
                )
            )
        uow.users.add(
            User(
                user_id=UserId("usr_waiter2"),
                name="Wren Waiter",
                email="waiter2@rms.test",
                role=Role.WAITER,
                is_active=True,
                password_hash=hasher.hash(PASSWORD),
            )
        )
        for table_id, number in (("tbl_one", 1), ("tbl_two", 2)):
            uow.tables.add(
                Table(
                    table_id=TableId(table_id),
                    number=number,
                    capacity=4,
                    status=TableStatus.AVAILABLE,
                )
            )
        for offset, (dish_id, name, cents, available) in enumerate(
            (
                ("dsh_burger", "Burger", 1000, True),
                ("dsh_fries", "Fries", 450, True),
                ("dsh_soup", "Soup", 600, False),
            )
        ):
            uow.dishes.add(
                Dish(
                    dish_id=DishId(dish_id),
                    name=name,
                    description=None,
                    price=Money(amount_cents=cents),
                    is_available=available,
                    created_at=started + timedelta(minutes=offset),
                )
            )
        uow.commit()
    return SqlAlchemyUnitOfWork(engine)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(secret="integration-secret", expires_minutes=30)


@pytest.fixture
def rate_limiter() -> LimitsRateLimiter:
    return LimitsRateLimiter(rate="5/hour", storage_uri="memory://")


@pytest.fixture
def client(
    engine: Engine,
    seeded: SqlAlchemyUnitOfWork,
    publisher: RecordingPublisher,
    token_service: JwtTokenService,
    rate_limiter: LimitsRateLimiter,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_unit_of_work] = lambda: SqlAlchemyUnitOfWork(engine)
    app.dependency_overrides[get_publisher] = lambda: publisher
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth(token_service: JwtTokenService) -> Callable[[str], dict[str, str]]:
    users = {
        "admin": ("usr_admin", Role.ADMIN),
        "waiter": ("usr_waiter", Role.WAITER),
        "waiter2": ("usr_waiter2", Role.WAITER),
        "cook": ("usr_cook", Role.COOK),
    }

    def headers(who: str) -> dict[str, str]:
        user_id, role = users[who]
        user = User(
            user_id=UserId(user_id),
            name=who,
            email=f"{who}@rms.test",
            role=role,
            is_active=True,
            password_hash="unused",
        )
        return {"Authorization": f"Bearer {token_service.issue(user)}"}

    return headers
