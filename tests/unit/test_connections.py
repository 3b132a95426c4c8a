from __future__ import annotations

from collections.abc import Iterator

import pytest

from rms.infrastructure.cache import redis_client
from rms.infrastructure.db import session


@pytest.fixture(autouse=True)
def fresh_connections() -> Iterator[None]:
    session.dispose_engine()
    redis_client.close_redis_client()
    yield
    session.dispose_engine()
    redis_client.close_redis_client()


def test_engine_is_created_once_and_rebuilt_after_dispose(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    engine = session.get_engine()
    assert session.get_engine() is engine
    assert session.ping_database()

    session.dispose_engine()
    assert session.get_engine() is not engine


def test_database_ping_fails_without_url(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    assert session.ping_database() is False


def test_redis_ping_fails_without_url(monkeypatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)

    assert redis_client.ping_redis() is False


def test_redis_client_is_shared_until_closed(monkeypatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

    client = redis_client.get_redis_client()
    assert redis_client.get_redis_client() is client

    redis_client.close_redis_client()
    assert redis_client.get_redis_client() is not client
