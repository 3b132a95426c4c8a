from __future__ import annotations

import logging
import os
import threading

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_engine_lock = threading.Lock()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _engine_options(database_url: str) -> dict[str, object]:
    if database_url.startswith("sqlite"):
        # Route handlers run in a threadpool, so connections cross threads.
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "connect_args": {"connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT_SECONDS", "2"))},
    }


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    with _engine_lock:
        if _engine is None:
            database_url = _database_url()
            _engine = create_engine(database_url, **_engine_options(database_url))
            logger.info("database_engine_created", extra={"dialect": _engine.dialect.name})
        return _engine


def dispose_engine() -> None:
    global _engine
    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
            _engine = None


def ping_database() -> bool:
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, RuntimeError):
        logger.warning("database_ping_failed", exc_info=True)
        return False
