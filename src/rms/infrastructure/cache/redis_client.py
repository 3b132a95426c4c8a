from __future__ import annotations

import logging
import os
import threading

import redis

logger = logging.getLogger(__name__)

_client: redis.Redis | None = None
_client_lock = threading.Lock()


def _redis_url() -> str:
    url = os.getenv("REDIS_URL")
    if not url:
        raise RuntimeError("REDIS_URL is not set")
    return url


def get_redis_client() -> redis.Redis:
    """Shared client for event publishing and readiness checks."""
    global _client
    with _client_lock:
        if _client is None:
            timeout = float(os.getenv("REDIS_SOCKET_TIMEOUT_SECONDS", "1.0"))
            _client = redis.Redis.from_url(
                _redis_url(),
                socket_connect_timeout=timeout,
                socket_timeout=timeout,
                health_check_interval=30,
            )
        return _client


def close_redis_client() -> None:
    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


def ping_redis() -> bool:
    try:
        return bool(get_redis_client().ping())
    except (redis.RedisError, RuntimeError):
        logger.warning("redis_ping_failed", exc_info=True)
        return False
