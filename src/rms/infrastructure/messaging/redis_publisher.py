from __future__ import annotations

import redis

from rms.application.ports.publisher import EventPublisher
from rms.infrastructure.cache.redis_client import get_redis_client


class RedisEventPublisher(EventPublisher):
    """Publishes serialized events on Redis pub/sub channels.

    The client is resolved lazily so building the publisher never needs a
    reachable broker.
    """

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._client = client

    def publish(self, channel: str, message: str) -> None:
        client = self._client or get_redis_client()
        client.publish(channel, message)
