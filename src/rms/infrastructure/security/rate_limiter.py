from __future__ import annotations

import math
import os
import time

from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

from rms.application.ports.security import RateLimiter


class LimitsRateLimiter(RateLimiter):
    """Fixed-window attempt counter backed by the ``limits`` storage URI.

    ``memory://`` keeps counters per process; point ``RATE_LIMIT_STORAGE_URL``
    at Redis to share them between workers.
    """

    def __init__(self, rate: str | None = None, storage_uri: str | None = None) -> None:
        self._item = parse(rate or os.getenv("LOGIN_RATE_LIMIT", "5/hour"))
        storage = storage_from_string(
            storage_uri or os.getenv("RATE_LIMIT_STORAGE_URL", "memory://")
        )
        self._limiter = FixedWindowRateLimiter(storage)

    def hit(self, scope: str, key: str) -> int | None:
        if self._limiter.hit(self._item, scope, key):
            return None
        stats = self._limiter.get_window_stats(self._item, scope, key)
        return max(1, math.ceil(stats.reset_time - time.time()))
