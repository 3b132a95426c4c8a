from __future__ import annotations

from typing import Protocol


class EventPublisher(Protocol):
    """Fire-and-forget delivery of a serialized event to a named channel.

    Implementations may raise on transport failure; callers decide whether the
    failure matters.
    """

    def publish(self, channel: str, message: str) -> None: ...
