from __future__ import annotations

import logging

from rms.application.mappers.event_envelope import AUTH_EVENTS_CHANNEL, ORDER_EVENTS_CHANNEL
from rms.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


def _publish(publisher: EventPublisher, channel: str, message: str) -> None:
    # Events are published after the fact; a broker outage must not fail the request.
    try:
        publisher.publish(channel=channel, message=message)
    except Exception:
        logger.warning("event_publish_failed", extra={"reason": channel}, exc_info=True)


def publish_order_event(publisher: EventPublisher, message: str) -> None:
    _publish(publisher, ORDER_EVENTS_CHANNEL, message)


def publish_auth_event(publisher: EventPublisher, message: str) -> None:
    _publish(publisher, AUTH_EVENTS_CHANNEL, message)
