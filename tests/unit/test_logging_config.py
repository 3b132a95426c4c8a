from __future__ import annotations

import json
import logging

from rms.api.middleware.request_id import request_id_context
from rms.infrastructure.observability.logging_config import JsonFormatter, RequestContextFilter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="rms.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="order_created",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_keeps_whitelisted_extras_only() -> None:
    record = _record(order_id="ord_abc", status="pending", password="hunter2")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "order_created"
    assert payload["level"] == "INFO"
    assert payload["order_id"] == "ord_abc"
    assert payload["status"] == "pending"
    assert "password" not in payload
    assert payload["trace_id"] is None


def test_request_context_filter_stamps_current_request_id() -> None:
    token = request_id_context.set("req-log")
    try:
        record = _record()
        assert RequestContextFilter().filter(record) is True
    finally:
        request_id_context.reset(token)

    payload = json.loads(JsonFormatter().format(record))
    assert payload["request_id"] == "req-log"
