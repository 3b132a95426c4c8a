from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("rms.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def _route_path(request: Request) -> str:
    # Label by route template so /v1/orders/{order_id} is one series, not one per id.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def _observe(request: Request, status_code: int, started: float) -> dict[str, object]:
    elapsed = time.perf_counter() - started
    path = _route_path(request)
    REQUEST_COUNT.labels(method=request.method, path=path, status_code=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=request.method, path=path).observe(elapsed)
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": round(elapsed * 1000, 2),
        "user_id": getattr(request.state, "user_id", None),
    }


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Counts, times and logs every request once it has been answered."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_error", extra=_observe(request, 500, started))
            raise

        fields = _observe(request, response.status_code, started)
        if response.status_code >= 500:
            logger.error("request_failed", extra=fields)
        else:
            logger.info("request_complete", extra=fields)
        return response
