from __future__ import annotations

from prometheus_client import Counter

AUTH_RATE_LIMITED_TOTAL = Counter(
    "rms_auth_rate_limited_total",
    "Total number of authentication requests rejected by the attempt limiter.",
    ["scope"],
)

PASSWORD_RESETS_TOTAL = Counter(
    "rms_password_resets_total",
    "Total number of password reset steps by outcome.",
    ["outcome"],
)


def record_rate_limited(scope: str) -> None:
    AUTH_RATE_LIMITED_TOTAL.labels(scope=scope).inc()


def record_password_reset(outcome: str) -> None:
    PASSWORD_RESETS_TOTAL.labels(outcome=outcome).inc()
