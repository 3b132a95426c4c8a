from __future__ import annotations

import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from rms.api.middleware.request_id import get_request_id
from rms.application.errors import (
    AuthenticationRequiredError,
    PermissionDeniedError,
    RateLimitExceededError,
)
from rms.application.metrics.auth_activity import record_rate_limited
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import UnitOfWork
from rms.application.ports.security import (
    InvalidTokenError,
    PasswordHasher,
    RateLimiter,
    TokenService,
)
from rms.application.use_cases.context import TraceContext
from rms.domain.user.entities import Identity, Role
from rms.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from rms.infrastructure.messaging.redis_publisher import RedisEventPublisher
from rms.infrastructure.security.passwords import WerkzeugPasswordHasher
from rms.infrastructure.security.rate_limiter import LimitsRateLimiter
from rms.infrastructure.security.tokens import JwtTokenService

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def get_unit_of_work() -> UnitOfWork:
    return SqlAlchemyUnitOfWork()


def get_publisher() -> EventPublisher:
    return RedisEventPublisher()


def get_password_hasher() -> PasswordHasher:
    return WerkzeugPasswordHasher()


def get_token_service() -> TokenService:
    return JwtTokenService()


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    # Counters live in the limiter, so every request must share one instance.
    return LimitsRateLimiter()


def get_trace_context() -> TraceContext:
    span_context = trace.get_current_span().get_span_context()
    trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else None
    return TraceContext(trace_id=trace_id, request_id=get_request_id())


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationRequiredError("authentication required")
    try:
        identity = tokens.decode(credentials.credentials)
    except InvalidTokenError as exc:
        raise AuthenticationRequiredError(str(exc)) from exc

    request.state.user_id = identity.user_id
    return identity


def require_roles(*roles: Role) -> Callable[[Identity], Identity]:
    allowed = frozenset(roles)

    def dependency(identity: Annotated[Identity, Depends(get_current_identity)]) -> Identity:
        if identity.role not in allowed:
            raise PermissionDeniedError(
                "permission denied",
                details={
                    "role": identity.role.value,
                    "allowed": sorted(role.value for role in allowed),
                },
            )
        return identity

    return dependency


UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
PublisherDep = Annotated[EventPublisher, Depends(get_publisher)]
PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
TraceContextDep = Annotated[TraceContext, Depends(get_trace_context)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
AdminIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN))]
WaiterOrAdminIdentity = Annotated[Identity, Depends(require_roles(Role.WAITER, Role.ADMIN))]
StaffIdentity = Annotated[
    Identity, Depends(require_roles(Role.ADMIN, Role.WAITER, Role.COOK))
]


def limit_attempts(scope: str) -> Callable[..., None]:
    """Count the request against the per-client attempt limit for ``scope``."""

    def dependency(
        request: Request,
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        client_ip = request.client.host if request.client else "unknown"
        retry_after = limiter.hit(scope, client_ip)
        if retry_after is not None:
            record_rate_limited(scope)
            logger.warning("rate_limited", extra={"reason": scope, "client_ip": client_ip})
            raise RateLimitExceededError(
                "too many attempts; try again later", retry_after_seconds=retry_after
            )

    return dependency
