from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rms.api.error_handling import register_exception_handlers
from rms.api.middleware.access_log import AccessLogMiddleware
from rms.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from rms.api.routes import auth, dishes, health, metrics, orders, tables, users
from rms.infrastructure.cache.redis_client import close_redis_client
from rms.infrastructure.db.session import dispose_engine
from rms.infrastructure.observability.logging_config import configure_logging
from rms.infrastructure.observability.otel import configure_otel

_ROUTERS = (
    health.router,
    metrics.router,
    auth.router,
    users.router,
    tables.router,
    dishes.router,
    orders.router,
)


def _cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]

    # Outside dev and test an unset allowlist means same-origin only.
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    dispose_engine()
    close_redis_client()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="RMS Backend", version="0.1.0", lifespan=_lifespan)
    register_exception_handlers(app)
    for router in _ROUTERS:
        app.include_router(router)

    # Registration order is inverted at runtime: CORS runs first, access logging last.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
