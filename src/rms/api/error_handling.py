from __future__ import annotations

from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rms.api.middleware.request_id import get_request_id
from rms.application.errors import (
    AuthenticationRequiredError,
    DishInUseError,
    DishNotFoundError,
    DishUnavailableError,
    DuplicateEmailError,
    DuplicateTableNumberError,
    EmptyOrderError,
    InvalidCredentialsError,
    InvalidOrderTransitionError,
    InvalidQuantityError,
    InvalidResetTokenError,
    OrderConflictError,
    OrderNotFoundError,
    PermissionDeniedError,
    RateLimitExceededError,
    TableInUseError,
    TableNotAvailableError,
    TableNotFoundError,
    TableStatusLockedError,
    UserInUseError,
    UserNotFoundError,
)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": jsonable_encoder(details or {}),
            },
            "requestId": get_request_id(),
        },
        headers=headers,
    )


def _exception_handler(status_code: int, code: str, headers: dict[str, str] | None = None):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        merged_headers = {**(headers or {}), **getattr(exc, "headers", {})}
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
            headers=merged_headers or None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    elif http_exc.status_code == 409:
        code = "CONFLICT"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
        headers=getattr(http_exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": validation_exc.errors()},
    )


_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str, dict[str, str] | None]] = [
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND", None),
        (TableNotFoundError, 404, "TABLE_NOT_FOUND", None),
        (DishNotFoundError, 404, "DISH_NOT_FOUND", None),
        (UserNotFoundError, 404, "USER_NOT_FOUND", None),
        (TableNotAvailableError, 400, "TABLE_NOT_AVAILABLE", None),
        (DishUnavailableError, 400, "DISH_UNAVAILABLE", None),
        (EmptyOrderError, 400, "EMPTY_ORDER", None),
        (InvalidQuantityError, 400, "INVALID_QUANTITY", None),
        (InvalidResetTokenError, 400, "INVALID_RESET_TOKEN", None),
        (InvalidOrderTransitionError, 409, "INVALID_ORDER_TRANSITION", None),
        (OrderConflictError, 409, "ORDER_CONFLICT", None),
        (DuplicateTableNumberError, 409, "DUPLICATE_TABLE_NUMBER", None),
        (DuplicateEmailError, 409, "DUPLICATE_EMAIL", None),
        (TableInUseError, 409, "TABLE_IN_USE", None),
        (DishInUseError, 409, "DISH_IN_USE", None),
        (TableStatusLockedError, 409, "TABLE_STATUS_LOCKED", None),
        (UserInUseError, 409, "USER_IN_USE", None),
        (InvalidCredentialsError, 401, "INVALID_CREDENTIALS", None),
        (AuthenticationRequiredError, 401, "AUTHENTICATION_REQUIRED", _BEARER_CHALLENGE),
        (PermissionDeniedError, 403, "PERMISSION_DENIED", None),
        (RateLimitExceededError, 429, "RATE_LIMITED", None),
    ]

    for exc_cls, status_code, code, headers in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code, headers))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
