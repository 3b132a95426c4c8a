from __future__ import annotations

from typing import Any


class ApplicationError(Exception):
    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class OrderNotFoundError(ApplicationError):
    pass


class TableNotFoundError(ApplicationError):
    pass


class DishNotFoundError(ApplicationError):
    pass


class UserNotFoundError(ApplicationError):
    pass


class TableNotAvailableError(ApplicationError):
    pass


class DishUnavailableError(ApplicationError):
    pass


class EmptyOrderError(ApplicationError):
    pass


class InvalidQuantityError(ApplicationError):
    pass


class InvalidOrderTransitionError(ApplicationError):
    pass


class OrderConflictError(ApplicationError):
    pass


class DuplicateTableNumberError(ApplicationError):
    pass


class DuplicateEmailError(ApplicationError):
    pass


class TableInUseError(ApplicationError):
    pass


class DishInUseError(ApplicationError):
    pass


class TableStatusLockedError(ApplicationError):
    pass


class InvalidCredentialsError(ApplicationError):
    pass


class AuthenticationRequiredError(ApplicationError):
    pass


class PermissionDeniedError(ApplicationError):
    pass


class UserInUseError(ApplicationError):
    pass


class InvalidResetTokenError(ApplicationError):
    pass


class RateLimitExceededError(ApplicationError):
    def __init__(self, message: str, retry_after_seconds: int) -> None:
        super().__init__(message, details={"retryAfterSeconds": retry_after_seconds})
        self.headers = {"Retry-After": str(retry_after_seconds)}
