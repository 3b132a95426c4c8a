from __future__ import annotations

import hashlib
import logging
from dataclasses import replace
from datetime import datetime, timezone

from rms.application.dto.requests import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
)
from rms.application.dto.responses import (
    LoginResponse,
    PasswordResetRequestedResponse,
    UserResponse,
)
from rms.application.errors import (
    InvalidCredentialsError,
    InvalidResetTokenError,
    UserNotFoundError,
)
from rms.application.mappers.event_envelope import serialize_password_reset_requested_event
from rms.application.mappers.user_mapper import to_user_response
from rms.application.metrics.auth_activity import record_password_reset
from rms.application.ports.publisher import EventPublisher
from rms.application.ports.repositories import UnitOfWork
from rms.application.ports.security import InvalidTokenError, PasswordHasher, TokenService
from rms.application.use_cases.context import TraceContext
from rms.application.use_cases.publishing import publish_auth_event
from rms.domain.user.entities import Identity

logger = logging.getLogger(__name__)


class Login:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, tokens: TokenService) -> None:
        self._uow = uow
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, request_dto: LoginRequest) -> LoginResponse:
        with self._uow:
            user = self._uow.users.get_by_email(request_dto.email.strip().lower())

        if user is None or not user.is_active:
            logger.warning("login_rejected", extra={"reason": "unknown_or_inactive"})
            raise InvalidCredentialsError("invalid credentials")
        if not self._hasher.verify(user.password_hash, request_dto.password):
            logger.warning("login_rejected", extra={"user_id": str(user.user_id)})
            raise InvalidCredentialsError("invalid credentials")

        logger.info("login_succeeded", extra={"user_id": str(user.user_id)})
        return LoginResponse(accessToken=self._tokens.issue(user), user=to_user_response(user))


class GetCurrentUser:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, identity: Identity) -> UserResponse:
        with self._uow:
            user = self._uow.users.get(identity.user_id)
        if user is None:
            raise UserNotFoundError(f"user {identity.user_id} not found")
        return to_user_response(user)


def password_fingerprint(password_hash: str) -> str:
    """Short digest of the stored hash; changing the password voids older reset tokens."""
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:16]


class RequestPasswordReset:
    """Issue a reset token for an active account and hand it to the mailer.

    Unknown and inactive addresses get the same response, so the endpoint does
    not reveal which emails have accounts.
    """

    def __init__(self, uow: UnitOfWork, tokens: TokenService, publisher: EventPublisher) -> None:
        self._uow = uow
        self._tokens = tokens
        self._publisher = publisher

    def execute(
        self, request_dto: ForgotPasswordRequest, trace_ctx: TraceContext
    ) -> PasswordResetRequestedResponse:
        with self._uow:
            user = self._uow.users.get_by_email(request_dto.email.strip().lower())

        if user is None or not user.is_active:
            record_password_reset("ignored")
            logger.info("password_reset_ignored", extra={"reason": "unknown_or_inactive"})
            return PasswordResetRequestedResponse()

        reset_token = self._tokens.issue_password_reset(
            user.user_id, password_fingerprint(user.password_hash)
        )
        publish_auth_event(
            self._publisher,
            serialize_password_reset_requested_event(
                occurred_at=datetime.now(timezone.utc),
                user=user,
                reset_token=reset_token,
                trace_ctx=trace_ctx,
            ),
        )
        record_password_reset("requested")
        logger.info("password_reset_requested", extra={"user_id": str(user.user_id)})
        return PasswordResetRequestedResponse()


class ResetPassword:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher, tokens: TokenService) -> None:
        self._uow = uow
        self._hasher = hasher
        self._tokens = tokens

    def execute(self, request_dto: ResetPasswordRequest) -> None:
        try:
            claims = self._tokens.decode_password_reset(request_dto.token)
        except InvalidTokenError as exc:
            raise self._rejected(str(exc)) from exc

        with self._uow:
            user = self._uow.users.get(claims.user_id)
            if user is None or not user.is_active:
                raise self._rejected("unknown_or_inactive")
            if password_fingerprint(user.password_hash) != claims.fingerprint:
                raise self._rejected("already_used")

            self._uow.users.update(
                replace(user, password_hash=self._hasher.hash(request_dto.new_password))
            )
            self._uow.commit()

        record_password_reset("completed")
        logger.info("password_reset_completed", extra={"user_id": str(user.user_id)})

    @staticmethod
    def _rejected(reason: str) -> InvalidResetTokenError:
        record_password_reset("rejected")
        logger.warning("password_reset_rejected", extra={"reason": reason})
        return InvalidResetTokenError("reset token is invalid or expired")
