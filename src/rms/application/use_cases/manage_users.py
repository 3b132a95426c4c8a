from __future__ import annotations

import logging
from dataclasses import replace
from uuid import uuid4

from rms.application.dto.requests import CreateUserRequest, UpdateUserRequest
from rms.application.dto.responses import UserResponse
from rms.application.errors import DuplicateEmailError, UserInUseError, UserNotFoundError
from rms.application.mappers.user_mapper import to_user_response
from rms.application.ports.repositories import UnitOfWork
from rms.application.ports.security import PasswordHasher
from rms.domain.common.ids import UserId
from rms.domain.user.entities import User

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class ListUsers:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[UserResponse]:
        with self._uow:
            users = self._uow.users.list_all()
        return [to_user_response(user) for user in users]


class GetUser:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: UserId) -> UserResponse:
        with self._uow:
            user = self._uow.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"user {user_id} not found")
        return to_user_response(user)


class CreateUser:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self._uow = uow
        self._hasher = hasher

    def execute(self, request_dto: CreateUserRequest) -> UserResponse:
        email = _normalize_email(request_dto.email)
        with self._uow:
            if self._uow.users.get_by_email(email) is not None:
                raise DuplicateEmailError(f"email {email} is already registered")
            user = User(
                user_id=UserId(f"usr_{uuid4().hex[:12]}"),
                name=request_dto.name.strip(),
                email=email,
                role=request_dto.role,
                is_active=True,
                password_hash=self._hasher.hash(request_dto.password),
            )
            self._uow.users.add(user)
            self._uow.commit()

        logger.info("user_created", extra={"user_id": str(user.user_id)})
        return to_user_response(user)


class UpdateUser:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self._uow = uow
        self._hasher = hasher

    def execute(self, user_id: UserId, request_dto: UpdateUserRequest) -> UserResponse:
        with self._uow:
            user = self._uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(f"user {user_id} not found")

            email = user.email
            if request_dto.email is not None:
                email = _normalize_email(request_dto.email)
                if email != user.email and self._uow.users.get_by_email(email) is not None:
                    raise DuplicateEmailError(f"email {email} is already registered")

            updated = replace(
                user,
                name=request_dto.name.strip() if request_dto.name else user.name,
                email=email,
                role=request_dto.role or user.role,
                is_active=(
                    request_dto.is_active if request_dto.is_active is not None else user.is_active
                ),
                password_hash=(
                    self._hasher.hash(request_dto.password)
                    if request_dto.password
                    else user.password_hash
                ),
            )
            self._uow.users.update(updated)
            self._uow.commit()

        logger.info("user_updated", extra={"user_id": str(user_id)})
        return to_user_response(updated)


class DeleteUser:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: UserId) -> None:
        with self._uow:
            if self._uow.users.get(user_id) is None:
                raise UserNotFoundError(f"user {user_id} not found")
            if self._uow.orders.exists_for_waiter(user_id):
                raise UserInUseError(
                    f"user {user_id} is referenced by orders; deactivate it instead"
                )
            self._uow.users.delete(user_id)
            self._uow.commit()

        logger.info("user_deleted", extra={"user_id": str(user_id)})
