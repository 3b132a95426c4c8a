from __future__ import annotations

from fastapi import APIRouter, Response, status

from rms.api.dependencies import AdminIdentity, PasswordHasherDep, UnitOfWorkDep
from rms.application.dto.requests import CreateUserRequest, UpdateUserRequest
from rms.application.dto.responses import UserResponse
from rms.application.use_cases.manage_users import (
    CreateUser,
    DeleteUser,
    GetUser,
    ListUsers,
    UpdateUser,
)
from rms.domain.common.ids import UserId

router = APIRouter(prefix="/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(uow: UnitOfWorkDep, _: AdminIdentity) -> list[UserResponse]:
    return ListUsers(uow).execute()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, uow: UnitOfWorkDep, _: AdminIdentity) -> UserResponse:
    return GetUser(uow).execute(user_id=UserId(user_id))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    request_dto: CreateUserRequest,
    uow: UnitOfWorkDep,
    hasher: PasswordHasherDep,
    _: AdminIdentity,
) -> UserResponse:
    return CreateUser(uow, hasher).execute(request_dto=request_dto)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    request_dto: UpdateUserRequest,
    uow: UnitOfWorkDep,
    hasher: PasswordHasherDep,
    _: AdminIdentity,
) -> UserResponse:
    return UpdateUser(uow, hasher).execute(user_id=UserId(user_id), request_dto=request_dto)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, uow: UnitOfWorkDep, _: AdminIdentity) -> Response:
    DeleteUser(uow).execute(user_id=UserId(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
