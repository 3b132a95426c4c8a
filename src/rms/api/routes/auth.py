from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from rms.api.dependencies import (
    CurrentIdentity,
    PasswordHasherDep,
    PublisherDep,
    TokenServiceDep,
    TraceContextDep,
    UnitOfWorkDep,
    limit_attempts,
)
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
from rms.application.use_cases.authenticate import (
    GetCurrentUser,
    Login,
    RequestPasswordReset,
    ResetPassword,
)

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(limit_attempts("login"))],
)
def login(
    request_dto: LoginRequest,
    uow: UnitOfWorkDep,
    hasher: PasswordHasherDep,
    tokens: TokenServiceDep,
) -> LoginResponse:
    return Login(uow, hasher, tokens).execute(request_dto=request_dto)


@router.get("/me", response_model=UserResponse)
def me(uow: UnitOfWorkDep, identity: CurrentIdentity) -> UserResponse:
    return GetCurrentUser(uow).execute(identity=identity)


@router.post(
    "/forgot-password",
    response_model=PasswordResetRequestedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(limit_attempts("forgot_password"))],
)
def forgot_password(
    request_dto: ForgotPasswordRequest,
    uow: UnitOfWorkDep,
    tokens: TokenServiceDep,
    publisher: PublisherDep,
    trace_ctx: TraceContextDep,
) -> PasswordResetRequestedResponse:
    return RequestPasswordReset(uow, tokens, publisher).execute(
        request_dto=request_dto, trace_ctx=trace_ctx
    )


@router.post(
    "/reset-password",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(limit_attempts("reset_password"))],
)
def reset_password(
    request_dto: ResetPasswordRequest,
    uow: UnitOfWorkDep,
    hasher: PasswordHasherDep,
    tokens: TokenServiceDep,
) -> Response:
    ResetPassword(uow, hasher, tokens).execute(request_dto=request_dto)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
