from __future__ import annotations

from rms.application.dto.responses import UserResponse
from rms.domain.user.entities import User


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        userId=str(user.user_id),
        name=user.name,
        email=user.email,
        role=user.role.value,
        isActive=user.is_active,
    )
