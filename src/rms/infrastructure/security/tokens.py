from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from rms.application.ports.security import InvalidTokenError, PasswordResetClaims, TokenService
from rms.domain.common.ids import UserId
from rms.domain.user.entities import Identity, Role, User

JWT_ALGORITHM = "HS256"
ACCESS_PURPOSE = "access"
PASSWORD_RESET_PURPOSE = "password_reset"
_DEV_SECRET = "dev-secret"


def _jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if secret:
        return secret
    if os.getenv("APP_ENV", "dev").lower() == "prod":
        raise RuntimeError("JWT_SECRET is not set")
    return _DEV_SECRET


def _expires_minutes() -> int:
    return int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))


def _reset_expires_minutes() -> int:
    return int(os.getenv("PASSWORD_RESET_EXPIRES_MINUTES", "60"))


class JwtTokenService(TokenService):
    def __init__(
        self,
        secret: str | None = None,
        expires_minutes: int | None = None,
        reset_expires_minutes: int | None = None,
    ) -> None:
        self._secret = secret or _jwt_secret()
        self._expires_minutes = expires_minutes or _expires_minutes()
        self._reset_expires_minutes = reset_expires_minutes or _reset_expires_minutes()

    def issue(self, user: User) -> str:
        return self._encode(
            {
                "sub": str(user.user_id),
                "purpose": ACCESS_PURPOSE,
                "role": user.role.value,
                "name": user.name,
                "email": user.email,
            },
            minutes=self._expires_minutes,
        )

    def decode(self, token: str) -> Identity:
        claims = self._decode(token, purpose=ACCESS_PURPOSE)
        try:
            return Identity(user_id=UserId(str(claims["sub"])), role=Role(claims["role"]))
        except (KeyError, ValueError) as exc:
            raise InvalidTokenError("invalid token") from exc

    def issue_password_reset(self, user_id: UserId, fingerprint: str) -> str:
        return self._encode(
            {"sub": str(user_id), "purpose": PASSWORD_RESET_PURPOSE, "fpr": fingerprint},
            minutes=self._reset_expires_minutes,
        )

    def decode_password_reset(self, token: str) -> PasswordResetClaims:
        claims = self._decode(token, purpose=PASSWORD_RESET_PURPOSE)
        try:
            return PasswordResetClaims(user_id=UserId(str(claims["sub"])), fingerprint=claims["fpr"])
        except KeyError as exc:
            raise InvalidTokenError("invalid token") from exc

    def _encode(self, claims: dict[str, Any], minutes: int) -> str:
        now = datetime.now(timezone.utc)
        claims = {**claims, "iat": now, "exp": now + timedelta(minutes=minutes)}
        return jwt.encode(claims, self._secret, algorithm=JWT_ALGORITHM)

    def _decode(self, token: str, purpose: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("invalid token") from exc
        # Tokens minted before purposes existed are access tokens.
        if claims.get("purpose", ACCESS_PURPOSE) != purpose:
            raise InvalidTokenError("invalid token")
        return claims
