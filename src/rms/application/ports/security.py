from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rms.domain.common.ids import UserId
from rms.domain.user.entities import Identity, User


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password_hash: str, password: str) -> bool: ...


@dataclass(frozen=True)
class PasswordResetClaims:
    user_id: UserId
    # Derived from the password hash at issue time; a reset changes it.
    fingerprint: str


class TokenService(Protocol):
    def issue(self, user: User) -> str: ...

    def decode(self, token: str) -> Identity: ...

    def issue_password_reset(self, user_id: UserId, fingerprint: str) -> str: ...

    def decode_password_reset(self, token: str) -> PasswordResetClaims: ...


class RateLimiter(Protocol):
    def hit(self, scope: str, key: str) -> int | None:
        """Count one attempt; return seconds until retry when the limit is exhausted."""
        ...


class InvalidTokenError(Exception):
    pass
