from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from rms.application.ports.security import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return generate_password_hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        return check_password_hash(password_hash, password)
