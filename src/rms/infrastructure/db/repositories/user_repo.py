from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from rms.application.ports.repositories import UserRepository
from rms.domain.common.ids import UserId
from rms.domain.user.entities import Role, User
from rms.infrastructure.db.models.user import UserModel


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: UserId) -> User | None:
        statement = select(UserModel).where(UserModel.id == str(user_id))
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserModel).where(UserModel.email == email)
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_all(self) -> list[User]:
        statement = select(UserModel).order_by(UserModel.name.asc(), UserModel.id.asc())
        return [self._to_domain(model) for model in self._session.execute(statement).scalars()]

    def add(self, user: User) -> None:
        self._session.add(
            UserModel(
                id=str(user.user_id),
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                role=user.role.value,
                is_active=user.is_active,
            )
        )
        self._session.flush()

    def update(self, user: User) -> None:
        self._session.execute(
            update(UserModel)
            .where(UserModel.id == str(user.user_id))
            .values(
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                role=user.role.value,
                is_active=user.is_active,
            )
        )

    def delete(self, user_id: UserId) -> None:
        self._session.execute(delete(UserModel).where(UserModel.id == str(user_id)))

    def _to_domain(self, model: UserModel) -> User:
        return User(
            user_id=UserId(model.id),
            name=model.name,
            email=model.email,
            role=Role(model.role),
            is_active=model.is_active,
            password_hash=model.password_hash,
        )
