from __future__ import annotations

from types import TracebackType

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from rms.application.ports.repositories import UnitOfWork
from rms.infrastructure.db.repositories.dish_repo import SqlAlchemyDishRepository
from rms.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from rms.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from rms.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from rms.infrastructure.db.session import get_engine


class SqlAlchemyUnitOfWork(UnitOfWork):
    orders: SqlAlchemyOrderRepository
    tables: SqlAlchemyTableRepository
    dishes: SqlAlchemyDishRepository
    users: SqlAlchemyUserRepository

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        session = Session(self._engine)
        self._session = session
        self.orders = SqlAlchemyOrderRepository(session)
        self.tables = SqlAlchemyTableRepository(session)
        self.dishes = SqlAlchemyDishRepository(session)
        self.users = SqlAlchemyUserRepository(session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._require_session()
        try:
            # No-op after commit(); discards everything otherwise.
            session.rollback()
        finally:
            session.close()
            self._session = None

    def commit(self) -> None:
        self._require_session().commit()

    def rollback(self) -> None:
        self._require_session().rollback()

    def _require_session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work used outside of a 'with' block")
        return self._session
