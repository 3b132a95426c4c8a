from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from rms.application.ports.repositories import TableRepository
from rms.domain.common.ids import TableId
from rms.domain.table.entities import Table, TableStatus
from rms.infrastructure.db.models.table import TableModel


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, table_id: TableId) -> Table | None:
        statement = select(TableModel).where(TableModel.id == str(table_id))
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_for_update(self, table_id: TableId) -> Table | None:
        # Row lock held until the surrounding transaction ends, so concurrent
        # availability checks on the same table are serialized.
        statement = select(TableModel).where(TableModel.id == str(table_id)).with_for_update()
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_by_number(self, number: int) -> Table | None:
        statement = select(TableModel).where(TableModel.number == number)
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def list_all(self) -> list[Table]:
        statement = select(TableModel).order_by(TableModel.number.asc())
        return [self._to_domain(model) for model in self._session.execute(statement).scalars()]

    def add(self, table: Table) -> None:
        self._session.add(
            TableModel(
                id=str(table.table_id),
                number=table.number,
                capacity=table.capacity,
                status=table.status.value,
            )
        )
        self._session.flush()

    def update(self, table: Table) -> None:
        self._session.execute(
            update(TableModel)
            .where(TableModel.id == str(table.table_id))
            .values(number=table.number, capacity=table.capacity, status=table.status.value)
        )

    def update_if_status(self, table: Table, expected_status: TableStatus) -> bool:
        result = self._session.execute(
            update(TableModel)
            .where(
                TableModel.id == str(table.table_id),
                TableModel.status == expected_status.value,
            )
            .values(status=table.status.value)
        )
        return result.rowcount == 1

    def delete(self, table_id: TableId) -> None:
        self._session.execute(delete(TableModel).where(TableModel.id == str(table_id)))

    def _to_domain(self, model: TableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            number=model.number,
            capacity=model.capacity,
            status=TableStatus(model.status),
        )
