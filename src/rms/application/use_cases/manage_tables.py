from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from rms.application.dto.requests import CreateTableRequest, UpdateTableRequest
from rms.application.dto.responses import TableResponse
from rms.application.errors import (
    DuplicateTableNumberError,
    TableInUseError,
    TableNotFoundError,
    TableStatusLockedError,
)
from rms.application.mappers.table_mapper import to_table_response
from rms.application.ports.repositories import UnitOfWork
from rms.domain.common.ids import TableId
from rms.domain.table.entities import Table, TableStatus
from rms.domain.table.entities import TableStatusLockedError as DomainTableStatusLockedError


class ListTables:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[TableResponse]:
        with self._uow:
            tables = self._uow.tables.list_all()
        return [to_table_response(table) for table in tables]


class GetTable:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, table_id: TableId) -> TableResponse:
        with self._uow:
            table = self._uow.tables.get(table_id)
        if table is None:
            raise TableNotFoundError(f"table {table_id} not found")
        return to_table_response(table)


class CreateTable:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, request_dto: CreateTableRequest) -> TableResponse:
        with self._uow:
            if self._uow.tables.get_by_number(request_dto.number) is not None:
                raise DuplicateTableNumberError(
                    f"table number {request_dto.number} already exists"
                )
            table = Table(
                table_id=TableId(f"tbl_{uuid4().hex[:12]}"),
                number=request_dto.number,
                capacity=request_dto.capacity,
                status=TableStatus.AVAILABLE,
            )
            self._uow.tables.add(table)
            self._uow.commit()
        return to_table_response(table)


class UpdateTable:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, table_id: TableId, request_dto: UpdateTableRequest) -> TableResponse:
        with self._uow:
            table = self._uow.tables.get_for_update(table_id)
            if table is None:
                raise TableNotFoundError(f"table {table_id} not found")

            if request_dto.number is not None and request_dto.number != table.number:
                existing = self._uow.tables.get_by_number(request_dto.number)
                if existing is not None:
                    raise DuplicateTableNumberError(
                        f"table number {request_dto.number} already exists"
                    )

            updated = replace(
                table,
                number=request_dto.number if request_dto.number is not None else table.number,
                capacity=(
                    request_dto.capacity if request_dto.capacity is not None else table.capacity
                ),
            )
            if request_dto.status is not None and request_dto.status != table.status:
                try:
                    updated = updated.with_manual_status(request_dto.status)
                except DomainTableStatusLockedError as exc:
                    raise TableStatusLockedError(str(exc)) from exc

            self._uow.tables.update(updated)
            self._uow.commit()
        return to_table_response(updated)


class DeleteTable:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, table_id: TableId) -> None:
        with self._uow:
            if self._uow.tables.get(table_id) is None:
                raise TableNotFoundError(f"table {table_id} not found")
            if self._uow.orders.exists_for_table(table_id):
                raise TableInUseError(f"table {table_id} is referenced by orders")
            self._uow.tables.delete(table_id)
            self._uow.commit()
