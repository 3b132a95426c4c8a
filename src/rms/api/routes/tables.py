from __future__ import annotations

from fastapi import APIRouter, Response, status

from rms.api.dependencies import AdminIdentity, CurrentIdentity, UnitOfWorkDep
from rms.application.dto.requests import CreateTableRequest, UpdateTableRequest
from rms.application.dto.responses import TableResponse
from rms.application.use_cases.manage_tables import (
    CreateTable,
    DeleteTable,
    GetTable,
    ListTables,
    UpdateTable,
)
from rms.domain.common.ids import TableId

router = APIRouter(prefix="/v1/tables", tags=["tables"])


@router.get("", response_model=list[TableResponse])
def list_tables(uow: UnitOfWorkDep, _: CurrentIdentity) -> list[TableResponse]:
    return ListTables(uow).execute()


@router.get("/{table_id}", response_model=TableResponse)
def get_table(table_id: str, uow: UnitOfWorkDep, _: CurrentIdentity) -> TableResponse:
    return GetTable(uow).execute(table_id=TableId(table_id))


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(
    request_dto: CreateTableRequest,
    uow: UnitOfWorkDep,
    _: AdminIdentity,
) -> TableResponse:
    return CreateTable(uow).execute(request_dto=request_dto)


@router.put("/{table_id}", response_model=TableResponse)
def update_table(
    table_id: str,
    request_dto: UpdateTableRequest,
    uow: UnitOfWorkDep,
    _: AdminIdentity,
) -> TableResponse:
    return UpdateTable(uow).execute(table_id=TableId(table_id), request_dto=request_dto)


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(table_id: str, uow: UnitOfWorkDep, _: AdminIdentity) -> Response:
    DeleteTable(uow).execute(table_id=TableId(table_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
