from __future__ import annotations

from rms.application.dto.responses import TableResponse
from rms.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        capacity=table.capacity,
        status=table.status.value,
    )
