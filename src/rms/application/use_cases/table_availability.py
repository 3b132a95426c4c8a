from __future__ import annotations

import logging

from rms.application.errors import TableNotAvailableError, TableNotFoundError
from rms.application.metrics.order_lifecycle import (
    record_table_not_available,
    record_table_state_change,
)
from rms.application.ports.repositories import TableRepository
from rms.domain.common.ids import TableId
from rms.domain.table.entities import Table, TableUnavailableError

logger = logging.getLogger(__name__)


def lock_table(tables: TableRepository, table_id: TableId) -> Table:
    """Load a table row locked for the rest of the current transaction."""
    table = tables.get_for_update(table_id)
    if table is None:
        raise TableNotFoundError(f"table {table_id} not found")
    return table


def ensure_table_available(table: Table, operation: str) -> None:
    try:
        table.ensure_available()
    except TableUnavailableError as exc:
        record_table_not_available(operation)
        logger.warning(
            "table_not_available",
            extra={"table_id": str(table.table_id), "status": table.status.value},
        )
        raise TableNotAvailableError(
            str(exc),
            details={"tableId": str(table.table_id), "tableStatus": table.status.value},
        ) from exc


def occupy_table(tables: TableRepository, table: Table, operation: str) -> Table:
    ensure_table_available(table, operation)
    occupied = table.occupy()
    # Guarded on the status read above; SQLite ignores FOR UPDATE.
    if not tables.update_if_status(occupied, expected_status=table.status):
        record_table_not_available(operation)
        logger.warning(
            "table_taken_concurrently",
            extra={"table_id": str(table.table_id), "reason": operation},
        )
        raise TableNotAvailableError(
            f"table {table.number} was taken by another order",
            details={"tableId": str(table.table_id)},
        )
    record_table_state_change(occupied.status)
    return occupied


def release_table(tables: TableRepository, table_id: TableId) -> Table | None:
    table = tables.get_for_update(table_id)
    if table is None:
        return None
    released = table.release()
    tables.update(released)
    record_table_state_change(released.status)
    return released
