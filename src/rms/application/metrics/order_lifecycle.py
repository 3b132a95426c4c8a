from __future__ import annotations

from prometheus_client import Counter

from rms.domain.order.entities import OrderStatus
from rms.domain.table.entities import TableStatus

ORDERS_CREATED_TOTAL = Counter(
    "rms_orders_created_total",
    "Total number of orders created by initial status.",
    ["status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "rms_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_TRANSITION_REJECTED_TOTAL = Counter(
    "rms_order_transition_rejected_total",
    "Total number of rejected order lifecycle transitions.",
    ["from", "to"],
)

ORDERS_DELETED_TOTAL = Counter(
    "rms_orders_deleted_total",
    "Total number of deleted orders by status at deletion.",
    ["status"],
)

DRAFT_EDITS_TOTAL = Counter(
    "rms_order_draft_edits_total",
    "Total number of draft order item replacements.",
)

TABLE_STATE_CHANGES_TOTAL = Counter(
    "rms_table_state_changes_total",
    "Total number of table occupancy changes driven by orders.",
    ["to"],
)

TABLE_NOT_AVAILABLE_TOTAL = Counter(
    "rms_table_not_available_total",
    "Total number of order operations rejected because the table was not available.",
    ["operation"],
)

ORDER_CONFLICTS_TOTAL = Counter(
    "rms_order_conflicts_total",
    "Total number of order writes rejected because the order changed after it was read.",
    ["operation"],
)


def record_order_created(status: OrderStatus) -> None:
    ORDERS_CREATED_TOTAL.labels(status=status.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_transition_rejected(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_REJECTED_TOTAL.labels(
        **{"from": from_status.value, "to": to_status.value}
    ).inc()


def record_order_deleted(status: OrderStatus) -> None:
    ORDERS_DELETED_TOTAL.labels(status=status.value).inc()


def record_draft_edit() -> None:
    DRAFT_EDITS_TOTAL.inc()


def record_table_state_change(status: TableStatus) -> None:
    TABLE_STATE_CHANGES_TOTAL.labels(to=status.value).inc()


def record_table_not_available(operation: str) -> None:
    TABLE_NOT_AVAILABLE_TOTAL.labels(operation=operation).inc()


def record_order_conflict(operation: str) -> None:
    ORDER_CONFLICTS_TOTAL.labels(operation=operation).inc()
