"""Work order data service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog

from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.constants import TABLE_WORK_ORDERS, VALID_WORK_ORDER_STATUSES, WorkOrderStatus
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import WorkOrder

log = structlog.get_logger(__name__)


@with_retry_sync()
def fetch_work_orders() -> list[WorkOrder]:
    """All work orders, newest first."""
    supabase = get_supabase_client()
    result = (
        supabase.table(TABLE_WORK_ORDERS)
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    return [WorkOrder.from_db_row(row) for row in result.data or []]


def update_work_order_status(
    work_order_id: str,
    status: WorkOrderStatus,
    *,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> bool:
    """
    Move a work order to a new status, optionally stamping start/end times.

    Returns:
        True if a row was updated.
    """
    if status not in VALID_WORK_ORDER_STATUSES:
        raise ValueError(f"invalid work order status {status!r}")
    if start_time and end_time and end_time < start_time:
        raise ValueError("end_time must not be before start_time")

    update: dict[str, Any] = {"status": status}
    if start_time:
        update["start_time"] = start_time.isoformat()
    if end_time:
        update["end_time"] = end_time.isoformat()

    supabase = get_supabase_client()
    result = supabase.table(TABLE_WORK_ORDERS).update(update).eq("id", work_order_id).execute()
    log.info("work_order_updated", work_order_id=work_order_id, status=status)
    return bool(result.data)
