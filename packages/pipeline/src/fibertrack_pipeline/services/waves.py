"""Wave data service."""

from __future__ import annotations

import structlog

from fibertrack_pipeline.analytics.kpis import wave_progress_percentage
from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.constants import TABLE_LOCATIONS, TABLE_WAVES, TABLE_WORK_ORDERS
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import Wave

log = structlog.get_logger(__name__)


@with_retry_sync()
def fetch_waves() -> list[Wave]:
    """All waves, most recent start date first."""
    supabase = get_supabase_client()
    result = (
        supabase.table(TABLE_WAVES)
        .select("*")
        .order("start_date", desc=True)
        .execute()
    )
    return [Wave.from_db_row(row) for row in result.data or []]


def create_wave(wave: Wave) -> Wave | None:
    """Insert a new wave; progress always starts at 0."""
    supabase = get_supabase_client()
    payload = wave.model_copy(update={"progress_percentage": 0}).to_insert_dict()
    result = supabase.table(TABLE_WAVES).insert(payload).execute()
    if not result.data:
        log.warning("wave_create_empty", name=wave.name)
        return None
    return Wave.from_db_row(result.data[0])


def update_wave_progress(wave_id: str) -> int:
    """
    Recompute a wave's progress from its work orders and persist it.

    Progress is the rounded share of Completed work orders across every
    location assigned to the wave; 0 when there are no locations or no
    work orders.

    Returns:
        The stored progress percentage.
    """
    supabase = get_supabase_client()

    locations = (
        supabase.table(TABLE_LOCATIONS).select("id").eq("wave_id", wave_id).execute()
    )
    location_ids = [row["id"] for row in locations.data or []]

    statuses: list[str] = []
    if location_ids:
        work_orders = (
            supabase.table(TABLE_WORK_ORDERS)
            .select("status")
            .in_("location_id", location_ids)
            .execute()
        )
        statuses = [row["status"] for row in work_orders.data or []]

    progress = wave_progress_percentage(statuses)
    supabase.table(TABLE_WAVES).update({"progress_percentage": progress}).eq("id", wave_id).execute()
    log.info(
        "wave_progress_updated",
        wave_id=wave_id,
        locations=len(location_ids),
        work_orders=len(statuses),
        progress=progress,
    )
    return progress
