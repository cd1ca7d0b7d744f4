"""Location data service."""

from __future__ import annotations

import structlog

from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.constants import (
    TABLE_LOCATIONS,
    VALID_FIBER_STATUSES,
    FiberStatus,
    Region,
)
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import Location

log = structlog.get_logger(__name__)


@with_retry_sync()
def fetch_locations(*, region: Region | None = None) -> list[Location]:
    """All locations ordered by address, optionally limited to one region."""
    supabase = get_supabase_client()
    query = supabase.table(TABLE_LOCATIONS).select("*")
    if region:
        query = query.eq("region", region)
    result = query.order("address").execute()
    return [Location.from_db_row(row) for row in result.data or []]


def create_location(location: Location) -> Location | None:
    supabase = get_supabase_client()
    result = supabase.table(TABLE_LOCATIONS).insert(location.to_insert_dict()).execute()
    if not result.data:
        log.warning("location_create_empty", address=location.address)
        return None
    return Location.from_db_row(result.data[0])


def update_location_fiber_status(location_id: str, fiber_status: FiberStatus) -> bool:
    """Set one location's fiber readiness; returns False if no row matched."""
    if fiber_status not in VALID_FIBER_STATUSES:
        raise ValueError(f"invalid fiber_status {fiber_status!r}")
    supabase = get_supabase_client()
    result = (
        supabase.table(TABLE_LOCATIONS)
        .update({"fiber_status": fiber_status})
        .eq("id", location_id)
        .execute()
    )
    updated = bool(result.data)
    log.info("fiber_status_updated", location_id=location_id, fiber_status=fiber_status, updated=updated)
    return updated
