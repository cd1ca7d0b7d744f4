"""Technician data service."""

from __future__ import annotations

from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.constants import TABLE_TECHNICIANS
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import Technician


@with_retry_sync()
def fetch_technicians() -> list[Technician]:
    supabase = get_supabase_client()
    result = supabase.table(TABLE_TECHNICIANS).select("*").order("name").execute()
    return [Technician.from_db_row(row) for row in result.data or []]
