"""Asset data service."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from fibertrack_pipeline.ingest.linkage import BatchResult, submit_assets
from fibertrack_pipeline.loaders.supabase_store import SupabaseStore
from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.config import settings
from fibertrack_shared.constants import TABLE_ASSETS
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import Asset

log = structlog.get_logger(__name__)


@with_retry_sync()
def fetch_assets() -> list[Asset]:
    """All assets, newest first."""
    supabase = get_supabase_client()
    result = (
        supabase.table(TABLE_ASSETS)
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    return [Asset.from_db_row(row) for row in result.data or []]


def create_asset(asset: Asset) -> Asset | None:
    supabase = get_supabase_client()
    result = supabase.table(TABLE_ASSETS).insert(asset.to_insert_dict()).execute()
    if not result.data:
        log.warning("asset_create_empty", type=asset.type)
        return None
    return Asset.from_db_row(result.data[0])


def update_asset(asset_id: str, **updates: Any) -> Asset | None:
    """
    Apply a partial update to one asset.

    Values are validated against the Asset model before anything is sent.
    """
    unknown = set(updates) - set(Asset.model_fields)
    if unknown:
        raise ValueError(f"unknown asset field(s): {', '.join(sorted(unknown))}")

    supabase = get_supabase_client()
    current = supabase.table(TABLE_ASSETS).select("*").eq("id", asset_id).limit(1).execute()
    if not current.data:
        return None

    merged = Asset.model_validate({**current.data[0], **updates})
    payload = merged.model_dump(mode="json", include=set(updates))
    result = supabase.table(TABLE_ASSETS).update(payload).eq("id", asset_id).execute()
    return Asset.from_db_row(result.data[0]) if result.data else None


async def bulk_create_assets(
    assets: Sequence[Asset],
    *,
    batch_size: int | None = None,
) -> BatchResult:
    """Insert already-linked assets in batches (default settings.csv_batch_size)."""
    store = SupabaseStore(get_supabase_client())
    return await submit_assets(
        assets,
        store,
        batch_size=batch_size if batch_size is not None else settings.csv_batch_size,
    )
