"""
loaders/supabase_store.py — Supabase implementation of the ingestion AssetStore.

The CSV upload pipeline funnels its writes through this module. The store:
  - Inserts one location per call and returns it with the generated id
  - Inserts a batch of assets per call and returns the inserted rows
  - Raises on any backend error so the caller can isolate the failure

Batching, linkage and error accounting live in ingest/linkage.py; this class
only translates models to rows and back.

Usage:
    from fibertrack_pipeline.loaders.supabase_store import SupabaseStore

    store = SupabaseStore()                      # service-role client
    created = await store.create_location(location)
    inserted = await store.insert_assets(assets)
"""

from __future__ import annotations

from typing import Any

import structlog
from supabase import Client

from fibertrack_pipeline.errors import StoreError
from fibertrack_shared.constants import TABLE_ASSETS, TABLE_LOCATIONS
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import Asset, Location

log = structlog.get_logger(__name__)


class SupabaseStore:
    """
    Handles ingestion writes to Supabase.

    Uses the service role key by default so RLS is bypassed for bulk writes.
    Inserts are not retried: a timed-out insert may still have landed.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client if client is not None else get_supabase_client(service_role=True)

    async def create_location(self, location: Location) -> Location:
        """
        Insert a location row.

        Returns:
            The persisted Location (with id).

        Raises:
            StoreError: If the insert returns no row.
            Exception:  Any backend error from the Supabase client.
        """
        result = (
            self._client.table(TABLE_LOCATIONS)
            .insert(location.to_insert_dict())
            .execute()
        )
        rows: list[dict[str, Any]] = result.data or []
        if not rows:
            raise StoreError(f"insert into {TABLE_LOCATIONS} returned no rows")
        created = Location.from_db_row(rows[0])
        log.debug("location_created", location_id=created.id, region=created.region)
        return created

    async def insert_assets(self, assets: list[Asset]) -> list[Asset]:
        """
        Insert a batch of asset rows in a single request.

        Returns:
            The inserted assets as returned by the backend.
        """
        if not assets:
            return []
        if any(not a.is_linked for a in assets):
            raise StoreError("every asset must reference a persisted location")

        result = (
            self._client.table(TABLE_ASSETS)
            .insert([a.to_insert_dict() for a in assets])
            .execute()
        )
        rows: list[dict[str, Any]] = result.data or []
        log.debug("assets_inserted", requested=len(assets), inserted=len(rows))
        return [Asset.from_db_row(row) for row in rows]
