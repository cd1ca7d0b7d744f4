"""
ingest/linkage.py — Persist locations, link assets to them, submit in batches.

Protocol (all calls strictly sequential):
  1. create_location() for every pair, in input order, keyed by row_key
  2. each asset receives its own location's generated id; an asset whose
     location failed to persist is counted as failed (linkage failure)
  3. linked assets go to insert_assets() in batches of batch_size; a failing
     batch is recorded and the next batch is still attempted

Usage:
    from fibertrack_pipeline.ingest.linkage import link_and_submit

    result = await link_and_submit(conversion.pairs, store, batch_size=50)
    print(result.success, result.failed, result.errors)
"""

from __future__ import annotations

import math
import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from fibertrack_pipeline.errors import StoreError
from fibertrack_pipeline.ingest.converter import RowPair
from fibertrack_shared.constants import CSV_BATCH_SIZE, RunStatus
from fibertrack_shared.models import Asset, Location

log = structlog.get_logger(__name__)


class AssetStore(Protocol):
    """Persistence collaborator used by the ingestion pipeline."""

    async def create_location(self, location: Location) -> Location:
        """Insert one location and return it with its generated id. Raises on failure."""
        ...

    async def insert_assets(self, assets: list[Asset]) -> list[Asset]:
        """Insert a batch of assets and return the rows actually inserted. Raises on failure."""
        ...


@dataclass
class BatchResult:
    """Aggregate outcome of one upload's writes; never reset mid-run."""

    success: int = 0
    failed: int = 0
    linkage_failed: int = 0
    batches_total: int = 0
    batches_failed: int = 0
    errors: list[str] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def status(self) -> RunStatus:
        if self.failed == 0:
            return "success"
        if self.success > 0:
            return "partial_failure"
        return "failure"

    def summary(self, limit: int = 10) -> dict[str, object]:
        """Counts plus the first `limit` error strings, for display."""
        return {
            "status": self.status,
            "success": self.success,
            "failed": self.failed,
            "linkage_failed": self.linkage_failed,
            "errors": self.errors[:limit],
            "errors_omitted": max(len(self.errors) - limit, 0),
        }


# ---------------------------------------------------------------------------
# Stage 1 + 2: locations and linkage
# ---------------------------------------------------------------------------


async def persist_locations(
    pairs: Sequence[RowPair],
    store: AssetStore,
    result: BatchResult,
) -> dict[uuid.UUID, str]:
    """
    Insert each pair's location one at a time, in order.

    Failures are recorded on `result` as linkage failures for the paired asset.

    Returns:
        row_key → generated location id, for locations that persisted.
    """
    location_ids: dict[uuid.UUID, str] = {}

    for pair in pairs:
        try:
            created = await store.create_location(pair.location)
            if not created.id:
                raise StoreError("location insert returned no id")
        except Exception as exc:
            log.warning("location_persist_failed", line=pair.line, error=str(exc))
            result.failed += 1
            result.linkage_failed += 1
            result.errors.append(f"Row {pair.line}: location could not be saved ({exc})")
            continue
        location_ids[pair.row_key] = created.id

    return location_ids


def link_assets(
    pairs: Sequence[RowPair],
    location_ids: dict[uuid.UUID, str],
) -> list[Asset]:
    """Return copies of each asset whose location persisted, with location_id set."""
    return [
        pair.asset.model_copy(update={"location_id": location_ids[pair.row_key]})
        for pair in pairs
        if pair.row_key in location_ids
    ]


# ---------------------------------------------------------------------------
# Stage 3: batched asset submission
# ---------------------------------------------------------------------------


async def submit_assets(
    assets: Sequence[Asset],
    store: AssetStore,
    *,
    batch_size: int = CSV_BATCH_SIZE,
    result: BatchResult | None = None,
) -> BatchResult:
    """
    Insert assets in fixed-size batches, isolating failures per batch.

    Args:
        assets:     Linked assets (location_id set).
        store:      Persistence collaborator.
        batch_size: Rows per insert call.
        result:     Accumulator to add to (a new one if omitted).

    Returns:
        The accumulated BatchResult.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    result = result if result is not None else BatchResult()
    n_batches = math.ceil(len(assets) / batch_size)
    result.batches_total += n_batches

    for batch_idx in range(n_batches):
        start = batch_idx * batch_size
        batch = list(assets[start : start + batch_size])
        label = f"Batch {batch_idx + 1}/{n_batches}"

        try:
            inserted = len(await store.insert_assets(batch))
        except Exception as exc:
            log.error("batch_failed", batch=batch_idx + 1, n_batches=n_batches, error=str(exc))
            result.failed += len(batch)
            result.batches_failed += 1
            result.errors.append(f"{label}: {exc}")
            continue

        result.success += inserted
        shortfall = len(batch) - inserted
        if shortfall > 0:
            log.warning("batch_short", batch=batch_idx + 1, inserted=inserted, expected=len(batch))
            result.failed += shortfall
            result.batches_failed += 1
            result.errors.append(f"{label}: only {inserted} of {len(batch)} assets inserted")
        else:
            log.debug("batch_loaded", batch=batch_idx + 1, n_batches=n_batches, batch_size=len(batch))

    return result


async def link_and_submit(
    pairs: Sequence[RowPair],
    store: AssetStore,
    *,
    batch_size: int = CSV_BATCH_SIZE,
) -> BatchResult:
    """
    Run the full write phase for converted pairs.

    Returns:
        BatchResult where failed = linkage failures + failed asset rows.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    result = BatchResult()
    t0 = time.monotonic()

    location_ids = await persist_locations(pairs, store, result)
    linked = link_assets(pairs, location_ids)
    log.info(
        "assets_linked",
        pairs=len(pairs),
        linked=len(linked),
        linkage_failed=result.linkage_failed,
    )

    await submit_assets(linked, store, batch_size=batch_size, result=result)

    result.duration_ms = int((time.monotonic() - t0) * 1000)
    log.info(
        "submission_complete",
        success=result.success,
        failed=result.failed,
        batches_failed=result.batches_failed,
        duration_ms=result.duration_ms,
        status=result.status,
    )
    return result
