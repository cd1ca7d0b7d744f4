"""
analytics/kpis.py — Dashboard KPI arithmetic over fetched records.

All functions are pure: they take already-fetched models and return numbers,
so the dashboard, the CLI and the wave-progress service share one definition
of each KPI.

Usage:
    from fibertrack_pipeline.analytics.kpis import dashboard_kpis, fiber_status_counts

    kpis = dashboard_kpis(assets, work_orders)
    kpis.average_install_hours            # e.g. 3.5, or None
    fiber_status_counts(locations, region="Interior")
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import polars as pl

from fibertrack_shared.constants import VALID_FIBER_STATUSES, Region
from fibertrack_shared.models import Asset, Location, WorkOrder


@dataclass(frozen=True)
class DashboardKpis:
    completed_migrations: int
    in_progress: int
    failed_installs: int
    average_install_hours: float | None

    def as_dict(self) -> dict[str, int | float | None]:
        return {
            "completed_migrations": self.completed_migrations,
            "in_progress": self.in_progress,
            "failed_installs": self.failed_installs,
            "average_install_hours": self.average_install_hours,
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def wave_progress_percentage(statuses: Iterable[str]) -> int:
    """Percentage of work orders with status Completed, rounded half up; 0 if none."""
    series = pl.Series("status", list(statuses), dtype=pl.String)
    if series.is_empty():
        return 0
    completed = int((series == "Completed").sum())
    return _round_half_up(completed * 100 / len(series))


def _work_order_frame(work_orders: Sequence[WorkOrder]) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "status": [wo.status for wo in work_orders],
            "duration_hours": [wo.duration_hours for wo in work_orders],
        },
        schema={"status": pl.String, "duration_hours": pl.Float64},
    )


def dashboard_kpis(assets: Sequence[Asset], work_orders: Sequence[WorkOrder]) -> DashboardKpis:
    """
    Headline dashboard numbers.

    - completed_migrations: assets with status "completed"
    - in_progress / failed_installs: work orders in those states
    - average_install_hours: mean duration of Completed work orders that have
      both start and end times, rounded to 0.1 h; None when there are none
    """
    completed_migrations = sum(1 for a in assets if a.status == "completed")

    wo = _work_order_frame(work_orders)
    status_counts = dict(
        wo.group_by("status").agg(pl.len().alias("n")).iter_rows()
    )

    timed = wo.filter(
        (pl.col("status") == "Completed") & pl.col("duration_hours").is_not_null()
    )
    average = None
    if timed.height:
        average = round(float(timed["duration_hours"].mean()), 1)

    return DashboardKpis(
        completed_migrations=completed_migrations,
        in_progress=status_counts.get("In Progress", 0),
        failed_installs=status_counts.get("Failed", 0),
        average_install_hours=average,
    )


def fiber_status_counts(
    locations: Sequence[Location],
    region: Region | None = None,
) -> dict[str, int]:
    """Locations per fiber status (every status present), optionally for one region."""
    df = pl.DataFrame(
        {
            "region": [loc.region for loc in locations],
            "fiber_status": [loc.fiber_status for loc in locations],
        },
        schema={"region": pl.String, "fiber_status": pl.String},
    )
    if region is not None:
        df = df.filter(pl.col("region") == region)

    counts = dict(df.group_by("fiber_status").agg(pl.len().alias("n")).iter_rows())
    return {status: counts.get(status, 0) for status in VALID_FIBER_STATUSES}


def locations_per_wave(locations: Sequence[Location]) -> dict[str, int]:
    """wave_id → number of locations assigned to it (unassigned locations skipped)."""
    df = pl.DataFrame(
        {"wave_id": [loc.wave_id for loc in locations]},
        schema={"wave_id": pl.String},
    ).drop_nulls()
    return dict(df.group_by("wave_id").agg(pl.len().alias("n")).iter_rows())
