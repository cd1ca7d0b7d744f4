"""
tests/test_analytics/test_kpis.py — Unit tests for dashboard KPI arithmetic.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from fibertrack_pipeline.analytics.kpis import (
    dashboard_kpis,
    fiber_status_counts,
    locations_per_wave,
    wave_progress_percentage,
)
from fibertrack_shared.models import Asset, Coordinates, Location, WorkOrder

T0 = datetime(2024, 3, 1, 8, 0)


def _wo(status: str, hours: float | None = None) -> WorkOrder:
    end = T0 + timedelta(hours=hours) if hours is not None else None
    return WorkOrder(
        location_id="loc-1",
        technician_id="t-1",
        status=status,
        start_time=T0 if hours is not None else None,
        end_time=end,
    )


def _loc(region: str, fiber_status: str, wave_id: str | None = None) -> Location:
    return Location(
        address="1 Main St",
        region=region,
        coordinates=Coordinates(lat=50.0, lng=-120.0),
        fiber_status=fiber_status,
        wave_id=wave_id,
    )


class TestWaveProgress:
    def test_empty_is_zero(self):
        assert wave_progress_percentage([]) == 0

    def test_all_completed(self):
        assert wave_progress_percentage(["Completed", "Completed"]) == 100

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            (["Completed", "Assigned"], 50),
            (["Completed", "Assigned", "Failed"], 33),
            (["Completed", "Completed", "Failed"], 67),
            (["Completed"] + ["Assigned"] * 7, 13),
        ],
    )
    def test_rounded_half_up(self, statuses, expected):
        assert wave_progress_percentage(statuses) == expected

    def test_accepts_generator(self):
        assert wave_progress_percentage(s for s in ["Completed", "Failed"]) == 50


class TestDashboardKpis:
    def test_counts_and_average(self):
        assets = [
            Asset(type="fiber", status="completed"),
            Asset(type="ONT", status="completed"),
            Asset(type="copper", status="pending"),
        ]
        work_orders = [
            _wo("Completed", 2.0),
            _wo("Completed", 3.0),
            _wo("Completed"),          # no times: excluded from the average
            _wo("In Progress"),
            _wo("In Progress"),
            _wo("Failed", 9.0),        # not Completed: excluded from the average
        ]

        kpis = dashboard_kpis(assets, work_orders)

        assert kpis.completed_migrations == 2
        assert kpis.in_progress == 2
        assert kpis.failed_installs == 1
        assert kpis.average_install_hours == 2.5

    def test_average_rounded_to_tenth(self):
        kpis = dashboard_kpis([], [_wo("Completed", 1.0), _wo("Completed", 1.25), _wo("Completed", 2.0)])
        assert kpis.average_install_hours == 1.4

    def test_no_data(self):
        kpis = dashboard_kpis([], [])
        assert kpis.as_dict() == {
            "completed_migrations": 0,
            "in_progress": 0,
            "failed_installs": 0,
            "average_install_hours": None,
        }


class TestLocationCounts:
    def test_every_status_present(self):
        counts = fiber_status_counts([_loc("North", "Fiber Ready"), _loc("North", "Fiber Ready")])
        assert counts == {"Fiber Ready": 2, "Pending Feasibility": 0, "Copper Only": 0}

    def test_region_filter(self):
        locations = [
            _loc("North", "Fiber Ready"),
            _loc("Interior", "Copper Only"),
            _loc("Interior", "Fiber Ready"),
        ]
        counts = fiber_status_counts(locations, region="Interior")
        assert counts == {"Fiber Ready": 1, "Pending Feasibility": 0, "Copper Only": 1}

    def test_locations_per_wave_skips_unassigned(self):
        locations = [
            _loc("North", "Fiber Ready", "w-1"),
            _loc("North", "Fiber Ready", "w-1"),
            _loc("North", "Fiber Ready", "w-2"),
            _loc("North", "Fiber Ready"),
        ]
        assert locations_per_wave(locations) == {"w-1": 2, "w-2": 1}

    def test_empty(self):
        assert locations_per_wave([]) == {}
        assert fiber_status_counts([]) == {"Fiber Ready": 0, "Pending Feasibility": 0, "Copper Only": 0}
