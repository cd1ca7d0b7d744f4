"""
models/locations.py — Pydantic models for the locations table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fibertrack_shared.constants import DEFAULT_FIBER_STATUS, FiberStatus, Region


class Coordinates(BaseModel):
    """Stored as a JSON object {"lat": ..., "lng": ...} on the locations row."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Location(BaseModel):
    """
    Matches the locations table row.

    `id` is None until the row has been inserted; `wave_id` is never set at
    CSV ingestion time.
    """

    id: str | None = None
    address: str = Field(min_length=1)
    region: Region
    coordinates: Coordinates
    wave_id: str | None = None
    fiber_status: FiberStatus = DEFAULT_FIBER_STATUS
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Location":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
            exclude_none=True,
        )
