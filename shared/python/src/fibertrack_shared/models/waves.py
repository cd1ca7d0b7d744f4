"""
models/waves.py — Pydantic model for the waves table.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from fibertrack_shared.constants import (
    DEFAULT_WAVE_STATUS,
    CustomerCohort,
    Region,
    WaveProgressStatus,
)


class Wave(BaseModel):
    """A scheduled migration campaign grouping locations by region and date range."""

    id: str | None = None
    name: str = Field(min_length=1)
    start_date: date
    end_date: date
    region: Region
    customer_cohort: CustomerCohort
    progress_status: WaveProgressStatus = DEFAULT_WAVE_STATUS
    progress_percentage: int = Field(default=0, ge=0, le=100)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _check_date_range(self) -> "Wave":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Wave":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
            exclude_none=True,
        )
