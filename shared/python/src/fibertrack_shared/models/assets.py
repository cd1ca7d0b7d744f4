"""
models/assets.py — Pydantic model for the assets table.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from fibertrack_shared.constants import DEFAULT_ASSET_STATUS, AssetStatus, AssetType


class Asset(BaseModel):
    """
    Matches the assets table row.

    An asset must reference a persisted location before it is inserted;
    `location_id` stays None until the ingestion linkage step fills it in.
    """

    id: str | None = None
    type: AssetType
    location_id: str | None = None
    status: AssetStatus = DEFAULT_ASSET_STATUS
    installation_date: date | None = None
    technician_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Asset":
        return cls(**row)

    @property
    def is_linked(self) -> bool:
        return bool(self.location_id)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
            exclude_none=True,
        )
