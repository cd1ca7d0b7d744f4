"""
fibertrack_shared.models — Pydantic models matching each backend table.

These models are used by:
- the CSV ingestion pipeline: build validated rows before writing to Supabase
- the service layer: parse query results into typed records

All models provide:
  .from_db_row(row: dict) -> Model
  .to_insert_dict() -> dict
"""

from fibertrack_shared.models.assets import Asset
from fibertrack_shared.models.locations import Coordinates, Location
from fibertrack_shared.models.operations import (
    ConsentLog,
    Customer,
    Technician,
    WorkOrder,
)
from fibertrack_shared.models.waves import Wave

__all__ = [
    "Asset",
    "Coordinates",
    "Location",
    "Wave",
    "Technician",
    "Customer",
    "WorkOrder",
    "ConsentLog",
]
