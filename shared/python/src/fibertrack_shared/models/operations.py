"""
models/operations.py — Pydantic models for technicians, customers,
work_orders and consent_logs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fibertrack_shared.constants import ConsentStatus, WorkOrderStatus


class Technician(BaseModel):
    """Matches the technicians table row."""

    id: str | None = None
    name: str
    phone: str
    assigned_jobs: int = Field(default=0, ge=0)

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Technician":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude={"id"}, exclude_none=True)


class Customer(BaseModel):
    """Matches the customers table row."""

    id: str | None = None
    name: str
    phone: str
    address: str
    consent_status: ConsentStatus = "Pending"

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Customer":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude={"id"}, exclude_none=True)


class WorkOrder(BaseModel):
    """Matches the work_orders table row."""

    id: str | None = None
    location_id: str
    technician_id: str
    status: WorkOrderStatus = "Assigned"
    start_time: datetime | None = None
    end_time: datetime | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "WorkOrder":
        return cls(**row)

    @property
    def duration_hours(self) -> float | None:
        """Elapsed hours between start and end, or None if either is missing."""
        if self.start_time is None or self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() / 3600

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)


class ConsentLog(BaseModel):
    """Matches the consent_logs table row (audit trail of consent changes)."""

    id: str | None = None
    customer_id: str
    agent_name: str
    status: ConsentStatus
    timestamp: datetime | None = None
    notes: str | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ConsentLog":
        return cls(**row)

    def to_insert_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)
