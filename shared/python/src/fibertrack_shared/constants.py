"""
constants.py — shared constants used across the pipeline and service layer.

Every enumerated backend value (regions, statuses, cohorts) is declared once
here as a typed Literal, with the matching tuple of allowed strings derived
from it so runtime checks and type hints cannot drift apart.
"""

from __future__ import annotations

from typing import Final, Literal, get_args

# ---------------------------------------------------------------------------
# Closed value sets (mirror the backend enum types)
# ---------------------------------------------------------------------------
Region = Literal["Vancouver Island", "Lower Mainland", "Interior", "North"]
AssetType = Literal["copper", "fiber", "ONT"]
AssetStatus = Literal["active", "pending", "completed", "failed"]
FiberStatus = Literal["Fiber Ready", "Pending Feasibility", "Copper Only"]
CustomerCohort = Literal["Hospitals", "Government", "Enterprise"]
WaveProgressStatus = Literal["Planning", "In Progress", "Completed", "On Hold"]
WorkOrderStatus = Literal["Assigned", "In Progress", "Completed", "Failed"]
ConsentStatus = Literal["Consented", "Pending", "Declined"]
RunStatus = Literal["success", "partial_failure", "failure"]

VALID_REGIONS: Final[tuple[str, ...]] = get_args(Region)
VALID_ASSET_TYPES: Final[tuple[str, ...]] = get_args(AssetType)
VALID_ASSET_STATUSES: Final[tuple[str, ...]] = get_args(AssetStatus)
VALID_FIBER_STATUSES: Final[tuple[str, ...]] = get_args(FiberStatus)
VALID_CUSTOMER_COHORTS: Final[tuple[str, ...]] = get_args(CustomerCohort)
VALID_WAVE_STATUSES: Final[tuple[str, ...]] = get_args(WaveProgressStatus)
VALID_WORK_ORDER_STATUSES: Final[tuple[str, ...]] = get_args(WorkOrderStatus)
VALID_CONSENT_STATUSES: Final[tuple[str, ...]] = get_args(ConsentStatus)

# ---------------------------------------------------------------------------
# Defaults applied when optional CSV columns are blank
# ---------------------------------------------------------------------------
DEFAULT_FIBER_STATUS: Final[FiberStatus] = "Pending Feasibility"
DEFAULT_ASSET_STATUS: Final[AssetStatus] = "pending"
DEFAULT_WAVE_STATUS: Final[WaveProgressStatus] = "Planning"

# ---------------------------------------------------------------------------
# CSV upload
# ---------------------------------------------------------------------------
CSV_BATCH_SIZE: Final[int] = 50

REQUIRED_CSV_COLUMNS: Final[tuple[str, ...]] = (
    "address",
    "region",
    "lat",
    "lng",
    "asset_type",
)
OPTIONAL_CSV_COLUMNS: Final[tuple[str, ...]] = (
    "fiber_status",
    "asset_status",
    "installation_date",
    "technician_id",
)

# Normalized header -> canonical column name
CSV_HEADER_ALIASES: Final[dict[str, str]] = {
    "latitude": "lat",
    "longitude": "lng",
    "lon": "lng",
    "long": "lng",
    "type": "asset_type",
    "status": "asset_status",
    "street_address": "address",
    "technician": "technician_id",
    "installed_on": "installation_date",
}

# ---------------------------------------------------------------------------
# Backend table names
# ---------------------------------------------------------------------------
TABLE_ASSETS: Final[str] = "assets"
TABLE_LOCATIONS: Final[str] = "locations"
TABLE_WAVES: Final[str] = "waves"
TABLE_TECHNICIANS: Final[str] = "technicians"
TABLE_WORK_ORDERS: Final[str] = "work_orders"
TABLE_CUSTOMERS: Final[str] = "customers"
TABLE_CONSENT_LOGS: Final[str] = "consent_logs"
