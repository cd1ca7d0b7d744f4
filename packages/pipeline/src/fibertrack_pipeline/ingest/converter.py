"""
ingest/converter.py — Validate parsed CSV rows and build Location/Asset pairs.

Rules run in a fixed order and the first failure rejects the row with a
single `Row <n>: <reason>` message:

  1. address        non-empty
  2. region         exact, case-sensitive match against VALID_REGIONS
  3. lat / lng      numeric, within [-90, 90] / [-180, 180]
  4. asset_type     one of VALID_ASSET_TYPES
  5. fiber_status   optional, one of VALID_FIBER_STATUSES (default "Pending Feasibility")
  6. asset_status   optional, one of VALID_ASSET_STATUSES (default "pending")
  7. installation_date  optional, ISO YYYY-MM-DD

Each accepted row yields one RowPair: a Location and an Asset that share a
fresh row_key. Persistence later links the asset to its location through
that key rather than through list position.

Usage:
    from fibertrack_pipeline.ingest.converter import convert_rows
    from fibertrack_pipeline.ingest.parser import CsvRowReader

    result = convert_rows(CsvRowReader(text))
    result.locations, result.assets, result.errors
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

import structlog
from pydantic import ValidationError

from fibertrack_pipeline.errors import RowValidationError
from fibertrack_pipeline.ingest.parser import CsvRow, MalformedRow, ParsedRow
from fibertrack_shared.constants import (
    DEFAULT_ASSET_STATUS,
    DEFAULT_FIBER_STATUS,
    VALID_ASSET_STATUSES,
    VALID_ASSET_TYPES,
    VALID_FIBER_STATUSES,
    VALID_REGIONS,
)
from fibertrack_shared.geo import LAT_BOUNDS, LNG_BOUNDS, in_range, parse_coordinate
from fibertrack_shared.models import Asset, Coordinates, Location

log = structlog.get_logger(__name__)

_AXIS_LABELS = {"lat": ("latitude", LAT_BOUNDS), "lng": ("longitude", LNG_BOUNDS)}
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


@dataclass(frozen=True)
class RowPair:
    """A converted row: the location and the asset that belongs to it."""

    row_key: uuid.UUID
    line: int
    location: Location
    asset: Asset


@dataclass
class ConversionResult:
    """Output of one conversion pass, in input row order."""

    pairs: list[RowPair] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    rows_read: int = 0

    @property
    def locations(self) -> list[Location]:
        return [p.location for p in self.pairs]

    @property
    def assets(self) -> list[Asset]:
        return [p.asset for p in self.pairs]

    @property
    def rejected(self) -> int:
        return self.rows_read - len(self.pairs)


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------


def _choice(row: CsvRow, column: str, allowed: tuple[str, ...], default: str | None = None) -> str:
    value = row.get(column)
    if not value and default is not None:
        return default
    if value not in allowed:
        shown = repr(value) if value else "missing value"
        raise RowValidationError(
            row.line,
            f"invalid {column} {shown} (expected one of: {', '.join(allowed)})",
        )
    return value


def _coordinate(row: CsvRow, column: str) -> float:
    label, (low, high) = _AXIS_LABELS[column]
    raw = row.get(column)
    if not raw:
        raise RowValidationError(row.line, f"{label} is required")
    value = parse_coordinate(raw)
    if value is None:
        raise RowValidationError(row.line, f"{label} {raw!r} is not a number")
    if not in_range(column, value):
        raise RowValidationError(
            row.line, f"{label} {value} is out of range [{low:g}, {high:g}]"
        )
    return value


def _installation_date(row: CsvRow) -> date | None:
    raw = row.get("installation_date")
    if not raw:
        return None
    try:
        if not _ISO_DATE.fullmatch(raw):
            raise ValueError(raw)
        return date.fromisoformat(raw)
    except ValueError:
        raise RowValidationError(
            row.line, f"installation_date {raw!r} is not a YYYY-MM-DD date"
        ) from None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def convert_row(row: CsvRow) -> RowPair:
    """
    Validate one parsed row and build its Location/Asset pair.

    Raises:
        RowValidationError: On the first rule the row breaks.
    """
    address = row.get("address")
    if not address:
        raise RowValidationError(row.line, "address is required")

    region = _choice(row, "region", VALID_REGIONS)
    lat = _coordinate(row, "lat")
    lng = _coordinate(row, "lng")
    asset_type = _choice(row, "asset_type", VALID_ASSET_TYPES)
    fiber_status = _choice(row, "fiber_status", VALID_FIBER_STATUSES, DEFAULT_FIBER_STATUS)
    asset_status = _choice(row, "asset_status", VALID_ASSET_STATUSES, DEFAULT_ASSET_STATUS)
    installation_date = _installation_date(row)

    try:
        location = Location(
            address=address,
            region=region,
            coordinates=Coordinates(lat=lat, lng=lng),
            fiber_status=fiber_status,
        )
        asset = Asset(
            type=asset_type,
            status=asset_status,
            installation_date=installation_date,
            technician_id=row.get("technician_id") or None,
        )
    except ValidationError as exc:
        raise RowValidationError(row.line, f"invalid row ({exc.error_count()} errors)") from exc

    return RowPair(row_key=uuid.uuid4(), line=row.line, location=location, asset=asset)


def convert_rows(rows: Iterable[ParsedRow]) -> ConversionResult:
    """
    Convert parsed rows in a single pass, skipping and recording bad ones.

    Args:
        rows: CsvRow / MalformedRow items, e.g. a CsvRowReader.

    Returns:
        ConversionResult with pairs and errors in input order.
    """
    result = ConversionResult()

    for row in rows:
        result.rows_read += 1
        if isinstance(row, MalformedRow):
            result.errors.append(row.message)
            continue
        try:
            result.pairs.append(convert_row(row))
        except RowValidationError as exc:
            log.debug("row_rejected", line=exc.line, reason=exc.reason)
            result.errors.append(str(exc))

    log.info(
        "conversion_complete",
        rows_read=result.rows_read,
        converted=len(result.pairs),
        rejected=result.rejected,
    )
    return result
