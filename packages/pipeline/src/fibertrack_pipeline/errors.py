"""
errors.py — Exception hierarchy for CSV ingestion.

Only CsvFormatError is allowed to escape the upload pipeline; row-level and
store errors are caught and folded into the accumulated error lists.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for ingestion failures."""


class CsvFormatError(IngestError):
    """The upload cannot be processed at all (unreadable, empty, or no usable header)."""


class RowValidationError(IngestError):
    """A single CSV row failed validation; attributable to its 1-based line number."""

    def __init__(self, line: int, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Row {line}: {reason}")


class StoreError(IngestError):
    """The persistence collaborator returned no usable data for a write."""
