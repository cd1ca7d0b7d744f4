"""
ingest/parser.py — CSV text → header-keyed row records.

The first non-blank line is the header. Every following non-blank record is
either a CsvRow (field count matches the header) or a MalformedRow (it does
not). Malformed rows are data, not exceptions: one bad line never stops the
rest of the file from being read.

Every physical line is one record. Quoted fields may hold commas and doubled
quotes (""), and spaces before an opening quote are ignored. A quote left
open runs to the end of its own line only, so that line comes out malformed
and parsing resumes on the next one. Line numbers are 1-based.

Usage:
    from fibertrack_pipeline.ingest.parser import CsvRowReader

    reader = CsvRowReader(text)          # raises CsvFormatError on a bad header
    for item in reader:                  # lazy; iterate again to re-scan
        if isinstance(item, MalformedRow):
            print(item.message)
        else:
            print(item.line, item.values["address"])
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from fibertrack_pipeline.errors import CsvFormatError
from fibertrack_shared.constants import CSV_HEADER_ALIASES, REQUIRED_CSV_COLUMNS

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CsvRow:
    """One well-formed data record: trimmed header name → trimmed value."""

    line: int
    values: dict[str, str]

    def get(self, column: str) -> str:
        return self.values.get(column, "")


@dataclass(frozen=True)
class MalformedRow:
    """A line whose field count differs from the header's, or that csv could not read."""

    line: int
    expected: int
    found: int
    detail: str | None = None

    @property
    def message(self) -> str:
        if self.detail:
            return f"Row {self.line}: unreadable record ({self.detail})"
        return f"Row {self.line}: expected {self.expected} fields, found {self.found}"


ParsedRow = CsvRow | MalformedRow


def normalize_header(name: str) -> str:
    """Convert 'Asset Type' / 'asset-type' / ' LAT ' to canonical snake_case names."""
    key = re.sub(r"[\s\-]+", "_", name.strip().lower())
    return CSV_HEADER_ALIASES.get(key, key)


_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _split_line(line: str) -> list[str]:
    return next(csv.reader([line], skipinitialspace=True), [])


def _is_blank(fields: list[str]) -> bool:
    return not fields or (len(fields) == 1 and not fields[0].strip())


class CsvRowReader:
    """
    Lazy, restartable reader over a CSV document held in memory.

    The header is read and checked on construction so that a file without a
    usable header fails before anything downstream runs. Iteration re-scans
    the text from the start each time, so two passes always yield equal rows.
    """

    def __init__(
        self,
        text: str,
        *,
        required_columns: tuple[str, ...] = REQUIRED_CSV_COLUMNS,
    ) -> None:
        self._text = text.lstrip("\ufeff")
        self.header, self.header_line = self._read_header()

        missing = [c for c in required_columns if c not in self.header]
        if missing:
            raise CsvFormatError(
                f"CSV header is missing required column(s): {', '.join(missing)}"
            )

        duplicates = sorted({c for c in self.header if self.header.count(c) > 1})
        if duplicates:
            raise CsvFormatError(
                f"CSV header has duplicate column(s): {', '.join(duplicates)}"
            )

    # ------------------------------------------------------------------
    # Records and header
    # ------------------------------------------------------------------

    def _records(self) -> Iterator[tuple[int, list[str] | csv.Error]]:
        """Yield (line, fields) for every non-blank line; fields is the csv.Error if unparseable."""
        for line_no, line in enumerate(_LINE_BREAK.split(self._text), start=1):
            if not line.strip():
                continue
            try:
                fields = _split_line(line)
            except csv.Error as exc:
                yield line_no, exc
                continue
            if _is_blank(fields):
                continue
            yield line_no, fields

    def _read_header(self) -> tuple[list[str], int]:
        for line, fields in self._records():
            if isinstance(fields, csv.Error):
                raise CsvFormatError(f"Unreadable CSV header on line {line}: {fields}")
            return [normalize_header(f) for f in fields], line
        raise CsvFormatError("CSV file is empty: no header row found")

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[ParsedRow]:
        expected = len(self.header)
        records = self._records()
        next(records)  # header

        for line, fields in records:
            if isinstance(fields, csv.Error):
                log.debug("row_unreadable", line=line, error=str(fields))
                yield MalformedRow(line=line, expected=expected, found=0, detail=str(fields))
                continue
            if len(fields) != expected:
                log.debug("row_malformed", line=line, expected=expected, found=len(fields))
                yield MalformedRow(line=line, expected=expected, found=len(fields))
                continue
            yield CsvRow(
                line=line,
                values={col: value.strip() for col, value in zip(self.header, fields)},
            )


def read_csv_file(path: str | Path) -> str:
    """
    Read an uploaded CSV file as text.

    Raises:
        CsvFormatError: If the file cannot be read or decoded.
    """
    file_path = Path(path)
    if file_path.suffix.lower() != ".csv":
        raise CsvFormatError(f"Please upload a CSV file (got {file_path.name!r})")
    try:
        return file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise CsvFormatError(f"Could not read {file_path}: {exc}") from exc
