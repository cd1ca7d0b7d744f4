"""
pipelines/csv_upload.py — CSV upload pipeline: file → locations + assets.

Stages:
  1. read + parse   (CsvFormatError here aborts before any write)
  2. validate/convert every row, collecting row errors
  3. persist locations, link assets by row key, submit assets in batches

Usage:
    from fibertrack_pipeline.pipelines.csv_upload import run, run_file, run_text

    report = await run_file("sites.csv")
    report = await run_text(csv_text, store=my_store, batch_size=25)
    report = await run_file("sites.csv", dry_run=True)   # no writes
    report = await run(path_or_text)                     # dispatches on the source

    print(report.summary())
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fibertrack_pipeline.ingest.converter import ConversionResult, convert_rows
from fibertrack_pipeline.ingest.linkage import AssetStore, BatchResult, link_and_submit
from fibertrack_pipeline.ingest.parser import CsvRowReader, read_csv_file
from fibertrack_pipeline.utils.logging import get_logger
from fibertrack_shared.config import settings

log = get_logger(__name__, pipeline="csv_upload")


@dataclass
class UploadReport:
    """Everything one upload produced: conversion output and write outcome."""

    conversion: ConversionResult
    result: BatchResult
    dry_run: bool = False

    @property
    def validation_errors(self) -> list[str]:
        return self.conversion.errors

    def summary(self, limit: int | None = None) -> dict[str, object]:
        """
        Aggregate counts plus the first `limit` validation and write errors.

        The full lists stay available on `conversion.errors` / `result.errors`.
        """
        limit = settings.error_summary_limit if limit is None else limit
        return {
            "rows_read": self.conversion.rows_read,
            "rows_converted": len(self.conversion.pairs),
            "rows_rejected": self.conversion.rejected,
            "validation_errors": self.conversion.errors[:limit],
            "dry_run": self.dry_run,
            **self.result.summary(limit),
        }


async def run_text(
    text: str,
    *,
    store: AssetStore | None = None,
    batch_size: int | None = None,
    dry_run: bool = False,
) -> UploadReport:
    """
    Run the upload pipeline on CSV text.

    Args:
        text:       Raw CSV content (header row first).
        store:      Persistence collaborator (default: SupabaseStore()).
        batch_size: Assets per insert (default: settings.csv_batch_size).
        dry_run:    Validate and convert only; report would-be counts.

    Returns:
        UploadReport.

    Raises:
        CsvFormatError: If the text has no usable header.
        ValueError:     If batch_size is below 1.
    """
    batch_size = batch_size if batch_size is not None else settings.csv_batch_size
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    reader = CsvRowReader(text)
    log.info("upload_start", columns=reader.header, batch_size=batch_size, dry_run=dry_run)

    conversion = convert_rows(reader)

    if dry_run:
        result = BatchResult(success=len(conversion.pairs))
        log.info("upload_dry_run", would_insert=result.success, rejected=conversion.rejected)
        return UploadReport(conversion=conversion, result=result, dry_run=True)

    if store is None:
        from fibertrack_pipeline.loaders.supabase_store import SupabaseStore

        store = SupabaseStore()

    result = await link_and_submit(conversion.pairs, store, batch_size=batch_size)

    log.info(
        "upload_complete",
        rows_read=conversion.rows_read,
        rejected=conversion.rejected,
        success=result.success,
        failed=result.failed,
        status=result.status,
    )
    return UploadReport(conversion=conversion, result=result)


async def run_file(
    path: str | Path,
    *,
    store: AssetStore | None = None,
    batch_size: int | None = None,
    dry_run: bool = False,
) -> UploadReport:
    """Read a .csv file and run the upload pipeline on its contents."""
    text = read_csv_file(path)
    return await run_text(text, store=store, batch_size=batch_size, dry_run=dry_run)


async def run(
    source: str | Path,
    *,
    store: AssetStore | None = None,
    batch_size: int | None = None,
    dry_run: bool = False,
) -> UploadReport:
    """
    Run the upload pipeline on a file path or on raw CSV text.

    A Path, or a single-line string ending in ".csv", is read as a file;
    any other string is treated as CSV content.
    """
    if isinstance(source, Path) or (
        "\n" not in source and source.strip().lower().endswith(".csv")
    ):
        return await run_file(source, store=store, batch_size=batch_size, dry_run=dry_run)
    return await run_text(source, store=store, batch_size=batch_size, dry_run=dry_run)
