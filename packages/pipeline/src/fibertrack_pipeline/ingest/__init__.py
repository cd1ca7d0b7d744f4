"""
ingest — CSV → Location/Asset ingestion stages.

    parser     CsvRowReader: raw text → CsvRow | MalformedRow
    converter  convert_rows: rows → ConversionResult (pairs + errors)
    linkage    link_and_submit: persist locations, link assets, submit batches
"""

from fibertrack_pipeline.ingest.converter import ConversionResult, RowPair, convert_row, convert_rows
from fibertrack_pipeline.ingest.linkage import AssetStore, BatchResult, link_and_submit, submit_assets
from fibertrack_pipeline.ingest.parser import CsvRow, CsvRowReader, MalformedRow, read_csv_file

__all__ = [
    "CsvRow",
    "CsvRowReader",
    "MalformedRow",
    "read_csv_file",
    "ConversionResult",
    "RowPair",
    "convert_row",
    "convert_rows",
    "AssetStore",
    "BatchResult",
    "link_and_submit",
    "submit_assets",
]
