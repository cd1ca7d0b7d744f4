"""
tests/test_pipelines/test_csv_upload.py — Unit tests for the CSV upload pipeline.

Tests cover:
  - End-to-end run against an in-memory store
  - Dry run (no store calls)
  - Fatal format errors raised before any write
  - Summary truncation and counters
  - run_file on the sample fixture
"""

from __future__ import annotations

import pytest

from fibertrack_pipeline.errors import CsvFormatError
from fibertrack_pipeline.pipelines.csv_upload import run, run_file, run_text

HEADER = "address,region,lat,lng,asset_type"


def _rows(n: int) -> str:
    body = "\n".join(f"{i} Main St,Interior,50.0,-119.0,copper" for i in range(n))
    return f"{HEADER}\n{body}\n"


class TestRunText:
    @pytest.mark.asyncio
    async def test_end_to_end(self, fake_store):
        text = (
            f"{HEADER}\n"
            "123 Main St,Lower Mainland,49.2827,-123.1207,fiber\n"
            ",Interior,50.0,-119.0,copper\n"
            "5 Oak Ave,North,53.9,-122.7,ONT\n"
        )

        report = await run_text(text, store=fake_store)

        assert report.validation_errors == ["Row 3: address is required"]
        assert len(fake_store.locations) == 2
        assert report.result.success == 2
        assert report.result.failed == 0
        assert report.result.status == "success"
        assert report.dry_run is False

    @pytest.mark.asyncio
    async def test_batch_size_passthrough(self, make_store):
        store = make_store(fail_batches={2})

        report = await run_text(_rows(120), store=store, batch_size=50)

        assert [len(b) for b in store.batches] == [50, 50, 20]
        assert report.result.success == 70
        assert report.result.failed == 50
        assert report.result.errors == ["Batch 2/3: connection reset during batch 2"]

    @pytest.mark.asyncio
    async def test_default_batch_size_from_settings(self, fake_store, monkeypatch):
        from fibertrack_pipeline.pipelines import csv_upload

        monkeypatch.setattr(csv_upload.settings, "csv_batch_size", 7)
        await run_text(_rows(10), store=fake_store)
        assert [len(b) for b in fake_store.batches] == [7, 3]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("batch_size", [0, -5])
    async def test_explicit_bad_batch_size_rejected_before_writes(self, fake_store, batch_size):
        with pytest.raises(ValueError, match="batch_size"):
            await run_text(_rows(3), store=fake_store, batch_size=batch_size)
        assert fake_store.location_calls == 0

    @pytest.mark.asyncio
    async def test_run_passes_zero_batch_size_through(self, fake_store):
        with pytest.raises(ValueError, match="batch_size"):
            await run(_rows(3), store=fake_store, batch_size=0)
        assert fake_store.location_calls == 0

    @pytest.mark.asyncio
    async def test_dry_run_makes_no_writes(self, fake_store):
        report = await run_text(_rows(3), store=fake_store, dry_run=True)

        assert fake_store.location_calls == 0
        assert fake_store.batches == []
        assert report.dry_run is True
        assert report.result.success == 3

    @pytest.mark.asyncio
    async def test_missing_required_column_is_fatal(self, fake_store):
        with pytest.raises(CsvFormatError, match="lng"):
            await run_text("address,region,lat,asset_type\nA,North,50,fiber\n", store=fake_store)
        assert fake_store.location_calls == 0

    @pytest.mark.asyncio
    async def test_empty_text_is_fatal(self, fake_store):
        with pytest.raises(CsvFormatError):
            await run_text("", store=fake_store)
        assert fake_store.location_calls == 0

    @pytest.mark.asyncio
    async def test_all_rows_invalid_no_writes(self, fake_store):
        text = f"{HEADER}\nA,Yukon,50,-119,copper\nB,North,95,-119,copper\n"

        report = await run_text(text, store=fake_store)

        assert len(report.validation_errors) == 2
        assert fake_store.location_calls == 0
        assert report.result.success == 0


class TestSummary:
    @pytest.mark.asyncio
    async def test_summary_counts_and_limit(self, fake_store):
        bad = "\n".join(f"{i} Bad St,Yukon,50,-119,copper" for i in range(15))
        text = f"{HEADER}\n1 Good St,North,53.9,-122.7,fiber\n{bad}\n"

        report = await run_text(text, store=fake_store)
        summary = report.summary(limit=3)

        assert summary["rows_read"] == 16
        assert summary["rows_converted"] == 1
        assert summary["rows_rejected"] == 15
        assert len(summary["validation_errors"]) == 3
        assert summary["success"] == 1
        assert summary["status"] == "success"
        assert len(report.validation_errors) == 15

    @pytest.mark.asyncio
    async def test_summary_default_limit(self, fake_store):
        bad = "\n".join(f"{i} Bad St,Yukon,50,-119,copper" for i in range(15))
        report = await run_text(f"{HEADER}\n{bad}\n", store=fake_store)
        assert len(report.summary()["validation_errors"]) == 10


class TestRunFile:
    @pytest.mark.asyncio
    async def test_sample_fixture(self, fixture_path, fake_store):
        report = await run_file(fixture_path / "sites_sample.csv", store=fake_store)

        assert report.conversion.rows_read == 5
        assert report.result.success == 4
        assert len(report.validation_errors) == 1
        assert report.validation_errors[0].startswith("Row 7:")
        addresses = [loc.address for loc in fake_store.locations]
        assert "456 Douglas St, Suite 200" in addresses

    @pytest.mark.asyncio
    async def test_wrong_extension(self, tmp_path, fake_store):
        path = tmp_path / "sites.txt"
        path.write_text(_rows(1))
        with pytest.raises(CsvFormatError):
            await run_file(path, store=fake_store)


class TestRunDispatch:
    @pytest.mark.asyncio
    async def test_path_object(self, fixture_path, fake_store):
        report = await run(fixture_path / "sites_sample.csv", store=fake_store, dry_run=True)
        assert report.result.success == 4

    @pytest.mark.asyncio
    async def test_path_string(self, fixture_path, fake_store):
        report = await run(str(fixture_path / "sites_sample.csv"), store=fake_store)
        assert len(fake_store.locations) == 4
        assert report.result.success == 4

    @pytest.mark.asyncio
    async def test_raw_text(self, fake_store):
        report = await run(_rows(2), store=fake_store)
        assert report.result.success == 2

    @pytest.mark.asyncio
    async def test_header_only_text_is_not_a_path(self, fake_store):
        report = await run(HEADER, store=fake_store)
        assert report.conversion.rows_read == 0
        assert fake_store.location_calls == 0
