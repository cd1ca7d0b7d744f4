"""
tests/conftest.py — Shared pytest fixtures for the fibertrack test suite.

Provides:
  fixture_path()          — resolves paths to tests/fixtures/
  mock_supabase_client()  — MagicMock of the Supabase client (prevents real DB calls)
  fake_store()            — in-memory AssetStore with switchable failures
  sample_csv_text()       — contents of fixtures/sites_sample.csv
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fibertrack_shared.models import Asset, Location

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_csv_text() -> str:
    return (FIXTURES_DIR / "sites_sample.csv").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Supabase client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """
    A MagicMock that simulates the supabase.Client interface.

    Every .table(...) query chain ends in .execute() returning empty data by
    default. Override in individual tests, e.g.
    mock_supabase_client.table.return_value.insert.return_value.execute.return_value = ...
    """
    client = MagicMock()

    default_result = MagicMock()
    default_result.data = []
    default_result.count = 0

    table = client.table.return_value
    for chain in (
        table.select.return_value,
        table.insert.return_value,
        table.update.return_value,
    ):
        chain.execute.return_value = default_result
        chain.eq.return_value = chain
        chain.in_.return_value = chain
        chain.order.return_value = chain
        chain.limit.return_value = chain

    return client


# ---------------------------------------------------------------------------
# In-memory persistence collaborator
# ---------------------------------------------------------------------------

class FakeStore:
    """
    AssetStore double that records every call.

    fail_addresses: location addresses whose insert raises
    fail_batches:   1-based insert_assets call numbers that raise
    short_batches:  call number → how many rows to report as inserted
    """

    def __init__(
        self,
        *,
        fail_addresses: set[str] | None = None,
        fail_batches: set[int] | None = None,
        short_batches: dict[int, int] | None = None,
    ) -> None:
        self.fail_addresses = fail_addresses or set()
        self.fail_batches = fail_batches or set()
        self.short_batches = short_batches or {}
        self.locations: list[Location] = []
        self.batches: list[list[Asset]] = []
        self.location_calls = 0

    async def create_location(self, location: Location) -> Location:
        self.location_calls += 1
        if location.address in self.fail_addresses:
            raise RuntimeError(f"insert rejected for {location.address}")
        created = location.model_copy(update={"id": f"loc-{len(self.locations) + 1}"})
        self.locations.append(created)
        return created

    async def insert_assets(self, assets: list[Asset]) -> list[Asset]:
        self.batches.append(list(assets))
        call = len(self.batches)
        if call in self.fail_batches:
            raise RuntimeError(f"connection reset during batch {call}")
        inserted = assets[: self.short_batches.get(call, len(assets))]
        return [a.model_copy(update={"id": f"asset-{call}-{i}"}) for i, a in enumerate(inserted)]

    @property
    def inserted_assets(self) -> list[Asset]:
        return [a for i, batch in enumerate(self.batches, 1) if i not in self.fail_batches for a in batch]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def make_store():
    """Factory for FakeStore instances with configured failures."""
    return FakeStore
