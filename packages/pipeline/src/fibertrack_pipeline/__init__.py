"""
fibertrack_pipeline — CSV ingestion and operations tooling for fibertrack.

Architecture:
  ingest/      — CSV parser, row validator/converter, location/asset linkage
  loaders/     — Supabase implementation of the ingestion persistence collaborator
  services/    — thin per-table CRUD functions used by the dashboard
  analytics/   — KPI arithmetic (polars)
  pipelines/   — the CSV upload orchestrator wiring ingest -> loaders
  utils/       — structlog configuration, tenacity retry decorator

Quick start:
    import asyncio
    from fibertrack_pipeline.pipelines.csv_upload import run_file
    report = asyncio.run(run_file("locations.csv", dry_run=True))
    print(report.summary())

CLI:
    fibertrack upload locations.csv --dry-run
    fibertrack kpis
    fibertrack wave-progress <wave-id>
"""

__version__ = "0.1.0"
