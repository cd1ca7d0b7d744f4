"""
cli.py — Click CLI entrypoint for fibertrack.

Usage:
    fibertrack upload sites.csv
    fibertrack upload sites.csv --dry-run --show-errors 20
    fibertrack kpis
    fibertrack wave-progress 6f1c...
"""

from __future__ import annotations

import asyncio

import click
import structlog

from fibertrack_pipeline.errors import CsvFormatError
from fibertrack_pipeline.utils.logging import configure_logging
from fibertrack_shared.config import settings

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["json", "console"]),
    help="Log renderer",
)
def main(log_level: str, log_format: str) -> None:
    """fibertrack — fiber-migration asset tracking tools."""
    configure_logging(log_level=log_level, log_format=log_format)


@main.command()
@click.argument("csv_file", type=click.Path(dir_okay=False))
@click.option("--batch-size", type=click.IntRange(min=1), default=None, help="Assets per insert")
@click.option("--dry-run", is_flag=True, help="Validate only, write nothing")
@click.option(
    "--show-errors",
    type=click.IntRange(min=0),
    default=settings.error_summary_limit,
    show_default=True,
    help="How many error lines to print",
)
def upload(csv_file: str, batch_size: int | None, dry_run: bool, show_errors: int) -> None:
    """Upload a CSV of locations and assets."""
    from fibertrack_pipeline.pipelines.csv_upload import run_file

    try:
        report = asyncio.run(run_file(csv_file, batch_size=batch_size, dry_run=dry_run))
    except CsvFormatError as exc:
        log.error("upload_aborted", file=csv_file, error=str(exc))
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    summary = report.summary(show_errors)
    verb = "Would upload" if dry_run else "Uploaded"
    click.echo(
        f"{verb} {summary['success']} assets "
        f"({summary['failed']} failed, {summary['rows_rejected']} rows rejected)"
    )

    for line in summary["validation_errors"]:
        click.echo(f"  ✗ {line}")
    for line in summary["errors"]:
        click.echo(f"  ✗ {line}")

    hidden = max(len(report.validation_errors) - show_errors, 0) + summary["errors_omitted"]
    if hidden:
        click.echo(f"  … {hidden} more error(s)")


@main.command()
def kpis() -> None:
    """Print dashboard KPIs."""
    from fibertrack_pipeline.analytics.kpis import dashboard_kpis
    from fibertrack_pipeline.services.assets import fetch_assets
    from fibertrack_pipeline.services.work_orders import fetch_work_orders

    result = dashboard_kpis(fetch_assets(), fetch_work_orders())
    avg = result.average_install_hours
    click.echo(f"Migrations completed:   {result.completed_migrations}")
    click.echo(f"Work orders in progress: {result.in_progress}")
    click.echo(f"Failed installs:        {result.failed_installs}")
    click.echo(f"Average time / install: {f'{avg:.1f} hours' if avg is not None else 'N/A'}")


@main.command("wave-progress")
@click.argument("wave_id")
def wave_progress(wave_id: str) -> None:
    """Recompute and store a wave's progress percentage."""
    from fibertrack_pipeline.services.waves import update_wave_progress

    progress = update_wave_progress(wave_id)
    click.echo(f"Wave {wave_id}: {progress}%")


if __name__ == "__main__":
    main()
