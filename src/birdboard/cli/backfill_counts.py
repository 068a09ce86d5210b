"""CLI command for backfilling daily species counts."""

import asyncio

import click

from birdboard.config import ConfigManager
from birdboard.counts.backfill import BackfillStats, DailyCountBackfill
from birdboard.database.core import DatabaseService, resolve_database_url
from birdboard.station.client import StationClient
from birdboard.system.path_resolver import PathResolver
from birdboard.system.structlog_configurator import configure_structlog


@click.command()
@click.option(
    "--days",
    type=click.IntRange(min=1),
    help="Number of days to backfill (default: window_days from the configuration)",
)
def backfill_counts(days: int | None) -> None:
    """Re-fetch station species totals and rebuild daily counts.

    Examples:
        # Backfill the configured window
        birdboard-backfill

        # Backfill the last 7 days
        birdboard-backfill --days 7
    """
    stats = asyncio.run(_backfill_counts_async(days))
    if stats is None:
        raise SystemExit(1)
    _display_stats(stats)


async def _backfill_counts_async(days: int | None) -> BackfillStats | None:
    """Async implementation of the daily counts backfill."""
    path_resolver = PathResolver()
    config = ConfigManager(path_resolver).load()
    configure_structlog(config)

    if not config.station_id:
        click.echo(
            click.style("Error: station_id must be configured in birdboard.yaml", fg="red"),
            err=True,
        )
        click.echo("Set 'station_id' in the configuration file or BIRDWEATHER_STATION_ID.")
        return None

    db_service = DatabaseService(resolve_database_url(config, path_resolver))
    await db_service.initialize()
    try:
        backfill = DailyCountBackfill(db_service, StationClient(config), config)
        window = config.window_days if days is None else days
        click.echo(f"Backfilling {window} days for station {config.station_id}")
        return await backfill.run(days)
    finally:
        await db_service.dispose()


def _display_stats(stats: BackfillStats) -> None:
    """Display backfill statistics in a formatted way."""
    click.echo("\n" + "=" * 50)
    click.echo(click.style("Backfill Complete!", fg="green", bold=True))
    click.echo("=" * 50)
    click.echo(f"Dates processed: {stats['dates']}")
    click.echo(f"Species tracked: {stats['species']}")
    click.echo(f"Rows upserted: {stats['rows_upserted']}")
    click.echo(f"Rows purged: {stats['purged']}")

    if stats["failed_dates"] > 0:
        click.echo(
            click.style(f"{stats['failed_dates']} dates failed to store", fg="yellow")
        )


def main() -> None:
    """Entry point for the daily counts backfill CLI."""
    backfill_counts()


if __name__ == "__main__":
    main()
