"""CLI command for fetching raw station detections."""

import asyncio

import click
from sqlalchemy.exc import SQLAlchemyError

from birdboard.config import ConfigManager
from birdboard.database.core import DatabaseService, resolve_database_url
from birdboard.detections.ingest import DetectionIngestService
from birdboard.station.client import StationClient
from birdboard.system.path_resolver import PathResolver
from birdboard.system.structlog_configurator import configure_structlog


@click.command()
@click.option(
    "--days",
    type=click.IntRange(min=1),
    help="Number of days to fetch, today included (default: detections_days)",
)
def fetch_detections(days: int | None) -> None:
    """Replace stored raw detections with a fresh copy from the station."""
    try:
        stored = asyncio.run(_fetch_detections_async(days))
    except (ValueError, SQLAlchemyError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1) from e

    click.echo(click.style(f"Stored {stored} detections", fg="green", bold=True))


async def _fetch_detections_async(days: int | None) -> int:
    """Async implementation of the raw detection fetch."""
    path_resolver = PathResolver()
    config = ConfigManager(path_resolver).load()
    configure_structlog(config)

    db_service = DatabaseService(resolve_database_url(config, path_resolver))
    await db_service.initialize()
    try:
        service = DetectionIngestService(db_service, StationClient(config), config)
        window = config.detections_days if days is None else days
        click.echo(f"Fetching {window} days of detections...")
        return await service.fetch_and_store(days)
    finally:
        await db_service.dispose()


def main() -> None:
    """Entry point for the raw detection fetch CLI."""
    fetch_detections()


if __name__ == "__main__":
    main()
