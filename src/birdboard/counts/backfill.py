"""Backfill of the daily_counts table from the station species endpoint."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import TypedDict

from sqlalchemy.exc import SQLAlchemyError

from birdboard.config.models import BirdboardConfig
from birdboard.counts.aggregation import window_dates
from birdboard.counts.reconciler import Snapshot, reconcile
from birdboard.counts.store import DailyCountStore
from birdboard.database.core import DatabaseService
from birdboard.station.client import StationClient

logger = logging.getLogger(__name__)


class BackfillStats(TypedDict):
    """Outcome of one backfill run."""

    dates: int
    species: int
    rows_upserted: int
    failed_dates: int
    purged: int
    skipped: bool


class DailyCountBackfill:
    """Re-fetch and re-derive stored daily rows for the trailing window.

    Fetches run strictly one after another. Purge and per-date upsert failures
    are logged and the run carries on, so one bad date never aborts the rest.
    """

    def __init__(
        self,
        database_service: DatabaseService,
        station_client: StationClient,
        config: BirdboardConfig,
        today: Callable[[], date] | None = None,
    ):
        self.database_service = database_service
        self.station_client = station_client
        self.config = config
        self._today = today or (lambda: datetime.now(config.tzinfo).date())

    async def run(self, days: int | None = None) -> BackfillStats:
        """Run a full backfill.

        Args:
            days: Window length; defaults to ``config.window_days``.

        Returns:
            Statistics about the run.
        """
        if days is None:
            days = self.config.window_days
        stats = BackfillStats(
            dates=0, species=0, rows_upserted=0, failed_dates=0, purged=0, skipped=False
        )

        if not self.config.station_id:
            logger.error("No station_id configured; skipping daily_counts backfill")
            stats["skipped"] = True
            return stats

        today = self._today()
        cutoff = today - timedelta(days=days)
        dates = window_dates(today, days)

        async with self.database_service.get_async_db() as session:
            store = DailyCountStore(session)

            try:
                stats["purged"] = await store.purge_older_than(cutoff)
                logger.info("Purged %d daily_counts rows older than %s", stats["purged"], cutoff)
            except SQLAlchemyError as e:
                logger.error("Error purging old daily_counts: %s", e)

            if dates:
                logger.info(
                    "Starting backfill for %d days (%s through %s)", days, dates[0], dates[-1]
                )
            snapshots: list[tuple[date, Snapshot]] = []
            for since in dates:
                snapshots.append((since, await self.station_client.fetch_cumulative_totals(since)))

            rows_by_date = reconcile(snapshots)
            stats["dates"] = len(rows_by_date)
            stats["species"] = len(rows_by_date[dates[0]]) if rows_by_date else 0

            for day, rows in rows_by_date.items():
                if not rows:
                    continue
                try:
                    stats["rows_upserted"] += await store.upsert_rows(rows)
                    logger.info("Upserted %d records for %s", len(rows), day)
                except SQLAlchemyError as e:
                    stats["failed_dates"] += 1
                    logger.error("Error upserting %s: %s", day, e)

        logger.info(
            "daily_counts backfill complete: %d rows over %d dates (%d failed)",
            stats["rows_upserted"],
            stats["dates"],
            stats["failed_dates"],
        )
        return stats
