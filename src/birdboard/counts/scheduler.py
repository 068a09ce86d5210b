"""Nightly scheduling of the daily counts backfill."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, tzinfo

from birdboard.counts.backfill import DailyCountBackfill

logger = logging.getLogger(__name__)


def seconds_until_next_midnight(now: datetime) -> float:
    """Seconds from ``now`` to the next local midnight in ``now``'s timezone."""
    tz = now.tzinfo
    next_day = (now + timedelta(days=1)).date()
    midnight = datetime(next_day.year, next_day.month, next_day.day, tzinfo=tz)
    # Compare absolute instants so DST transitions are accounted for
    return max(0.0, midnight.timestamp() - now.timestamp())


class BackfillScheduler:
    """Runs the backfill once at startup and then every local midnight."""

    def __init__(
        self,
        backfill: DailyCountBackfill,
        timezone: tzinfo,
        run_on_start: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.backfill = backfill
        self.timezone = timezone
        self.run_on_start = run_on_start
        self._clock = clock or (lambda: datetime.now(self.timezone))
        self.is_running = False
        self.last_run: datetime | None = None
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the background loop."""
        if self.is_running:
            return

        logger.info("Starting daily counts scheduler...")
        self.is_running = True
        self._task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        """Stop the background loop."""
        if not self.is_running:
            return

        logger.info("Stopping daily counts scheduler...")
        self.is_running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run_once(self) -> None:
        """Run a single backfill, logging rather than raising on failure."""
        try:
            await self.backfill.run()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Daily counts backfill failed: %s", e, exc_info=True)
        finally:
            self.last_run = self._clock()

    async def _run_loop(self) -> None:
        if self.run_on_start:
            await self.run_once()

        while self.is_running:
            delay = seconds_until_next_midnight(self._clock())
            logger.info("Next daily counts backfill in %.0f seconds", delay)
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break
            await self.run_once()
