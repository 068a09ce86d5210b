"""Fetch raw station detections and replace the stored recent window."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from birdboard.config.models import BirdboardConfig
from birdboard.database.core import DatabaseService
from birdboard.detections.models import Detection
from birdboard.station.client import StationClient
from birdboard.station.models import StationDetection

logger = logging.getLogger(__name__)


class DetectionIngestService:
    """Replaces stored detections for the last N days with a fresh upstream copy.

    Unlike the daily counts backfill, storage errors here are not swallowed.
    """

    def __init__(
        self,
        database_service: DatabaseService,
        station_client: StationClient,
        config: BirdboardConfig,
        clock: Callable[[], datetime] | None = None,
    ):
        self.database_service = database_service
        self.station_client = station_client
        self.config = config
        self._clock = clock or (lambda: datetime.now(config.tzinfo))

    def to_detections(self, raw_events: Sequence[dict[str, Any]]) -> list[Detection]:
        """Validate raw events and build rows; events without a species are skipped."""
        detections = []
        for raw in raw_events:
            try:
                event = StationDetection.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping invalid detection %s: %s", raw.get("id"), e)
                continue

            detections.append(
                Detection(
                    species_code=event.species.id,
                    common_name=event.species.common_name,
                    scientific_name=event.species.scientific_name,
                    image_url=event.species.image_url,
                    thumbnail_url=event.species.thumbnail_url,
                    confidence=event.confidence,
                    detected_at=event.timestamp,
                    is_rare=False,
                    station_id=self.config.station_id,
                )
            )
        return detections

    async def fetch_and_store(self, days: int | None = None) -> int:
        """Fetch the last ``days`` days of detections and store them.

        Returns:
            Number of detections stored.

        Raises:
            ValueError: If no station is configured.
            SQLAlchemyError: If the stored window cannot be replaced.
        """
        if days is None:
            days = self.config.detections_days
        if not self.config.station_id:
            raise ValueError("No station_id configured")

        now = self._clock()
        today = now.date()
        raw_events: list[dict[str, Any]] = []
        for offset in range(days):
            day = today - timedelta(days=offset)
            events = await self.station_client.fetch_detections_for_date(day)
            logger.info("Fetched %d detections for %s", len(events), day)
            raw_events.extend(events)
            if offset < days - 1:
                await asyncio.sleep(self.config.detections_page_delay)

        detections = self.to_detections(raw_events)
        if not detections:
            logger.info("No detections to store; keeping the stored window")
            return 0

        cutoff = now - timedelta(days=days)

        stmt = delete(Detection).where(Detection.detected_at >= cutoff)  # type: ignore[arg-type]

        async with self.database_service.get_async_db() as session:
            try:
                result = await session.execute(stmt)
                session.add_all(detections)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise

        logger.info(
            "Replaced %d stored detections with %d new ones since %s",
            result.rowcount or 0,
            len(detections),
            cutoff.isoformat(),
        )
        return len(detections)
