"""Build the recent and rare species views from stored daily counts.

The two views intentionally use different algorithms:

- ``recent`` aligns every species on the full window of dates, fills gaps with
  zero and differences consecutive cumulative totals into daily counts.
- ``rare`` groups the stored rows per species in fetch order and uses the
  stored totals as-is, without zero filling.

The divergence is kept for compatibility with existing dashboard clients.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel

from birdboard.config.models import BirdboardConfig
from birdboard.counts.models import DailyCount
from birdboard.counts.store import DailyCountStore
from birdboard.database.core import DatabaseService

logger = logging.getLogger(__name__)


class ViewMode(StrEnum):
    """Available aggregation views."""

    RECENT = "recent"
    RARE = "rare"


class SpeciesMetadata(BaseModel):
    """Species fields shared by both views."""

    species_code: str
    common_name: str | None = None
    scientific_name: str | None = None
    color: str | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None
    png_url: str | None = None


class AggregatedSpecies(SpeciesMetadata):
    """A species in the recent view with one frequency value per window day."""

    frequency: list[int]
    total_detections: int
    last_detected: datetime | None = None


class RareSpecies(SpeciesMetadata):
    """A species in the rare view: its first stored row plus grouped frequency."""

    date: date
    total_detections: int
    almost_certain: int = 0
    very_likely: int = 0
    uncertain: int = 0
    unlikely: int = 0
    latest_detection_at: datetime | None = None
    frequency: list[int]
    last_detected: datetime | None = None


def window_dates(today: date, window_days: int) -> list[date]:
    """Dates of the trailing window, oldest first, excluding ``today``."""
    return [today - timedelta(days=offset) for offset in range(window_days, 0, -1)]


def daily_frequency(date_totals: Sequence[int]) -> list[int]:
    """Convert "since this date" cumulative totals into per-day counts.

    Totals shrink as the since-date moves forward, so each day is its total
    minus the next day's total, floored at zero. The most recent day has no
    successor and keeps its total.
    """
    if not date_totals:
        return []
    frequency = [
        max(0, current - following) for current, following in zip(date_totals, date_totals[1:])
    ]
    frequency.append(date_totals[-1])
    return frequency


def _latest(current: datetime | None, candidate: datetime | None) -> datetime | None:
    if candidate is None:
        return current
    if current is None or candidate > current:
        return candidate
    return current


class AggregationService:
    """Reads the trailing window of daily counts and shapes it for the dashboard."""

    def __init__(
        self,
        database_service: DatabaseService,
        config: BirdboardConfig,
        today: Callable[[], date] | None = None,
    ):
        self.database_service = database_service
        self.config = config
        self._today = today or (lambda: datetime.now(config.tzinfo).date())

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return self._today()

    async def build_view(
        self, window_days: int, mode: ViewMode | str
    ) -> list[AggregatedSpecies] | list[RareSpecies]:
        """Build either view over the trailing ``window_days`` days.

        Raises:
            CountsReadError: If the stored rows cannot be read.
        """
        mode = ViewMode(mode)
        today = self.today()
        async with self.database_service.get_async_db() as session:
            rows = await DailyCountStore(session).read_window(today - timedelta(days=window_days))
        if mode is ViewMode.RECENT:
            return self.recent_from_rows(rows, window_dates(today, window_days))
        return self.rare_from_rows(rows)

    async def recent(self, window_days: int | None = None) -> list[AggregatedSpecies]:
        """Species with detections in the window, most detected first."""
        if window_days is None:
            window_days = self.config.window_days
        return await self.build_view(window_days, ViewMode.RECENT)  # type: ignore[return-value]

    async def rare(self, window_days: int | None = None) -> list[RareSpecies]:
        """Recently heard species whose latest stored total is low."""
        if window_days is None:
            window_days = self.config.window_days
        return await self.build_view(window_days, ViewMode.RARE)  # type: ignore[return-value]

    def recent_from_rows(
        self, rows: Sequence[DailyCount], dates: Sequence[date]
    ) -> list[AggregatedSpecies]:
        """Zero-filled, differenced view aligned on ``dates``."""
        grouped: dict[str, dict] = {}
        for row in rows:
            entry = grouped.get(row.species_code)
            if entry is None:
                entry = {
                    "meta": row,
                    "totals": {},
                    "last_detected": row.latest_detection_at,
                }
                grouped[row.species_code] = entry
            # Duplicate (species, date) rows are tolerated and summed
            entry["totals"][row.date] = entry["totals"].get(row.date, 0) + row.total_detections
            entry["last_detected"] = _latest(entry["last_detected"], row.latest_detection_at)

        result = []
        for species_code, entry in grouped.items():
            date_totals = [entry["totals"].get(day, 0) for day in dates]
            frequency = daily_frequency(date_totals)
            total = sum(frequency)
            if total <= 0:
                continue
            meta: DailyCount = entry["meta"]
            result.append(
                AggregatedSpecies(
                    species_code=species_code,
                    common_name=meta.common_name,
                    scientific_name=meta.scientific_name,
                    color=meta.color,
                    image_url=meta.image_url,
                    thumbnail_url=meta.thumbnail_url,
                    png_url=meta.png_url,
                    frequency=frequency,
                    total_detections=total,
                    last_detected=entry["last_detected"],
                )
            )

        logger.debug("Recent view: %d of %d species had detections", len(result), len(grouped))
        result.sort(key=lambda item: item.total_detections, reverse=True)
        return result

    def rare_from_rows(self, rows: Sequence[DailyCount]) -> list[RareSpecies]:
        """Grouped view over raw rows in fetch order, no zero filling."""
        grouped: dict[str, RareSpecies] = {}
        for row in rows:
            item = grouped.get(row.species_code)
            if item is None:
                grouped[row.species_code] = RareSpecies(
                    **row.model_dump(),
                    frequency=[row.total_detections],
                    last_detected=row.latest_detection_at,
                )
                continue
            item.frequency.append(row.total_detections)
            item.last_detected = _latest(item.last_detected, row.latest_detection_at)

        candidates = [
            item
            for item in grouped.values()
            if item.frequency[-1] < self.config.rare_threshold
        ]
        # Most recently detected first; never-detected species go last
        dated = [item for item in candidates if item.last_detected is not None]
        undated = [item for item in candidates if item.last_detected is None]
        dated.sort(key=lambda item: item.last_detected, reverse=True)  # type: ignore[arg-type]
        return (dated + undated)[: self.config.rare_limit]
