"""Client for the BirdWeather station API.

Both paging calls are lenient: an HTTP failure, a transport error, or a
malformed page ends the page sequence and whatever was accumulated so far is
returned. Callers treat a short or empty result as "nothing more to fetch".
"""

import asyncio
import logging
from datetime import date, datetime, time
from typing import Any

import httpx
from pydantic import ValidationError

from birdboard.config.models import BirdboardConfig
from birdboard.station.models import SpeciesObservation

logger = logging.getLogger(__name__)


class StationClient:
    """Pages species totals and raw detections for one station."""

    def __init__(self, config: BirdboardConfig) -> None:
        self.config = config
        self.station_id = config.station_id
        self.base_url = config.api_base_url
        self.page_size = config.page_size

    @property
    def headers(self) -> dict[str, str]:
        """Request headers; the station id doubles as the bearer token."""
        return {"Authorization": f"Bearer {self.station_id}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self.headers, timeout=self.config.request_timeout)

    async def _get_page(
        self, client: httpx.AsyncClient, url: str, params: dict[str, Any], label: str
    ) -> dict[str, Any] | None:
        """Fetch one page, returning the decoded body or None on any failure."""
        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error("[%s] Request failed: %s", label, e)
            return None

        if not response.is_success:
            logger.error("[%s] HTTP error: %s", label, response.status_code)
            return None

        try:
            body = response.json()
        except ValueError as e:
            logger.error("[%s] Response was not JSON: %s", label, e)
            return None

        if not isinstance(body, dict):
            logger.error("[%s] Unexpected response body: %r", label, body)
            return None
        return body

    async def fetch_cumulative_totals(self, since_date: date) -> dict[str, SpeciesObservation]:
        """Fetch cumulative species totals since a date, across all pages.

        Args:
            since_date: The "since" date passed upstream.

        Returns:
            Mapping of species id to its observation; later pages win on id clashes.
        """
        url = f"{self.base_url}/stations/{self.station_id}/species"
        label = since_date.isoformat()
        totals: dict[str, SpeciesObservation] = {}
        page = 1

        async with self._client() as client:
            while True:
                params = {
                    "period": "day",
                    "since": since_date.isoformat(),
                    "limit": self.page_size,
                    "page": page,
                }
                logger.debug("[%s] Fetching species page %d", label, page)
                body = await self._get_page(client, url, params, label)
                if body is None:
                    break

                species = body.get("species")
                if not body.get("success"):
                    logger.error("[%s] API returned success=false on page %d", label, page)
                    break
                if not isinstance(species, list) or not species:
                    break

                kept = 0
                for item in species:
                    try:
                        observation = SpeciesObservation.model_validate(item)
                    except ValidationError as e:
                        logger.warning(
                            "[%s] Skipping malformed species on page %d: %s", label, page, e
                        )
                        continue
                    totals[observation.id] = observation
                    kept += 1
                logger.info(
                    "[%s] page %d, fetched species count: %d (kept %d)",
                    label,
                    page,
                    len(species),
                    kept,
                )

                # Page size is judged on the raw item count, not on what validated
                if len(species) < self.page_size:
                    break
                page += 1
                await asyncio.sleep(self.config.species_page_delay)

        return totals

    def day_bounds(self, day: date) -> tuple[datetime, datetime]:
        """Local start and end of a calendar day in the configured timezone."""
        tz = self.config.tzinfo
        start = datetime.combine(day, time(0, 0, 0, 0), tzinfo=tz)
        end = datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)
        return start, end

    async def fetch_detections_for_date(self, day: date) -> list[dict[str, Any]]:
        """Fetch every raw detection recorded during one local day.

        Args:
            day: Calendar day in the configured timezone.

        Returns:
            Raw detection dicts in upstream order.
        """
        url = f"{self.base_url}/stations/{self.station_id}/detections"
        label = day.isoformat()
        start, end = self.day_bounds(day)
        detections: list[dict[str, Any]] = []
        offset = 0

        async with self._client() as client:
            while True:
                params = {
                    "from": start.isoformat(timespec="milliseconds"),
                    "to": end.isoformat(timespec="milliseconds"),
                    "limit": self.page_size,
                    "offset": offset,
                }
                body = await self._get_page(client, url, params, label)
                if body is None:
                    break

                page = body.get("detections")
                if not body.get("success") or not isinstance(page, list):
                    logger.error("[%s] Invalid API response format at offset %d", label, offset)
                    break

                detections.extend(page)
                logger.info("[%s] Retrieved %d detections at offset %d", label, len(page), offset)

                if len(page) < self.page_size:
                    break
                offset += self.page_size
                await asyncio.sleep(self.config.detections_page_delay)

        return detections
