"""Tests for the daily counts backfill job."""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from birdboard.counts.backfill import DailyCountBackfill
from birdboard.counts.models import DailyCount
from birdboard.counts.store import DailyCountStore
from birdboard.station.client import StationClient

TODAY = date(2026, 10, 19)


@pytest.fixture
def station_client():
    """Station client mock returning nothing by default."""
    client = MagicMock(spec=StationClient)
    client.fetch_cumulative_totals = AsyncMock(return_value={})
    return client


@pytest.fixture
def backfill(in_memory_db_service, station_client, test_config):
    """Backfill over the in-memory database with a fixed "today"."""
    return DailyCountBackfill(
        in_memory_db_service, station_client, test_config, today=lambda: TODAY
    )


async def _stored(db_service) -> list[DailyCount]:
    async with db_service.get_async_db() as session:
        result = await session.execute(
            select(DailyCount).order_by(DailyCount.date, DailyCount.species_code)
        )
        return list(result.scalars().all())


def _keys(rows: list[DailyCount]) -> list[tuple]:
    return [(row.species_code, row.date, row.total_detections) for row in rows]


class TestDailyCountBackfill:
    """End-to-end backfill against a mocked station."""

    async def test_fetches_each_date_in_order(self, backfill, station_client):
        """Should request every window date, oldest first, one at a time."""
        await backfill.run(days=3)

        calls = station_client.fetch_cumulative_totals.await_args_list
        requested = [call.args[0] for call in calls]
        assert requested == [date(2026, 10, 16), date(2026, 10, 17), date(2026, 10, 18)]

    async def test_stores_zero_filled_rows(
        self, backfill, station_client, in_memory_db_service, observation_factory
    ):
        """Should write one row per species per date, zero filling gaps."""
        snapshots = {
            date(2026, 10, 17): {"A": observation_factory("A", 10)},
            date(2026, 10, 18): {"B": observation_factory("B", 2)},
        }
        station_client.fetch_cumulative_totals.side_effect = lambda day: snapshots[day]

        stats = await backfill.run(days=2)

        rows = await _stored(in_memory_db_service)
        assert [(row.date, row.species_code, row.total_detections) for row in rows] == [
            (date(2026, 10, 17), "A", 10),
            (date(2026, 10, 17), "B", 0),
            (date(2026, 10, 18), "A", 0),
            (date(2026, 10, 18), "B", 2),
        ]
        assert stats["dates"] == 2
        assert stats["species"] == 2
        assert stats["rows_upserted"] == 4
        assert stats["failed_dates"] == 0

    async def test_rerun_is_idempotent(
        self, backfill, station_client, in_memory_db_service, observation_factory
    ):
        """Should leave the same rows after running twice with the same upstream data."""
        station_client.fetch_cumulative_totals.side_effect = lambda day: {
            "A": observation_factory("A", 3)
        }

        await backfill.run(days=2)
        first = _keys(await _stored(in_memory_db_service))
        await backfill.run(days=2)
        second = _keys(await _stored(in_memory_db_service))

        assert first == second
        assert len(second) == 2

    async def test_purges_rows_older_than_window(
        self, backfill, in_memory_db_service, daily_count_factory
    ):
        """Should delete rows dated before today - days."""
        async with in_memory_db_service.get_async_db() as session:
            await DailyCountStore(session).upsert_rows(
                [
                    daily_count_factory("old", TODAY - timedelta(days=4), 1),
                    daily_count_factory("kept", TODAY - timedelta(days=3), 1),
                ]
            )

        stats = await backfill.run(days=3)

        rows = await _stored(in_memory_db_service)
        assert [row.species_code for row in rows] == ["kept"]
        assert stats["purged"] == 1

    async def test_empty_upstream_writes_nothing(self, backfill, in_memory_db_service):
        """Should not write rows when no date returned species."""
        stats = await backfill.run(days=3)

        assert await _stored(in_memory_db_service) == []
        assert stats["rows_upserted"] == 0
        assert stats["species"] == 0

    async def test_purge_failure_is_swallowed(
        self, backfill, station_client, in_memory_db_service, observation_factory
    ):
        """Should continue fetching and upserting when the purge fails."""
        station_client.fetch_cumulative_totals.return_value = {"A": observation_factory("A", 1)}

        with patch.object(
            DailyCountStore,
            "purge_older_than",
            AsyncMock(side_effect=OperationalError("stmt", {}, Exception("locked"))),
        ):
            stats = await backfill.run(days=2)

        assert stats["rows_upserted"] == 2
        assert len(await _stored(in_memory_db_service)) == 2

    async def test_upsert_failure_skips_only_that_date(
        self, backfill, station_client, observation_factory
    ):
        """Should log a failed date and still upsert the remaining dates."""
        station_client.fetch_cumulative_totals.return_value = {"A": observation_factory("A", 1)}
        upsert = AsyncMock(side_effect=[OperationalError("stmt", {}, Exception("locked")), 1, 1])

        with patch.object(DailyCountStore, "upsert_rows", upsert):
            stats = await backfill.run(days=3)

        assert upsert.await_count == 3
        assert stats["failed_dates"] == 1
        assert stats["rows_upserted"] == 2

    async def test_default_window(self, backfill, station_client, test_config):
        """Should fall back to the configured window length."""
        await backfill.run()

        assert station_client.fetch_cumulative_totals.await_count == test_config.window_days

    async def test_zero_window_fetches_nothing(self, backfill, station_client):
        """Should treat an explicit zero-day window as empty rather than the default."""
        stats = await backfill.run(days=0)

        station_client.fetch_cumulative_totals.assert_not_awaited()
        assert stats["dates"] == 0
        assert stats["species"] == 0
        assert stats["rows_upserted"] == 0

    async def test_skips_without_station(self, in_memory_db_service, station_client, test_config):
        """Should do nothing when no station is configured."""
        config = test_config.model_copy(update={"station_id": ""})
        backfill = DailyCountBackfill(
            in_memory_db_service, station_client, config, today=lambda: TODAY
        )

        stats = await backfill.run(days=3)

        assert stats["skipped"] is True
        station_client.fetch_cumulative_totals.assert_not_awaited()
