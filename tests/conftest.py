from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from birdboard.config import BirdboardConfig, ConfigManager
from birdboard.counts.models import DailyCount
from birdboard.database.core import DatabaseService
from birdboard.station.models import SpeciesObservation
from birdboard.system.path_resolver import PathResolver


@pytest.fixture
def path_resolver(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PathResolver:
    """PathResolver whose writable locations all live under tmp_path.

    Environment overrides are cleared so a developer's shell never leaks into tests.
    """
    for name in ("BIRDBOARD_CONFIG", "BIRDWEATHER_STATION_ID", "BIRDBOARD_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BIRDBOARD_APP", str(tmp_path / "app"))
    monkeypatch.setenv("BIRDBOARD_DATA", str(tmp_path / "data"))
    return PathResolver()


@pytest.fixture
def test_config(path_resolver: PathResolver) -> BirdboardConfig:
    """Load a default configuration from a temp config file, with a station and no delays."""
    config = ConfigManager(path_resolver).load()
    return config.model_copy(
        update={
            "station_id": "station-token",
            "species_page_delay": 0,
            "detections_page_delay": 0,
        }
    )


@pytest.fixture
async def async_in_memory_session():
    """Create real in-memory async SQLite session with full schema."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_local = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    session = session_local()
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
async def in_memory_db_service():
    """DatabaseService over an initialized in-memory SQLite database."""
    service = DatabaseService("sqlite+aiosqlite:///:memory:")
    await service.initialize()
    try:
        yield service
    finally:
        await service.dispose()


@pytest.fixture
def observation_factory():
    """Build SpeciesObservation objects from upstream-shaped payloads."""

    def _create(species_id: str, total: int, **overrides: Any) -> SpeciesObservation:
        payload = {
            "id": species_id,
            "commonName": f"Bird {species_id}",
            "scientificName": f"Avis {species_id}",
            "color": "#123456",
            "imageUrl": f"https://img.example/{species_id}.jpg",
            "thumbnailUrl": f"https://img.example/{species_id}_t.jpg",
            "detections": {
                "almostCertain": total,
                "veryLikely": 0,
                "uncertain": 0,
                "unlikely": 0,
                "total": total,
            },
            "latestDetectionAt": "2026-10-18T06:30:00Z" if total else None,
        }
        payload.update(overrides)
        return SpeciesObservation.model_validate(payload)

    return _create


@pytest.fixture
def daily_count_factory():
    """Build DailyCount rows with sensible defaults."""

    def _create(
        species_code: str,
        day: date,
        total: int,
        latest: datetime | None = None,
        **overrides: Any,
    ) -> DailyCount:
        values: dict[str, Any] = {
            "species_code": species_code,
            "date": day,
            "common_name": f"Bird {species_code}",
            "scientific_name": f"Avis {species_code}",
            "total_detections": total,
            "almost_certain": total,
            "latest_detection_at": latest,
        }
        values.update(overrides)
        return DailyCount(**values)

    return _create


@pytest.fixture
def utc_datetime():
    """Shorthand for aware UTC datetimes."""

    def _create(*args: int) -> datetime:
        return datetime(*args, tzinfo=UTC)

    return _create
