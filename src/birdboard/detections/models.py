"""Database models for raw detection events."""

import uuid
from datetime import datetime

from sqlalchemy import Column, Index, String
from sqlmodel import Field, SQLModel

from birdboard.database.model_utils import UTCDateTime


class Detection(SQLModel, table=True):
    """A single detection event as reported by the station."""

    __tablename__: str = "detections"  # type: ignore[assignment]

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)

    species_code: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    common_name: str = Field(sa_column=Column(String(100), nullable=False))
    scientific_name: str | None = Field(default=None, sa_column=Column(String(100)))
    image_url: str | None = None
    thumbnail_url: str | None = None

    confidence: float | None = None
    detected_at: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False))
    is_rare: bool = False  # Not derived on ingest
    station_id: str = Field(sa_column=Column(String(64), nullable=False))

    __table_args__ = (Index("idx_detections_detected_at", "detected_at"),)
