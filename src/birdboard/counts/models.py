"""Database models for daily species counts."""

import datetime as dt

from sqlalchemy import Column, Index, String
from sqlmodel import Field, SQLModel

from birdboard.database.model_utils import UTCDateTime


class DailyCount(SQLModel, table=True):
    """Species totals for one station day.

    ``total_detections`` holds the cumulative total upstream reports for the
    "since this date" query, not the count of that single day. Daily values
    are derived at read time by differencing consecutive dates.
    """

    __tablename__: str = "daily_counts"  # type: ignore[assignment]

    # Natural composite key
    species_code: str = Field(sa_column=Column(String(64), primary_key=True))
    date: dt.date = Field(primary_key=True)

    # Species metadata copied at write time
    common_name: str | None = Field(default=None, sa_column=Column(String(100)))
    scientific_name: str | None = Field(default=None, sa_column=Column(String(100)))
    color: str | None = Field(default=None, sa_column=Column(String(20)))
    image_url: str | None = None
    thumbnail_url: str | None = None
    png_url: str | None = None

    # Confidence tiers
    almost_certain: int = 0
    very_likely: int = 0
    uncertain: int = 0
    unlikely: int = 0

    total_detections: int = 0
    latest_detection_at: dt.datetime | None = Field(
        default=None, sa_column=Column(UTCDateTime(), nullable=True)
    )

    __table_args__ = (Index("idx_daily_counts_date", "date"),)
