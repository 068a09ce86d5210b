"""Models for payloads returned by the BirdWeather station API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StationPayload(BaseModel):
    """Base for upstream payloads: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DetectionCounts(StationPayload):
    """Cumulative detection counts broken down by confidence tier.

    Upstream does not guarantee that the tiers add up to ``total``;
    only ``total`` is authoritative.
    """

    almost_certain: int = Field(default=0, alias="almostCertain")
    very_likely: int = Field(default=0, alias="veryLikely")
    uncertain: int = 0
    unlikely: int = 0
    total: int = 0

    @field_validator(
        "almost_certain", "very_likely", "uncertain", "unlikely", "total", mode="before"
    )
    @classmethod
    def null_as_zero(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat missing counts as zero."""
        return 0 if v is None else v


class SpeciesObservation(StationPayload):
    """One species entry from the station species listing for a since-date."""

    id: str
    common_name: str | None = Field(default=None, alias="commonName")
    scientific_name: str | None = Field(default=None, alias="scientificName")
    color: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    png_url: str | None = Field(default=None, alias="pngUrl")
    detections: DetectionCounts = Field(default_factory=DetectionCounts)
    latest_detection_at: datetime | None = Field(default=None, alias="latestDetectionAt")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:  # noqa: ANN401
        """Species ids are opaque strings even when upstream sends integers."""
        return str(v) if isinstance(v, int) else v

    @field_validator("detections", mode="before")
    @classmethod
    def null_detections(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat a null detections object as all-zero counts."""
        return {} if v is None else v


class DetectionSpecies(StationPayload):
    """Species attached to a raw detection event."""

    id: str
    common_name: str = Field(alias="commonName", min_length=1)
    scientific_name: str | None = Field(default=None, alias="scientificName")
    image_url: str | None = Field(default=None, alias="imageUrl")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:  # noqa: ANN401
        """Species ids are opaque strings even when upstream sends integers."""
        return str(v) if isinstance(v, int) else v


class StationDetection(StationPayload):
    """A single raw detection event from the station detections endpoint."""

    id: str | int | None = None
    timestamp: datetime
    confidence: float | None = None
    species: DetectionSpecies
