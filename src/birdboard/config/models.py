"""Configuration models for Birdboard.

This module contains all configuration-related Pydantic models used throughout the application.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "birdboard"})


class BirdboardConfig(BaseModel):
    """Configuration settings for the Birdboard application."""

    # Basic Settings
    site_name: str = "Birdboard"
    timezone: str = "UTC"  # Defines "today" and local-day bounds

    # BirdWeather station; the id is both a path segment and the bearer token
    station_id: str = ""
    api_base_url: str = "https://app.birdweather.com/api/v1"
    request_timeout: float = 30.0  # Seconds per upstream request

    # Upstream paging
    page_size: int = Field(default=100, gt=0)
    species_page_delay: float = Field(default=0.3, ge=0)  # Seconds between species pages
    detections_page_delay: float = Field(default=0.5, ge=0)  # Seconds between detection pages

    # Daily counts
    window_days: int = Field(default=31, gt=0)  # Retention and aggregation window
    rare_threshold: int = 5  # Rare when the last frequency value is below this
    rare_limit: int = Field(default=12, gt=0)  # Maximum rare species returned
    backfill_on_startup: bool = True

    # Raw detections
    detections_days: int = Field(default=14, gt=0)

    # Storage; empty means the SQLite file from PathResolver
    database_url: str = ""

    # Logging settings
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{v}'") from e
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API base URL."""
        return v.rstrip("/")

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone object for the configured timezone."""
        return ZoneInfo(self.timezone)
