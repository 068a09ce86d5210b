"""Response models for the dashboard detection endpoints."""

from pydantic import BaseModel, Field

from birdboard.counts.aggregation import AggregatedSpecies, RareSpecies

__all__ = ["AggregatedSpecies", "ErrorResponse", "RareSpecies"]


class ErrorResponse(BaseModel):
    """Body returned when stored counts cannot be read."""

    error: str = Field(..., description="Human-readable error message")
