"""Web API contract models using Pydantic for validation."""

from birdboard.web.models.detections import AggregatedSpecies, ErrorResponse, RareSpecies

__all__ = [
    "AggregatedSpecies",
    "ErrorResponse",
    "RareSpecies",
]
