"""BirdWeather station API access."""

from birdboard.station.client import StationClient
from birdboard.station.models import DetectionCounts, SpeciesObservation, StationDetection

__all__ = [
    "DetectionCounts",
    "SpeciesObservation",
    "StationClient",
    "StationDetection",
]
