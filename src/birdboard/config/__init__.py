"""Birdboard configuration package.

This package provides centralized configuration management with:
- Pydantic validation of every setting
- YAML parsing and serialization
- Environment variable overrides for deployment secrets
"""

from .manager import ConfigManager
from .models import BirdboardConfig

__all__ = [
    "BirdboardConfig",
    "ConfigManager",
]
