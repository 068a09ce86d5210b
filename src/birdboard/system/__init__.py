"""System domain package.

This package contains system-level components:
- PathResolver: Path resolution for config and database files
- StructlogConfigurator: Structured logging configuration
"""

from birdboard.system import structlog_configurator
from birdboard.system.path_resolver import PathResolver

__all__ = [
    "PathResolver",
    "structlog_configurator",
]
