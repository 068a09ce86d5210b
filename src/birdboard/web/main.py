"""Birdboard web application with dependency injection."""

import logging

from birdboard.config import ConfigManager
from birdboard.system.structlog_configurator import configure_structlog
from birdboard.web.core.factory import create_app

# Configure logging before anything else imports and creates loggers
config_manager = ConfigManager()
config = config_manager.load()
configure_structlog(config)

# Request logging is handled by our own structured middleware
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.disabled = True

uvicorn_error_logger = logging.getLogger("uvicorn.error")
uvicorn_error_logger.setLevel(logging.INFO)

app = create_app()
