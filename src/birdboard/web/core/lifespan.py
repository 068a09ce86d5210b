"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from birdboard.system.structlog_configurator import configure_structlog
from birdboard.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Context manager for application startup and shutdown events.

    Creates missing tables, starts the nightly backfill scheduler and, on the
    way out, stops it and releases the database engine.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    # Get the container from the app (runtime dynamic attribute)
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    database = container.database()
    await database.initialize()

    logger.info("Starting application services...")
    scheduler = container.scheduler()
    try:
        await scheduler.start()
        logger.info("All services started successfully")

        yield

    finally:
        logger.info("Shutting down application services...")
        await scheduler.stop()
        await database.dispose()
        logger.info("All services stopped successfully")
