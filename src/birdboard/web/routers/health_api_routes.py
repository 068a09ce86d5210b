"""Health check endpoints for monitoring service status."""

import logging
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from birdboard.config import BirdboardConfig
from birdboard.database.core import DatabaseService
from birdboard.web.core.container import Container
from birdboard.web.models.health import (
    HealthCheckResponse,
    LivenessProbeResponse,
    ReadinessProbeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def get_version() -> str:
    """Get the installed application version."""
    try:
        return version("birdboard")
    except PackageNotFoundError:
        logger.warning("Could not determine installed birdboard version")
        return "unknown"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@router.get("/", response_model=HealthCheckResponse)
@inject
async def health_check(
    config: Annotated[BirdboardConfig, Depends(Provide[Container.config])],
) -> HealthCheckResponse:
    """Check basic health status of the service.

    Returns:
        Health status with timestamp and version.
    """
    return HealthCheckResponse(
        status="healthy",
        timestamp=_timestamp(),
        version=get_version(),
        service="birdboard",
        station_configured=bool(config.station_id),
    )


@router.get("/live", response_model=LivenessProbeResponse)
async def liveness_probe() -> LivenessProbeResponse:
    """Liveness probe.

    Returns:
        Simple status indicating the service is alive.
    """
    return LivenessProbeResponse(status="alive")


@router.get("/ready", status_code=200, response_model=ReadinessProbeResponse)
@inject
async def readiness_probe(
    db_service: Annotated[DatabaseService, Depends(Provide[Container.database])],
    response: Response,
) -> ReadinessProbeResponse:
    """Check whether the service can serve requests by pinging the database."""
    checks = {
        "database": await db_service.ping(),
        "version": get_version(),
    }

    is_ready = checks["database"]
    if not is_ready:
        response.status_code = 503

    return ReadinessProbeResponse(
        status="ready" if is_ready else "not_ready",
        checks=checks,
        timestamp=_timestamp(),
    )
