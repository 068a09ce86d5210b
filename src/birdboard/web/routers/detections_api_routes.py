"""Dashboard endpoints for recent and rare species."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from birdboard.counts.aggregation import AggregationService
from birdboard.counts.store import CountsReadError
from birdboard.web.core.container import Container
from birdboard.web.models.detections import AggregatedSpecies, ErrorResponse, RareSpecies

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/detections")

_ERROR_RESPONSES: dict[int | str, dict] = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _read_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.get("/recent", response_model=list[AggregatedSpecies], responses=_ERROR_RESPONSES)
@inject
async def get_recent_species(
    aggregation: Annotated[AggregationService, Depends(Provide[Container.aggregation_service])],
) -> list[AggregatedSpecies] | JSONResponse:
    """Species detected in the trailing window, most detected first.

    Each entry carries one frequency value per day of the window, oldest first.
    """
    try:
        return await aggregation.recent()
    except CountsReadError as e:
        logger.error("Error fetching recent daily counts: %s", e)
        return _read_error("Failed to fetch recent daily counts")


@router.get("/rare", response_model=list[RareSpecies], responses=_ERROR_RESPONSES)
@inject
async def get_rare_species(
    aggregation: Annotated[AggregationService, Depends(Provide[Container.aggregation_service])],
) -> list[RareSpecies] | JSONResponse:
    """Recently detected species with a low latest total, newest detection first."""
    try:
        return await aggregation.rare()
    except CountsReadError as e:
        logger.error("Error fetching rare daily counts: %s", e)
        return _read_error("Failed to fetch rare daily counts")
