"""Application factory for creating FastAPI application with dependency injection."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from birdboard.web.core.container import Container
from birdboard.web.core.lifespan import lifespan
from birdboard.web.middleware.request_logging import StructuredRequestLoggingMiddleware
from birdboard.web.routers import detections_api_routes, health_api_routes


def create_app(container: Container | None = None) -> FastAPI:
    """Create FastAPI application with dependency injection.

    Args:
        container: Optional pre-built container, mainly for tests.

    Returns:
        FastAPI: The configured application instance.
    """
    container = container or Container()

    app = FastAPI(
        lifespan=lifespan,
        title="Birdboard API",
        description="Daily species counts and dashboard views for a BirdWeather station",
        version="1.0.0",
    )
    app.container = container  # type: ignore[attr-defined]

    # Dashboard clients are served from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # nosemgrep
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(StructuredRequestLoggingMiddleware)

    container.wire(
        modules=[
            "birdboard.web.routers.detections_api_routes",
            "birdboard.web.routers.health_api_routes",
        ]
    )

    app.include_router(detections_api_routes.router, prefix="/api", tags=["Detections API"])
    app.include_router(health_api_routes.router, prefix="/api", tags=["Health Check API"])

    return app
