from unittest.mock import AsyncMock, MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from birdboard.counts.aggregation import AggregationService
from birdboard.counts.scheduler import BackfillScheduler
from birdboard.database.core import DatabaseService
from birdboard.web.core.container import Container
from birdboard.web.core.factory import create_app


@pytest.fixture
def mock_aggregation():
    """Aggregation service mock returning empty views."""
    service = MagicMock(spec=AggregationService)
    service.recent = AsyncMock(return_value=[])
    service.rare = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_database():
    """Database service mock that answers pings."""
    database = MagicMock(spec=DatabaseService)
    database.initialize = AsyncMock()
    database.dispose = AsyncMock()
    database.ping = AsyncMock(return_value=True)
    return database


@pytest.fixture
def mock_scheduler():
    """Scheduler mock so no backfill runs during web tests."""
    scheduler = MagicMock(spec=BackfillScheduler)
    scheduler.start = AsyncMock()
    scheduler.stop = AsyncMock()
    return scheduler


@pytest.fixture
def app(path_resolver, test_config, mock_aggregation, mock_database, mock_scheduler):
    """Create the app with every external dependency overridden."""
    container = Container()
    container.path_resolver.override(providers.Object(path_resolver))
    container.config.override(providers.Object(test_config))
    container.database.override(providers.Object(mock_database))
    container.aggregation_service.override(providers.Object(mock_aggregation))
    container.scheduler.override(providers.Object(mock_scheduler))

    app = create_app(container)
    yield app

    container.unwire()
    container.reset_override()


@pytest.fixture
def client(app):
    """Test client without running the lifespan."""
    return TestClient(app)
