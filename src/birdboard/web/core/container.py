"""Dependency injection container for the Birdboard application."""

from dependency_injector import containers, providers

from birdboard.counts.aggregation import AggregationService
from birdboard.counts.backfill import DailyCountBackfill
from birdboard.counts.scheduler import BackfillScheduler
from birdboard.database.core import DatabaseService, resolve_database_url
from birdboard.station.client import StationClient
from birdboard.system.path_resolver import PathResolver
from birdboard.web.core.config import get_config


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    Long-lived services are singletons; request-scoped services are factories.
    """

    # Core infrastructure services - singletons
    path_resolver = providers.Singleton(PathResolver)

    config = providers.Singleton(
        get_config,
        path_resolver=path_resolver,
    )

    database_url = providers.Factory(
        resolve_database_url,
        config=config,
        path_resolver=path_resolver,
    )

    database = providers.Singleton(
        DatabaseService,
        db_url=database_url,
    )

    station_client = providers.Singleton(
        StationClient,
        config=config,
    )

    # Daily counts
    aggregation_service = providers.Factory(
        AggregationService,
        database_service=database,
        config=config,
    )

    backfill = providers.Singleton(
        DailyCountBackfill,
        database_service=database,
        station_client=station_client,
        config=config,
    )

    scheduler = providers.Singleton(
        BackfillScheduler,
        backfill=backfill,
        timezone=config.provided.tzinfo,
        run_on_start=config.provided.backfill_on_startup,
    )
