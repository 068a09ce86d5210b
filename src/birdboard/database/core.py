import contextlib
import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,  # type: ignore[attr-defined]
    create_async_engine,
)
from sqlmodel import SQLModel

from birdboard.config.models import BirdboardConfig

# Import table models so SQLModel.metadata knows about them
from birdboard.counts.models import DailyCount  # noqa: F401
from birdboard.detections.models import Detection  # noqa: F401
from birdboard.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


def sqlite_url(db_path: Path) -> str:
    """Build an aiosqlite URL for a database file."""
    return f"sqlite+aiosqlite:///{db_path}"


def resolve_database_url(config: BirdboardConfig, path_resolver: PathResolver) -> str:
    """Configured database URL, or the default SQLite file when none is set."""
    return config.database_url or sqlite_url(path_resolver.get_database_path())


class DatabaseService:
    """Provides an interface for database operations, including initialization."""

    def __init__(self, db_url: str):
        self.db_url = db_url

        if db_url.startswith("sqlite") and ":memory:" not in db_url:
            db_path = Path(db_url.split("///", 1)[1])
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.async_engine = create_async_engine(
            self.db_url,
            pool_pre_ping=True,
            pool_recycle=3600,  # Recycle connections every hour
        )

        self.async_session_local = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        # Tables are created by initialize(), which must be awaited after construction

    @classmethod
    def from_path(cls, db_path: Path) -> "DatabaseService":
        """Create a service backed by a SQLite file."""
        return cls(sqlite_url(db_path))

    async def initialize(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database initialized at %s", self.async_engine.url.render_as_string())

    @contextlib.asynccontextmanager
    async def get_async_db(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide an async database session for dependency injection."""
        async with self.async_session_local() as session:
            yield session

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        async with self.get_async_db() as session:
            try:
                await session.execute(text("SELECT 1"))
                return True
            except SQLAlchemyError as e:
                logger.error("Database ping failed: %s", e)
                return False

    async def dispose(self) -> None:
        """Dispose of the database engine to release resources.

        This should be called when the DatabaseService is no longer needed,
        especially in tests, to prevent file descriptor leaks.
        """
        if self.async_engine:
            await self.async_engine.dispose()
            logger.debug("Async database engine disposed")
