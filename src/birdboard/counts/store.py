"""Persistence for daily count rows."""

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from birdboard.counts.models import DailyCount

logger = logging.getLogger(__name__)

READ_PAGE_SIZE = 1000

_KEY_COLUMNS = ("species_code", "date")


class CountsReadError(Exception):
    """Raised when daily counts cannot be read from storage."""


class DailyCountStore:
    """Purge, upsert and windowed reads over the ``daily_counts`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self) -> Any:  # noqa: ANN401
        """Dialect-specific INSERT that supports ON CONFLICT."""
        dialect = self.session.bind.dialect.name if self.session.bind else "sqlite"
        if dialect == "postgresql":
            return postgresql.insert(DailyCount)
        return sqlite.insert(DailyCount)

    async def purge_older_than(self, cutoff: date) -> int:
        """Delete rows dated strictly before ``cutoff``.

        Returns:
            Number of rows deleted.
        """
        try:
            result = await self.session.execute(delete(DailyCount).where(DailyCount.date < cutoff))
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return result.rowcount or 0

    async def upsert_rows(self, rows: Sequence[DailyCount]) -> int:
        """Insert rows, overwriting any existing row with the same (species_code, date).

        Returns:
            Number of rows written.
        """
        if not rows:
            return 0

        values = [row.model_dump() for row in rows]
        stmt = self._insert().values(values)
        updates = {
            column.name: stmt.excluded[column.name]
            for column in DailyCount.__table__.columns  # type: ignore[attr-defined]
            if column.name not in _KEY_COLUMNS
        }
        stmt = stmt.on_conflict_do_update(index_elements=list(_KEY_COLUMNS), set_=updates)

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return len(values)

    async def read_window(
        self, since_date: date, page_size: int = READ_PAGE_SIZE
    ) -> list[DailyCount]:
        """Read every row dated on or after ``since_date``, oldest first.

        Reads page by page until a page comes back short, so results are never
        truncated by a server-side row cap.

        Raises:
            CountsReadError: If any page cannot be read.
        """
        rows: list[DailyCount] = []
        offset = 0
        while True:
            stmt = (
                select(DailyCount)
                .where(DailyCount.date >= since_date)
                .order_by(DailyCount.date, DailyCount.species_code)
                .offset(offset)
                .limit(page_size)
            )
            try:
                result = await self.session.execute(stmt)
            except SQLAlchemyError as e:
                logger.error("Failed to read daily counts since %s: %s", since_date, e)
                raise CountsReadError(str(e)) from e

            page = list(result.scalars().all())
            rows.extend(page)
            if len(page) < page_size:
                break
            offset += page_size

        return rows
