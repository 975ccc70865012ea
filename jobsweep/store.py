"""Store session used by the cleanup sweep.

Wraps one AsyncSession and exposes the filtered delete/update/select/count
primitives the sweep stages need. Mutating primitives commit immediately so
that later stages (and the stats counts) see their effects. Any SQLAlchemy
error rolls the session back and surfaces as StoreError, leaving the session
usable for the next stage.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import StoreError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 500


def _chunks(values: Sequence[Any], size: int) -> Iterable[Sequence[Any]]:
    for start in range(0, len(values), size):
        yield values[start:start + size]


class SweepStore:
    def __init__(self, session: AsyncSession, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.session = session
        self.chunk_size = max(1, chunk_size)

    async def _rollback(self, action: str, exc: SQLAlchemyError) -> StoreError:
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_exc:
            logger.warning("Rollback after failed %s also failed: %s", action, rollback_exc)
        return StoreError(f"{action} failed: {exc}", cause=exc)

    async def delete_older_than(self, column, cutoff: datetime) -> int:
        """Delete rows whose ``column`` is strictly before ``cutoff``."""
        table = column.class_
        stmt = delete(table).where(column < cutoff).execution_options(synchronize_session=False)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._rollback(f"delete from {table.__tablename__}", e) from e
        return result.rowcount or 0

    async def update_older_than(
        self,
        column,
        cutoff: datetime,
        counter,
        floor: int,
        values: Dict[str, Any],
    ) -> int:
        """Update rows where ``column < cutoff AND counter > floor``."""
        table = column.class_
        stmt = (
            update(table)
            .where(column < cutoff, counter > floor)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._rollback(f"update of {table.__tablename__}", e) from e
        return result.rowcount or 0

    async def select_older_than(self, columns: Sequence[Any], column, cutoff: datetime) -> List[Row]:
        stmt = select(*columns).where(column < cutoff)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._rollback(f"select from {column.class_.__tablename__}", e) from e
        return list(result.all())

    async def count_where(self, column, value: Any) -> int:
        stmt = select(func.count()).select_from(column.class_).where(column == value)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._rollback(f"count of {column.class_.__tablename__}", e) from e
        return result.scalar_one() or 0

    async def count_all(self, model) -> int:
        stmt = select(func.count()).select_from(model)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._rollback(f"count of {model.__tablename__}", e) from e
        return result.scalar_one() or 0

    async def count_grouped(self, column, values: Sequence[Any]) -> Dict[Any, int]:
        """Count rows per distinct ``column`` value, restricted to ``values``.

        Values with no rows are absent from the returned mapping.
        """
        counts: Dict[Any, int] = {}
        for chunk in _chunks(list(values), self.chunk_size):
            stmt = (
                select(column, func.count())
                .where(column.in_(chunk))
                .group_by(column)
            )
            try:
                result = await self.session.execute(stmt)
            except SQLAlchemyError as e:
                raise await self._rollback(f"grouped count of {column.class_.__tablename__}", e) from e
            for key, count in result.all():
                counts[key] = count
        return counts

    async def delete_where_in(self, column, values: Sequence[Any]) -> int:
        table = column.class_
        deleted = 0
        for chunk in _chunks(list(values), self.chunk_size):
            stmt = delete(table).where(column.in_(chunk)).execution_options(synchronize_session=False)
            try:
                result = await self.session.execute(stmt)
                await self.session.commit()
            except SQLAlchemyError as e:
                raise await self._rollback(f"delete from {table.__tablename__}", e) from e
            deleted += result.rowcount or 0
        return deleted
