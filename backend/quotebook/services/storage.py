"""
Quotebook Backend: Storage Port
================================

What:  The read/write contract every service depends on, plus its
       implementation over an async SQLAlchemy session.
How:   Services build predicates and orderings with SQLAlchemy column
       expressions and hand them to the port; the port executes them and
       translates driver failures into StorageError.
Who:   Constructed per request (`SQLAlchemyStorage(db)`) by route handlers,
       or per test by fixtures, and passed explicitly into every service
       call. There is no module-level store handle.

Operations:
    insert(table, record)                       -> assigned id
    update(table, id, record, where=())         -> success (conditional when `where` given)
    delete(table, id)                           -> rows affected
    query_one(table, where, order_by)           -> record | None
    query_many(table, where, order_by, limit, offset) -> list[record]
    aggregate(table, group_key, value_column)   -> list[{key, count, avg}]
    distinct_values(table, column, where, ...)  -> list[value]
    count(table, where)                         -> int

The port holds no cached state between calls; every operation re-reads.
It performs no retries and no transaction management: commit/rollback
belong to whoever owns the session (get_db_session for HTTP requests).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Type, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quotebook.database import Base
from quotebook.exceptions import StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class StoragePort(Protocol):
    """Abstract storage contract consumed by the services."""

    async def insert(self, table: Type[ModelT], record: Mapping[str, Any]) -> int: ...

    async def update(
        self,
        table: Type[ModelT],
        record_id: int,
        record: Mapping[str, Any],
        where: Sequence[Any] = (),
    ) -> bool: ...

    async def delete(self, table: Type[ModelT], record_id: int) -> int: ...

    async def query_one(
        self, table: Type[ModelT], where: Sequence[Any] = (), order_by: Sequence[Any] = ()
    ) -> Optional[ModelT]: ...

    async def query_many(
        self,
        table: Type[ModelT],
        where: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ModelT]: ...

    async def aggregate(
        self,
        table: Type[ModelT],
        group_key: Any,
        value_column: Any,
        order_by_count: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]: ...

    async def distinct_values(
        self,
        table: Type[ModelT],
        column: Any,
        where: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[Any]: ...

    async def count(self, table: Type[ModelT], where: Sequence[Any] = ()) -> int: ...


class SQLAlchemyStorage:
    """
    StoragePort implementation over an AsyncSession.

    Writes are flushed, not committed, so a request's writes land in one
    transaction owned by the session dependency.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _fail(self, operation: str, table: Type[Base], exc: Exception) -> StorageError:
        logger.error(
            "Storage %s on %s failed: %s", operation, table.__tablename__, str(exc), exc_info=True
        )
        return StorageError(
            context={
                "operation": operation,
                "table": table.__tablename__,
                "error_type": type(exc).__name__,
            }
        )

    async def insert(self, table: Type[ModelT], record: Mapping[str, Any]) -> int:
        row = table(**record)
        try:
            self.session.add(row)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._fail("insert", table, e) from e
        logger.debug("Inserted %s id=%s", table.__tablename__, row.id)
        return row.id

    async def update(
        self,
        table: Type[ModelT],
        record_id: int,
        record: Mapping[str, Any],
        where: Sequence[Any] = (),
    ) -> bool:
        # Extra predicates turn this into a compare-and-set: the row is only
        # written when they still hold at execution time.
        # Unsynchronized: no RETURNING, so rowcount is exact. Reads use
        # populate_existing to pick up the new values.
        stmt = (
            sa_update(table)
            .where(table.id == record_id, *where)
            .values(**record)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("update", table, e) from e
        return result.rowcount > 0

    async def delete(self, table: Type[ModelT], record_id: int) -> int:
        stmt = (
            sa_delete(table)
            .where(table.id == record_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("delete", table, e) from e
        return result.rowcount

    async def query_one(
        self, table: Type[ModelT], where: Sequence[Any] = (), order_by: Sequence[Any] = ()
    ) -> Optional[ModelT]:
        stmt = (
            select(table)
            .where(*where)
            .order_by(*order_by)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("query_one", table, e) from e
        return result.scalars().first()

    async def query_many(
        self,
        table: Type[ModelT],
        where: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ModelT]:
        # populate_existing: rows already in the identity map are refreshed
        # rather than served from memory.
        stmt = (
            select(table)
            .where(*where)
            .order_by(*order_by)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("query_many", table, e) from e
        return list(result.scalars().all())

    async def aggregate(
        self,
        table: Type[ModelT],
        group_key: Any,
        value_column: Any,
        order_by_count: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Group-by over `group_key` yielding the row count and the average of
        `value_column` per group.
        """
        count_col = func.count().label("count")
        stmt = (
            select(
                group_key.label("key"),
                count_col,
                func.avg(value_column).label("avg"),
            )
            .select_from(table)
            .group_by(group_key)
        )
        if order_by_count:
            stmt = stmt.order_by(count_col.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("aggregate", table, e) from e
        groups = []
        # Row.count is the tuple method; read labels through the mapping
        for row in result.mappings():
            avg = row["avg"]
            groups.append(
                {
                    "key": row["key"],
                    "count": int(row["count"]),
                    # PostgreSQL returns Decimal for AVG over integers
                    "avg": float(avg) if avg is not None else None,
                }
            )
        return groups

    async def distinct_values(
        self,
        table: Type[ModelT],
        column: Any,
        where: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[Any]:
        stmt = select(column).select_from(table).where(*where).distinct().order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("distinct_values", table, e) from e
        return list(result.scalars().all())

    async def count(self, table: Type[ModelT], where: Sequence[Any] = ()) -> int:
        stmt = select(func.count()).select_from(table).where(*where)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise self._fail("count", table, e) from e
        return result.scalar_one()
