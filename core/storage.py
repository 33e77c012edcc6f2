"""
Storage client used by the ingestion core.

The core talks to storage through a small table-oriented interface
(select / single / insert / update / delete) so that the pipeline and the
refresh coordinator never depend on a particular backend. Rows travel as
plain dictionaries keyed by column name.

SQLAlchemyStorage is the production implementation. Every call runs in its
own session and commits on its own: a failed batch insert never rolls back
batches that were already written.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union
from sqlalchemy import select, update, delete, func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from core.exceptions import StorageError
from models.data_source import DataSource
from models.data_row import DataRow
import logging

logger = logging.getLogger(__name__)

DATA_SOURCES = "data_sources"
DATA_ROWS = "data_rows"

Filters = Optional[Dict[str, Any]]
OrderBy = Optional[Union[str, Sequence[str]]]


class StorageClient(ABC):
    """Generic CRUD client over the data_sources and data_rows tables"""

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Filters = None,
        order_by: OrderBy = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        """Return rows matching all equality filters"""

    @abstractmethod
    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows and return them with generated columns filled in"""

    @abstractmethod
    async def update(self, table: str, patch: Dict[str, Any], filters: Filters) -> int:
        """Apply patch to matching rows, return the number of rows updated"""

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows, return the number of rows deleted"""

    @abstractmethod
    async def count(self, table: str, filters: Filters = None) -> int:
        """Count matching rows"""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the backend is reachable"""

    async def single(self, table: str, filters: Filters) -> Optional[Dict[str, Any]]:
        """Fetch the one row matching a unique filter, or None"""
        rows = await self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None


class SQLAlchemyStorage(StorageClient):
    """StorageClient backed by an async SQLAlchemy session factory"""

    TABLES = {
        DATA_SOURCES: DataSource,
        DATA_ROWS: DataRow,
    }

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    def _model(self, table: str):
        try:
            return self.TABLES[table]
        except KeyError:
            raise StorageError(
                f"Unknown table: {table}",
                context={"table_name": table}
            )

    @staticmethod
    def _where(model, filters: Filters) -> list:
        clauses = []
        for column_name, value in (filters or {}).items():
            clauses.append(getattr(model, column_name) == value)
        return clauses

    @staticmethod
    def _to_dict(obj, columns: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        names = columns or [c.key for c in obj.__table__.columns]
        return {name: getattr(obj, name) for name in names}

    def _error(self, operation: str, table: str, e: Exception) -> StorageError:
        logger.error(f"Storage {operation} on {table} failed: {str(e)}")
        return StorageError(
            f"Storage {operation} failed",
            context={"operation": operation, "table_name": table},
            original_exception=e
        )

    async def select(
        self,
        table: str,
        filters: Filters = None,
        order_by: OrderBy = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        model = self._model(table)
        stmt = select(model).where(*self._where(model, filters))

        if order_by:
            names = [order_by] if isinstance(order_by, str) else list(order_by)
            for name in names:
                column = getattr(model, name)
                stmt = stmt.order_by(column.asc() if ascending else column.desc())

        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return [self._to_dict(obj, columns) for obj in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._error("SELECT", table, e)

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        model = self._model(table)
        if not rows:
            return []

        objects = [model(**row) for row in rows]
        try:
            async with self.session_maker() as session:
                session.add_all(objects)
                await session.commit()
                return [self._to_dict(obj) for obj in objects]
        except SQLAlchemyError as e:
            raise self._error("INSERT", table, e)

    async def update(self, table: str, patch: Dict[str, Any], filters: Filters) -> int:
        model = self._model(table)
        stmt = update(model).where(*self._where(model, filters)).values(**patch)

        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise self._error("UPDATE", table, e)

    async def delete(self, table: str, filters: Filters) -> int:
        model = self._model(table)
        stmt = delete(model).where(*self._where(model, filters))

        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise self._error("DELETE", table, e)

    async def count(self, table: str, filters: Filters = None) -> int:
        model = self._model(table)
        stmt = select(func.count()).select_from(model).where(*self._where(model, filters))

        try:
            async with self.session_maker() as session:
                result = await session.execute(stmt)
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise self._error("SELECT", table, e)

    async def ping(self) -> bool:
        try:
            async with self.session_maker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database connection failed: {str(e)}")
            return False
