"""
Database engine and session management with SQLAlchemy async
"""

from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
)
from core.config import Settings, settings as default_settings
import logging

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite only honours ON DELETE CASCADE with this pragma
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the async engine and session factory for one process.

    Built once at startup from settings and passed to whatever needs
    sessions, so tests can point it at a throwaway database.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            future=True
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        settings = settings or default_settings
        return cls(settings.DATABASE_URL, echo=settings.ENVIRONMENT == "development")

    async def create_all(self):
        """Create all tables known to the ORM metadata"""
        from models.base import Base
        import models.data_source  # noqa: F401
        import models.data_row  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database engine disposed")

