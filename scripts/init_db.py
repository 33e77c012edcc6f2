import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import Database
from core.logging import setup_logging

logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    database = Database(settings.DATABASE_URL, echo=True)

    try:
        logger.info("Creating data_sources and data_rows tables...")
        await database.create_all()
        logger.info("Tables created successfully.")
    finally:
        await database.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database())
