"""
Script to refresh data sources from the command line.

Usage:
    python scripts/refresh_sources.py              # refresh every source
    python scripts/refresh_sources.py <id> [<id>]  # refresh selected sources
"""

import argparse
import asyncio
import sys
import os
import logging
from typing import List, Optional
from uuid import UUID

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

import httpx
from core.config import settings
from core.database import Database
from core.exceptions import CatalogException
from core.logging import setup_logging
from core.storage import SQLAlchemyStorage
from ingestion.fetcher import CSVFetcher
from ingestion.pipeline import IngestionPipeline
from ingestion.refresh import RefreshCoordinator
from ingestion.registry import DataSourceRegistry

logger = logging.getLogger(__name__)


async def refresh_sources(coordinator: RefreshCoordinator, source_ids: Optional[List[UUID]] = None) -> int:
    """Refresh the given sources (all when None), return the number that failed"""
    if not source_ids:
        source_ids = [source.id for source in await coordinator.registry.list_sources()]

    if not source_ids:
        logger.warning("No data sources registered. Nothing to refresh.")
        return 0

    failed = 0
    for source_id in source_ids:
        try:
            result = await coordinator.refresh(source_id)
        except CatalogException as e:
            failed += 1
            logger.error(f"Refresh failed for {source_id}: {e.message}")
            continue

        logger.info(
            f"Refreshed {source_id}: inserted={result.inserted_count}, "
            f"failed_batches={len(result.failures)}"
        )

    logger.info(f"All refreshes completed ({failed} failed)")
    return failed


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Refresh CSV data sources")
    parser.add_argument("source_ids", nargs="*", type=UUID, help="Data source ids (default: all)")
    args = parser.parse_args(argv)

    database = Database.from_settings(settings)
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS, follow_redirects=True) as client:
            storage = SQLAlchemyStorage(database.session_maker)
            coordinator = RefreshCoordinator(
                DataSourceRegistry(storage),
                IngestionPipeline(storage, CSVFetcher(client), batch_size=settings.INGEST_BATCH_SIZE)
            )
            failed = await refresh_sources(coordinator, args.source_ids)
    finally:
        await database.dispose()

    return 1 if failed else 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(main()))
