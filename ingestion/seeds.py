"""
Register configured seed data sources that are not in the catalog yet.
"""

from typing import Iterable, List
from core.exceptions import CatalogException
from ingestion.refresh import RefreshCoordinator
from schemas.ingestion import SeedSource, SeedResult
import logging

logger = logging.getLogger(__name__)


async def initialize_sources(
    coordinator: RefreshCoordinator,
    seeds: Iterable[SeedSource]
) -> List[SeedResult]:
    """
    Create and ingest every seed whose URL is not registered.

    One failing seed never stops the others; each gets its own result.
    """
    results: List[SeedResult] = []

    for seed in seeds:
        existing = await coordinator.registry.find_by_url(seed.url)
        if existing is not None:
            results.append(SeedResult(name=seed.name, status="skipped", message="Already exists"))
            continue

        try:
            source = await coordinator.create_and_ingest(seed.name, seed.url, seed.description)
        except CatalogException as e:
            logger.error(f"Seeding {seed.name} failed: {e.message}")
            results.append(SeedResult(name=seed.name, status="error", message=e.message))
            continue

        results.append(SeedResult(
            name=seed.name,
            status="success",
            message=f"Created with {source.row_count} rows",
            rows_inserted=source.row_count
        ))

    logger.info(
        f"Initialization complete: "
        f"{sum(1 for r in results if r.status == 'success')} created, "
        f"{sum(1 for r in results if r.status == 'skipped')} skipped, "
        f"{sum(1 for r in results if r.status == 'error')} failed"
    )
    return results
