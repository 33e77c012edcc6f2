"""
Health check endpoint with database status and catalog totals
"""

from fastapi import APIRouter, Depends
from api.dependencies import get_registry, get_storage
from core.exceptions import CatalogException
from core.storage import StorageClient
from ingestion.registry import DataSourceRegistry
from schemas.api import HealthCheckResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    storage: StorageClient = Depends(get_storage),
    registry: DataSourceRegistry = Depends(get_registry)
):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Number of registered data sources and stored rows
    """
    db_connected = await storage.ping()

    totals = {"total_sources": 0, "total_rows": 0}
    if db_connected:
        try:
            totals = await registry.totals()
        except CatalogException as e:
            logger.error(f"Failed to count catalog contents: {e.message}")

    return HealthCheckResponse(database_connected=db_connected, **totals)
