"""
Data source endpoints: register, list, refresh, preview, export, delete
"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse, Response
from api.dependencies import (
    get_coordinator, get_refresh_locks, get_registry, get_settings
)
from core.config import Settings
from ingestion.exporter import export_csv
from ingestion.locks import KeyedLock
from ingestion.refresh import RefreshCoordinator
from ingestion.registry import DataSourceRegistry
from schemas.api import DataSourceCreate, MessageResponse, RefreshResponse
from schemas.ingestion import DataSourceRecord, PreviewResult
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/datasources", tags=["Data Sources"])


@router.get("", response_model=List[DataSourceRecord])
async def list_data_sources(registry: DataSourceRegistry = Depends(get_registry)):
    """List every data source, newest first"""
    return await registry.list_sources()


@router.post("", response_model=DataSourceRecord, status_code=status.HTTP_201_CREATED)
async def create_data_source(
    request: Request,
    payload: DataSourceCreate,
    coordinator: RefreshCoordinator = Depends(get_coordinator)
):
    """
    Register a data source and ingest its CSV.

    Errors:
    - 400 name/url missing, or the CSV could not be fetched
    - 409 url already registered
    """
    request_id = getattr(request.state, "request_id", "-")
    logger.info(f"[{request_id}] POST /datasources url={payload.url}")

    return await coordinator.create_and_ingest(payload.name, payload.url, payload.description)


@router.delete("/{source_id}", response_model=MessageResponse)
async def delete_data_source(
    source_id: UUID,
    registry: DataSourceRegistry = Depends(get_registry)
):
    """Delete a data source and all of its rows"""
    await registry.delete_source(source_id)
    return MessageResponse(message="Data source deleted successfully")


@router.post("/{source_id}/refresh", response_model=RefreshResponse)
async def refresh_data_source(
    request: Request,
    source_id: UUID,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
    locks: KeyedLock = Depends(get_refresh_locks)
):
    """
    Purge and re-ingest a data source.

    Concurrent refreshes of the same source wait for each other.
    """
    request_id = getattr(request.state, "request_id", "-")
    if locks.locked(source_id):
        logger.info(f"[{request_id}] Refresh of {source_id} already running, waiting")

    async with locks.acquire(source_id):
        result = await coordinator.refresh(source_id)

    message = "Data source refreshed successfully"
    if result.failures:
        message = (
            f"Data source refreshed with {len(result.failures)} failed batches"
        )

    return RefreshResponse(
        message=message,
        data_source=result.data_source,
        inserted_rows=result.inserted_count,
        failures=result.failures
    )


@router.get("/{source_id}/preview", response_model=PreviewResult)
async def preview_data_source(
    source_id: UUID,
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Rows to return"),
    registry: DataSourceRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_settings)
):
    """First rows of a data source in file order"""
    return await registry.preview(source_id, limit=limit or app_settings.PREVIEW_LIMIT)


@router.get("/{source_id}/export")
async def export_data_source(
    source_id: UUID,
    registry: DataSourceRegistry = Depends(get_registry)
):
    """Download every row of a data source as CSV"""
    records = await registry.fetch_rows(source_id)
    if not records:
        return PlainTextResponse("No data to export", status_code=status.HTTP_404_NOT_FOUND)

    return Response(
        content=export_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="export_{source_id}.csv"'}
    )
