"""
FastAPI dependencies.

Process-wide clients (storage, HTTP client, refresh locks) are created in
the application lifespan and stored on app.state; routes receive them
through these functions so tests can override them.
"""

import httpx
from fastapi import Depends, Request
from core.config import Settings, settings
from core.storage import StorageClient
from ingestion.fetcher import CSVFetcher
from ingestion.locks import KeyedLock
from ingestion.pipeline import IngestionPipeline
from ingestion.refresh import RefreshCoordinator
from ingestion.registry import DataSourceRegistry


def get_settings() -> Settings:
    return settings


def get_storage(request: Request) -> StorageClient:
    return request.app.state.storage


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_refresh_locks(request: Request) -> KeyedLock:
    return request.app.state.refresh_locks


def get_registry(storage: StorageClient = Depends(get_storage)) -> DataSourceRegistry:
    return DataSourceRegistry(storage)


def get_pipeline(
    storage: StorageClient = Depends(get_storage),
    client: httpx.AsyncClient = Depends(get_http_client),
    app_settings: Settings = Depends(get_settings)
) -> IngestionPipeline:
    return IngestionPipeline(
        storage,
        CSVFetcher(client),
        batch_size=app_settings.INGEST_BATCH_SIZE
    )


def get_coordinator(
    registry: DataSourceRegistry = Depends(get_registry),
    pipeline: IngestionPipeline = Depends(get_pipeline)
) -> RefreshCoordinator:
    return RefreshCoordinator(registry, pipeline)
