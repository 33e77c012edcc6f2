"""
Seed data source initialization endpoint
"""

from fastapi import APIRouter, Depends
from api.dependencies import get_coordinator, get_settings
from core.config import Settings
from ingestion.refresh import RefreshCoordinator
from ingestion.seeds import initialize_sources
from schemas.api import InitializeResponse
from schemas.ingestion import SeedSource

router = APIRouter(tags=["Initialize"])


@router.post("/initialize", response_model=InitializeResponse)
async def initialize(
    coordinator: RefreshCoordinator = Depends(get_coordinator),
    app_settings: Settings = Depends(get_settings)
):
    """Register every configured seed source that is not in the catalog yet"""
    seeds = [SeedSource(**seed) for seed in app_settings.SEED_SOURCES]
    results = await initialize_sources(coordinator, seeds)

    return InitializeResponse(
        success=True,
        message="Initialization complete",
        results=results
    )
