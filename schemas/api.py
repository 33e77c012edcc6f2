"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone
from schemas.ingestion import BatchFailure, DataSourceRecord, SeedResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Data Source Schemas
# ============================================================================

class DataSourceCreate(BaseModel):
    """
    Registration request.

    name and url are optional here so that blank input reaches the registry
    and comes back as a 400 ValidationError rather than a schema error.
    """
    name: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name", "url", "description")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Employee Hours",
                "url": "https://example.com/csv/hours.csv",
                "description": "Weekly time tracking export"
            }
        }


class RefreshResponse(BaseModel):
    """Result of POST /datasources/{id}/refresh"""
    message: str
    data_source: Optional[DataSourceRecord] = None
    inserted_rows: int
    failures: List[BatchFailure] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Data source refreshed successfully",
                "inserted_rows": 1250,
                "failures": []
            }
        }


class MessageResponse(BaseModel):
    message: str


class InitializeResponse(BaseModel):
    """Result of POST /initialize"""
    success: bool
    message: str
    results: List[SeedResult] = Field(default_factory=list)


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall system status: healthy or unhealthy")
    timestamp: datetime = Field(default_factory=_utcnow)
    database_connected: bool
    total_sources: int = 0
    total_rows: int = 0

    @model_validator(mode="after")
    def determine_status(self):
        """Unhealthy whenever the database is unreachable"""
        self.status = "healthy" if self.database_connected else "unhealthy"
        return self


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    classification: str = "internal_error"
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "A data source with this URL already exists",
                "classification": "conflict",
                "detail": None,
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
