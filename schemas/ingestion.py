"""
Pydantic schemas for data sources and ingestion results
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID


class DataSourceRecord(BaseModel):
    """A registered data source as stored in data_sources"""
    id: UUID
    name: str
    url: str
    description: Optional[str] = None
    row_count: int = Field(0, ge=0)
    last_refresh: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Employee Hours",
                "url": "https://example.com/csv/hours.csv",
                "description": "Weekly time tracking export",
                "row_count": 1250,
                "last_refresh": "2024-01-15T10:00:00Z",
                "created_at": "2024-01-10T08:30:00Z",
                "updated_at": "2024-01-15T10:00:00Z"
            }
        }


class BatchFailure(BaseModel):
    """One batch of a multi-batch insert that the storage backend rejected"""
    batch_index: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    error: str


class IngestResult(BaseModel):
    """Outcome of one ingest: rows confirmed written plus any failed batches"""
    inserted_count: int = 0
    records_parsed: int = 0
    failures: List[BatchFailure] = Field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


class RefreshResult(IngestResult):
    """Outcome of a purge-and-reingest of an existing data source"""
    data_source_id: UUID
    data_source: Optional[DataSourceRecord] = None


class PreviewResult(BaseModel):
    """First rows of a data source with the column names of the first row"""
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class SeedSource(BaseModel):
    """A data source registered on initialization"""
    name: str
    url: str
    description: Optional[str] = None


class SeedResult(BaseModel):
    """Outcome of registering one seed source"""
    name: str
    status: str = Field(..., description="success, skipped or error")
    message: str
    rows_inserted: Optional[int] = None
