"""
Pydantic schemas for validation and serialization.

Schemas:
    ingestion: Data source records and ingestion/refresh/preview results
    api: HTTP request/response bodies

Usage:
    from schemas.ingestion import DataSourceRecord, IngestResult, BatchFailure
    from schemas.api import DataSourceCreate, RefreshResponse, ErrorResponse
"""

__all__ = [
    "DataSourceRecord",
    "BatchFailure",
    "IngestResult",
    "RefreshResult",
    "PreviewResult",
    "DataSourceCreate",
    "RefreshResponse",
    "HealthCheckResponse",
    "ErrorResponse",
]
