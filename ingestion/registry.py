"""
Data source registry: metadata lifecycle of catalog entries.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from core.exceptions import (
    ConflictError,
    DeleteError,
    NotFoundError,
    StorageError,
    ValidationError
)
from core.storage import StorageClient, DATA_SOURCES, DATA_ROWS
from schemas.ingestion import DataSourceRecord, PreviewResult
import logging

logger = logging.getLogger(__name__)

ROW_ORDER = ["created_at", "row_index"]


class DataSourceRegistry:
    """
    Owns data_sources rows and read access to data_rows.

    Responsibilities:
    - Registration with required-field and URL-uniqueness checks
    - Lookup, listing and deletion (rows cascade)
    - Row purge and refresh metadata updates
    - Preview and full row reads for export
    """

    def __init__(self, storage: StorageClient):
        self.storage = storage

    async def list_sources(self) -> List[DataSourceRecord]:
        rows = await self.storage.select(DATA_SOURCES, order_by="created_at", ascending=False)
        return [DataSourceRecord(**row) for row in rows]

    async def get_source(self, source_id: UUID) -> DataSourceRecord:
        row = await self.storage.single(DATA_SOURCES, {"id": source_id})
        if row is None:
            raise NotFoundError(
                "Data source not found",
                context={"data_source_id": str(source_id)}
            )
        return DataSourceRecord(**row)

    async def find_by_url(self, url: str) -> Optional[DataSourceRecord]:
        row = await self.storage.single(DATA_SOURCES, {"url": url})
        return DataSourceRecord(**row) if row else None

    async def register(
        self,
        name: Optional[str],
        url: Optional[str],
        description: Optional[str] = None
    ) -> DataSourceRecord:
        """
        Create a data source with row_count=0.

        Raises:
            ValidationError: name or url missing/blank
            ConflictError: a source with this url already exists
        """
        name = (name or "").strip()
        url = (url or "").strip()

        missing = [field for field, value in (("name", name), ("url", url)) if not value]
        if missing:
            raise ValidationError(
                "Name and URL are required",
                context={"missing_fields": missing}
            )

        existing = await self.find_by_url(url)
        if existing is not None:
            raise ConflictError(
                "A data source with this URL already exists",
                context={"url": url, "existing_id": str(existing.id)}
            )

        created = await self.storage.insert(DATA_SOURCES, [{
            "name": name,
            "url": url,
            "description": description or None,
            "row_count": 0,
        }])
        source = DataSourceRecord(**created[0])
        logger.info(f"Registered data source {source.id} ({source.name}) for {source.url}")
        return source

    async def delete_source(self, source_id: UUID) -> None:
        """Delete a data source; its rows go with it"""
        await self.get_source(source_id)

        try:
            await self.storage.delete(DATA_SOURCES, {"id": source_id})
        except StorageError as e:
            raise DeleteError(
                "Failed to delete data source",
                context={"data_source_id": str(source_id), "table_name": DATA_SOURCES},
                original_exception=e
            )
        logger.info(f"Deleted data source {source_id}")

    async def purge_rows(self, source_id: UUID) -> int:
        """Delete every row owned by a source"""
        try:
            deleted = await self.storage.delete(DATA_ROWS, {"data_source_id": source_id})
        except StorageError as e:
            raise DeleteError(
                "Failed to delete old data",
                context={"data_source_id": str(source_id), "table_name": DATA_ROWS},
                original_exception=e
            )
        logger.info(f"Purged {deleted} rows for data source {source_id}")
        return deleted

    async def update_metadata(self, source_id: UUID, row_count: int) -> None:
        await self.storage.update(
            DATA_SOURCES,
            {"row_count": row_count, "last_refresh": datetime.now(timezone.utc)},
            {"id": source_id}
        )

    async def preview(self, source_id: UUID, limit: int = 10) -> PreviewResult:
        rows = await self.storage.select(
            DATA_ROWS,
            filters={"data_source_id": source_id},
            order_by=ROW_ORDER,
            limit=limit,
            columns=["json_data"]
        )
        if not rows:
            return PreviewResult()

        records = [row["json_data"] for row in rows]
        return PreviewResult(columns=list(records[0].keys()), rows=records)

    async def fetch_rows(self, source_id: UUID) -> List[dict]:
        rows = await self.storage.select(
            DATA_ROWS,
            filters={"data_source_id": source_id},
            order_by=ROW_ORDER,
            columns=["json_data"]
        )
        return [row["json_data"] for row in rows]

    async def totals(self) -> dict:
        return {
            "total_sources": await self.storage.count(DATA_SOURCES),
            "total_rows": await self.storage.count(DATA_ROWS),
        }
