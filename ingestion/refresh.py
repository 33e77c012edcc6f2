"""
Refresh coordinator - replaces a data source's rows with freshly fetched ones.

Refresh state machine:
1. Lookup   - unknown source id raises NotFoundError, nothing touched
2. Purge    - delete every row of the source; failure raises DeleteError
              and stops before any fetch
3. Ingest   - run the ingestion pipeline on the stored URL; a FetchError
              propagates and leaves the source with zero rows and stale
              metadata until the next successful refresh
4. Finalize - set row_count to the rows actually inserted and stamp
              last_refresh; failure here is logged only

Registration (create_and_ingest) runs the same ingest and finalize steps
without a purge. A source whose first fetch fails is kept with zero rows so
the caller can retry through refresh.

The coordinator does not serialize refreshes of the same source. Callers
that need that hold ingestion.locks.KeyedLock around refresh().
"""

from typing import Optional
from uuid import UUID
from core.exceptions import CatalogException, FetchError
from ingestion.pipeline import IngestionPipeline
from ingestion.registry import DataSourceRegistry
from schemas.ingestion import DataSourceRecord, IngestResult, RefreshResult
import logging

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """Purge-and-reingest policy on top of the ingestion pipeline"""

    def __init__(self, registry: DataSourceRegistry, pipeline: IngestionPipeline):
        self.registry = registry
        self.pipeline = pipeline

    async def refresh(self, source_id: UUID) -> RefreshResult:
        """
        Purge and re-ingest one data source.

        Raises:
            NotFoundError: Unknown source id
            DeleteError: Purge failed; old rows and metadata are untouched
            FetchError: Remote CSV unavailable; rows were already purged
        """
        source = await self.registry.get_source(source_id)
        logger.info(f"Refreshing data source {source.id} ({source.name}) from {source.url}")

        await self.registry.purge_rows(source.id)

        try:
            result = await self.pipeline.ingest(source.url, source.id)
        except FetchError as e:
            logger.error(
                f"Refresh of {source.id} failed after purge: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        await self._finalize(source.id, result)

        return RefreshResult(
            data_source_id=source.id,
            data_source=await self._reload(source.id),
            **result.model_dump()
        )

    async def create_and_ingest(
        self,
        name: Optional[str],
        url: Optional[str],
        description: Optional[str] = None
    ) -> DataSourceRecord:
        """
        Register a new data source and load its CSV.

        Raises:
            ValidationError: name or url missing
            ConflictError: url already registered (nothing created)
            FetchError: CSV unavailable; the new source stays with zero rows
        """
        source = await self.registry.register(name, url, description)

        try:
            result = await self.pipeline.ingest(source.url, source.id)
        except FetchError as e:
            logger.error(
                f"Initial ingest of {source.id} failed, source kept with zero rows: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            raise

        await self._finalize(source.id, result)
        return await self._reload(source.id) or source

    async def _finalize(self, source_id: UUID, result: IngestResult) -> None:
        try:
            await self.registry.update_metadata(source_id, result.inserted_count)
        except CatalogException as e:
            # Rows are in place; only the counters lag
            logger.error(
                f"Failed to update metadata for data source {source_id}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return

        logger.info(
            f"Data source {source_id} now has {result.inserted_count} rows "
            f"({len(result.failures)} failed batches)"
        )

    async def _reload(self, source_id: UUID) -> Optional[DataSourceRecord]:
        try:
            return await self.registry.get_source(source_id)
        except CatalogException as e:
            logger.warning(f"Could not re-read data source {source_id}: {e.message}")
            return None
