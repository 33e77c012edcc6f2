"""
Ingestion pipeline: fetch a remote CSV, parse it and write its records.

Records are written in fixed-size batches, strictly in file order. A batch
the storage backend rejects is recorded and skipped; the pipeline moves on
to the next batch so one transient error does not discard the rest of a
large file. The result reports only rows that were confirmed written.
"""

from typing import Any, Dict, List
from uuid import UUID
from core.exceptions import CatalogException
from core.storage import StorageClient, DATA_ROWS
from ingestion.csv_parser import parse_csv, Record
from ingestion.fetcher import CSVFetcher
from schemas.ingestion import BatchFailure, IngestResult
import logging

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


class IngestionPipeline:
    """
    Fetch -> parse -> batch insert.

    The pipeline never deletes anything; replacing existing rows is the
    refresh coordinator's job.
    """

    def __init__(
        self,
        storage: StorageClient,
        fetcher: CSVFetcher,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.storage = storage
        self.fetcher = fetcher
        self.batch_size = batch_size

    async def ingest(self, source_url: str, target_source_id: UUID) -> IngestResult:
        """
        Fetch the CSV at source_url and store its records under target_source_id.

        Raises:
            FetchError: If the CSV cannot be fetched; nothing is written
        """
        text = await self.fetcher.fetch_text(source_url)
        records, count = parse_csv(text)
        logger.info(f"Parsed {count} records from {source_url}")

        return await self.load_records(records, target_source_id)

    async def load_records(self, records: List[Record], target_source_id: UUID) -> IngestResult:
        """Insert already-parsed records in ordered batches"""
        inserted_count = 0
        failures: List[BatchFailure] = []

        for batch_index, start in enumerate(range(0, len(records), self.batch_size)):
            batch = records[start:start + self.batch_size]
            rows = self._build_rows(batch, target_source_id, start)

            try:
                await self.storage.insert(DATA_ROWS, rows)
            except CatalogException as e:
                failure = BatchFailure(batch_index=batch_index, size=len(batch), error=e.message)
                failures.append(failure)
                logger.error(
                    f"Batch {batch_index} ({len(batch)} rows) failed for source "
                    f"{target_source_id}: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
                continue

            inserted_count += len(batch)
            logger.debug(f"Batch {batch_index}: inserted {len(batch)} rows")

        if failures:
            logger.warning(
                f"Ingest for source {target_source_id} partially succeeded: "
                f"{inserted_count}/{len(records)} rows, {len(failures)} failed batches"
            )
        else:
            logger.info(f"Inserted {inserted_count} rows for source {target_source_id}")

        return IngestResult(
            inserted_count=inserted_count,
            records_parsed=len(records),
            failures=failures
        )

    @staticmethod
    def _build_rows(batch: List[Record], source_id: UUID, offset: int) -> List[Dict[str, Any]]:
        return [
            {
                "data_source_id": source_id,
                "json_data": record,
                "row_index": offset + position,
            }
            for position, record in enumerate(batch)
        ]
