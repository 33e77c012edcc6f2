"""
CSV ingestion components for the data source catalog.

Modules:
    csv_parser: Quote-aware line splitter and header-keyed document parser
    fetcher: Remote CSV download over a shared httpx client
    pipeline: Fetch -> parse -> ordered batch insert with partial-failure accounting
    refresh: Purge-and-reingest coordinator and first-time registration
    registry: Data source metadata lifecycle, preview and row reads
    locks: Per-source asyncio locks for serialized refreshes
    exporter: Records -> CSV text
    seeds: Registration of configured seed sources

Architecture:
    registry ─┐
    pipeline ─┴─> refresh ─> api routes / scripts
       │
       ├─ fetcher (httpx)
       └─ csv_parser (pure)

Usage:
    from ingestion.csv_parser import parse_csv, split_csv_line
    from ingestion.pipeline import IngestionPipeline
    from ingestion.refresh import RefreshCoordinator

Example:
    pipeline = IngestionPipeline(storage, CSVFetcher(client))
    coordinator = RefreshCoordinator(DataSourceRegistry(storage), pipeline)

    source = await coordinator.create_and_ingest("People", "https://example.com/people.csv")
    result = await coordinator.refresh(source.id)

    print(f"Inserted {result.inserted_count} rows, {len(result.failures)} failed batches")

Error Handling:
    Terminal failures raise core.exceptions subclasses (ValidationError,
    ConflictError, NotFoundError, FetchError, DeleteError). Failed insert
    batches are reported on the result, never raised.
"""

__all__ = [
    "split_csv_line",
    "parse_csv",
    "CSVFetcher",
    "IngestionPipeline",
    "RefreshCoordinator",
    "DataSourceRegistry",
    "KeyedLock",
    "export_csv",
    "initialize_sources",
]
