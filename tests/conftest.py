"""
Pytest configuration and fixtures
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import httpx
import pytest
import pytest_asyncio

from core.exceptions import StorageError
from core.storage import StorageClient, DATA_SOURCES, DATA_ROWS
from ingestion.fetcher import CSVFetcher
from ingestion.pipeline import IngestionPipeline
from ingestion.refresh import RefreshCoordinator
from ingestion.registry import DataSourceRegistry


PEOPLE_URL = "https://csv.example.com/people.csv"
PEOPLE_CSV = "name,age\nAlice,30\nBob,25"


class InMemoryStorage(StorageClient):
    """
    StorageClient fake keeping both tables in lists.

    Failure injection:
        fail_row_batches: 0-based indices of data_rows insert calls to reject
        fail_operations: {(operation, table)} pairs that always raise StorageError
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {DATA_SOURCES: [], DATA_ROWS: []}
        self.fail_row_batches: Set[int] = set()
        self.fail_operations: Set[Tuple[str, str]] = set()
        self.row_insert_calls: List[int] = []
        self.available = True
        self._clock = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)

    def _now(self) -> datetime:
        self._clock += timedelta(microseconds=1)
        return self._clock

    def _check(self, operation: str, table: str):
        if table not in self.tables:
            raise StorageError(f"Unknown table: {table}", context={"table_name": table})
        if (operation, table) in self.fail_operations:
            raise StorageError(
                f"Simulated {operation} failure",
                context={"operation": operation, "table_name": table}
            )

    @staticmethod
    def _matches(row: Dict[str, Any], filters) -> bool:
        return all(row.get(k) == v for k, v in (filters or {}).items())

    def _defaults(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        now = self._now()
        if table == DATA_SOURCES:
            base = {
                "id": uuid.uuid4(),
                "description": None,
                "row_count": 0,
                "last_refresh": None,
                "created_at": now,
                "updated_at": now,
            }
        else:
            base = {"id": uuid.uuid4(), "row_index": 0, "created_at": now}
        base.update(row)
        return base

    async def select(
        self,
        table: str,
        filters=None,
        order_by=None,
        ascending: bool = True,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        self._check("select", table)
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]

        if order_by:
            names = [order_by] if isinstance(order_by, str) else list(order_by)
            rows.sort(key=lambda r: tuple(r[n] for n in names), reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        if columns:
            rows = [{c: r[c] for c in columns} for r in rows]
        return rows

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        self._check("insert", table)

        if table == DATA_ROWS:
            call_index = len(self.row_insert_calls)
            self.row_insert_calls.append(len(rows))
            if call_index in self.fail_row_batches:
                raise StorageError(
                    f"Simulated failure of batch {call_index}",
                    context={"operation": "INSERT", "table_name": table}
                )

        if table == DATA_SOURCES:
            urls = {r["url"] for r in self.tables[DATA_SOURCES]}
            if any(row["url"] in urls for row in rows):
                raise StorageError("duplicate key value violates unique constraint")

        created = [self._defaults(table, row) for row in rows]
        self.tables[table].extend(created)
        return [dict(r) for r in created]

    async def update(self, table: str, patch: Dict[str, Any], filters) -> int:
        self._check("update", table)
        updated = 0
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(patch)
                if table == DATA_SOURCES:
                    row["updated_at"] = self._now()
                updated += 1
        return updated

    async def delete(self, table: str, filters) -> int:
        self._check("delete", table)
        doomed = [r for r in self.tables[table] if self._matches(r, filters)]
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]

        if table == DATA_SOURCES:
            ids = {r["id"] for r in doomed}
            self.tables[DATA_ROWS] = [
                r for r in self.tables[DATA_ROWS] if r["data_source_id"] not in ids
            ]
        return len(doomed)

    async def count(self, table: str, filters=None) -> int:
        self._check("select", table)
        return sum(1 for r in self.tables[table] if self._matches(r, filters))

    async def ping(self) -> bool:
        return self.available

    # Helpers for assertions
    def rows_for(self, source_id) -> List[Dict[str, Any]]:
        rows = [r for r in self.tables[DATA_ROWS] if r["data_source_id"] == source_id]
        return [r["json_data"] for r in sorted(rows, key=lambda r: r["row_index"])]


class CSVServer:
    """httpx.MockTransport handler serving CSV bodies by URL"""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, str]] = {}
        self.unreachable: Set[str] = set()
        self.requests: List[str] = []

    def serve(self, url: str, body: str, status_code: int = 200):
        self.routes[url] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)

        if url in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        status_code, body = self.routes.get(url, (404, "not found"))
        return httpx.Response(status_code, text=body)


def make_csv(rows: int, headers: Sequence[str] = ("id", "value")) -> str:
    lines = [",".join(headers)]
    for i in range(rows):
        lines.append(",".join(f"{h}_{i}" for h in headers))
    return "\n".join(lines) + "\n"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def csv_server() -> CSVServer:
    server = CSVServer()
    server.serve(PEOPLE_URL, PEOPLE_CSV)
    return server


@pytest_asyncio.fixture
async def http_client(csv_server):
    async with httpx.AsyncClient(transport=httpx.MockTransport(csv_server.handler)) as client:
        yield client


@pytest.fixture
def fetcher(http_client) -> CSVFetcher:
    return CSVFetcher(http_client)


@pytest.fixture
def pipeline(storage, fetcher) -> IngestionPipeline:
    return IngestionPipeline(storage, fetcher, batch_size=100)


@pytest.fixture
def registry(storage) -> DataSourceRegistry:
    return DataSourceRegistry(storage)


@pytest.fixture
def coordinator(registry, pipeline) -> RefreshCoordinator:
    return RefreshCoordinator(registry, pipeline)
