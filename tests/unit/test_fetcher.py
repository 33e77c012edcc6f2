"""
Unit tests for the remote CSV fetcher
"""

import httpx
import pytest
from core.exceptions import FetchError
from ingestion.fetcher import CSVFetcher

from conftest import PEOPLE_URL, PEOPLE_CSV


class TestCSVFetcher:
    """Test HTTP fetch and error mapping"""

    @pytest.mark.asyncio
    async def test_fetch_text_success(self, fetcher):
        text = await fetcher.fetch_text(PEOPLE_URL)

        assert text == PEOPLE_CSV

    @pytest.mark.asyncio
    async def test_non_success_status_raises_fetch_error(self, fetcher, csv_server):
        csv_server.serve("https://csv.example.com/gone.csv", "missing", status_code=404)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text("https://csv.example.com/gone.csv")

        error = exc_info.value
        assert error.http_status == 404
        assert error.status_text == "Not Found"
        assert error.context["status_code"] == 404
        assert "Not Found" in error.message

    @pytest.mark.asyncio
    async def test_server_error_raises_fetch_error(self, fetcher, csv_server):
        csv_server.serve("https://csv.example.com/broken.csv", "", status_code=503)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text("https://csv.example.com/broken.csv")

        assert exc_info.value.http_status == 503

    @pytest.mark.asyncio
    async def test_connection_error_raises_fetch_error(self, fetcher, csv_server):
        csv_server.unreachable.add(PEOPLE_URL)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch_text(PEOPLE_URL)

        assert exc_info.value.http_status is None
        assert isinstance(exc_info.value.original_exception, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_error(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FetchError) as exc_info:
                await CSVFetcher(client).fetch_text(PEOPLE_URL)

        assert "Timed out" in exc_info.value.message
