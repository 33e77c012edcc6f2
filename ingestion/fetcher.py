"""
Remote CSV fetcher.

Wraps an injected httpx.AsyncClient so one client (and its connection
pool and timeout) is shared by every ingest in the process.
"""

import httpx
from core.exceptions import FetchError
import logging

logger = logging.getLogger(__name__)


class CSVFetcher:
    """
    Download CSV text over HTTP.

    Any non-2xx response or transport failure is raised as FetchError; the
    caller decides what a failed fetch means for the data source.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch_text(self, url: str) -> str:
        """
        GET the URL and return the decoded body.

        Raises:
            FetchError: On non-success status, timeout or network error
        """
        logger.info(f"Fetching CSV from {url}")

        try:
            response = await self.client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(
                f"Timed out fetching CSV from {url}",
                context={"url": url},
                original_exception=e
            )
        except httpx.HTTPError as e:
            raise FetchError(
                f"Failed to fetch CSV: {str(e)}",
                context={"url": url},
                original_exception=e
            )

        if not response.is_success:
            raise FetchError(
                f"Failed to fetch CSV: {response.reason_phrase}",
                context={"url": url},
                http_status=response.status_code,
                status_text=response.reason_phrase
            )

        text = response.text
        logger.info(f"Fetched {len(text)} characters from {url}")
        return text
