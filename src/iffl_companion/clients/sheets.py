"""
Async Google Sheets Client

Reads cell ranges from the league spreadsheet with the Sheets v4 values API.
Uses httpx for async HTTP requests and keeps an explicit per-range cache.

API Documentation: https://developers.google.com/sheets/api/reference/rest
"""

import logging
import time
from collections.abc import Callable
from urllib.parse import quote

import httpx

from iffl_companion.clients.retry import TransientHTTPError, request_with_retry
from iffl_companion.config import Settings, get_settings

logger = logging.getLogger(__name__)

Rows = list[list[str]]


class SheetsAPIError(Exception):
    """Exception raised for spreadsheet fetch failures."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class SheetCache:
    """
    In-memory cache of fetched ranges.

    Entries live until ``ttl_seconds`` elapse, or forever when the TTL is
    None, and can always be dropped with ``invalidate``. Rows are copied in
    and out, so callers never share the cached lists.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds or None
        self._clock = clock
        self._entries: dict[str, tuple[float, Rows]] = {}

    def get(self, range_: str) -> Rows | None:
        item = self._entries.get(range_)
        if item is None:
            return None
        stored_at, values = item
        if self.ttl is not None and self._clock() - stored_at > self.ttl:
            del self._entries[range_]
            logger.debug("Cache entry expired for %s", range_)
            return None
        return [list(row) for row in values]

    def set(self, range_: str, values: Rows) -> None:
        self._entries[range_] = (self._clock(), [list(row) for row in values])

    def invalidate(self, range_: str | None = None) -> None:
        """Drop one range, or everything when no range is given."""
        if range_ is None:
            self._entries.clear()
        else:
            self._entries.pop(range_, None)
        logger.debug("Cache invalidated: %s", range_ or "<all>")

    def __contains__(self, range_: str) -> bool:
        return self.get(range_) is not None

    def __len__(self) -> int:
        return len(self._entries)


class SheetsClient:
    """
    Async client for the league spreadsheet.

    Usage:
        async with SheetsClient() as sheets:
            rows = await sheets.fetch_values("2025 Master List!A2:M")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache: SheetCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else SheetCache(self.settings.sheets_cache_ttl)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SheetsClient":
        """Create HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            base_url=self.settings.sheets_base_url,
            timeout=httpx.Timeout(self.settings.http_timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "SheetsClient must be used as async context manager: "
                "async with SheetsClient() as sheets: ..."
            )
        return self._client

    async def fetch_values(self, range_: str, force_refresh: bool = False) -> Rows:
        """
        Fetch a cell range as rows of strings.

        Args:
            range_: A1 range including the sheet name, e.g. "Trades!A2:C"
            force_refresh: Bypass and replace the cached entry

        Returns:
            Ragged rows; trailing empty cells are omitted by the API

        Raises:
            SheetsAPIError: network, auth or server failure
        """
        if not force_refresh:
            cached = self.cache.get(range_)
            if cached is not None:
                logger.debug("Cache hit for %s", range_)
                return cached

        endpoint = (
            f"/spreadsheets/{self.settings.spreadsheet_id}/values/{quote(range_, safe='!:')}"
        )
        try:
            response = await request_with_retry(
                self.client,
                "GET",
                endpoint,
                self.settings,
                params={"key": self.settings.sheets_api_key},
            )
        except TransientHTTPError as e:
            raise SheetsAPIError(
                f"Failed to fetch {range_}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise SheetsAPIError(f"Failed to fetch {range_}: {e}") from e

        if response.status_code != 200:
            raise SheetsAPIError(
                f"Failed to fetch {range_}", status_code=response.status_code
            )

        values = [
            ["" if cell is None else str(cell) for cell in row]
            for row in response.json().get("values", [])
        ]
        self.cache.set(range_, values)
        logger.debug("Fetched %d rows for %s", len(values), range_)
        return values
