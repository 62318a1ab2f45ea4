"""Tests for the spreadsheet client, its cache and the retry policy."""

import httpx
import pytest

from iffl_companion.clients.sheets import SheetCache, SheetsAPIError, SheetsClient
from tests.conftest import sheets_payload

RANGE = "Trades!A2:C"


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestSheetCache:
    def test_entries_without_ttl_persist(self):
        clock = FakeClock()
        cache = SheetCache(None, clock=clock)
        cache.set(RANGE, [["a"]])
        clock.now += 10_000
        assert cache.get(RANGE) == [["a"]]

    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = SheetCache(60, clock=clock)
        cache.set(RANGE, [["a"]])

        clock.now += 30
        assert RANGE in cache
        clock.now += 31
        assert cache.get(RANGE) is None
        assert len(cache) == 0

    def test_invalidate_one_or_all(self):
        cache = SheetCache()
        cache.set("A!A1", [["a"]])
        cache.set("B!A1", [["b"]])

        cache.invalidate("A!A1")
        assert "A!A1" not in cache
        assert "B!A1" in cache

        cache.invalidate()
        assert len(cache) == 0


class TestSheetsClient:
    @pytest.mark.asyncio
    async def test_fetch_values_normalizes_and_caches(self, sheets_factory):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=sheets_payload([["3/1/24", None, "Bill"], [42]]))

        async with sheets_factory(handler) as sheets:
            first = await sheets.fetch_values(RANGE)
            second = await sheets.fetch_values(RANGE)

        assert first == [["3/1/24", "", "Bill"], ["42"]]
        assert second == first
        assert len(calls) == 1
        assert calls[0].url.params["key"] == "test-key"
        assert calls[0].url.path == "/v4/spreadsheets/sheet-123/values/Trades!A2:C"

    @pytest.mark.asyncio
    async def test_mutating_returned_rows_leaves_cache_intact(self, sheets_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=sheets_payload([["3/1/24", "Jared", "Bill"]]))

        async with sheets_factory(handler) as sheets:
            fetched = await sheets.fetch_values(RANGE)
            fetched[0][1] = "changed"
            fetched.append(["extra"])
            cached = await sheets.fetch_values(RANGE)
            cached[0].clear()
            again = await sheets.fetch_values(RANGE)

        assert again == [["3/1/24", "Jared", "Bill"]]

    @pytest.mark.asyncio
    async def test_force_refresh_bypasses_cache(self, sheets_factory):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=sheets_payload([[str(len(calls))]]))

        async with sheets_factory(handler) as sheets:
            await sheets.fetch_values(RANGE)
            refreshed = await sheets.fetch_values(RANGE, force_refresh=True)

        assert refreshed == [["2"]]
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_missing_values_key_means_empty_range(self, sheets_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"range": RANGE, "majorDimension": "ROWS"})

        async with sheets_factory(handler) as sheets:
            assert await sheets.fetch_values(RANGE) == []

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self, sheets_factory):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=sheets_payload([["ok"]]))

        async with sheets_factory(handler) as sheets:
            assert await sheets.fetch_values(RANGE) == [["ok"]]
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, sheets_factory):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        async with sheets_factory(handler) as sheets:
            with pytest.raises(SheetsAPIError) as exc_info:
                await sheets.fetch_values(RANGE)

        assert exc_info.value.status_code == 500
        assert len(calls) == 3
        assert RANGE not in sheets.cache

    @pytest.mark.asyncio
    async def test_transport_errors_become_sheets_errors(self, sheets_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        async with sheets_factory(handler) as sheets:
            with pytest.raises(SheetsAPIError) as exc_info:
                await sheets.fetch_values(RANGE)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_auth_failure_is_not_retried(self, sheets_factory):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(403, json={"error": {"status": "PERMISSION_DENIED"}})

        async with sheets_factory(handler) as sheets:
            with pytest.raises(SheetsAPIError) as exc_info:
                await sheets.fetch_values(RANGE)

        assert exc_info.value.status_code == 403
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_client_requires_context_manager(self, settings):
        sheets = SheetsClient(settings)
        with pytest.raises(RuntimeError):
            await sheets.fetch_values(RANGE)
