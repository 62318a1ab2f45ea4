"""Tests for trade ledger parsing, grouping, ordering and search."""

from datetime import date

import httpx
import pytest

from iffl_companion.models.trade import Trade
from iffl_companion.services.ledger import (
    TradeLedger,
    TradeLedgerService,
    group_trades_by_year,
    parse_trade_date,
    parse_trade_rows,
    sort_trades,
)
from tests.conftest import sheets_payload


def trade(date_: str, team1: str = "Jared", team2: str = "Bill", **kwargs) -> Trade:
    return Trade(date=date_, team1=team1, team2=team2, **kwargs)


class TestParseTradeRows:
    def test_blocks_become_trades(self, trade_rows):
        trades = parse_trade_rows(trade_rows)

        assert len(trades) == 2
        first, second = trades
        assert first.date == "3/1/24"
        assert (first.team1, first.team2) == ("Jared", "Bill")
        assert first.team1_receives == ("Player A",)
        assert first.team2_receives == ("Pick B",)
        assert second.date == "3/15/23"
        assert (second.team1, second.team2) == ("Bill", "Jared")
        assert second.team1_receives == ()
        assert second.team2_receives == ()

    def test_one_sided_asset_rows(self):
        rows = [
            ["9/2/25", "Ryan", "Wayne"],
            ["", "", "2026 1st"],
            ["", "D. Henry"],
            ["", "T. Kelce", ""],
        ]
        (only,) = parse_trade_rows(rows)

        assert only.team1_receives == ("D. Henry", "T. Kelce")
        assert only.team2_receives == ("2026 1st",)

    def test_rows_before_first_date_are_ignored(self):
        rows = [["", "Orphan"], ["1/5/25", "Abad", "Foley"], ["", "X", "Y"]]
        (only,) = parse_trade_rows(rows)

        assert only.team1_receives == ("X",)

    def test_empty_rows_and_input(self):
        assert parse_trade_rows([]) == []
        (only,) = parse_trade_rows([["1/5/25", "Abad", "Foley"], []])
        assert only.team1_receives == ()

    def test_header_row_with_missing_team_cells(self):
        (only,) = parse_trade_rows([["1/5/25"]])
        assert (only.team1, only.team2) == ("", "")


class TestGrouping:
    def test_group_by_year(self, trade_rows):
        by_year, skipped = group_trades_by_year(parse_trade_rows(trade_rows))

        assert skipped == 0
        assert set(by_year) == {"24", "23"}
        assert by_year["24"][0].team1_receives == ("Player A",)
        assert by_year["23"][0].team1_receives == ()

    def test_malformed_dates_are_dropped_and_counted(self):
        trades = [trade("3/1/24"), trade("March 2024"), trade("3/1"), trade("1/2/3/4")]
        by_year, skipped = group_trades_by_year(trades)

        assert skipped == 3
        assert list(by_year) == ["24"]

    def test_flattening_groups_recovers_well_formed_trades(self):
        trades = [trade("3/1/24"), trade("bad"), trade("5/1/23"), trade("6/1/24")]
        ledger = TradeLedger(trades)
        flattened = [t for group in ledger.by_year.values() for t in group]

        assert sorted(flattened, key=trades.index) == [trades[0], trades[2], trades[3]]
        assert ledger.grouped_trades() == [trades[0], trades[2], trades[3]]
        assert ledger.skipped == 1


class TestSorting:
    def test_parse_trade_date(self):
        assert parse_trade_date("3/1/24") == date(2024, 3, 1)
        assert parse_trade_date("12/31/99") == date(1999, 12, 31)
        assert parse_trade_date("13/1/24") is None
        assert parse_trade_date("soon") is None

    def test_descending_and_ascending(self):
        trades = [trade("3/1/24"), trade("11/15/24"), trade("1/2/24")]

        assert [t.date for t in sort_trades(trades, ascending=False)] == ["11/15/24", "3/1/24", "1/2/24"]
        assert [t.date for t in sort_trades(trades, ascending=True)] == ["1/2/24", "3/1/24", "11/15/24"]

    def test_unparsable_dates_sort_last_in_input_order(self):
        trades = [trade("99/99/24", team1="A"), trade("3/1/24"), trade("0/0/24", team1="B")]
        result = sort_trades(trades, ascending=False)

        assert [t.date for t in result] == ["3/1/24", "99/99/24", "0/0/24"]


class TestTradeLedger:
    @pytest.fixture
    def ledger(self) -> TradeLedger:
        return TradeLedger.from_rows(
            [
                ["3/1/25", "Jared", "Bill"],
                ["", "J. Allen", "2026 1st"],
                ["9/10/25", "Abad", "Foley"],
                ["", "J. Chase", "T. Hill"],
                ["2/2/24", "Ryan", "Wayne"],
                ["", "D. Henry", ""],
                ["8/8/22", "Dugan", "Jason"],
                ["", "", "C. McCaffrey"],
                ["7/7/21", "Faybik", "Cantone"],
                ["TBD", "Jared", "Abad"],
            ]
        )

    def test_for_year_accepts_both_year_forms(self, ledger):
        assert len(ledger.for_year("25")) == 2
        assert len(ledger.for_year("2025")) == 2
        assert len(ledger.for_year(2025)) == 2
        assert ledger.for_year("2030") == []

    def test_current_year_is_newest_first(self, ledger):
        assert [t.date for t in ledger.current_year_trades("2025")] == ["9/10/25", "3/1/25"]

    def test_history_is_oldest_first(self, ledger):
        assert [t.date for t in ledger.history("2025")] == ["3/1/25", "9/10/25"]

    def test_historical_years(self, ledger):
        assert ledger.historical_years(2025) == ["2024", "2022"]
        assert ledger.historical_years(2025, span=4) == ["2024", "2022", "2021"]

    def test_skipped_count(self, ledger):
        assert ledger.skipped == 1

    def test_search_matches_teams_assets_and_dates(self, ledger):
        assert {y: len(t) for y, t in ledger.search("chase").items()} == {"25": 1}
        assert set(ledger.search("mccaffrey")) == {"22"}
        assert set(ledger.search("jared")) == {"25"}
        assert set(ledger.search("2/2/")) == {"24"}
        assert ledger.search("nobody") == {}

    def test_empty_search_returns_everything(self, ledger):
        assert ledger.search("") == ledger.by_year


class TestTradeLedgerService:
    @pytest.mark.asyncio
    async def test_refresh(self, sheets_factory, trade_rows):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/values/Trades!A2:C")
            return httpx.Response(200, json=sheets_payload(trade_rows))

        async with sheets_factory(handler) as sheets:
            service = TradeLedgerService(sheets)
            ledger = await service.ensure_loaded()

        assert ledger.years() == ["23", "24"]
        assert service.ledger is ledger
