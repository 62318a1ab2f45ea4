"""
Trade Ledger Service

Parses the "Trades" sheet into Trade records and groups them by year.

The sheet is laid out in blocks. A row with a date opens a block and names
the two teams; the rows under it (blank date) list what each team received:

    3/1/24   Jared      Bill
             Player A   Pick B
    3/15/23  Bill       Jared
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from iffl_companion.clients.sheets import SheetsClient
from iffl_companion.models.trade import Trade

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%y"


def parse_trade_date(value: str) -> date | None:
    """Parse an M/D/YY ledger date, or None when it does not parse."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_trade_rows(rows: Iterable[Sequence[str]]) -> list[Trade]:
    """
    Segment ledger rows into trades.

    Asset rows that appear before the first dated row belong to no trade and
    are ignored.
    """
    trades: list[Trade] = []
    current: dict | None = None

    def flush() -> None:
        if current is not None:
            trades.append(
                Trade(
                    date=current["date"],
                    team1=current["team1"],
                    team2=current["team2"],
                    team1_receives=tuple(current["team1_receives"]),
                    team2_receives=tuple(current["team2_receives"]),
                )
            )

    for row in rows:
        date_cell = row[0] if len(row) > 0 else ""
        col_b = row[1] if len(row) > 1 else ""
        col_c = row[2] if len(row) > 2 else ""

        if date_cell:
            flush()
            current = {
                "date": date_cell,
                "team1": col_b,
                "team2": col_c,
                "team1_receives": [],
                "team2_receives": [],
            }
        elif current is not None:
            if col_b:
                current["team1_receives"].append(col_b)
            if col_c:
                current["team2_receives"].append(col_c)
        elif col_b or col_c:
            logger.debug("Ignoring asset row before the first dated trade: %s", list(row))

    flush()
    return trades


def group_trades_by_year(trades: Iterable[Trade]) -> tuple[dict[str, list[Trade]], int]:
    """
    Group trades by the year component of their date.

    Returns:
        Mapping of year key (e.g. "24") to trades in input order, and the
        number of trades dropped because their date is not X/X/X
    """
    by_year: dict[str, list[Trade]] = {}
    skipped = 0
    for trade in trades:
        key = trade.year_key
        if not key:
            skipped += 1
            continue
        by_year.setdefault(key, []).append(trade)

    if skipped:
        logger.warning("Dropped %d trades with malformed dates from the ledger", skipped)
    return by_year, skipped


def sort_trades(trades: Iterable[Trade], ascending: bool = True) -> list[Trade]:
    """
    Order trades by calendar date.

    Trades whose date does not parse go last, in their original order.
    """
    dated: list[tuple[date, Trade]] = []
    undated: list[Trade] = []
    for trade in trades:
        parsed = parse_trade_date(trade.date)
        if parsed is None:
            undated.append(trade)
        else:
            dated.append((parsed, trade))

    dated.sort(key=lambda pair: pair[0], reverse=not ascending)
    return [trade for _, trade in dated] + undated


class TradeLedger:
    """Parsed trade history, grouped by year."""

    def __init__(self, trades: Iterable[Trade]):
        self.trades = list(trades)
        self.by_year, self.skipped = group_trades_by_year(self.trades)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> "TradeLedger":
        return cls(parse_trade_rows(rows))

    def years(self) -> list[str]:
        return sorted(self.by_year)

    def _key(self, year: str | int) -> str | None:
        year = str(year)
        if year in self.by_year:
            return year
        # The sheet writes two-digit years; accept "2025" for "25".
        if len(year) == 4 and year[2:] in self.by_year:
            return year[2:]
        return None

    def for_year(self, year: str | int) -> list[Trade]:
        key = self._key(year)
        return list(self.by_year[key]) if key else []

    def current_year_trades(self, year: str | int) -> list[Trade]:
        """This season's trades, most recent first."""
        return sort_trades(self.for_year(year), ascending=False)

    def history(self, year: str | int) -> list[Trade]:
        """A past season's trades, oldest first."""
        return sort_trades(self.for_year(year), ascending=True)

    def historical_years(self, current_year: int, span: int = 3) -> list[str]:
        """The previous ``span`` seasons that have trades, most recent first."""
        years = range(current_year - 1, current_year - span - 1, -1)
        return [str(y) for y in years if self.for_year(y)]

    def grouped_trades(self) -> list[Trade]:
        """Every trade that landed in a year group, in ledger order."""
        return [t for t in self.trades if t.year_key]

    def search(self, text: str) -> dict[str, list[Trade]]:
        """Year groups filtered to trades matching ``text``; empty years removed."""
        if not text:
            return {year: list(trades) for year, trades in self.by_year.items()}

        result: dict[str, list[Trade]] = {}
        for year, trades in self.by_year.items():
            matching = [t for t in trades if t.matches(text)]
            if matching:
                result[year] = matching
        return result


class TradeLedgerService:
    """Loads the trade ledger range from the spreadsheet."""

    def __init__(self, sheets: SheetsClient, range_: str | None = None):
        self.sheets = sheets
        self.range = range_ or sheets.settings.trades_range
        self.ledger: TradeLedger | None = None

    async def refresh(self, force: bool = False) -> TradeLedger:
        if force:
            self.sheets.cache.invalidate(self.range)
        rows = await self.sheets.fetch_values(self.range)
        self.ledger = TradeLedger.from_rows(rows)
        logger.info(
            "Ledger loaded: %d trades across %d years", len(self.ledger.trades), len(self.ledger.by_year)
        )
        return self.ledger

    async def ensure_loaded(self) -> TradeLedger:
        if self.ledger is None:
            return await self.refresh()
        return self.ledger
