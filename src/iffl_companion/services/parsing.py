"""
Master list row parser.

Converts ragged spreadsheet rows into Asset records. The sheet has no type
column: a row is a draft pick when its rookie-round or draft-year cell is
filled in.

Column layout (A..M):
    team, position, name, 2025 price, 2026 price, 2027 price, original price,
    purchase year, contract year, player pool, rookie round, draft year,
    trade history
"""

import logging
import re
from collections.abc import Iterable, Sequence

from iffl_companion.models.asset import Asset, ParseReport

logger = logging.getLogger(__name__)

MIN_ROW_CELLS = 3
_INTEGER = re.compile(r"[+-]?\d+")


def _cell(cells: Sequence[str], index: int, default: str = "") -> str:
    return cells[index] if len(cells) > index else default


def _parse_year(value: str) -> int:
    if _INTEGER.fullmatch(value):
        return int(value)
    return 0


def parse_asset_row(cells: Sequence[str]) -> Asset | None:
    """
    Parse one master list row.

    Args:
        cells: Row cells; only the first three are required

    Returns:
        Asset, or None when the row has fewer than three cells
    """
    if len(cells) < MIN_ROW_CELLS:
        return None

    return Asset(
        team=cells[0].strip(),
        position=cells[1],
        name=cells[2],
        price_2025=_cell(cells, 3, "$0"),
        price_2026=_cell(cells, 4),
        price_2027=_cell(cells, 5),
        original_price=_cell(cells, 6),
        purchase_year=_parse_year(_cell(cells, 7)),
        contract_year=_cell(cells, 8),
        player_pool=_cell(cells, 9),
        rookie_round=_cell(cells, 10),
        draft_year=_cell(cells, 11),
        trade_history=_cell(cells, 12),
    )


def parse_asset_rows(rows: Iterable[Sequence[str]]) -> tuple[list[Asset], ParseReport]:
    """
    Parse a whole range, skipping rows that are too short.

    Returns:
        Assets in input order and a report of what was skipped
    """
    assets: list[Asset] = []
    report = ParseReport()

    for index, row in enumerate(rows):
        report.total_rows += 1
        asset = parse_asset_row(row)
        if asset is None:
            report.skipped_rows.append(index)
            continue
        assets.append(asset)

    report.parsed = len(assets)
    if report.skipped:
        logger.warning(
            "Skipped %d of %d master list rows with fewer than %d cells",
            report.skipped,
            report.total_rows,
            MIN_ROW_CELLS,
        )
    return assets, report
