"""
Asset Catalog Service

Holds the season's master list in memory and answers the roster, search,
filter and sort queries the league views need. A load always replaces the
whole set; there is no incremental merge.
"""

import logging
import re
from collections.abc import Collection, Iterable, Iterator, Sequence
from enum import Enum

from iffl_companion.clients.sheets import SheetsClient
from iffl_companion.models.asset import Asset, ParseReport
from iffl_companion.services.parsing import parse_asset_rows

logger = logging.getLogger(__name__)

ALL = "All"
PICKS = "Picks"
POSITIONS = [ALL, "QB", "RB", "WR", "TE", PICKS]

_NON_DIGITS = re.compile(r"[^0-9]")


class SortOrder(str, Enum):
    """Price sort direction."""

    HIGHEST = "Highest"
    LOWEST = "Lowest"


def price_key(price: str) -> int:
    """Numeric sort key for a currency string: every non-digit is dropped."""
    digits = _NON_DIGITS.sub("", price)
    return int(digits) if digits else 0


def toggle_filter(selection: set[str], item: str, all_items: Sequence[str]) -> set[str]:
    """
    Apply one filter-chip tap and return the new selection.

    Tapping "All" selects everything, or clears everything when "All" was
    already on. Tapping another chip flips it; "All" is dropped as soon as
    anything is missing and re-added once every other chip is on.
    """
    if item == ALL:
        return set() if ALL in selection else set(all_items)

    result = set(selection)
    if item in result:
        result.discard(item)
    else:
        result.add(item)

    if ALL in result and len(result) < len(all_items):
        result.discard(ALL)
    if ALL not in result and len(result) == len(all_items) - 1:
        result.add(ALL)
    return result


class AssetCatalog:
    """In-memory set of every Asset for the current season."""

    def __init__(self, assets: Iterable[Asset] | None = None):
        self._assets: list[Asset] = []
        self._by_id: dict[str, Asset] = {}
        self.loaded = False
        self.last_report: ParseReport | None = None
        if assets is not None:
            self.replace(assets)

    def replace(self, assets: Iterable[Asset]) -> None:
        """Swap in a new asset set wholesale."""
        self._assets = list(assets)
        self._by_id = {}
        collisions = 0
        for asset in self._assets:
            if asset.asset_id in self._by_id:
                collisions += 1
                continue
            self._by_id[asset.asset_id] = asset
        if collisions:
            logger.warning("%d assets share a team+name id with an earlier row", collisions)
        self.loaded = True

    def load(self, rows: Iterable[Sequence[str]]) -> ParseReport:
        """Parse sheet rows and replace the catalog with the result."""
        assets, report = parse_asset_rows(rows)
        self.replace(assets)
        self.last_report = report
        logger.info("Catalog loaded with %d assets", len(assets))
        return report

    def all(self) -> list[Asset]:
        return list(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets)

    def get(self, asset_id: str) -> Asset | None:
        return self._by_id.get(asset_id)

    def resolve(self, asset_ids: Iterable[str]) -> list[Asset]:
        """Known assets for the given ids, in the order given; unknown ids are dropped."""
        return [self._by_id[i] for i in asset_ids if i in self._by_id]

    def teams(self) -> list[str]:
        seen: dict[str, None] = {}
        for asset in self._assets:
            seen.setdefault(asset.team, None)
        return list(seen)

    def filter_by_team(self, name: str) -> list[Asset]:
        """Case-insensitive substring match on the team column."""
        needle = name.lower()
        return [a for a in self._assets if needle in a.team.lower()]

    def search(
        self,
        text: str = "",
        teams: Collection[str] = (ALL,),
        positions: Collection[str] = (ALL,),
        sort: SortOrder | str = SortOrder.HIGHEST,
    ) -> list[Asset]:
        """
        Filter and sort the catalog.

        Args:
            text: Case-insensitive substring of the asset name; empty matches all
            teams: Teams to keep; any selection containing "All" keeps every team
            positions: Positions to keep; "Picks" keeps every draft pick and
                "All" keeps everything
            sort: "Highest" or "Lowest" 2025 price first

        Returns:
            Matching assets; equal prices keep their input order
        """
        sort = SortOrder(sort)
        result = self._assets

        if text:
            needle = text.lower()
            result = [a for a in result if needle in a.name.lower()]

        if ALL not in teams:
            result = [a for a in result if a.team in teams]

        if ALL not in positions:
            want_picks = PICKS in positions
            result = [
                a for a in result
                if (want_picks and a.is_pick) or a.position in positions
            ]

        return sorted(
            result,
            key=lambda a: price_key(a.price_2025),
            reverse=sort is SortOrder.HIGHEST,
        )


class AssetCatalogService:
    """Loads the master list range from the spreadsheet into a catalog."""

    def __init__(
        self,
        sheets: SheetsClient,
        catalog: AssetCatalog | None = None,
        range_: str | None = None,
    ):
        self.sheets = sheets
        self.catalog = catalog if catalog is not None else AssetCatalog()
        self.range = range_ or sheets.settings.master_list_range

    async def refresh(self, force: bool = False) -> ParseReport:
        """
        (Re)load the catalog.

        Args:
            force: Drop the cached range and fetch it again

        Raises:
            SheetsAPIError: the fetch failed; the current catalog is kept
        """
        if force:
            self.sheets.cache.invalidate(self.range)
        rows = await self.sheets.fetch_values(self.range)
        return self.catalog.load(rows)

    async def ensure_loaded(self) -> AssetCatalog:
        if not self.catalog.loaded:
            await self.refresh()
        return self.catalog
