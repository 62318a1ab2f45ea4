"""
Asset API Routes

Endpoints for browsing the season master list: team rosters, search,
filtering and price sorting.
"""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path, Query

from iffl_companion.api.dependencies import CatalogDep, CatalogServiceDep
from iffl_companion.models.asset import Asset, ParseReport
from iffl_companion.services.catalog import ALL, SortOrder

router = APIRouter()


@router.get(
    "",
    response_model=list[Asset],
    summary="Search players and picks",
    description="Filter by name, teams and positions and sort by 2025 price.",
)
async def search_assets(
    catalog: CatalogDep,
    q: Annotated[str, Query(description="Name contains (case-insensitive)")] = "",
    teams: Annotated[list[str], Query(description="Teams to include, or All")] = [ALL],
    positions: Annotated[
        list[str], Query(description="Positions to include: QB, RB, WR, TE, Picks or All")
    ] = [ALL],
    sort: Annotated[SortOrder, Query(description="Highest or Lowest price first")] = SortOrder.HIGHEST,
) -> list[Asset]:
    """Search the master list."""
    return catalog.search(q, set(teams), set(positions), sort)


@router.get(
    "/teams/{team}",
    response_model=list[Asset],
    summary="Get a team's roster and picks",
)
async def get_team_assets(
    catalog: CatalogDep,
    team: Annotated[str, Path(description="Team name (substring match)")],
) -> list[Asset]:
    """Assets whose team contains the given name, in sheet order."""
    return catalog.filter_by_team(team)


@router.post(
    "/refresh",
    response_model=ParseReport,
    summary="Reload the master list",
    description="Drop the cached sheet range and load it again.",
)
async def refresh_assets(service: CatalogServiceDep) -> ParseReport:
    return await service.refresh(force=True)


@router.get(
    "/{asset_id:path}",
    response_model=dict[str, Any],
    summary="Get one asset",
    description="Player or draft pick detail for a team+name asset id.",
)
async def get_asset(
    catalog: CatalogDep,
    asset_id: Annotated[str, Path(description="Team name followed by asset name")],
) -> dict[str, Any]:
    asset = catalog.get(asset_id)
    if asset is None:
        raise HTTPException(status_code=404, detail=f"Asset not found: {asset_id}")

    if asset.is_pick:
        return {"kind": "pick", "asset": asset, "pick": asset.to_draft_pick()}
    player = asset.to_roster_player()
    return {
        "kind": "player",
        "asset": asset,
        "player": player,
        "purchase_year": player.formatted_purchase_year,
    }
