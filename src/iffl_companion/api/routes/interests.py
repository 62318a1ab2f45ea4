"""
Interest API Routes

Endpoints for marking and listing assets the signed-in user is interested in.
"""

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path

from iffl_companion.api.dependencies import CatalogDep, CurrentUserDep, StoreDep
from iffl_companion.models.asset import Asset
from iffl_companion.models.user import require_user
from iffl_companion.services.interests import InterestTracker

router = APIRouter()


@router.get(
    "",
    response_model=list[Asset],
    summary="List my interests",
)
async def list_interests(
    user: CurrentUserDep,
    store: StoreDep,
    catalog: CatalogDep,
) -> list[Asset]:
    user = require_user(user)
    tracker = InterestTracker(store, catalog)
    await tracker.load(user.user_id)
    return tracker.interested_assets


@router.post(
    "/{asset_id:path}/toggle",
    response_model=dict[str, Any],
    summary="Toggle interest in an asset",
)
async def toggle_interest(
    user: CurrentUserDep,
    store: StoreDep,
    catalog: CatalogDep,
    asset_id: Annotated[str, Path(description="Team name followed by asset name")],
) -> dict[str, Any]:
    user = require_user(user)
    asset = catalog.get(asset_id)
    if asset is None:
        raise HTTPException(status_code=404, detail=f"Asset not found: {asset_id}")

    tracker = InterestTracker(store, catalog)
    await tracker.load(user.user_id)
    interested = await tracker.toggle(asset, user)
    return {"asset_id": asset_id, "interested": interested}
