"""
Trade API Routes

Endpoints for the trade ledger: this season, past seasons and search.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query

from iffl_companion.api.dependencies import LedgerServiceDep, SettingsDep
from iffl_companion.models.trade import Trade

router = APIRouter()


@router.get(
    "/years/{year}",
    response_model=dict[str, Any],
    summary="Get trades for a year",
    description="Current season newest first; past seasons oldest first.",
)
async def get_year_trades(
    service: LedgerServiceDep,
    settings: SettingsDep,
    year: Annotated[str, Path(description="Year, e.g. 2025 or 25")],
) -> dict[str, Any]:
    ledger = await service.ensure_loaded()
    if year in (settings.current_year, settings.current_year[2:]):
        trades = ledger.current_year_trades(year)
    else:
        trades = ledger.history(year)
    return {"year": year, "count": len(trades), "trades": trades}


@router.get(
    "/history",
    response_model=list[dict[str, Any]],
    summary="Get historical trade years",
    description="Previous seasons that have trades, most recent first.",
)
async def get_trade_history(
    service: LedgerServiceDep,
    settings: SettingsDep,
    span: Annotated[int, Query(description="Number of past seasons", ge=1, le=20)] = 3,
) -> list[dict[str, Any]]:
    ledger = await service.ensure_loaded()
    return [
        {"year": year, "count": len(ledger.for_year(year))}
        for year in ledger.historical_years(int(settings.current_year), span)
    ]


@router.get(
    "/search",
    response_model=dict[str, list[Trade]],
    summary="Search trades",
    description="Match dates, team names or traded assets (case-insensitive).",
)
async def search_trades(
    service: LedgerServiceDep,
    q: Annotated[str, Query(description="Search text")] = "",
) -> dict[str, list[Trade]]:
    ledger = await service.ensure_loaded()
    return ledger.search(q)


@router.post(
    "/refresh",
    response_model=dict[str, Any],
    summary="Reload the trade ledger",
)
async def refresh_trades(service: LedgerServiceDep) -> dict[str, Any]:
    ledger = await service.refresh(force=True)
    return {
        "trades": len(ledger.trades),
        "years": ledger.years(),
        "skipped": ledger.skipped,
    }
