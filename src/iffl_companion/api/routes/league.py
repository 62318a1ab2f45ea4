"""
League API Routes
"""

from typing import Any

from fastapi import APIRouter

from iffl_companion.api.dependencies import CurrentUserDep, LeagueDep
from iffl_companion.models.league import FantasyTeam
from iffl_companion.models.user import require_user

router = APIRouter()


@router.get(
    "/teams",
    response_model=list[FantasyTeam],
    summary="League teams",
)
async def get_teams(league: LeagueDep) -> list[FantasyTeam]:
    return league.teams


@router.get(
    "/me",
    response_model=dict[str, Any],
    summary="Signed-in user and default team",
)
async def get_me(user: CurrentUserDep, league: LeagueDep) -> dict[str, Any]:
    user = require_user(user)
    return {
        "user_id": user.user_id,
        "email": user.email,
        "team": league.team_for_email(user.email),
    }
