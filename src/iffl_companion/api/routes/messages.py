"""
Message API Routes
"""

from typing import Annotated

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel

from iffl_companion.api.dependencies import CurrentUserDep, LeagueDep, MessageFeedDep
from iffl_companion.models.interest import LeagueMessage
from iffl_companion.models.user import require_user

router = APIRouter()


class MessageCreate(BaseModel):
    text: str
    team: str | None = None


@router.get(
    "",
    response_model=list[LeagueMessage],
    summary="Recent league messages",
)
async def list_messages(
    feed: MessageFeedDep,
    limit: Annotated[int | None, Query(ge=1, le=200)] = None,
) -> list[LeagueMessage]:
    return await feed.recent(limit)


@router.post(
    "",
    response_model=LeagueMessage,
    status_code=201,
    summary="Post a league message",
)
async def post_message(
    user: CurrentUserDep,
    league: LeagueDep,
    feed: MessageFeedDep,
    body: Annotated[MessageCreate, Body()],
) -> LeagueMessage:
    user = require_user(user)
    team = body.team or league.team_for_email(user.email)
    try:
        return await feed.post(user, team, body.text)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
