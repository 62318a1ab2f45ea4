"""
Trade Proposal API Routes

Endpoints for proposing trades and answering proposals addressed to a team.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Path, Query
from pydantic import BaseModel, Field

from iffl_companion.api.dependencies import (
    CurrentUserDep,
    LeagueDep,
    ProposalServiceDep,
)
from iffl_companion.models.proposal import ProposalResponse, TradeProposal
from iffl_companion.models.user import require_user

router = APIRouter()


class ProposalCreate(BaseModel):
    """Request body for a new proposal."""

    recipient: str
    offered_ids: list[str] = Field(default_factory=list)
    requested_ids: list[str] = Field(default_factory=list)
    proposer: str | None = Field(
        default=None, description="Defaults to the signed-in user's team"
    )


class ProposalAnswer(BaseModel):
    response: ProposalResponse


@router.post(
    "",
    response_model=TradeProposal,
    status_code=201,
    summary="Propose a trade",
)
async def create_proposal(
    user: CurrentUserDep,
    league: LeagueDep,
    service: ProposalServiceDep,
    body: Annotated[ProposalCreate, Body()],
) -> TradeProposal:
    user = require_user(user)
    proposer = body.proposer or league.team_for_email(user.email)
    return await service.submit(
        user, proposer, body.recipient, body.offered_ids, body.requested_ids
    )


@router.get(
    "/pending",
    response_model=list[TradeProposal],
    summary="Pending proposals for a team",
    description="Only proposals addressed to the team that are still pending.",
)
async def list_pending(
    user: CurrentUserDep,
    league: LeagueDep,
    service: ProposalServiceDep,
    team: Annotated[str | None, Query(description="Defaults to the signed-in user's team")] = None,
) -> list[TradeProposal]:
    if team is None:
        team = league.team_for_email(require_user(user).email)
    return await service.pending_for(team)


@router.get(
    "/{proposal_id}",
    response_model=TradeProposal,
    summary="Get a proposal",
)
async def get_proposal(
    service: ProposalServiceDep,
    proposal_id: Annotated[str, Path()],
) -> TradeProposal:
    return await service.get(proposal_id)


@router.post(
    "/{proposal_id}/respond",
    response_model=TradeProposal,
    summary="Answer a proposal",
    description="yes accepts, no rejects, maybe leaves it pending.",
)
async def respond_to_proposal(
    user: CurrentUserDep,
    service: ProposalServiceDep,
    proposal_id: Annotated[str, Path()],
    body: Annotated[ProposalAnswer, Body()],
) -> TradeProposal:
    return await service.respond(user, proposal_id, body.response)
