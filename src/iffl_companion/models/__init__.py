"""Pydantic models and schemas."""

from iffl_companion.models.asset import Asset, DraftPick, ParseReport, RosterPlayer
from iffl_companion.models.interest import LeagueMessage, PlayerInterest
from iffl_companion.models.league import FantasyTeam, LeagueConfig, load_league_config
from iffl_companion.models.proposal import (
    InvalidTransitionError,
    ProposalResponse,
    ProposalStatus,
    TradeProposal,
)
from iffl_companion.models.trade import Trade
from iffl_companion.models.user import CurrentUser, NotAuthenticatedError, require_user

__all__ = [
    # Asset
    "Asset",
    "DraftPick",
    "ParseReport",
    "RosterPlayer",
    # Interest / messages
    "LeagueMessage",
    "PlayerInterest",
    # League
    "FantasyTeam",
    "LeagueConfig",
    "load_league_config",
    # Proposal
    "InvalidTransitionError",
    "ProposalResponse",
    "ProposalStatus",
    "TradeProposal",
    # Trade
    "Trade",
    # User
    "CurrentUser",
    "NotAuthenticatedError",
    "require_user",
]
