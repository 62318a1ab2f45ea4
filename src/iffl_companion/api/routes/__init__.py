"""API route handlers."""

from iffl_companion.api.routes import (
    assets,
    interests,
    league,
    messages,
    proposals,
    trades,
)

__all__ = [
    "assets",
    "interests",
    "league",
    "messages",
    "proposals",
    "trades",
]
