"""
Player interest and league message models.
"""

import hashlib
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlayerInterest(BaseModel):
    """A (user, asset) interest marker."""

    user_id: str
    asset_id: str
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def document_id(self) -> str:
        """Deterministic id for the (user, asset) pair."""
        key = f"{self.user_id}\x1f{self.asset_id}".encode("utf-8")
        return hashlib.sha1(key).hexdigest()

    def to_document(self) -> dict:
        return {
            "userId": self.user_id,
            "playerId": self.asset_id,
            "timestamp": self.timestamp,
        }


class LeagueMessage(BaseModel):
    """A message posted to the league feed."""

    message_id: str | None = None
    user_id: str
    team: str
    text: str
    timestamp: datetime = Field(default_factory=_utcnow)

    def to_document(self) -> dict:
        return {
            "userId": self.user_id,
            "team": self.team,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "LeagueMessage":
        return cls(
            message_id=doc_id,
            user_id=data.get("userId", ""),
            team=data.get("team", ""),
            text=data.get("text", ""),
            timestamp=data.get("timestamp") or _utcnow(),
        )
