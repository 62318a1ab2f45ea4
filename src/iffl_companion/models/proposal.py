"""
Trade proposal Pydantic models and lifecycle.

pending -> accepted   (response "yes")
pending -> rejected   (response "no")
pending -> pending    (response "maybe")

accepted and rejected are terminal.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class ProposalStatus(str, Enum):
    """Proposal status."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ProposalStatus.PENDING


class ProposalResponse(str, Enum):
    """Recipient's answer to a proposal."""

    YES = "yes"
    NO = "no"
    MAYBE = "maybe"

    @property
    def status(self) -> ProposalStatus:
        return _RESPONSE_STATUS[self]


_RESPONSE_STATUS = {
    ProposalResponse.YES: ProposalStatus.ACCEPTED,
    ProposalResponse.NO: ProposalStatus.REJECTED,
    ProposalResponse.MAYBE: ProposalStatus.PENDING,
}


class InvalidTransitionError(Exception):
    """Raised when responding to a proposal that is already resolved."""

    def __init__(self, proposal_id: str | None, status: ProposalStatus):
        self.proposal_id = proposal_id
        self.status = status
        super().__init__(
            f"Proposal {proposal_id or '<unsaved>'} is already {status.value}"
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TradeProposal(BaseModel):
    """A pending or resolved offer between two teams."""

    proposal_id: str | None = None
    proposer: str = Field(description="Proposing team")
    recipient: str = Field(description="Receiving team")
    offered: frozenset[str] = Field(description="Asset IDs the proposer gives up")
    requested: frozenset[str] = Field(description="Asset IDs the proposer asks for")
    status: ProposalStatus = ProposalStatus.PENDING
    response: ProposalResponse | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    def apply_response(self, response: ProposalResponse) -> "TradeProposal":
        """Return a copy with the response applied."""
        if self.status.is_terminal:
            raise InvalidTransitionError(self.proposal_id, self.status)
        return self.model_copy(update={"response": response, "status": response.status})

    def to_document(self) -> dict:
        return {
            "proposer": self.proposer,
            "recipient": self.recipient,
            "offered": sorted(self.offered),
            "requested": sorted(self.requested),
            "status": self.status.value,
            "response": self.response.value if self.response else None,
            "created_at": self.created_at,
        }

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "TradeProposal":
        return cls(
            proposal_id=doc_id,
            proposer=data["proposer"],
            recipient=data["recipient"],
            offered=frozenset(data.get("offered") or ()),
            requested=frozenset(data.get("requested") or ()),
            status=ProposalStatus(data.get("status", ProposalStatus.PENDING.value)),
            response=ProposalResponse(data["response"]) if data.get("response") else None,
            created_at=data.get("created_at") or _utcnow(),
        )
