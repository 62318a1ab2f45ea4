"""
Trade Proposal Service

Submits proposals, records the recipient's yes/no/maybe and lists what is
waiting on a team. Notifications are best-effort: a failed send never undoes
the write that triggered it.

Recipients only see their own pending proposals. There is no listing of a
team's outgoing or resolved proposals and no way to withdraw one.
"""

import logging
from collections.abc import Iterable

from iffl_companion.clients.notifications import Notifier
from iffl_companion.clients.store import PROPOSALS_COLLECTION, DocumentStore
from iffl_companion.models.proposal import (
    ProposalResponse,
    ProposalStatus,
    TradeProposal,
)
from iffl_companion.models.user import CurrentUser, require_user
from iffl_companion.services.catalog import AssetCatalog

logger = logging.getLogger(__name__)


class ProposalValidationError(ValueError):
    """Raised when a proposal is missing offered or requested assets."""


class ProposalNotFoundError(LookupError):
    """Raised when responding to a proposal that does not exist."""

    def __init__(self, proposal_id: str):
        self.proposal_id = proposal_id
        super().__init__(f"Proposal not found: {proposal_id}")


class ProposalService:
    """Lifecycle of trade proposals between two teams."""

    def __init__(
        self,
        store: DocumentStore,
        notifier: Notifier,
        catalog: AssetCatalog | None = None,
    ):
        self.store = store
        self.notifier = notifier
        self.catalog = catalog

    def _describe(self, asset_ids: Iterable[str]) -> str:
        ids = sorted(asset_ids)
        if self.catalog is None:
            return ", ".join(ids)
        names = {a.asset_id: a.name for a in self.catalog.resolve(ids)}
        return ", ".join(names.get(i, i) for i in ids)

    async def _notify(self, recipient: str, title: str, body: str) -> None:
        try:
            await self.notifier.send(recipient, title, body)
        except Exception:
            logger.warning("Notification to %s failed", recipient, exc_info=True)

    async def submit(
        self,
        user: CurrentUser | None,
        proposer: str,
        recipient: str,
        offered_ids: Iterable[str],
        requested_ids: Iterable[str],
    ) -> TradeProposal:
        """
        Create a pending proposal and notify the recipient.

        Raises:
            NotAuthenticatedError: no user
            ProposalValidationError: nothing offered or nothing requested
        """
        require_user(user)
        offered = frozenset(offered_ids)
        requested = frozenset(requested_ids)
        if not offered:
            raise ProposalValidationError("A proposal must offer at least one asset")
        if not requested:
            raise ProposalValidationError("A proposal must request at least one asset")

        proposal = TradeProposal(
            proposer=proposer,
            recipient=recipient,
            offered=offered,
            requested=requested,
        )
        doc_id = await self.store.add(PROPOSALS_COLLECTION, proposal.to_document())
        proposal = proposal.model_copy(update={"proposal_id": doc_id})
        logger.info("Proposal %s submitted: %s -> %s", doc_id, proposer, recipient)

        await self._notify(
            recipient,
            "New Trade Proposal",
            f"{proposer} offers {self._describe(offered)} for {self._describe(requested)}",
        )
        return proposal

    async def get(self, proposal_id: str) -> TradeProposal:
        doc = await self.store.get(PROPOSALS_COLLECTION, proposal_id)
        if doc is None:
            raise ProposalNotFoundError(proposal_id)
        return TradeProposal.from_document(doc.id, doc.data)

    async def respond(
        self,
        user: CurrentUser | None,
        proposal_id: str,
        response: ProposalResponse | str,
    ) -> TradeProposal:
        """
        Record the recipient's answer and notify the proposer.

        yes -> accepted, no -> rejected, maybe -> stays pending.

        Raises:
            NotAuthenticatedError: no user
            ProposalNotFoundError: unknown proposal
            InvalidTransitionError: the proposal is already accepted or rejected
        """
        require_user(user)
        response = ProposalResponse(response)
        proposal = await self.get(proposal_id)
        updated = proposal.apply_response(response)

        await self.store.update(
            PROPOSALS_COLLECTION,
            proposal_id,
            {"status": updated.status.value, "response": response.value},
        )
        logger.info(
            "Proposal %s: %s -> %s (%s)",
            proposal_id,
            proposal.status.value,
            updated.status.value,
            response.value,
        )

        await self._notify(
            updated.proposer,
            "Trade Proposal Update",
            f"{updated.recipient} answered {response.value} to your proposal",
        )
        return updated

    async def pending_for(self, recipient: str) -> list[TradeProposal]:
        """Pending proposals addressed to ``recipient``, oldest first."""
        docs = await self.store.query(
            PROPOSALS_COLLECTION,
            {"recipient": recipient, "status": ProposalStatus.PENDING.value},
        )
        proposals = [TradeProposal.from_document(d.id, d.data) for d in docs]
        return sorted(proposals, key=lambda p: p.created_at)
