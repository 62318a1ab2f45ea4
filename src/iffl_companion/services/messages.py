"""
League message feed backed by the document store's live query.
"""

import logging
from collections.abc import AsyncIterator

from iffl_companion.clients.store import MESSAGES_COLLECTION, DocumentStore
from iffl_companion.models.interest import LeagueMessage
from iffl_companion.models.user import CurrentUser, require_user

logger = logging.getLogger(__name__)


class MessageFeed:
    """Post to and read the league-wide message feed."""

    def __init__(self, store: DocumentStore, limit: int = 50):
        self.store = store
        self.limit = limit

    async def post(self, user: CurrentUser | None, team: str, text: str) -> LeagueMessage:
        user = require_user(user)
        text = text.strip()
        if not text:
            raise ValueError("Message text cannot be empty")
        message = LeagueMessage(user_id=user.user_id, team=team, text=text)
        doc_id = await self.store.add(MESSAGES_COLLECTION, message.to_document())
        return message.model_copy(update={"message_id": doc_id})

    async def recent(self, limit: int | None = None) -> list[LeagueMessage]:
        """Most recent messages, newest first."""
        docs = await self.store.query(
            MESSAGES_COLLECTION,
            order_by="timestamp",
            descending=True,
            limit=limit or self.limit,
        )
        return [LeagueMessage.from_document(d.id, d.data) for d in docs]

    async def stream(self, limit: int | None = None) -> AsyncIterator[list[LeagueMessage]]:
        """Yield the newest-first feed every time it changes."""
        async for docs in self.store.subscribe(
            MESSAGES_COLLECTION,
            order_by="timestamp",
            descending=True,
            limit=limit or self.limit,
        ):
            yield [LeagueMessage.from_document(d.id, d.data) for d in docs]
