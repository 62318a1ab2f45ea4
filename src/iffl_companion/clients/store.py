"""
Document Store

Schemaless, collection-based storage for user-generated league state:
interest markers, trade proposals and the message feed.

``DocumentStore`` is the contract; ``MemoryDocumentStore`` keeps everything
in-process and ``FirestoreDocumentStore`` (see ``clients.firestore``) talks to
Cloud Firestore over REST.
"""

import asyncio
import copy
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

INTERESTS_COLLECTION = "playerInterests"
PROPOSALS_COLLECTION = "tradeProposals"
MESSAGES_COLLECTION = "messages"


class DocumentStoreError(Exception):
    """Exception raised for document store failures."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class Document(BaseModel):
    """A stored document: its id plus field data."""

    id: str
    data: dict[str, Any] = Field(default_factory=dict)


def _sort_key(field: str):
    def key(doc: Document):
        value = doc.data.get(field)
        return (value is not None, value)

    return key


class DocumentStore(ABC):
    """Read/write contract the services need from the backing store."""

    poll_interval: float = 5.0

    @abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document with a generated id and return the id."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Create or replace the document at ``doc_id``."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Fetch one document, or None when absent."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Documents whose fields equal every value in ``filters``."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Update named fields; raises DocumentStoreError if the document is missing."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""

    async def subscribe(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
        limit: int | None = None,
    ) -> AsyncIterator[list[Document]]:
        """
        Live query: yield the ordered, limited snapshot whenever it changes.

        The base implementation polls every ``poll_interval`` seconds.
        """
        previous: list[Document] | None = None
        while True:
            snapshot = await self.query(
                collection, order_by=order_by, descending=descending, limit=limit
            )
            if snapshot != previous:
                previous = snapshot
                yield snapshot
            await asyncio.sleep(self.poll_interval)

    async def close(self) -> None:
        """Release any held resources."""


class MemoryDocumentStore(DocumentStore):
    """In-process store. Every read returns copies so callers cannot mutate state."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._versions: dict[str, int] = {}
        self._conditions: dict[str, asyncio.Condition] = {}

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _condition(self, name: str) -> asyncio.Condition:
        return self._conditions.setdefault(name, asyncio.Condition())

    async def _changed(self, collection: str) -> None:
        self._versions[collection] = self._versions.get(collection, 0) + 1
        condition = self._condition(collection)
        async with condition:
            condition.notify_all()

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._collection(collection)[doc_id] = copy.deepcopy(dict(data))
        await self._changed(collection)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._collection(collection)[doc_id] = copy.deepcopy(dict(data))
        await self._changed(collection)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        filters = filters or {}
        docs = [
            Document(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collection(collection).items()
            if all(data.get(k) == v for k, v in filters.items())
        ]
        if order_by:
            docs.sort(key=_sort_key(order_by), reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return docs

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        data = self._collection(collection).get(doc_id)
        if data is None:
            raise DocumentStoreError(f"Document not found: {collection}/{doc_id}", 404)
        data.update(copy.deepcopy(dict(fields)))
        await self._changed(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        if self._collection(collection).pop(doc_id, None) is not None:
            await self._changed(collection)

    async def subscribe(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
        limit: int | None = None,
    ) -> AsyncIterator[list[Document]]:
        condition = self._condition(collection)
        seen = -1
        while True:
            async with condition:
                await condition.wait_for(
                    lambda: self._versions.get(collection, 0) != seen
                )
                seen = self._versions.get(collection, 0)
            yield await self.query(
                collection, order_by=order_by, descending=descending, limit=limit
            )
