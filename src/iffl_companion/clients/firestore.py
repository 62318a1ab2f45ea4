"""
Cloud Firestore REST store

Implements ``DocumentStore`` against the Firestore v1 REST API using httpx.
Live subscriptions fall back to polling ``runQuery``.

API Documentation: https://firebase.google.com/docs/firestore/reference/rest
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import httpx

from iffl_companion.clients.retry import TransientHTTPError, request_with_retry
from iffl_companion.clients.store import Document, DocumentStore, DocumentStoreError
from iffl_companion.config import Settings, get_settings

logger = logging.getLogger(__name__)


# ==================== Value Codec ====================


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value as a Firestore ``Value``."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {"timestampValue": stamp}
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def encode_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: encode_value(v) for key, v in data.items()}


def decode_value(value: Mapping[str, Any]) -> Any:
    """Decode a Firestore ``Value`` into a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return datetime.fromisoformat(value["timestampValue"].replace("Z", "+00:00"))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "referenceValue" in value:
        return value["referenceValue"]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: decode_value(v) for key, v in fields.items()}


def decode_document(raw: Mapping[str, Any]) -> Document:
    doc_id = raw["name"].rsplit("/", 1)[-1]
    return Document(id=doc_id, data=decode_fields(raw.get("fields", {})))


def build_where(filters: Mapping[str, Any]) -> dict[str, Any] | None:
    """Structured-query ``where`` clause for conjunctive equality filters."""
    clauses = [
        {
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": "EQUAL",
                "value": encode_value(value),
            }
        }
        for field, value in filters.items()
    ]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"compositeFilter": {"op": "AND", "filters": clauses}}


# ==================== Store ====================


class FirestoreDocumentStore(DocumentStore):
    """
    Firestore-backed document store.

    Usage:
        async with FirestoreDocumentStore() as store:
            doc_id = await store.add("messages", {"text": "hi"})
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.poll_interval = self.settings.firestore_poll_interval
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def documents_path(self) -> str:
        return (
            f"/projects/{self.settings.firestore_project}"
            f"/databases/{self.settings.firestore_database}/documents"
        )

    async def __aenter__(self) -> "FirestoreDocumentStore":
        headers = {"Accept": "application/json"}
        if self.settings.firestore_token:
            headers["Authorization"] = f"Bearer {self.settings.firestore_token}"
        self._client = httpx.AsyncClient(
            base_url=self.settings.firestore_base_url,
            timeout=httpx.Timeout(self.settings.http_timeout),
            headers=headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "FirestoreDocumentStore must be used as async context manager: "
                "async with FirestoreDocumentStore() as store: ..."
            )
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await request_with_retry(self.client, method, url, self.settings, **kwargs)
        except TransientHTTPError as e:
            raise DocumentStoreError(
                f"Firestore {method} {url} failed", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise DocumentStoreError(f"Firestore {method} {url} failed: {e}") from e

    @staticmethod
    def _check(response: httpx.Response, what: str) -> None:
        if response.status_code >= 400:
            raise DocumentStoreError(f"{what} failed", status_code=response.status_code)

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        response = await self._request(
            "POST",
            f"{self.documents_path}/{collection}",
            json={"fields": encode_fields(data)},
        )
        self._check(response, f"Insert into {collection}")
        return decode_document(response.json()).id

    async def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        response = await self._request(
            "PATCH",
            f"{self.documents_path}/{collection}/{doc_id}",
            json={"fields": encode_fields(data)},
        )
        self._check(response, f"Write {collection}/{doc_id}")

    async def get(self, collection: str, doc_id: str) -> Document | None:
        response = await self._request("GET", f"{self.documents_path}/{collection}/{doc_id}")
        if response.status_code == 404:
            return None
        self._check(response, f"Read {collection}/{doc_id}")
        return decode_document(response.json())

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        structured: dict[str, Any] = {"from": [{"collectionId": collection}]}
        where = build_where(filters or {})
        if where:
            structured["where"] = where
        if order_by:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": order_by},
                    "direction": "DESCENDING" if descending else "ASCENDING",
                }
            ]
        if limit is not None:
            structured["limit"] = limit

        response = await self._request(
            "POST",
            f"{self.documents_path}:runQuery",
            json={"structuredQuery": structured},
        )
        self._check(response, f"Query {collection}")
        return [
            decode_document(item["document"])
            for item in response.json()
            if "document" in item
        ]

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        params: list[tuple[str, str]] = [
            ("updateMask.fieldPaths", name) for name in fields
        ]
        params.append(("currentDocument.exists", "true"))
        response = await self._request(
            "PATCH",
            f"{self.documents_path}/{collection}/{doc_id}",
            params=params,
            json={"fields": encode_fields(fields)},
        )
        if response.status_code == 404:
            raise DocumentStoreError(f"Document not found: {collection}/{doc_id}", 404)
        self._check(response, f"Update {collection}/{doc_id}")

    async def delete(self, collection: str, doc_id: str) -> None:
        response = await self._request("DELETE", f"{self.documents_path}/{collection}/{doc_id}")
        if response.status_code == 404:
            return
        self._check(response, f"Delete {collection}/{doc_id}")
