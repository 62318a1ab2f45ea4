"""External API clients."""

from iffl_companion.clients.firestore import FirestoreDocumentStore
from iffl_companion.clients.notifications import (
    LoggingNotifier,
    Notifier,
    RelayNotifier,
    build_notifier,
)
from iffl_companion.clients.sheets import SheetCache, SheetsAPIError, SheetsClient
from iffl_companion.clients.store import (
    Document,
    DocumentStore,
    DocumentStoreError,
    MemoryDocumentStore,
)

__all__ = [
    "SheetsClient",
    "SheetsAPIError",
    "SheetCache",
    "Document",
    "DocumentStore",
    "DocumentStoreError",
    "MemoryDocumentStore",
    "FirestoreDocumentStore",
    "Notifier",
    "LoggingNotifier",
    "RelayNotifier",
    "build_notifier",
]
