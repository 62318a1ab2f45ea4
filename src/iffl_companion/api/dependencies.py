"""
API Dependencies

Shared dependencies for FastAPI route handlers: long-lived clients and
services, the league roster, and the signed-in user.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header

from iffl_companion.clients.firestore import FirestoreDocumentStore
from iffl_companion.clients.notifications import Notifier, build_notifier
from iffl_companion.clients.sheets import SheetsAPIError, SheetsClient
from iffl_companion.clients.store import DocumentStore, MemoryDocumentStore
from iffl_companion.config import Settings, get_settings
from iffl_companion.models.league import LeagueConfig, load_league_config
from iffl_companion.models.user import CurrentUser
from iffl_companion.services.catalog import AssetCatalog, AssetCatalogService
from iffl_companion.services.ledger import TradeLedgerService
from iffl_companion.services.messages import MessageFeed
from iffl_companion.services.proposals import ProposalService

logger = logging.getLogger(__name__)


class ClientManager:
    """
    Manages client and service lifecycle for the application.

    One instance of each is created on first use and reused across requests.
    Tests (or embedding code) can inject their own with ``configure``.
    """

    _sheets: SheetsClient | None = None
    _store: DocumentStore | None = None
    _notifier: Notifier | None = None
    _league: LeagueConfig | None = None
    _catalog_service: AssetCatalogService | None = None
    _ledger_service: TradeLedgerService | None = None

    @classmethod
    def configure(
        cls,
        sheets: SheetsClient | None = None,
        store: DocumentStore | None = None,
        notifier: Notifier | None = None,
        league: LeagueConfig | None = None,
    ) -> None:
        if sheets is not None:
            cls._sheets = sheets
        if store is not None:
            cls._store = store
        if notifier is not None:
            cls._notifier = notifier
        if league is not None:
            cls._league = league

    @classmethod
    async def get_sheets(cls) -> SheetsClient:
        """Get or create the SheetsClient instance."""
        if cls._sheets is None:
            cls._sheets = SheetsClient()
        if cls._sheets._client is None:
            await cls._sheets.__aenter__()
        return cls._sheets

    @classmethod
    async def get_store(cls) -> DocumentStore:
        """Get or create the configured document store."""
        if cls._store is None:
            settings = get_settings()
            if settings.store_backend == "firestore":
                store = FirestoreDocumentStore(settings)
                await store.__aenter__()
                cls._store = store
            else:
                cls._store = MemoryDocumentStore()
            logger.info("Using %s document store", type(cls._store).__name__)
        return cls._store

    @classmethod
    def get_notifier(cls) -> Notifier:
        if cls._notifier is None:
            cls._notifier = build_notifier()
        return cls._notifier

    @classmethod
    def get_league(cls) -> LeagueConfig:
        if cls._league is None:
            cls._league = load_league_config(get_settings().league_config_path)
        return cls._league

    @classmethod
    async def get_catalog_service(cls) -> AssetCatalogService:
        if cls._catalog_service is None:
            cls._catalog_service = AssetCatalogService(await cls.get_sheets())
        return cls._catalog_service

    @classmethod
    async def get_ledger_service(cls) -> TradeLedgerService:
        if cls._ledger_service is None:
            cls._ledger_service = TradeLedgerService(await cls.get_sheets())
        return cls._ledger_service

    @classmethod
    async def close(cls) -> None:
        """Close every open client and forget all instances."""
        if cls._sheets is not None:
            await cls._sheets.__aexit__(None, None, None)
        if cls._store is not None:
            await cls._store.close()
        if cls._notifier is not None:
            await cls._notifier.close()
        cls._sheets = None
        cls._store = None
        cls._notifier = None
        cls._league = None
        cls._catalog_service = None
        cls._ledger_service = None


async def get_store() -> DocumentStore:
    return await ClientManager.get_store()


def get_league() -> LeagueConfig:
    return ClientManager.get_league()


async def get_catalog_service() -> AssetCatalogService:
    return await ClientManager.get_catalog_service()


async def get_catalog(
    service: Annotated[AssetCatalogService, Depends(get_catalog_service)],
) -> AssetCatalog:
    """Dependency to get the loaded catalog; loads it on first use."""
    return await service.ensure_loaded()


async def get_ledger_service() -> TradeLedgerService:
    return await ClientManager.get_ledger_service()


async def get_proposal_service(
    store: Annotated[DocumentStore, Depends(get_store)],
    catalog_service: Annotated[AssetCatalogService, Depends(get_catalog_service)],
) -> ProposalService:
    """
    Proposal service backed by the document store.

    The catalog only supplies asset names for notification text, so an
    unreachable spreadsheet falls back to raw asset ids.
    """
    try:
        catalog: AssetCatalog | None = await catalog_service.ensure_loaded()
    except SheetsAPIError as e:
        logger.warning("Catalog unavailable for proposal notifications: %s", e.message)
        catalog = None
    return ProposalService(store, ClientManager.get_notifier(), catalog)


async def get_message_feed(
    store: Annotated[DocumentStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageFeed:
    return MessageFeed(store, limit=settings.message_feed_limit)


def get_current_user(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_email: Annotated[str | None, Header()] = None,
) -> CurrentUser | None:
    """
    The signed-in user as asserted by the upstream identity provider.

    Returns None when no user header is present.
    """
    if not x_user_id:
        return None
    return CurrentUser(user_id=x_user_id, email=x_user_email)


# Type aliases for cleaner route signatures
StoreDep = Annotated[DocumentStore, Depends(get_store)]
LeagueDep = Annotated[LeagueConfig, Depends(get_league)]
CatalogServiceDep = Annotated[AssetCatalogService, Depends(get_catalog_service)]
CatalogDep = Annotated[AssetCatalog, Depends(get_catalog)]
LedgerServiceDep = Annotated[TradeLedgerService, Depends(get_ledger_service)]
ProposalServiceDep = Annotated[ProposalService, Depends(get_proposal_service)]
MessageFeedDep = Annotated[MessageFeed, Depends(get_message_feed)]
CurrentUserDep = Annotated[CurrentUser | None, Depends(get_current_user)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
