"""
Interest Tracker

Tracks which assets a league member has marked as "interested" and keeps the
remote store in step.

Markers are written at a document id derived from (user, asset), so marking
twice is an upsert rather than a duplicate. Unmarking deletes every record
for the pair, which also clears duplicates left by older clients.
"""

import logging

from iffl_companion.clients.store import INTERESTS_COLLECTION, DocumentStore
from iffl_companion.models.asset import Asset
from iffl_companion.models.interest import PlayerInterest
from iffl_companion.models.user import CurrentUser, require_user
from iffl_companion.services.catalog import AssetCatalog

logger = logging.getLogger(__name__)


class InterestTracker:
    """Per-user set of assets marked as interesting."""

    def __init__(self, store: DocumentStore, catalog: AssetCatalog):
        self.store = store
        self.catalog = catalog
        self.user_id: str | None = None
        self._assets: dict[str, Asset] = {}

    @property
    def interested_assets(self) -> list[Asset]:
        return list(self._assets.values())

    def is_interested(self, asset: Asset) -> bool:
        return asset.asset_id in self._assets

    async def load(self, user_id: str) -> set[Asset]:
        """
        Fetch the user's markers and resolve them against the catalog.

        Markers for assets no longer in the catalog are dropped from the
        result but left in the store.
        """
        docs = await self.store.query(INTERESTS_COLLECTION, {"userId": user_id})
        resolved: dict[str, Asset] = {}
        missing = 0
        for doc in docs:
            asset = self.catalog.get(doc.data.get("playerId", ""))
            if asset is None:
                missing += 1
                continue
            resolved[asset.asset_id] = asset

        if missing:
            logger.debug("%d interest markers for %s are not in the catalog", missing, user_id)
        self.user_id = user_id
        self._assets = resolved
        return set(resolved.values())

    async def mark(self, asset: Asset, user: CurrentUser | None) -> None:
        user = require_user(user)
        interest = PlayerInterest(user_id=user.user_id, asset_id=asset.asset_id)
        await self.store.set(INTERESTS_COLLECTION, interest.document_id, interest.to_document())
        if user.user_id == self.user_id:
            self._assets[asset.asset_id] = asset

    async def unmark(self, asset: Asset, user: CurrentUser | None) -> int:
        """Delete every marker for (user, asset); returns how many were removed."""
        user = require_user(user)
        docs = await self.store.query(
            INTERESTS_COLLECTION,
            {"playerId": asset.asset_id, "userId": user.user_id},
        )
        for doc in docs:
            await self.store.delete(INTERESTS_COLLECTION, doc.id)
        if user.user_id == self.user_id:
            self._assets.pop(asset.asset_id, None)
        return len(docs)

    async def toggle(self, asset: Asset, user: CurrentUser | None) -> bool:
        """
        Flip interest in an asset.

        Local state belonging to another user is reloaded first.

        Returns:
            True if the asset is now marked, False if it was unmarked

        Raises:
            NotAuthenticatedError: no user; nothing is changed
        """
        user = require_user(user)
        if user.user_id != self.user_id:
            await self.load(user.user_id)
        if self.is_interested(asset):
            await self.unmark(asset, user)
            return False
        await self.mark(asset, user)
        return True
