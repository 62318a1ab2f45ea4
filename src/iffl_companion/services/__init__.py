"""Business logic services."""

from iffl_companion.services.catalog import (
    AssetCatalog,
    AssetCatalogService,
    SortOrder,
    price_key,
    toggle_filter,
)
from iffl_companion.services.interests import InterestTracker
from iffl_companion.services.ledger import (
    TradeLedger,
    TradeLedgerService,
    group_trades_by_year,
    parse_trade_rows,
    sort_trades,
)
from iffl_companion.services.messages import MessageFeed
from iffl_companion.services.parsing import parse_asset_row, parse_asset_rows
from iffl_companion.services.proposals import (
    ProposalNotFoundError,
    ProposalService,
    ProposalValidationError,
)

__all__ = [
    # Parsing
    "parse_asset_row",
    "parse_asset_rows",
    # Catalog
    "AssetCatalog",
    "AssetCatalogService",
    "SortOrder",
    "price_key",
    "toggle_filter",
    # Ledger
    "TradeLedger",
    "TradeLedgerService",
    "group_trades_by_year",
    "parse_trade_rows",
    "sort_trades",
    # Interests
    "InterestTracker",
    # Proposals
    "ProposalService",
    "ProposalNotFoundError",
    "ProposalValidationError",
    # Messages
    "MessageFeed",
]
