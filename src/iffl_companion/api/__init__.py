"""API package - FastAPI routes and dependencies."""

from iffl_companion.api.dependencies import (
    CatalogDep,
    ClientManager,
    CurrentUserDep,
    LeagueDep,
    SettingsDep,
    get_catalog,
    get_current_user,
    get_store,
)

__all__ = [
    "ClientManager",
    "get_catalog",
    "get_current_user",
    "get_store",
    "CatalogDep",
    "CurrentUserDep",
    "LeagueDep",
    "SettingsDep",
]
