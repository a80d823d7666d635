"""
PURPOSE: FastAPI dependencies exposing the services created at startup.

Every service lives on app.state (see main.on_startup). Tests replace them
through app.dependency_overrides or by assigning app.state directly.
"""

from fastapi import Request

from hyperlens.search.recent import RecentSearches
from hyperlens.search.resolver import SearchResolver
from hyperlens.search.watchlist import Watchlist
from hyperlens.services.positions_service import PositionsService
from hyperlens.store.base import KeyValueStore


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_resolver(request: Request) -> SearchResolver:
    return request.app.state.resolver


def get_recent_searches(request: Request) -> RecentSearches:
    return request.app.state.recent


def get_watchlist(request: Request) -> Watchlist:
    return request.app.state.watchlist


def get_positions_service(request: Request) -> PositionsService:
    return request.app.state.positions
