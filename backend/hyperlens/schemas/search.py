"""
Search, history and watchlist schemas for the HyperLens API.
"""

from typing import List, Optional

from pydantic import BaseModel, field_validator

from hyperlens.config.constants import EntityType
from hyperlens.search.models import RecentSearch, WatchlistItem


class ClassifyResponse(BaseModel):
    """
    Lexical classification of a query.

    Attributes:
        query: Query as received
        type: Detected entity type
        is_valid: Whether any rule matched
        cleaned: Canonical identifier
        route: Canonical explorer path
    """

    query: str
    type: EntityType
    is_valid: bool
    cleaned: str
    route: str


class RecentSearchesResponse(BaseModel):
    """Recent searches, newest first."""

    searches: List[RecentSearch]


class WatchWalletRequest(BaseModel):
    """Request to watch a wallet."""

    address: str
    name: Optional[str] = None


class WatchTokenRequest(BaseModel):
    """Request to watch a token."""

    symbol: str
    address: Optional[str] = None

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Validate symbol is not blank."""
        if not v.strip():
            raise ValueError('symbol must not be empty')
        return v.strip()


class WatchlistResponse(BaseModel):
    """Watched items grouped by type."""

    items: List[WatchlistItem]
    wallets: List[WatchlistItem]
    tokens: List[WatchlistItem]
