"""
PURPOSE: Pydantic models for search classification, resolution and the
store-backed search history and watchlist.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from hyperlens.config.constants import EntityType, ResolutionFailure


class ValidationResult(BaseModel):
    """
    PURPOSE: Outcome of lexical validation of a query.

    Attributes:
        is_valid: Whether any classification rule matched.
        type: Matched entity type, UNKNOWN when invalid.
        cleaned: Canonical identifier for the matched type.
    """

    is_valid: bool
    type: EntityType
    cleaned: str


class DomainFlags(BaseModel):
    """Which chain domains confirmed the entity."""

    hypercore: bool = False
    hyperevm: bool = False


class VerificationOutcome(BaseModel):
    """
    PURPOSE: Answer of the verification collaborator for one entity.

    Attributes:
        exists: Whether any checked source confirmed the entity.
        domains: Domains on which it was found.
        checked_sources: Sources consulted, in order.
        data: Optional canonical data returned by the source.
    """

    exists: bool
    domains: DomainFlags = Field(default_factory=DomainFlags)
    checked_sources: List[str] = Field(default_factory=list)
    data: Optional[Dict[str, Any]] = None


class ResolverResult(BaseModel):
    """
    PURPOSE: Final resolution of a search query.

    verified=True means the entity was confirmed by the verifier, in which
    case error and failure are None. verified=False always carries an error
    message and a failure kind.

    Attributes:
        type: Lexical classification.
        identifier: Canonical identifier.
        verified: Whether existence was confirmed.
        route: Canonical explorer path.
        error: Human-readable failure message.
        failure: Failure kind (invalid input, not found, timeout, upstream error).
        checked_sources: Sources the verifier consulted.
        domains: Domains that confirmed the entity.
        cached: Whether the result came from the resolution cache.
    """

    type: EntityType
    identifier: str
    verified: bool
    route: str
    error: Optional[str] = None
    failure: Optional[ResolutionFailure] = None
    checked_sources: List[str] = Field(default_factory=list)
    domains: DomainFlags = Field(default_factory=DomainFlags)
    cached: bool = False


class RecentSearch(BaseModel):
    """A query the user successfully resolved, newest first in history."""

    query: str
    type: EntityType
    timestamp: int


class WatchlistItem(BaseModel):
    """A watched wallet or token."""

    id: str
    type: Literal["wallet", "token"]
    address: Optional[str] = None
    symbol: Optional[str] = None
    name: Optional[str] = None
    added_at: int
