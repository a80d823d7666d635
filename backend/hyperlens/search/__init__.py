"""
Entity search for HyperLens.

PURPOSE: Classify raw queries (wallets, transactions, trades, blocks,
markets, tokens), verify them against Hyperliquid, and keep the search
history and watchlist.

Components:
    - classifier: lexical classification and route building
    - verifier: existence checks against Hypercore and HyperEVM
    - resolver: cached, time-bounded resolution of a query
    - session: interactive search state machine
    - recent / watchlist: store-backed user state
"""

from hyperlens.search.cancellation import CancellationToken
from hyperlens.search.classifier import build_route, classify, validate_input
from hyperlens.search.models import (
    DomainFlags,
    RecentSearch,
    ResolverResult,
    ValidationResult,
    VerificationOutcome,
    WatchlistItem,
)
from hyperlens.search.recent import RecentSearches
from hyperlens.search.resolver import SearchResolver
from hyperlens.search.session import SearchSession
from hyperlens.search.verifier import HyperliquidVerifier, Verifier
from hyperlens.search.watchlist import Watchlist

__all__ = [
    "CancellationToken",
    "build_route",
    "classify",
    "validate_input",
    "DomainFlags",
    "RecentSearch",
    "ResolverResult",
    "ValidationResult",
    "VerificationOutcome",
    "WatchlistItem",
    "RecentSearches",
    "SearchResolver",
    "SearchSession",
    "HyperliquidVerifier",
    "Verifier",
    "Watchlist",
]
