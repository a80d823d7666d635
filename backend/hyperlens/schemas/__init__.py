"""
Pydantic v2 schemas for the HyperLens API.

This module exports the request/response models used by the API routes.
"""

from .positions import AccountSummary, LivePosition, LivePositions, WalletRiskResponse
from .risk import EvaluateRequest, LiqScoreResponse, LiquidationRiskResponse, PortfolioRequest
from .search import (
    ClassifyResponse,
    RecentSearchesResponse,
    WatchlistResponse,
    WatchTokenRequest,
    WatchWalletRequest,
)
from .system import HealthCheck, VersionInfo

__all__ = [
    "AccountSummary",
    "LivePosition",
    "LivePositions",
    "WalletRiskResponse",
    "EvaluateRequest",
    "LiqScoreResponse",
    "LiquidationRiskResponse",
    "PortfolioRequest",
    "ClassifyResponse",
    "RecentSearchesResponse",
    "WatchlistResponse",
    "WatchTokenRequest",
    "WatchWalletRequest",
    "HealthCheck",
    "VersionInfo",
]
