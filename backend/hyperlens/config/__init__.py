"""
PURPOSE: Export configuration settings and constants for HyperLens.

This module centralizes access to all configuration settings and constants
used throughout the risk and search engines.
"""

from .constants import (
    AlertType,
    Domain,
    EntityType,
    ResolutionFailure,
    RiskFactorId,
    RiskLevel,
    SearchState,
    Severity,
)
from .settings import Settings, settings

__all__ = [
    "settings",
    "Settings",
    "AlertType",
    "Domain",
    "EntityType",
    "ResolutionFailure",
    "RiskFactorId",
    "RiskLevel",
    "SearchState",
    "Severity",
]
