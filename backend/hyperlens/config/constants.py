"""
PURPOSE: Enumerations and constants shared across the risk and search engines.
"""

from enum import Enum


class RiskLevel(str, Enum):
    """Account health level derived from a 0-100 safety score."""

    SAFE = "Safe"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class Severity(str, Enum):
    """Severity of a risk factor or alert."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskFactorId(str, Enum):
    """Stable identifiers of the account health risk factors."""

    EXTREME_LEVERAGE = "extreme_leverage"
    HIGH_LEVERAGE = "high_leverage"
    IMMINENT_LIQUIDATION = "imminent_liquidation"
    LIQUIDATION_RISK = "liquidation_risk"
    CONCENTRATION = "concentration"
    DRAWDOWN = "drawdown"


class AlertType(str, Enum):
    """Portfolio detector alert kinds."""

    LIQUIDATION = "liquidation"
    HEALTH_FACTOR = "health_factor"
    CONCENTRATION = "concentration"
    LEVERAGE = "leverage"


class EntityType(str, Enum):
    """Classification bucket of a search query."""

    WALLET = "wallet"
    TX = "tx"
    TRADE = "trade"
    BLOCK = "block"
    TOKEN = "token"
    MARKET = "market"
    UNKNOWN = "unknown"


class Domain(str, Enum):
    """Hyperliquid chain domains consulted during verification."""

    HYPERCORE = "hypercore"
    HYPEREVM = "hyperevm"


class ResolutionFailure(str, Enum):
    """Why a search query could not be resolved."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    UPSTREAM_ERROR = "upstream_error"


class SearchState(str, Enum):
    """States of the interactive search session."""

    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    SUCCESS = "success"
    ERROR = "error"


PERP_SUFFIX = "-PERP"
