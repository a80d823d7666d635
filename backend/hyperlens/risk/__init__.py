"""
PURPOSE: Risk scoring module for HyperLens.

Provides the account health engine, liquidation proximity estimates and the
portfolio risk detector.

Exports:
    - evaluate / calculate_account_health: Account health score from positions
    - calculate_liq_score: liq_score derivation from a raw snapshot
    - calculate_liquidation_risk: Per-position 0-100 liquidation risk
    - detect_risks: Portfolio alerts
    - Position, RiskAnalysisResult, RiskFactor: Engine models
"""

from hyperlens.risk.detector import detect_risks, has_high_risk_positions
from hyperlens.risk.health import calculate_account_health, evaluate, score_to_level
from hyperlens.risk.liquidation import (
    calculate_liq_score,
    calculate_liquidation_risk,
    get_risk_band,
    liq_score_from_snapshot,
)
from hyperlens.risk.risk_models import (
    LendingExposure,
    LiquidationRiskInput,
    PerpExposure,
    PortfolioRiskReport,
    Position,
    RawPositionSnapshot,
    RiskAlert,
    RiskAnalysisResult,
    RiskFactor,
)

__all__ = [
    "evaluate",
    "calculate_account_health",
    "score_to_level",
    "calculate_liq_score",
    "liq_score_from_snapshot",
    "calculate_liquidation_risk",
    "get_risk_band",
    "detect_risks",
    "has_high_risk_positions",
    "Position",
    "RiskFactor",
    "RiskAnalysisResult",
    "RawPositionSnapshot",
    "LiquidationRiskInput",
    "PerpExposure",
    "LendingExposure",
    "RiskAlert",
    "PortfolioRiskReport",
]
