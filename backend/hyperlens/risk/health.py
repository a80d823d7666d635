"""
PURPOSE: Account health scoring for a wallet's open perp positions.

Turns a list of validated positions and the account equity into a 0-100
safety score, a level and the triggered risk factors. The result is
advisory and only used for display: the engine never raises and never
divides by a non-positive account value.
"""

import math
from typing import List, Sequence

from hyperlens.config.constants import RiskFactorId, RiskLevel, Severity
from hyperlens.risk.risk_models import Position, RiskAnalysisResult, RiskFactor
from hyperlens.utils.formatters import format_leverage
from hyperlens.utils.logger import get_logger
from hyperlens.utils.math_utils import (
    clamp,
    concentration_ratio,
    safe_divide,
    total_notional,
)

logger = get_logger("risk.health")

MAX_SCORE = 100

EXTREME_LEVERAGE = 20.0
HIGH_LEVERAGE = 10.0
ELEVATED_LEVERAGE = 5.0

IMMINENT_LIQ_SCORE = 0.8
ELEVATED_LIQ_SCORE = 0.6

CONCENTRATION_LIMIT = 0.8
DRAWDOWN_LIMIT = 0.25

# (exclusive upper bound, level), checked in order
LEVEL_THRESHOLDS = (
    (50, RiskLevel.CRITICAL),
    (70, RiskLevel.HIGH),
    (85, RiskLevel.MODERATE),
)


def score_to_level(score: int) -> RiskLevel:
    """
    PURPOSE: Map a 0-100 safety score to its level.

    <50 Critical, <70 High, <85 Moderate, otherwise Safe.

    Args:
        score: Clamped safety score.

    Returns:
        RiskLevel: Level for the score.
    """
    for upper, level in LEVEL_THRESHOLDS:
        if score < upper:
            return level
    return RiskLevel.SAFE


def _describe_leverage(account_leverage: float) -> str:
    if math.isinf(account_leverage):
        return "unbounded"
    return format_leverage(account_leverage)


def _describe_drawdown(drawdown: float) -> str:
    if math.isinf(drawdown):
        return "more than 100%"
    return f"{drawdown * 100:.1f}%"


def evaluate(positions: Sequence[Position], account_value: float) -> RiskAnalysisResult:
    """
    PURPOSE: Score a wallet's account health from its open positions.

    CALLED BY: services/positions_service.py, api/routes_risk.py

    Deductions are additive and independent, then the score is clamped:
    1. Account leverage (Σ|position_value| / account_value): >20x -40,
       >10x -20, >5x -5 without a factor.
    2. Liquidation proximity (max liq_score): >0.8 -40, >0.6 -20.
    3. Concentration (largest / total exposure, more than one position): >0.8 -15.
    4. Drawdown (losses / account_value): >25% -10.

    Args:
        positions: Validated open positions, possibly empty.
        account_value: Account equity; zero or negative is tolerated.

    Returns:
        RiskAnalysisResult: Score, level and factors in evaluation order.
    """
    if not positions:
        return RiskAnalysisResult(score=MAX_SCORE, level=RiskLevel.SAFE, factors=[])

    score = MAX_SCORE
    factors: List[RiskFactor] = []
    position_values = [p.position_value for p in positions]

    # 1. Leverage risk
    notional = total_notional(position_values)
    account_leverage = safe_divide(notional, account_value)

    if account_leverage > EXTREME_LEVERAGE:
        score -= 40
        factors.append(RiskFactor(
            id=RiskFactorId.EXTREME_LEVERAGE,
            severity=Severity.HIGH,
            title="Extreme Account Leverage",
            description=(
                f"Total account leverage is {_describe_leverage(account_leverage)}, "
                "significantly amplifying risk."
            ),
        ))
    elif account_leverage > HIGH_LEVERAGE:
        score -= 20
        factors.append(RiskFactor(
            id=RiskFactorId.HIGH_LEVERAGE,
            severity=Severity.MEDIUM,
            title="High Account Leverage",
            description=(
                "Total notional exposure exceeds 10x equity "
                f"({_describe_leverage(account_leverage)})."
            ),
        ))
    elif account_leverage > ELEVATED_LEVERAGE:
        score -= 5

    # 2. Liquidation proximity
    max_liq_score = max(p.liq_score for p in positions)

    if max_liq_score > IMMINENT_LIQ_SCORE:
        score -= 40
        factors.append(RiskFactor(
            id=RiskFactorId.IMMINENT_LIQUIDATION,
            severity=Severity.HIGH,
            title="Liquidation Imminent",
            description="One or more positions are extremely close to liquidation price.",
        ))
    elif max_liq_score > ELEVATED_LIQ_SCORE:
        score -= 20
        factors.append(RiskFactor(
            id=RiskFactorId.LIQUIDATION_RISK,
            severity=Severity.MEDIUM,
            title="High Liquidation Risk",
            description="Positions are approaching liquidation thresholds.",
        ))

    # 3. Concentration risk
    if len(positions) > 1:
        concentration = concentration_ratio(position_values)
        if concentration > CONCENTRATION_LIMIT:
            score -= 15
            factors.append(RiskFactor(
                id=RiskFactorId.CONCENTRATION,
                severity=Severity.MEDIUM,
                title="Concentrated Exposure",
                description=f"{concentration * 100:.0f}% of your exposure is in a single position.",
            ))

    # 4. Drawdown warning
    total_unrealized = sum(p.unrealized_pnl for p in positions)
    drawdown = safe_divide(abs(total_unrealized), account_value) if total_unrealized < 0 else 0.0

    if drawdown > DRAWDOWN_LIMIT:
        score -= 10
        factors.append(RiskFactor(
            id=RiskFactorId.DRAWDOWN,
            severity=Severity.HIGH,
            title="Significant Drawdown",
            description=(
                f"Current open positions are down {_describe_drawdown(drawdown)} "
                "of account value."
            ),
        ))

    score = int(clamp(score, 0, MAX_SCORE))
    level = score_to_level(score)

    logger.debug(
        "account_health_evaluated",
        position_count=len(positions),
        score=score,
        level=level.value,
        factors=[f.id.value for f in factors],
    )

    return RiskAnalysisResult(score=score, level=level, factors=factors)


calculate_account_health = evaluate
