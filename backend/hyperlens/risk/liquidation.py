"""
PURPOSE: Liquidation proximity estimates for individual perp positions.

calculate_liq_score derives the 0-1 liq_score consumed by the account health
engine from a raw clearinghouse snapshot. calculate_liquidation_risk is the
coarser 0-100 per-position estimate used by position tables and the
portfolio detector.
"""

from typing import Literal, Optional

from hyperlens.risk.risk_models import LiquidationRiskInput, RawPositionSnapshot
from hyperlens.utils.math_utils import clamp

# Share of initial margin consumed before the venue liquidates
MAINTENANCE_BUFFER = 0.9

LOSS_WEIGHT = 0.5
MAX_LOSS_CONTRIBUTION = 0.5


def calculate_liq_score(
    signed_size: float,
    entry_price: float,
    mark_price: float,
    liquidation_price: Optional[float],
    leverage: float,
    margin_used: float,
    unrealized_pnl: float,
) -> float:
    """
    PURPOSE: Estimate how much of the liquidation buffer a position has used.

    CALLED BY: services/positions_service.py

    Without a liquidation price the score falls back to leverage / 100.
    Otherwise the distance from mark to liquidation price is compared with
    the maximum distance at this leverage (1 / leverage); the used share of
    that buffer is the score, plus up to 0.5 for unrealized losses relative
    to margin. The result is clamped to [0, 1].

    Args:
        signed_size: Position size, positive for longs.
        entry_price: Average entry price (unused by the formula, kept for the snapshot shape).
        mark_price: Current mark price.
        liquidation_price: Venue liquidation price, or None.
        leverage: Effective leverage.
        margin_used: Margin allocated to the position.
        unrealized_pnl: Signed unrealized PnL.

    Returns:
        float: liq_score in [0, 1], 1 meaning liquidation is imminent.
    """
    if not liquidation_price or liquidation_price <= 0 or mark_price <= 0 or leverage <= 0:
        return min(1.0, max(0.0, leverage / 100))

    if signed_size > 0:
        distance_to_liq = (mark_price - liquidation_price) / mark_price
    else:
        distance_to_liq = (liquidation_price - mark_price) / mark_price

    if distance_to_liq < 0:
        return 1.0

    max_distance = 1 / leverage
    used_buffer = 1 - (distance_to_liq / max_distance)

    if margin_used > 0 and unrealized_pnl < 0:
        loss_pct = abs(unrealized_pnl) / margin_used
        used_buffer += min(MAX_LOSS_CONTRIBUTION, loss_pct * LOSS_WEIGHT)

    return clamp(used_buffer, 0.0, 1.0)


def liq_score_from_snapshot(snapshot: RawPositionSnapshot) -> float:
    """
    PURPOSE: calculate_liq_score applied to a RawPositionSnapshot.

    Args:
        snapshot: Validated upstream position snapshot.

    Returns:
        float: liq_score in [0, 1].
    """
    return calculate_liq_score(
        signed_size=snapshot.signed_size,
        entry_price=snapshot.entry_price,
        mark_price=snapshot.mark_price,
        liquidation_price=snapshot.liquidation_price,
        leverage=snapshot.leverage,
        margin_used=snapshot.margin_used,
        unrealized_pnl=snapshot.unrealized_pnl,
    )


def price_distance_to_liquidation(position: LiquidationRiskInput) -> float:
    """
    PURPOSE: Distance from the current price to a simplified liquidation price.

    The liquidation price is approximated as entry * (1 -/+ 0.9 / leverage)
    for longs/shorts.

    Args:
        position: Per-position risk inputs.

    Returns:
        float: 1 = as far as at entry (or no data), 0 = at liquidation.
    """
    if position.entry_price <= 0 or position.leverage <= 0:
        return 1.0

    offset = (1 / position.leverage) * MAINTENANCE_BUFFER

    if position.side == "long":
        liq_price = position.entry_price * (1 - offset)
        max_distance = position.entry_price - liq_price
        current_distance = position.current_price - liq_price
    else:
        liq_price = position.entry_price * (1 + offset)
        max_distance = liq_price - position.entry_price
        current_distance = liq_price - position.current_price

    if max_distance <= 0:
        return 0.0

    return clamp(current_distance / max_distance, 0.0, 1.0)


def calculate_liquidation_risk(position: LiquidationRiskInput) -> float:
    """
    PURPOSE: Per-position liquidation risk score from 0 to 100, higher is riskier.

    Components:
        leverage: up to 30 points (10x = 30).
        margin ratio: up to 40 points (margin_used / account_value * 50).
        price proximity: up to 30 points.

    Args:
        position: Per-position risk inputs.

    Returns:
        float: Risk score in [0, 100].
    """
    leverage_score = min(30.0, (position.leverage / 10) * 30)

    margin_ratio = (
        position.margin_used / position.account_value
        if position.account_value > 0
        else 0.0
    )
    margin_score = min(40.0, margin_ratio * 50)

    price_score = min(30.0, (1 - price_distance_to_liquidation(position)) * 30)

    return clamp(leverage_score + margin_score + price_score, 0.0, 100.0)


def get_risk_band(score: float) -> Literal["low", "medium", "high"]:
    """
    PURPOSE: Band a 0-100 liquidation risk score.

    Args:
        score: Liquidation risk score.

    Returns:
        str: "low" below 30, "medium" below 70, otherwise "high".
    """
    if score < 30:
        return "low"
    if score < 70:
        return "medium"
    return "high"
