"""
PURPOSE: Pydantic models for the risk scoring data structures.

Defines the validated Position input of the account health engine, its
RiskAnalysisResult output, the raw upstream snapshot used to derive
liquidation scores, and the portfolio detector's exposures and alerts.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from hyperlens.config.constants import (
    AlertType,
    RiskFactorId,
    RiskLevel,
    Severity,
)


class Position(BaseModel):
    """
    PURPOSE: One open derivative position as seen by the account health engine.

    Constructed fresh for every evaluation from an upstream snapshot. All
    numeric fields must be finite; NaN and infinity are rejected here so they
    never reach the scoring algorithm.

    Attributes:
        market: Instrument identifier (e.g. "BTC-PERP").
        effective_leverage: Notional exposure / account equity for this position.
        liq_score: Proximity to liquidation in [0, 1], 1 = liquidated.
        margin_used: Margin currently allocated to the position.
        position_value: Signed or absolute notional value.
        unrealized_pnl: Signed profit/loss not yet realized.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    market: str
    effective_leverage: float
    liq_score: float = Field(ge=0.0, le=1.0)
    margin_used: float = Field(ge=0.0)
    position_value: float
    unrealized_pnl: float


class RiskFactor(BaseModel):
    """
    PURPOSE: One triggered, human-readable risk explanation.

    Attributes:
        id: Stable factor kind.
        severity: low, medium or high.
        title: Short headline.
        description: Sentence with the computed magnitude.
    """

    model_config = ConfigDict(frozen=True)

    id: RiskFactorId
    severity: Severity
    title: str
    description: str


class RiskAnalysisResult(BaseModel):
    """
    PURPOSE: Immutable account health verdict.

    Attributes:
        score: Safety score 0-100, higher is safer.
        level: Level derived from score.
        factors: Triggered factors in evaluation order.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    level: RiskLevel
    factors: List[RiskFactor] = Field(default_factory=list)


class RawPositionSnapshot(BaseModel):
    """
    PURPOSE: Position as supplied by the clearinghouse, before liq_score derivation.

    Attributes:
        market: Instrument identifier.
        signed_size: Position size, positive for longs, negative for shorts.
        entry_price: Average entry price.
        mark_price: Current mark price.
        liquidation_price: Liquidation price if the venue reports one.
        leverage: Effective leverage of the position.
        margin_used: Margin allocated.
        unrealized_pnl: Signed unrealized PnL.
        position_value: Notional value.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    market: str
    signed_size: float
    entry_price: float
    mark_price: float
    liquidation_price: Optional[float] = None
    leverage: float
    margin_used: float = 0.0
    unrealized_pnl: float = 0.0
    position_value: float = 0.0


class LiquidationRiskInput(BaseModel):
    """
    PURPOSE: Inputs of the per-position 0-100 liquidation risk estimate.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    leverage: float
    margin_used: float
    account_value: float
    entry_price: float
    current_price: float
    side: Literal["long", "short"]


class PerpExposure(BaseModel):
    """A perp position as consumed by the portfolio detector."""

    market: str
    side: Literal["long", "short"]
    size_notional: float = Field(ge=0.0)
    liquidation_risk: float = Field(ge=0.0, le=100.0)


class LendingExposure(BaseModel):
    """A supplied or borrowed lending balance in USD."""

    asset: str
    type: Literal["supplied", "borrowed"]
    value_usd: float = Field(ge=0.0)


class RiskAlert(BaseModel):
    """
    PURPOSE: One portfolio-level alert for display.

    Attributes:
        type: Alert kind.
        severity: low, medium or high.
        message: Display sentence.
        link: Optional route to the related entity.
    """

    type: AlertType
    severity: Severity
    message: str
    link: Optional[str] = None


class PortfolioRiskReport(BaseModel):
    """
    PURPOSE: Result of the portfolio risk detector.

    Attributes:
        has_risk: Whether any alert was raised.
        alerts: At most three alerts, in detection order.
        overall_severity: Highest severity present, or "none".
    """

    has_risk: bool
    alerts: List[RiskAlert] = Field(default_factory=list)
    overall_severity: Literal["none", "low", "medium", "high"]
