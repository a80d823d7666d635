"""
Risk scoring request/response schemas for the HyperLens API.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from hyperlens.risk.risk_models import LendingExposure, PerpExposure, Position


class EvaluateRequest(BaseModel):
    """
    Account health evaluation request.

    Attributes:
        positions: Open positions with derived leverage and liq_score
        account_value: Account equity; zero or negative values are scored as unbounded leverage
    """

    model_config = ConfigDict(allow_inf_nan=False)

    positions: List[Position] = Field(default_factory=list)
    account_value: float


class LiqScoreResponse(BaseModel):
    """liq_score derived from a raw position snapshot."""

    market: str
    liq_score: float = Field(ge=0.0, le=1.0)


class PortfolioRequest(BaseModel):
    """
    Portfolio risk detection request.

    Attributes:
        perps: Perp exposures with 0-100 liquidation risk
        lending: Supplied and borrowed lending positions
        total_value: Total portfolio value used for concentration
    """

    model_config = ConfigDict(allow_inf_nan=False)

    perps: List[PerpExposure] = Field(default_factory=list)
    lending: List[LendingExposure] = Field(default_factory=list)
    total_value: float = 0.0


class LiquidationRiskResponse(BaseModel):
    """
    Per-position 0-100 liquidation risk.

    Attributes:
        score: Risk score, higher is riskier
        band: "low" below 30, "medium" below 70, otherwise "high"
    """

    score: float = Field(ge=0.0, le=100.0)
    band: Literal["low", "medium", "high"]
