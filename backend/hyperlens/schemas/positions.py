"""
Live position schemas for the HyperLens API.

Shapes returned by the positions service for a wallet's open perp
positions and account summary.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from hyperlens.risk.risk_models import Position, RiskAnalysisResult


class LivePosition(BaseModel):
    """
    One open perp position with its derived liquidation score.

    Attributes:
        market: Market label, "{coin}-PERP"
        position_size: Signed size, positive for longs
        avg_entry: Average entry price
        liquidation_px: Venue liquidation price, if any
        mark_price: Mid price, or entry price when no mid is known
        effective_leverage: Leverage used by the risk engine
        margin_used: Margin allocated to the position
        unrealized_pnl: Signed unrealized PnL
        position_value: Position notional
        return_on_equity: Venue-reported ROE
        max_leverage: Market's maximum leverage
        liq_score: Liquidation proximity in [0, 1]
    """

    market: str
    position_size: float
    avg_entry: float
    liquidation_px: Optional[float] = None
    mark_price: float
    effective_leverage: float
    margin_used: float = 0.0
    unrealized_pnl: float = 0.0
    position_value: float = 0.0
    return_on_equity: float = 0.0
    max_leverage: float = 50.0
    liq_score: float = Field(ge=0.0, le=1.0)

    def to_risk_position(self) -> Position:
        """Project onto the risk engine's Position."""
        return Position(
            market=self.market,
            effective_leverage=self.effective_leverage,
            liq_score=self.liq_score,
            margin_used=max(0.0, self.margin_used),
            position_value=self.position_value,
            unrealized_pnl=self.unrealized_pnl,
        )


class AccountSummary(BaseModel):
    """Margin summary of the wallet's perp account."""

    account_value: float = 0.0
    total_margin_used: float = 0.0
    total_notional: float = 0.0


class LivePositions(BaseModel):
    """Open positions, most at risk first, plus the account summary."""

    wallet: str
    positions: List[LivePosition] = Field(default_factory=list)
    account: AccountSummary = Field(default_factory=AccountSummary)


class WalletRiskResponse(BaseModel):
    """Live positions of a wallet together with its account health."""

    positions: LivePositions
    health: RiskAnalysisResult
