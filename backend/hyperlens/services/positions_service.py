"""
Positions service for HyperLens.

PURPOSE: Fetch a wallet's open perp positions from Hyperliquid, derive
effective leverage and liquidation scores, and feed them into the account
health engine.

CALLED BY: api/routes_risk.py
"""

import asyncio
from typing import Any, Dict, List, Optional

from hyperlens.clients.hyperliquid import HyperliquidClient
from hyperlens.config.constants import PERP_SUFFIX
from hyperlens.exceptions import InvalidWalletAddress
from hyperlens.risk.health import evaluate
from hyperlens.risk.liquidation import calculate_liq_score
from hyperlens.schemas.positions import AccountSummary, LivePosition, LivePositions, WalletRiskResponse
from hyperlens.utils.decorators import timed
from hyperlens.utils.logger import get_logger
from hyperlens.utils.validators import is_finite_number, normalize_address

logger = get_logger("services.positions")

# Sizes below this are treated as closed positions
MIN_POSITION_SIZE = 1e-7
DEFAULT_MAX_LEVERAGE = 50.0


def _to_float(value: Any, default: float = 0.0) -> float:
    """Parse an upstream numeric string; non-finite or unparseable values give default."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if is_finite_number(parsed) else default


def _to_liquidation_price(value: Any) -> Optional[float]:
    if value is None or value == "null":
        return None
    parsed = _to_float(value)
    return parsed if parsed > 0 else None


class PositionsService:
    """
    Service exposing live positions and account health of a wallet.

    PURPOSE: Translate clearinghouse snapshots into risk engine inputs.

    CALLED BY: Risk API routes
    """

    def __init__(self, client: HyperliquidClient):
        self._client = client

    @timed
    async def get_live_positions(self, wallet: str) -> LivePositions:
        """
        Fetch and normalize open perp positions of a wallet.

        PURPOSE: Skip closed positions, derive effective leverage (cross
        margin uses position value over account value) and liq_score, label
        markets "{coin}-PERP" and sort most at risk first.

        Args:
            wallet: Wallet address, any case

        Returns:
            LivePositions with positions and account summary

        Raises:
            InvalidWalletAddress: If wallet is not a 0x + 40 hex address
            UpstreamError: If Hyperliquid cannot be reached
        """
        try:
            address = normalize_address(wallet)
        except ValueError as e:
            raise InvalidWalletAddress(wallet) from e

        logger.info("live_positions_fetch_started", wallet=address)

        state, mids = await asyncio.gather(
            self._client.clearinghouse_state(address),
            self._client.all_mids(),
        )

        asset_positions = state.get("assetPositions")
        if not asset_positions:
            logger.info("live_positions_empty", wallet=address)
            return LivePositions(wallet=address)

        summary: Dict[str, Any] = state.get("marginSummary") or {}
        account_value = _to_float(summary.get("accountValue"))

        positions: List[LivePosition] = []
        for entry in asset_positions:
            position = self._build_position(entry.get("position") or {}, mids, account_value)
            if position is not None:
                positions.append(position)

        positions.sort(key=lambda p: p.liq_score, reverse=True)

        account = AccountSummary(
            account_value=account_value,
            total_margin_used=_to_float(summary.get("totalMarginUsed")),
            total_notional=_to_float(summary.get("totalNtlPos")),
        )

        logger.info(
            "live_positions_fetched",
            wallet=address,
            position_count=len(positions),
            account_value=account_value,
        )
        return LivePositions(wallet=address, positions=positions, account=account)

    @staticmethod
    def _build_position(
        raw: Dict[str, Any],
        mids: Dict[str, float],
        account_value: float,
    ) -> Optional[LivePosition]:
        size = _to_float(raw.get("szi"))
        if abs(size) < MIN_POSITION_SIZE:
            return None

        coin = str(raw.get("coin", ""))
        entry_price = _to_float(raw.get("entryPx"))
        mark_price = mids.get(coin) or entry_price
        position_value = _to_float(raw.get("positionValue"))
        unrealized_pnl = _to_float(raw.get("unrealizedPnl"))
        margin_used = _to_float(raw.get("marginUsed"))

        effective_leverage = 1.0
        leverage = raw.get("leverage")
        if isinstance(leverage, dict):
            if leverage.get("type") == "cross":
                effective_leverage = abs(position_value) / account_value if account_value > 0 else 1.0
            else:
                effective_leverage = _to_float(leverage.get("value")) or 1.0

        liquidation_px = _to_liquidation_price(raw.get("liquidationPx"))
        liq_score = calculate_liq_score(
            signed_size=size,
            entry_price=entry_price,
            mark_price=mark_price,
            liquidation_price=liquidation_px,
            leverage=effective_leverage,
            margin_used=margin_used,
            unrealized_pnl=unrealized_pnl,
        )

        return LivePosition(
            market=f"{coin}{PERP_SUFFIX}",
            position_size=size,
            avg_entry=entry_price,
            liquidation_px=liquidation_px,
            mark_price=mark_price,
            effective_leverage=effective_leverage,
            margin_used=margin_used,
            unrealized_pnl=unrealized_pnl,
            position_value=position_value,
            return_on_equity=_to_float(raw.get("returnOnEquity")),
            max_leverage=_to_float(raw.get("maxLeverage")) or DEFAULT_MAX_LEVERAGE,
            liq_score=liq_score,
        )

    async def get_account_health(self, wallet: str) -> WalletRiskResponse:
        """
        Score the account health of a wallet from its live positions.

        Args:
            wallet: Wallet address, any case

        Returns:
            WalletRiskResponse with live positions and the health result
        """
        live = await self.get_live_positions(wallet)
        health = evaluate(
            [p.to_risk_position() for p in live.positions],
            live.account.account_value,
        )
        logger.info(
            "account_health_scored",
            wallet=live.wallet,
            score=health.score,
            level=health.level.value,
        )
        return WalletRiskResponse(positions=live, health=health)
