"""
PURPOSE: Risk scoring API routes for HyperLens.

Provides account health evaluation, liq_score derivation, per-position
liquidation risk, portfolio alert detection and live account health of a
wallet.
"""

from fastapi import APIRouter, Depends, Request

from hyperlens.api.dependencies import get_positions_service
from hyperlens.core.rate_limit import limiter, READ_LIMIT, RESOLVE_LIMIT
from hyperlens.risk import (
    LiquidationRiskInput,
    PortfolioRiskReport,
    RawPositionSnapshot,
    RiskAnalysisResult,
    calculate_liquidation_risk,
    detect_risks,
    has_high_risk_positions,
    evaluate,
    get_risk_band,
    liq_score_from_snapshot,
)
from hyperlens.schemas import (
    EvaluateRequest,
    LiqScoreResponse,
    LiquidationRiskResponse,
    PortfolioRequest,
    WalletRiskResponse,
)
from hyperlens.services.positions_service import PositionsService
from hyperlens.utils.logger import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/risk", tags=["risk"])


@router.post("/evaluate", response_model=RiskAnalysisResult)
@limiter.limit(READ_LIMIT)
async def evaluate_account_health(request: Request, body: EvaluateRequest) -> RiskAnalysisResult:
    """Score account health from positions and account value."""
    result = evaluate(body.positions, body.account_value)
    logger.info(
        "risk_evaluated",
        position_count=len(body.positions),
        score=result.score,
        level=result.level.value,
    )
    return result


@router.post("/liq-score", response_model=LiqScoreResponse)
@limiter.limit(READ_LIMIT)
async def derive_liq_score(request: Request, body: RawPositionSnapshot) -> LiqScoreResponse:
    """Derive the 0-1 liq_score of one raw position snapshot."""
    return LiqScoreResponse(market=body.market, liq_score=liq_score_from_snapshot(body))


@router.post("/portfolio", response_model=PortfolioRiskReport)
@limiter.limit(READ_LIMIT)
async def detect_portfolio_risks(request: Request, body: PortfolioRequest) -> PortfolioRiskReport:
    """Detect liquidation, health factor and concentration alerts."""
    report = detect_risks(body.perps, body.lending, body.total_value)
    logger.info(
        "portfolio_risk_detected",
        alert_count=len(report.alerts),
        overall_severity=report.overall_severity,
        high_risk_perps=has_high_risk_positions(body.perps),
    )
    return report


@router.get("/wallet/{address}", response_model=WalletRiskResponse)
@limiter.limit(RESOLVE_LIMIT)
async def get_wallet_health(
    request: Request,
    address: str,
    service: PositionsService = Depends(get_positions_service),
) -> WalletRiskResponse:
    """Fetch live positions of a wallet and score its account health."""
    return await service.get_account_health(address)


@router.post("/liquidation-risk", response_model=LiquidationRiskResponse)
@limiter.limit(READ_LIMIT)
async def score_liquidation_risk(request: Request, body: LiquidationRiskInput) -> LiquidationRiskResponse:
    """Score one position's 0-100 liquidation risk and its band."""
    score = calculate_liquidation_risk(body)
    return LiquidationRiskResponse(score=score, band=get_risk_band(score))
