"""
PURPOSE: Portfolio-level risk detection across perp and lending positions.

Produces a short list of display alerts: liquidation-prone perps, weak
lending health factor, high lending utilization and concentration in a
single market.
"""

import math
from typing import List, Sequence

from hyperlens.config.constants import AlertType, Severity
from hyperlens.risk.risk_models import (
    LendingExposure,
    PerpExposure,
    PortfolioRiskReport,
    RiskAlert,
)

HIGH_LIQUIDATION_RISK = 70.0
MEDIUM_LIQUIDATION_RISK = 50.0

MIN_HEALTH_FACTOR = 1.5
CRITICAL_HEALTH_FACTOR = 1.2
MAX_UTILIZATION = 0.5
MAX_MARKET_SHARE = 0.6

MAX_ALERTS = 3


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _liquidation_alerts(perps: Sequence[PerpExposure]) -> List[RiskAlert]:
    alerts: List[RiskAlert] = []
    for pos in perps:
        if pos.liquidation_risk >= HIGH_LIQUIDATION_RISK:
            severity = Severity.HIGH
        elif pos.liquidation_risk >= MEDIUM_LIQUIDATION_RISK:
            severity = Severity.MEDIUM
        else:
            continue

        alerts.append(RiskAlert(
            type=AlertType.LIQUIDATION,
            severity=severity,
            message=(
                f"{pos.market} {pos.side} position: "
                f"{_round_half_up(pos.liquidation_risk)}% liquidation risk"
            ),
            link=f"/market/{pos.market}",
        ))
    return alerts


def _lending_alerts(lending: Sequence[LendingExposure]) -> List[RiskAlert]:
    alerts: List[RiskAlert] = []
    supplied = sum(item.value_usd for item in lending if item.type == "supplied")
    borrowed = sum(item.value_usd for item in lending if item.type == "borrowed")

    if borrowed > 0 and supplied > 0:
        health_factor = supplied / borrowed
        if health_factor < MIN_HEALTH_FACTOR:
            alerts.append(RiskAlert(
                type=AlertType.HEALTH_FACTOR,
                severity=Severity.HIGH if health_factor < CRITICAL_HEALTH_FACTOR else Severity.MEDIUM,
                message=f"Lending health factor: {health_factor:.2f} (recommended: >1.5)",
            ))

    if supplied > 0 and borrowed > supplied * MAX_UTILIZATION:
        alerts.append(RiskAlert(
            type=AlertType.LEVERAGE,
            severity=Severity.MEDIUM,
            message=f"High lending leverage: {borrowed / supplied * 100:.0f}% utilization",
        ))

    return alerts


def _concentration_alert(perps: Sequence[PerpExposure], total_value: float) -> List[RiskAlert]:
    if total_value <= 0 or not perps:
        return []

    largest = max(perps, key=lambda p: p.size_notional)
    if largest.size_notional <= total_value * MAX_MARKET_SHARE:
        return []

    return [RiskAlert(
        type=AlertType.CONCENTRATION,
        severity=Severity.MEDIUM,
        message=(
            f"Portfolio concentration: "
            f"{_round_half_up(largest.size_notional / total_value * 100)}% in {largest.market}"
        ),
        link=f"/market/{largest.market}",
    )]


def detect_risks(
    perps: Sequence[PerpExposure],
    lending: Sequence[LendingExposure],
    total_value: float,
) -> PortfolioRiskReport:
    """
    PURPOSE: Detect portfolio risk conditions for display.

    CALLED BY: api/routes_risk.py

    Args:
        perps: Open perp positions with their 0-100 liquidation risk.
        lending: Supplied and borrowed lending balances.
        total_value: Total portfolio value in USD.

    Returns:
        PortfolioRiskReport: Up to three alerts and the overall severity.
    """
    alerts = (
        _liquidation_alerts(perps)
        + _lending_alerts(lending)
        + _concentration_alert(perps, total_value)
    )

    severities = {alert.severity for alert in alerts}
    if Severity.HIGH in severities:
        overall = "high"
    elif Severity.MEDIUM in severities:
        overall = "medium"
    elif alerts:
        overall = "low"
    else:
        overall = "none"

    return PortfolioRiskReport(
        has_risk=bool(alerts),
        alerts=alerts[:MAX_ALERTS],
        overall_severity=overall,
    )


def has_high_risk_positions(perps: Sequence[PerpExposure]) -> bool:
    """Whether any perp is at or above the high liquidation risk threshold."""
    return any(p.liquidation_risk >= HIGH_LIQUIDATION_RISK for p in perps)
