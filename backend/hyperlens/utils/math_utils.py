"""
PURPOSE: Numeric helpers shared by the risk engines: guarded division, clamping,
and exposure aggregates over position values.
"""

import math
from typing import Iterable, List

import numpy as np


def safe_divide(numerator: float, denominator: float) -> float:
    """
    PURPOSE: Divide without raising or producing NaN on a non-positive denominator.

    A ratio against zero or negative equity is treated as unbounded:
    a positive numerator yields +inf, a zero numerator yields 0.0 and a
    negative numerator yields -inf.

    Args:
        numerator: Value to divide.
        denominator: Divisor (e.g. account value).

    Returns:
        float: numerator / denominator, or the guarded value described above.
    """
    if denominator > 0:
        return numerator / denominator

    if numerator > 0:
        return math.inf
    if numerator < 0:
        return -math.inf
    return 0.0


def clamp(value: float, lower: float, upper: float) -> float:
    """
    PURPOSE: Clamp a value into [lower, upper].

    Args:
        value: Value to clamp.
        lower: Lower bound.
        upper: Upper bound.

    Returns:
        float: Clamped value.
    """
    return max(lower, min(upper, value))


def total_notional(position_values: Iterable[float]) -> float:
    """
    PURPOSE: Sum of absolute notional values across positions.

    Args:
        position_values: Signed or absolute position values.

    Returns:
        float: Σ|value|, 0.0 for no positions.
    """
    values: List[float] = list(position_values)
    if not values:
        return 0.0

    return float(np.abs(np.array(values, dtype=float)).sum())


def largest_exposure(position_values: Iterable[float]) -> float:
    """
    PURPOSE: Largest absolute notional value across positions.

    Args:
        position_values: Signed or absolute position values.

    Returns:
        float: max|value|, 0.0 for no positions.
    """
    values: List[float] = list(position_values)
    if not values:
        return 0.0

    return float(np.abs(np.array(values, dtype=float)).max())


def concentration_ratio(position_values: Iterable[float]) -> float:
    """
    PURPOSE: Share of total exposure held by the single largest position.

    Args:
        position_values: Signed or absolute position values.

    Returns:
        float: largest / total in [0, 1]. Returns 0.0 when total exposure is zero.
    """
    values: List[float] = list(position_values)
    total = total_notional(values)

    if total <= 0:
        return 0.0

    return largest_exposure(values) / total
