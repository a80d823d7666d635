"""
PURPOSE: Tests for numeric helpers used by the risk engines.

Tests:
- Guarded division against zero and negative equity
- Clamping
- Exposure aggregates (total notional, largest exposure, concentration)
"""

import math

import pytest
from hyperlens.utils.math_utils import (
    clamp,
    concentration_ratio,
    largest_exposure,
    safe_divide,
    total_notional,
)


class TestSafeDivide:
    """Test guarded division."""

    def test_safe_divide_positive_denominator(self):
        """Test ordinary division."""
        assert safe_divide(50000.0, 10000.0) == pytest.approx(5.0)

    def test_safe_divide_zero_denominator_positive_numerator(self):
        """Test exposure against zero equity is unbounded."""
        assert safe_divide(100.0, 0.0) == math.inf

    def test_safe_divide_negative_denominator(self):
        """Test negative equity is treated like zero equity."""
        assert safe_divide(100.0, -500.0) == math.inf
        assert safe_divide(-100.0, -500.0) == -math.inf

    def test_safe_divide_zero_over_zero(self):
        """Test 0/0 gives 0 instead of NaN."""
        assert safe_divide(0.0, 0.0) == 0.0


class TestClamp:
    """Test clamping."""

    def test_clamp_within_bounds(self):
        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_clamp_below_and_above(self):
        assert clamp(-3.0, 0.0, 1.0) == 0.0
        assert clamp(105, 0, 100) == 100

    def test_clamp_infinity(self):
        assert clamp(math.inf, 0.0, 1.0) == 1.0


class TestExposureAggregates:
    """Test notional, largest exposure and concentration."""

    def test_total_notional_uses_absolute_values(self):
        """Test shorts with negative values still add exposure."""
        assert total_notional([9000.0, -1000.0]) == pytest.approx(10000.0)

    def test_total_notional_empty(self):
        assert total_notional([]) == 0.0

    def test_largest_exposure(self):
        assert largest_exposure([1000.0, -7000.0, 2000.0]) == pytest.approx(7000.0)

    def test_largest_exposure_empty(self):
        assert largest_exposure([]) == 0.0

    def test_concentration_ratio(self):
        """Test 9000 of 10000 is a 0.9 concentration."""
        assert concentration_ratio([9000.0, 1000.0]) == pytest.approx(0.9)

    def test_concentration_ratio_single_position(self):
        assert concentration_ratio([4200.0]) == pytest.approx(1.0)

    def test_concentration_ratio_zero_exposure(self):
        """Test all-zero exposure does not divide by zero."""
        assert concentration_ratio([0.0, 0.0]) == 0.0
        assert concentration_ratio([]) == 0.0
