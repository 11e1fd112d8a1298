"""
Tests for risk and risk-adjusted ratios.
"""

import pytest

from analysis.calculations.risk import (
    approximate_beta,
    calmar_ratio,
    downside_deviation,
    sharpe_ratio,
    value_at_risk,
)

RETURNS = [-0.05, -0.03, -0.01, 0.0, 0.01, 0.02, 0.03, 0.04, 0.05, 0.06]


class TestSharpeRatio:
    """Tests for sharpe_ratio."""

    def test_zero_risk_free(self):
        assert sharpe_ratio([0.02, 0.0], risk_free_rate=0.0) == pytest.approx(1.0)

    def test_constant_returns(self):
        assert sharpe_ratio([0.5, 0.5, 0.5]) == 0.0

    def test_empty(self):
        assert sharpe_ratio([]) is None


class TestValueAtRisk:
    """Tests for value_at_risk."""

    def test_quantiles(self):
        assert value_at_risk(RETURNS, 0.95) == -0.05
        assert value_at_risk(RETURNS, 0.5) == 0.02

    def test_unsorted_input(self):
        assert value_at_risk(list(reversed(RETURNS)), 0.95) == -0.05

    def test_empty(self):
        assert value_at_risk([], 0.95) is None


class TestDownsideDeviation:
    """Tests for downside_deviation."""

    def test_negative_only(self):
        assert downside_deviation([0.01, -0.02, -0.04]) == pytest.approx(0.01)

    def test_no_losses(self):
        assert downside_deviation([0.01, 0.02]) == 0.0

    def test_empty(self):
        assert downside_deviation([]) is None


class TestCalmarAndBeta:
    """Tests for calmar_ratio and approximate_beta."""

    def test_calmar(self):
        # mean 0.02 × 365 = 7.3 over a 20% drawdown
        assert calmar_ratio([0.01, 0.03], 20.0) == pytest.approx(36.5)

    def test_calmar_without_drawdown(self):
        assert calmar_ratio([0.01], 0.0) is None
        assert calmar_ratio([0.01], None) is None
        assert calmar_ratio([], 10.0) is None

    def test_beta_proxy(self):
        assert approximate_beta([0.02, -0.02]) == pytest.approx(1.0)
        assert approximate_beta([0.04, -0.04]) == pytest.approx(2.0)

    def test_beta_empty(self):
        assert approximate_beta([]) == 1.0
