"""
Tests for seasonal (monthly/weekday) return patterns.
"""

from datetime import date, timedelta

import pytest

from patterns.seasonal import detect_seasonal_patterns
from patterns.types import PatternType, pattern_score


def series_from_returns(returns, start=date(2023, 1, 1)):
    prices = [100.0]
    for r in returns:
        prices.append(prices[-1] * (1 + r))
    return [
        {
            'date': start + timedelta(days=i),
            'open': p, 'high': p, 'low': p, 'close': p,
            'volume': 1000.0,
        }
        for i, p in enumerate(prices)
    ]


class TestSeasonalPatterns:
    """Tests for detect_seasonal_patterns."""

    def test_constant_gain_flags_every_bucket(self):
        """+1% every day: zero spread with a positive mean is significant."""
        series = series_from_returns([0.01] * 399)

        patterns = detect_seasonal_patterns(series, symbol='BTC')

        monthly = [p for p in patterns if p['subtype'] == 'monthly']
        weekly = [p for p in patterns if p['subtype'] == 'weekly']

        assert len(monthly) == 12
        assert len(weekly) == 7
        for pattern in patterns:
            assert pattern['type'] == PatternType.SEASONAL
            assert pattern['symbol'] == 'BTC'
            assert pattern['confidence'] == 1.0
            assert pattern['data']['is_positive'] is True
            assert abs(pattern['avg_return'] - 1.0) < 1e-6
            assert pattern['sample_size'] >= 20

        assert monthly[0]['period'] == 0
        assert monthly[0]['period_name'] == 'January'
        assert weekly[0]['period_name'] == 'Monday'

    def test_ranked_on_confidence_alone(self):
        """Seasonal buckets carry no strength, so they score confidence x 0.7."""
        series = series_from_returns([0.01] * 399)

        for pattern in detect_seasonal_patterns(series):
            assert 'strength' not in pattern
            assert pattern_score(pattern) == pytest.approx(0.7)

    def test_alternating_returns_are_not_seasonal(self):
        """Symmetric +1%/-1% returns average out in every bucket."""
        returns = [0.01 if i % 2 == 0 else -0.01 for i in range(399)]
        series = series_from_returns(returns)

        assert detect_seasonal_patterns(series) == []

    def test_accepts_iso_string_dates(self):
        series = series_from_returns([0.01] * 399)
        for point in series:
            point['date'] = point['date'].isoformat()

        patterns = detect_seasonal_patterns(series)

        assert len(patterns) == 19

    def test_short_series_returns_empty(self):
        series = series_from_returns([0.01] * 100)

        assert detect_seasonal_patterns(series) == []
