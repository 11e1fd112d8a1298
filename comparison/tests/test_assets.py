"""
Tests for multi-asset comparison and ranking.
"""

from datetime import date, timedelta

from comparison.assets import asset_metrics, compare_cryptocurrencies


def build_series(prices, volume=1000.0, start=date(2024, 1, 1)):
    return [
        {
            'date': start + timedelta(days=i),
            'open': p, 'high': p, 'low': p, 'close': p,
            'volume': volume,
        }
        for i, p in enumerate(prices)
    ]


class TestAssetMetrics:
    """Tests for per-asset metrics."""

    def test_flat_series_sharpe_is_zero(self):
        metrics = asset_metrics('BTC', build_series([100.0, 100.0, 100.0]))

        assert metrics['sharpe_ratio'] == 0.0
        assert metrics['volatility'] == 0.0
        assert metrics['total_volume'] == 3000.0

    def test_sharpe_is_mean_over_std(self):
        # Returns: +10%, -10%
        metrics = asset_metrics('ETH', build_series([100.0, 110.0, 99.0]))

        assert abs(metrics['sharpe_ratio']) < 1e-9
        assert abs(metrics['volatility'] - 10.0) < 1e-9


class TestCompareCryptocurrencies:
    """Tests for compare_cryptocurrencies."""

    def test_single_symbol_returns_none(self):
        assert compare_cryptocurrencies({'BTC': build_series([100.0, 110.0])}, 'daily') is None

    def test_empty_series_do_not_count(self):
        result = compare_cryptocurrencies(
            {'BTC': build_series([100.0, 110.0]), 'ETH': [], 'SOL': None},
            'daily',
        )

        assert result is None

    def test_ranking_and_summary(self):
        series_map = {
            'BTC': build_series([100.0, 110.0], volume=10.0),
            'ETH': build_series([100.0, 150.0], volume=20.0),
            'SOL': build_series([100.0, 90.0], volume=30.0),
        }

        result = compare_cryptocurrencies(series_map, 'weekly')

        assert result['timeframe'] == 'weekly'
        assert [m['symbol'] for m in result['rankings']] == ['ETH', 'BTC', 'SOL']
        assert [m['rank'] for m in result['rankings']] == [1, 2, 3]

        summary = result['summary']
        assert summary['best_performer']['symbol'] == 'ETH'
        assert summary['worst_performer']['symbol'] == 'SOL'
        assert abs(summary['avg_return'] - 50.0 / 3) < 1e-9
        assert summary['total_volume'] == 120.0

    def test_leader_and_divergence_insights(self):
        series_map = {
            'BTC': build_series([100.0, 110.0]),
            'ETH': build_series([100.0, 150.0]),
        }

        insights = compare_cryptocurrencies(series_map, 'daily')['insights']

        assert insights[0]['severity'] == 'info'
        assert insights[0]['message'] == 'ETH leads with 50.00% return'
        divergence = [i for i in insights if i['type'] == 'divergence'][0]
        assert divergence['severity'] == 'high'
        assert abs(divergence['value'] - 40.0) < 1e-9
