"""
Tests for comparison chart data and export.
"""

import json
from datetime import date, timedelta

import pytest

from comparison.assets import compare_cryptocurrencies
from comparison.export import (
    ComparisonExportError,
    build_comparison_chart_data,
    export_comparison,
)
from comparison.periods import compare_time_periods


def build_series(prices, start=date(2024, 1, 1)):
    return [
        {
            'date': start + timedelta(days=i),
            'open': p, 'high': p, 'low': p, 'close': p,
            'volume': 1000.0,
        }
        for i, p in enumerate(prices)
    ]


@pytest.fixture
def period_comparison():
    return compare_time_periods(
        build_series([100.0, 105.0, 110.0]),
        build_series([90.0, 95.0]),
        'BTC',
    )


@pytest.fixture
def asset_comparison():
    return compare_cryptocurrencies(
        {
            'BTC': build_series([100.0, 110.0]),
            'ETH': build_series([10.0, 12.0]),
        },
        'daily',
    )


class TestChartData:
    """Tests for build_comparison_chart_data."""

    def test_period_chart_truncates_to_shorter(self, period_comparison):
        chart = build_comparison_chart_data(period_comparison)

        assert len(chart) == 2
        assert chart[0]['base_value'] == 100.0
        assert chart[0]['compare_value'] == 90.0
        assert chart[1]['base_name'] == 'Current Period'

    def test_asset_chart(self, asset_comparison):
        chart = build_comparison_chart_data(asset_comparison)

        assert [row['symbol'] for row in chart] == ['ETH', 'BTC']
        assert abs(chart[0]['return'] - 20.0) < 1e-9

    def test_empty(self):
        assert build_comparison_chart_data(None) is None


class TestExportComparison:
    """Tests for export_comparison."""

    def test_period_rows(self, period_comparison):
        rows = export_comparison(period_comparison, fmt='rows')

        assert rows[0] == ['Metric', 'Current Period', 'Previous Period', 'Difference']
        assert rows[1][0] == 'Total Return (%)'
        assert rows[1][1] == '10.00'
        assert len(rows) == 4

    def test_asset_csv(self, asset_comparison):
        csv_text = export_comparison(asset_comparison, fmt='csv')
        lines = csv_text.split('\n')

        assert lines[0] == 'Symbol,Return (%),Volatility (%),Volume,Sharpe Ratio,Start Price,End Price'
        assert lines[1].startswith('ETH,20.00,')
        assert len(lines) == 3

    def test_json(self, period_comparison):
        payload = json.loads(export_comparison(period_comparison, fmt='json'))

        assert payload['symbol'] == 'BTC'
        assert payload['period1']['data'][0]['date'] == '2024-01-01'

    def test_unknown_format(self, period_comparison):
        with pytest.raises(ComparisonExportError, match="Unsupported export format"):
            export_comparison(period_comparison, fmt='pdf')

    def test_empty(self):
        assert export_comparison(None) is None
