"""
Tests for price point enrichment, data ranges and filters.
"""

from datetime import date

from ingestion.transforms.enrichment import (
    compute_data_ranges,
    enrich_price_points,
    filter_market_data,
    liquidity_metrics,
    performance_indicator,
    price_change_percent,
)


def point(day, open_, high, low, close, volume, **extra):
    p = {'date': date(2024, 1, day), 'open': open_, 'high': high, 'low': low,
         'close': close, 'volume': volume}
    p.update(extra)
    return p


SERIES = [
    point(1, 100.0, 110.0, 90.0, 105.0, 300.0, trades=10),
    point(2, 105.0, 106.0, 104.0, 104.0, 100.0),
    point(3, 104.0, 104.0, 104.0, 104.0, 200.0),
]


class TestPerformance:
    """Tests for price change and performance indicator."""

    def test_price_change(self):
        assert abs(price_change_percent(SERIES[0]) - 5.0) < 1e-9

    def test_zero_open(self):
        assert price_change_percent(point(1, 0.0, 1.0, 0.0, 1.0, 1.0)) == 0.0

    def test_directions(self):
        assert performance_indicator(2.0)['direction'] == 'up'
        assert performance_indicator(-2.5) == {'price_change': -2.5, 'direction': 'down', 'magnitude': 2.5}
        assert performance_indicator(0.0)['direction'] == 'neutral'


class TestLiquidity:
    """Tests for liquidity_metrics."""

    def test_normalized_volume(self):
        metrics = liquidity_metrics(SERIES[0])

        assert metrics['volume'] == 300.0
        assert abs(metrics['volume_normalized'] - 300.0 / 105.0) < 1e-9
        assert metrics['trades'] == 10

    def test_missing_trades(self):
        assert liquidity_metrics(SERIES[1])['trades'] == 0


class TestEnrichPricePoints:
    """Tests for enrich_price_points."""

    def test_derived_fields(self):
        enriched = enrich_price_points(SERIES)

        assert len(enriched) == 3
        first = enriched[0]
        assert abs(first['price_change'] - 5.0) < 1e-9
        assert abs(first['volatility'] - 20.0) < 1e-9
        assert first['performance']['direction'] == 'up'
        assert first['liquidity']['volume'] == 300.0
        assert enriched[2]['volatility'] == 0.0

    def test_volume_percentiles(self):
        enriched = enrich_price_points(SERIES)

        # Sorted volumes [100, 200, 300]
        assert [p['volume_percentile'] for p in enriched] == [67, 0, 33]

    def test_inputs_not_mutated(self):
        original = dict(SERIES[0])

        enrich_price_points(SERIES)

        assert SERIES[0] == original

    def test_empty(self):
        assert enrich_price_points([]) == []


class TestDataRanges:
    """Tests for compute_data_ranges."""

    def test_ranges(self):
        ranges = compute_data_ranges(SERIES)

        assert ranges['volume_range'] == {'min': 100.0, 'max': 300.0}
        assert ranges['price_range'] == {'min': 104.0, 'max': 105.0}
        assert ranges['volatility_range']['min'] == 0.0
        assert abs(ranges['volatility_range']['max'] - 20.0) < 1e-9

    def test_empty(self):
        assert compute_data_ranges([]) is None


class TestFilterMarketData:
    """Tests for filter_market_data."""

    def test_no_filters(self):
        assert filter_market_data(SERIES) == SERIES

    def test_volume_range_inclusive(self):
        kept = filter_market_data(SERIES, volume_range=(100.0, 200.0))

        assert [p['date'].day for p in kept] == [2, 3]

    def test_volatility_range(self):
        kept = filter_market_data(SERIES, volatility_range=(0.0, 5.0))

        assert [p['date'].day for p in kept] == [2, 3]

    def test_combined(self):
        kept = filter_market_data(SERIES, volatility_range=(0.0, 5.0), volume_range=(150.0, 1000.0))

        assert [p['date'].day for p in kept] == [3]
