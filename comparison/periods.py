"""
Period-over-period comparison for one asset.
"""

from typing import Any, Dict, Optional, Sequence

from analysis.calculations.returns import closes, total_return_percent, volumes
from analysis.calculations.volatility import daily_volatility_percent
from comparison.insights import generate_comparison_insights


def period_metrics(series: Optional[Sequence[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    """
    Aggregate metrics for one slice of a series.

    Args:
        series: Price points in ascending date order

    Returns:
        Dictionary with start/end/max/min price, total_return (percent),
        total_volume, avg_volume, volatility (percent, not annualized),
        data_points, price_range and price_range_percent (relative to the
        start price). None for empty input.
    """
    if not series:
        return None

    prices = closes(series)
    vols = volumes(series)

    start_price = prices[0]
    max_price = max(prices)
    min_price = min(prices)
    total_volume = sum(vols)
    price_range = max_price - min_price

    return {
        'start_price': start_price,
        'end_price': prices[-1],
        'max_price': max_price,
        'min_price': min_price,
        'total_return': total_return_percent(prices),
        'total_volume': total_volume,
        'avg_volume': total_volume / len(vols),
        'volatility': daily_volatility_percent(prices),
        'data_points': len(series),
        'price_range': price_range,
        'price_range_percent': price_range / start_price * 100 if start_price else 0.0,
    }


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    if denominator == 0:
        return None
    return numerator / denominator


def compare_time_periods(
    series_a: Optional[Sequence[Dict[str, Any]]],
    series_b: Optional[Sequence[Dict[str, Any]]],
    symbol: str
) -> Optional[Dict[str, Any]]:
    """
    Compare two periods of the same asset.

    Period 1 (A) is the current period, period 2 (B) the one it is compared
    against. Differences are A - B; ratios are A / B and None where B's
    metric is 0.

    Args:
        series_a: Current period price points
        series_b: Comparison period price points
        symbol: Asset symbol

    Returns:
        Dictionary with symbol, period1, period2 ({metrics, data}),
        differences, ratios and insights; None if either side is empty

    Example:
        >>> result = compare_time_periods(series, series, 'BTC')
        >>> result['differences']['return_difference']
        0.0
    """
    metrics_a = period_metrics(series_a)
    metrics_b = period_metrics(series_b)

    if metrics_a is None or metrics_b is None:
        return None

    result = {
        'symbol': symbol,
        'period1': {'metrics': metrics_a, 'data': list(series_a)},
        'period2': {'metrics': metrics_b, 'data': list(series_b)},
        'differences': {
            'return_difference': metrics_a['total_return'] - metrics_b['total_return'],
            'volatility_difference': metrics_a['volatility'] - metrics_b['volatility'],
            'volume_difference': metrics_a['total_volume'] - metrics_b['total_volume'],
            'avg_volume_difference': metrics_a['avg_volume'] - metrics_b['avg_volume'],
            'price_range_difference': (
                metrics_a['price_range_percent'] - metrics_b['price_range_percent']
            ),
        },
        'ratios': {
            'return_ratio': _ratio(metrics_a['total_return'], metrics_b['total_return']),
            'volatility_ratio': _ratio(metrics_a['volatility'], metrics_b['volatility']),
            'volume_ratio': _ratio(metrics_a['total_volume'], metrics_b['total_volume']),
            'avg_volume_ratio': _ratio(metrics_a['avg_volume'], metrics_b['avg_volume']),
        },
    }
    result['insights'] = generate_comparison_insights(result)

    return result
