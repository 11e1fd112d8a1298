"""
Trend and breakout detection.

Slides a lookback window over close prices, measures the raw percent change
and an OLS slope, and flags windows that move more than 5% with a slope
that tracks the move.
"""

from typing import Any, Dict, List, Sequence

from patterns.types import PatternType, TrendPattern, series_dates, series_prices


TREND_CHANGE_THRESHOLD = 0.05
CORRELATION_THRESHOLD = 0.5
BREAKOUT_WINDOW = 20
BREAKOUT_MARGIN = 1.02


def regression_slope(values: Sequence[float]) -> float:
    """
    Least-squares slope of values against their index 0..n-1.

    Formula: (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)

    Returns:
        Slope, 0.0 for fewer than 2 values
    """
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in enumerate(values))
    sum_xx = sum(x * x for x in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def detect_trend_patterns(
    series: Sequence[Dict[str, Any]],
    lookback_days: int = 30
) -> List[Dict[str, Any]]:
    """
    Detect bullish/bearish trends and 20-bar breakouts.

    Args:
        series: Price points in ascending date order
        lookback_days: Trend window length in bars

    Returns:
        List of trend patterns; empty when the series is shorter than
        lookback_days
    """
    if not series or lookback_days < 2 or len(series) < lookback_days:
        return []

    prices = series_prices(series)
    dates = series_dates(series)
    patterns = []

    for i in range(max(BREAKOUT_WINDOW, lookback_days), len(prices)):
        window = prices[i - lookback_days:i]
        start_price = window[0]
        if start_price == 0:
            continue

        price_change = (window[-1] - start_price) / start_price
        slope = regression_slope(window)
        correlation = abs(slope) / max(abs(price_change), 0.01)

        if abs(price_change) > TREND_CHANGE_THRESHOLD and correlation > CORRELATION_THRESHOLD:
            patterns.append({
                'type': PatternType.TREND,
                'subtype': TrendPattern.BULLISH if price_change > 0 else TrendPattern.BEARISH,
                'start_date': dates[i - lookback_days],
                'end_date': dates[i - 1],
                'strength': min(abs(price_change) * 10, 1),
                'confidence': min(correlation, 1.0),
                'data': {
                    'price_change': price_change * 100,
                    'slope': slope,
                    'start_price': start_price,
                    'end_price': window[-1],
                },
            })

    patterns.extend(_detect_breakouts(prices, dates))
    return patterns


def _detect_breakouts(prices: List[float], dates: List[Any]) -> List[Dict[str, Any]]:
    breakouts = []

    for i in range(BREAKOUT_WINDOW, len(prices)):
        current_price = prices[i]
        recent_high = max(prices[i - BREAKOUT_WINDOW:i])

        if recent_high > 0 and current_price > recent_high * BREAKOUT_MARGIN:
            excess = (current_price - recent_high) / recent_high
            breakouts.append({
                'type': PatternType.TREND,
                'subtype': TrendPattern.BREAKOUT,
                'start_date': dates[i - 1],
                'end_date': dates[i],
                'strength': excess,
                'confidence': 0.8,
                'data': {
                    'breakout_level': recent_high,
                    'current_price': current_price,
                    'percent_above': excess * 100,
                },
            })

    return breakouts
