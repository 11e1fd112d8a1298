"""
Seasonal return patterns by calendar month and weekday.

Needs at least a year of daily data. Each daily return is bucketed by the
month (0-11) and weekday (0=Monday) of the bar it ends on.
"""

import calendar
import logging
from typing import Any, Dict, List, Optional, Sequence

from analysis.calculations.statistics import mean, stddev
from patterns.types import PatternType, as_date, series_prices


logger = logging.getLogger(__name__)

MIN_POINTS = 365
MIN_BUCKET_SAMPLES = 20
SIGNIFICANCE_RATIO = 0.5


def _bucket_pattern(
    subtype: str,
    period: int,
    period_name: str,
    samples: List[float],
    symbol: Optional[str]
) -> Optional[Dict[str, Any]]:
    avg_return = mean(samples)
    std_return = stddev(samples)

    if std_return == 0:
        if avg_return == 0:
            return None
        confidence = 1.0
    else:
        if abs(avg_return) <= std_return * SIGNIFICANCE_RATIO:
            return None
        confidence = min(abs(avg_return) / std_return, 1)

    return {
        'type': PatternType.SEASONAL,
        'subtype': subtype,
        'symbol': symbol,
        'period': period,
        'period_name': period_name,
        'avg_return': avg_return * 100,
        'sample_size': len(samples),
        'confidence': confidence,
        'data': {
            'standard_deviation': std_return * 100,
            'is_positive': avg_return > 0,
        },
    }


def detect_seasonal_patterns(
    series: Sequence[Dict[str, Any]],
    symbol: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Detect months and weekdays with consistently positive or negative returns.

    A bucket is reported when it holds at least 20 returns and
    |avg| > 0.5 × std. Zero spread with a non-zero average counts as
    significant with confidence 1.

    Args:
        series: Daily price points in ascending date order
        symbol: Optional symbol copied onto each pattern

    Returns:
        List of seasonal patterns (subtype 'monthly' or 'weekly'); empty
        with fewer than 365 points
    """
    if not series or len(series) < MIN_POINTS:
        return []

    prices = series_prices(series)
    monthly: Dict[int, List[float]] = {}
    weekly: Dict[int, List[float]] = {}

    for i in range(1, len(series)):
        previous = prices[i - 1]
        if previous == 0:
            continue
        ret = (prices[i] - previous) / previous

        try:
            day = as_date(series[i].get('date'))
        except (ValueError, OverflowError, TypeError):
            logger.warning(f"Skipping unparseable date {series[i].get('date')!r}")
            continue

        monthly.setdefault(day.month - 1, []).append(ret)
        weekly.setdefault(day.weekday(), []).append(ret)

    patterns = []

    for month, samples in sorted(monthly.items()):
        if len(samples) >= MIN_BUCKET_SAMPLES:
            pattern = _bucket_pattern(
                'monthly', month, calendar.month_name[month + 1], samples, symbol
            )
            if pattern:
                patterns.append(pattern)

    for weekday, samples in sorted(weekly.items()):
        if len(samples) >= MIN_BUCKET_SAMPLES:
            pattern = _bucket_pattern(
                'weekly', weekday, calendar.day_name[weekday], samples, symbol
            )
            if pattern:
                patterns.append(pattern)

    return patterns
