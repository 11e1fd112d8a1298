"""
Core validators for canonical price points.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date
from typing import Any, Dict, List, Sequence


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


REQUIRED_KEYS = {'date', 'open', 'high', 'low', 'close', 'volume'}


def validate_price_point(point: Dict[str, Any]) -> None:
    """
    Validate a canonical price point.

    Args:
        point: Dictionary containing OHLCV data

    Raises:
        ValidationError: If validation fails
    """
    missing = REQUIRED_KEYS - set(point.keys())
    if missing:
        raise ValidationError(f"Missing required keys: {sorted(missing)}")

    if not isinstance(point['date'], date):
        raise ValidationError(f"date must be date, got {type(point['date'])}")

    for field in ['open', 'high', 'low', 'close']:
        value = point[field]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field} must be numeric, got {type(value)}")

        if not math.isfinite(value):
            raise ValidationError(f"{field} must be finite, got {value}")

        if value <= 0:
            raise ValidationError(f"{field} must be positive, got {value}")

    volume = point['volume']
    if isinstance(volume, bool) or not isinstance(volume, (int, float)):
        raise ValidationError(f"volume must be numeric, got {type(volume)}")

    if not math.isfinite(volume):
        raise ValidationError(f"volume must be finite, got {volume}")

    if volume < 0:
        raise ValidationError(f"volume must be non-negative, got {volume}")

    high = point['high']
    low = point['low']
    open_price = point['open']
    close = point['close']

    if high < low:
        raise ValidationError(f"high ({high}) must be >= low ({low})")

    if high < open_price:
        raise ValidationError(f"high ({high}) must be >= open ({open_price})")

    if high < close:
        raise ValidationError(f"high ({high}) must be >= close ({close})")

    if low > open_price:
        raise ValidationError(f"low ({low}) must be <= open ({open_price})")

    if low > close:
        raise ValidationError(f"low ({low}) must be <= close ({close})")


def check_series_order(series: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Report ordering problems in a series without reordering it.

    Analytics assume ascending dates with no duplicates. This check lets
    callers surface a malformed series; it never sorts.

    Returns:
        List of problem descriptions, empty when the series is well ordered
    """
    problems = []

    for i in range(1, len(series)):
        previous = series[i - 1].get('date')
        current = series[i].get('date')

        if previous is None or current is None:
            continue

        if current == previous:
            problems.append(f"Duplicate date at index {i}: {current}")
        elif current < previous:
            problems.append(f"Out-of-order date at index {i}: {current} after {previous}")

    return problems
