"""
Time-series statistics.
Pure functions over ordered numeric sequences - no IO, no side effects.

All standard deviations are population deviations (divide by n).
Short or empty inputs never raise: they return 0.0, None or an empty list
as documented per function.
"""

import math
from bisect import bisect_left
from typing import List, Optional, Sequence

import numpy as np


def mean(xs: Sequence[float]) -> float:
    """
    Arithmetic mean.

    Args:
        xs: Numeric values

    Returns:
        Mean of the values, 0.0 for empty input
    """
    if len(xs) == 0:
        return 0.0
    return float(np.mean(np.asarray(xs, dtype=float)))


def stddev(xs: Sequence[float]) -> float:
    """
    Population standard deviation.

    Formula: σ = sqrt(Σ(x - μ)² / n)

    Args:
        xs: Numeric values

    Returns:
        Standard deviation (>= 0), 0.0 for fewer than 2 values
    """
    if len(xs) < 2:
        return 0.0
    return float(np.std(np.asarray(xs, dtype=float), ddof=0))


def simple_moving_average(xs: Sequence[float], period: int) -> Optional[float]:
    """
    Average of the last `period` values.

    Args:
        xs: Values in chronological order
        period: Window length

    Returns:
        SMA of the trailing window, or None if len(xs) < period
    """
    if period <= 0 or len(xs) < period:
        return None
    return mean(list(xs)[-period:])


def moving_average_series(xs: Sequence[float], period: int) -> List[float]:
    """
    Rolling simple moving average over every complete window.

    Example:
        moving_average_series([1, 2, 3, 4], 2) -> [1.5, 2.5, 3.5]
    """
    if period <= 0 or len(xs) < period:
        return []

    values = np.asarray(xs, dtype=float)
    # Cumulative sums give every window sum in one pass
    cumsum = np.concatenate(([0.0], np.cumsum(values)))
    window_sums = cumsum[period:] - cumsum[:-period]
    return (window_sums / period).tolist()


def exponential_moving_average(xs: Sequence[float], period: int) -> Optional[float]:
    """
    Exponential moving average seeded with the SMA of the first `period` values.

    Formula: ema = (x - ema) * (2 / (period + 1)) + ema

    Args:
        xs: Values in chronological order
        period: EMA period

    Returns:
        Final EMA value, or None if len(xs) < period
    """
    if period <= 0 or len(xs) < period:
        return None

    values = list(xs)
    multiplier = 2 / (period + 1)
    ema = mean(values[:period])

    for x in values[period:]:
        ema = (x - ema) * multiplier + ema

    return float(ema)


def percentile_rank(value: float, sorted_ascending: Sequence[float]) -> float:
    """
    Percentile rank of a value within an ascending-sorted batch.

    Rank = index of the first element >= value, divided by the batch size,
    expressed as 0-100.

    Args:
        value: Value to rank
        sorted_ascending: Batch values sorted ascending

    Returns:
        Rank in [0, 100]; 100.0 if value exceeds every element
    """
    n = len(sorted_ascending)
    index = bisect_left(sorted_ascending, value)
    if index >= n:
        return 100.0
    return index / n * 100


def z_score(value: float, mu: float, sigma: float) -> Optional[float]:
    """Z-score of value; None when sigma is 0."""
    if sigma == 0 or math.isnan(sigma):
        return None
    return (value - mu) / sigma
