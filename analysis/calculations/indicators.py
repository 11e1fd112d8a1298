"""
Technical indicator calculations.
Pure functions built on the time-series statistics - inputs are never mutated.
"""

from typing import Dict, Optional, Sequence

from analysis.calculations.statistics import (
    exponential_moving_average,
    mean,
    simple_moving_average,
    stddev,
)


def rsi(prices: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Relative Strength Index over the trailing `period` price changes.

    Formula: RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    Args:
        prices: Prices in chronological order
        period: Number of trailing changes

    Returns:
        RSI in [0, 100]; 100.0 when there are no losses;
        None if len(prices) < period + 1
    """
    if period <= 0 or len(prices) < period + 1:
        return None

    values = list(prices)
    changes = [values[i] - values[i - 1] for i in range(1, len(values))]
    recent = changes[-period:]

    avg_gain = sum(c for c in recent if c > 0) / period
    avg_loss = sum(-c for c in recent if c < 0) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def macd(prices: Sequence[float]) -> Optional[float]:
    """
    MACD line: EMA(12) - EMA(26).

    Returns:
        MACD value, or None with fewer than 26 prices
    """
    if len(prices) < 26:
        return None

    ema12 = exponential_moving_average(prices, 12)
    ema26 = exponential_moving_average(prices, 26)
    if ema12 is None or ema26 is None:
        return None
    return ema12 - ema26


def bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    num_std: float = 2.0
) -> Optional[Dict[str, float]]:
    """
    Bollinger Bands over the trailing window.

    Args:
        prices: Prices in chronological order
        period: SMA window
        num_std: Band width in standard deviations

    Returns:
        {'upper', 'middle', 'lower'} with lower <= middle <= upper,
        or None if len(prices) < period
    """
    middle = simple_moving_average(prices, period)
    if middle is None:
        return None

    sigma = stddev(list(prices)[-period:])

    return {
        'upper': middle + sigma * num_std,
        'middle': middle,
        'lower': middle - sigma * num_std,
    }


def volume_profile(volumes: Sequence[float]) -> Optional[Dict[str, float]]:
    """Average, max, min and latest volume; None for empty input."""
    if len(volumes) == 0:
        return None

    return {
        'avg': mean(volumes),
        'max': float(max(volumes)),
        'min': float(min(volumes)),
        'current': float(volumes[-1]),
    }
