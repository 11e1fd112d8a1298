"""
Returns calculation utilities.
Pure functions for simple returns over price series.
"""

from typing import Any, Dict, List, Sequence


def price_of(point: Dict[str, Any]) -> float:
    """
    Price used for analytics: close, falling back to price.

    Missing fields are treated as 0.
    """
    value = point.get('close')
    if not value:
        value = point.get('price')
    return float(value or 0)


def closes(series: Sequence[Dict[str, Any]]) -> List[float]:
    """Extract analytics prices from a series of price points."""
    return [price_of(point) for point in series]


def volumes(series: Sequence[Dict[str, Any]]) -> List[float]:
    """Extract volumes from a series, missing volume counts as 0."""
    return [float(point.get('volume') or 0) for point in series]


def simple_returns(prices: Sequence[float]) -> List[float]:
    """
    Calculate one-period simple returns.

    Formula: r_i = (P_i - P_{i-1}) / P_{i-1}

    Pairs whose previous price is 0 are skipped.

    Args:
        prices: Prices in chronological order

    Returns:
        List of returns as decimals (0.05 = 5%), empty for fewer than 2 prices

    Example:
        simple_returns([100, 110, 99]) -> [0.10, -0.10]
    """
    returns = []
    for i in range(1, len(prices)):
        previous = prices[i - 1]
        if previous != 0:
            returns.append((prices[i] - previous) / previous)
    return returns


def total_return_percent(prices: Sequence[float]) -> float:
    """
    Total return from first to last price, as percent.

    Returns:
        Percent return (5.0 = 5%), 0.0 for empty input or a zero start price
    """
    if len(prices) == 0 or prices[0] == 0:
        return 0.0
    return (prices[-1] - prices[0]) / prices[0] * 100


def trailing_returns(prices: Sequence[float], window: int = 30) -> List[float]:
    """
    Simple returns over the last `window` prices.

    Args:
        prices: Prices in chronological order
        window: Number of trailing prices to use

    Returns:
        Up to window - 1 returns
    """
    if window <= 0:
        return []
    return simple_returns(list(prices)[-window:])
