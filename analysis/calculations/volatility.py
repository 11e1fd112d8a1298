"""
Volatility calculation utilities.
Pure functions for return-based and range-based volatility.

Two conventions coexist:
- daily_volatility_percent: stddev of returns x 100 (not annualized)
- annualized_volatility_percent: stddev of returns x sqrt(252) x 100
"""

import math
from typing import Any, Dict, List, Sequence

from analysis.calculations.returns import simple_returns
from analysis.calculations.statistics import stddev


TRADING_DAYS_PER_YEAR = 252


def daily_volatility_percent(prices: Sequence[float]) -> float:
    """
    Volatility of simple returns, not annualized.

    Formula: σ = std(returns) × 100

    Args:
        prices: Prices in chronological order

    Returns:
        Volatility as percent (2.5 = 2.5%), 0.0 for fewer than 2 prices
    """
    return stddev(simple_returns(prices)) * 100


def annualized_volatility_percent(prices: Sequence[float]) -> float:
    """
    Annualized volatility of simple returns.

    Formula: σ = std(returns) × √252 × 100

    Args:
        prices: Prices in chronological order

    Returns:
        Annualized volatility as percent, 0.0 for fewer than 2 prices
    """
    return stddev(simple_returns(prices)) * math.sqrt(TRADING_DAYS_PER_YEAR) * 100


def rolling_annualized_volatility(prices: Sequence[float], window: int = 10) -> List[float]:
    """
    Annualized volatility of every trailing window of returns.

    Element k covers returns[k : k + window], i.e. the window whose last
    return ends at price index k + window.

    Args:
        prices: Prices in chronological order
        window: Number of returns per window

    Returns:
        List of annualized volatilities (percent); empty when there are
        fewer than `window` returns
    """
    returns = simple_returns(prices)

    if window <= 0 or len(returns) < window:
        return []

    annualize = math.sqrt(TRADING_DAYS_PER_YEAR) * 100
    rolling_vols = []

    for i in range(window - 1, len(returns)):
        window_returns = returns[i - window + 1:i + 1]
        rolling_vols.append(stddev(window_returns) * annualize)

    return rolling_vols


def intrabar_volatility_percent(point: Dict[str, Any]) -> float:
    """
    Range-based volatility of a single OHLC bar.

    Formula: (high - low) / ((high + low) / 2) × 100

    Returns:
        Percent range, 0.0 if the bar midpoint is 0
    """
    high = float(point.get('high') or 0)
    low = float(point.get('low') or 0)
    midpoint = (high + low) / 2
    if midpoint == 0:
        return 0.0
    return (high - low) / midpoint * 100
