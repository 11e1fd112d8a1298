"""
Risk and risk-adjusted performance ratios.
Pure functions over return lists (decimals, 0.01 = 1%).
"""

import math
from typing import Optional, Sequence

from analysis.calculations.statistics import mean, stddev


DEFAULT_RISK_FREE_RATE = 0.02 / 365


def sharpe_ratio(
    returns: Sequence[float],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> Optional[float]:
    """
    Sharpe ratio of periodic returns.

    Formula: (mean(returns) - risk_free_rate) / std(returns)

    Args:
        returns: Periodic returns as decimals
        risk_free_rate: Risk-free rate per period (default 2% annual / 365)

    Returns:
        Sharpe ratio; 0.0 if std is 0; None for empty input
    """
    if len(returns) == 0:
        return None

    sigma = stddev(returns)
    if sigma == 0:
        return 0.0

    return (mean(returns) - risk_free_rate) / sigma


def value_at_risk(returns: Sequence[float], confidence: float) -> Optional[float]:
    """
    Historical Value-at-Risk.

    Picks the (1 - confidence) quantile of sorted returns by index
    floor((1 - confidence) * n). The raw signed return is returned;
    callers negate or scale for display.

    Args:
        returns: Periodic returns as decimals
        confidence: Confidence level, e.g. 0.95

    Returns:
        Return at the quantile; None for empty input; 0.0 if the index
        falls outside the list
    """
    if len(returns) == 0:
        return None

    sorted_returns = sorted(returns)
    index = math.floor((1 - confidence) * len(sorted_returns))

    if index < 0 or index >= len(sorted_returns):
        return 0.0
    return sorted_returns[index]


def downside_deviation(returns: Sequence[float]) -> Optional[float]:
    """
    Standard deviation of negative returns only.

    Returns:
        Downside deviation as decimal; 0.0 if no return is negative;
        None for empty input
    """
    if len(returns) == 0:
        return None

    negative = [r for r in returns if r < 0]
    if not negative:
        return 0.0
    return stddev(negative)


def calmar_ratio(
    returns: Sequence[float],
    max_drawdown_percent: Optional[float]
) -> Optional[float]:
    """
    Calmar ratio: annualized mean return over maximum drawdown.

    Formula: (mean(returns) × 365) / (max_drawdown_percent / 100)

    Returns:
        Calmar ratio, or None when returns are empty or drawdown is 0/None
    """
    if len(returns) == 0 or not max_drawdown_percent:
        return None

    annualized_return = mean(returns) * 365
    return annualized_return / (max_drawdown_percent / 100)


def approximate_beta(
    returns: Sequence[float],
    market_volatility: float = 0.02
) -> float:
    """
    Volatility-ratio beta proxy for use without a market benchmark series.

    Asset daily volatility divided by an assumed market daily volatility.

    Returns:
        Beta estimate, 1.0 for empty input
    """
    if len(returns) == 0 or market_volatility == 0:
        return 1.0
    return stddev(returns) / market_volatility
