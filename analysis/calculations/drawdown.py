"""
Drawdown and recovery calculation utilities.
Pure functions for maximum drawdown analysis.
"""

from datetime import date
from typing import Any, Dict, Optional, Sequence, Union

from analysis.calculations.returns import closes


def max_drawdown_from_prices(prices: Sequence[float]) -> float:
    """
    Largest peak-to-trough decline of a price list, as percent.

    Tracks the running peak; drawdown at each point is (peak - price) / peak.

    Args:
        prices: Prices in chronological order

    Returns:
        Maximum drawdown as a non-negative percent (20.0 = 20%),
        0.0 for fewer than 2 prices

    Example:
        [100, 90, 95, 80, 85] -> 20.0
    """
    if len(prices) < 2:
        return 0.0

    max_dd = 0.0
    peak = prices[0]

    for price in prices[1:]:
        if price > peak:
            peak = price
        elif peak > 0:
            max_dd = max(max_dd, (peak - price) / peak)

    return max_dd * 100


def max_drawdown(series: Sequence[Dict[str, Any]]) -> float:
    """
    Maximum drawdown of a price-point series, using close prices.

    Returns:
        Maximum drawdown as percent, 0.0 for fewer than 2 points
    """
    return max_drawdown_from_prices(closes(series))


def drawdown_stats(
    prices: Sequence[float],
    dates: Sequence[date]
) -> Dict[str, Union[float, date, int, None]]:
    """
    Calculate maximum drawdown statistics for a price series.

    Finds the largest peak-to-trough decline and recovery information.

    Args:
        prices: List of prices in chronological order
        dates: Corresponding dates

    Returns:
        Dictionary with drawdown statistics:
        - max_drawdown_pct: Largest decline as percent (positive)
        - peak_date: Date of peak before max drawdown
        - trough_date: Date of lowest point
        - recovery_date: Date when price exceeded peak (None if no recovery)
        - drawdown_days: Bars from peak to trough
        - recovery_days: Bars from trough to recovery (None if no recovery)
        All values are None for fewer than 2 prices or mismatched inputs.
    """
    if len(prices) < 2 or len(prices) != len(dates):
        return _empty_drawdown_stats()

    peak_idx = 0
    max_dd = 0.0
    best_peak_idx = 0
    trough_idx = 0

    for i in range(1, len(prices)):
        if prices[i] > prices[peak_idx]:
            peak_idx = i
            continue

        peak_price = prices[peak_idx]
        if peak_price <= 0:
            continue

        dd = (peak_price - prices[i]) / peak_price
        if dd > max_dd:
            max_dd = dd
            best_peak_idx = peak_idx
            trough_idx = i

    # No decline at all: peak and trough coincide, recovery is immediate
    if max_dd == 0.0:
        return {
            'max_drawdown_pct': 0.0,
            'peak_date': dates[0],
            'trough_date': dates[0],
            'recovery_date': dates[0],
            'drawdown_days': 0,
            'recovery_days': 0
        }

    peak_value = prices[best_peak_idx]
    recovery_idx: Optional[int] = None
    for i in range(trough_idx + 1, len(prices)):
        if prices[i] > peak_value:
            recovery_idx = i
            break

    return {
        'max_drawdown_pct': max_dd * 100,
        'peak_date': dates[best_peak_idx],
        'trough_date': dates[trough_idx],
        'recovery_date': dates[recovery_idx] if recovery_idx is not None else None,
        'drawdown_days': trough_idx - best_peak_idx,
        'recovery_days': (recovery_idx - trough_idx) if recovery_idx is not None else None
    }


def _empty_drawdown_stats() -> Dict[str, None]:
    return {
        'max_drawdown_pct': None,
        'peak_date': None,
        'trough_date': None,
        'recovery_date': None,
        'drawdown_days': None,
        'recovery_days': None
    }
