"""
Volatility cluster detection over rolling annualized volatility.
"""

from typing import Any, Dict, List, Sequence

from analysis.calculations.statistics import mean
from analysis.calculations.volatility import rolling_annualized_volatility
from patterns.types import PatternType, series_dates, series_prices


MIN_CLUSTER_LENGTH = 3


def detect_volatility_clusters(
    series: Sequence[Dict[str, Any]],
    period: int = 10,
    threshold: float = 1.5
) -> List[Dict[str, Any]]:
    """
    Detect runs of elevated volatility.

    A cluster is a run of at least 3 consecutive rolling-volatility values
    above average volatility × threshold. A run still open at the end of the
    series is reported too.

    Args:
        series: Price points in ascending date order
        period: Rolling window in returns
        threshold: Multiple of average volatility that counts as elevated

    Returns:
        List of cluster patterns; empty with fewer than 2 * period points
    """
    if not series or period <= 0 or len(series) < period * 2:
        return []

    prices = series_prices(series)
    dates = series_dates(series)
    volatilities = rolling_annualized_volatility(prices, period)

    if not volatilities:
        return []

    avg_volatility = mean(volatilities)
    if avg_volatility == 0:
        return []

    cutoff = avg_volatility * threshold
    clusters = []
    run_start = None
    run_values: List[float] = []

    # Sentinel closes a run that lasts until the final value
    for i, vol in enumerate(volatilities + [None]):
        if vol is not None and vol > cutoff:
            if run_start is None:
                run_start = i
                run_values = []
            run_values.append(vol)
            continue

        if run_start is not None and len(run_values) >= MIN_CLUSTER_LENGTH:
            clusters.append(_build_cluster(
                dates, run_start, i - 1, run_values, avg_volatility, period
            ))
        run_start = None
        run_values = []

    return clusters


def _build_cluster(
    dates: List[Any],
    start: int,
    end: int,
    values: List[float],
    baseline: float,
    period: int
) -> Dict[str, Any]:
    # Volatility k covers the window ending at price index k + period
    avg_cluster_vol = mean(values)
    return {
        'type': PatternType.VOLATILITY_CLUSTER,
        'start_date': dates[start + period],
        'end_date': dates[end + period],
        'avg_volatility': avg_cluster_vol,
        'max_volatility': max(values),
        'strength': (avg_cluster_vol - baseline) / baseline,
        'confidence': 0.8 if len(values) > 5 else 0.6,
        'data': {
            'baseline_volatility': baseline,
            'cluster_volatilities': list(values),
            'duration': len(values),
        },
    }
