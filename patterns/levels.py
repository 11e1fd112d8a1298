"""
Support and resistance level detection.

Local highs/lows over a symmetric window are grouped into price clusters;
clusters touched often enough become levels.
"""

from typing import Any, Dict, List, Sequence

from patterns.types import PatternType, series_dates, series_prices


CLUSTER_TOLERANCE = 0.02


def find_local_extrema(
    values: Sequence[float],
    dates: Sequence[Any],
    period: int,
    find_peaks: bool
) -> List[Dict[str, Any]]:
    """
    Points that are the max (peaks) or min (troughs) of the window [i - period, i + period].
    """
    extrema = []

    for i in range(period, len(values) - period):
        window = values[i - period:i + period + 1]
        current = values[i]
        is_extreme = current >= max(window) if find_peaks else current <= min(window)
        if is_extreme:
            extrema.append({'index': i, 'price': current, 'date': dates[i]})

    return extrema


def group_levels(points: Sequence[Dict[str, Any]], min_touches: int) -> List[Dict[str, Any]]:
    """
    Cluster extrema whose price is within 2% of a cluster's running average.

    Each point joins the first cluster it fits; clusters with fewer than
    min_touches points are dropped.
    """
    groups: List[Dict[str, List[Any]]] = []

    for point in points:
        for group in groups:
            avg_price = sum(group['prices']) / len(group['prices'])
            if avg_price != 0 and abs(point['price'] - avg_price) / avg_price < CLUSTER_TOLERANCE:
                group['prices'].append(point['price'])
                group['dates'].append(point['date'])
                group['indices'].append(point['index'])
                break
        else:
            groups.append({
                'prices': [point['price']],
                'dates': [point['date']],
                'indices': [point['index']],
            })

    return [g for g in groups if len(g['prices']) >= min_touches]


def detect_support_resistance(
    series: Sequence[Dict[str, Any]],
    period: int = 20,
    min_touches: int = 3
) -> List[Dict[str, Any]]:
    """
    Detect support (clustered lows) and resistance (clustered highs) levels.

    Args:
        series: Price points in ascending date order
        period: Half-width of the extremum window
        min_touches: Minimum touches for a level

    Returns:
        List of levels; empty with fewer than 2 * period points
    """
    if not series or period <= 0 or min_touches <= 0 or len(series) < period * 2:
        return []

    prices = series_prices(series)
    highs = [float(p.get('high') or price) for p, price in zip(series, prices)]
    lows = [float(p.get('low') or price) for p, price in zip(series, prices)]
    dates = series_dates(series)

    resistance = group_levels(find_local_extrema(highs, dates, period, find_peaks=True), min_touches)
    support = group_levels(find_local_extrema(lows, dates, period, find_peaks=False), min_touches)

    levels = []
    for subtype, groups in (('resistance', resistance), ('support', support)):
        for group in groups:
            touches = len(group['prices'])
            ratio = touches / min_touches
            levels.append({
                'type': PatternType.SUPPORT_RESISTANCE,
                'subtype': subtype,
                'price': sum(group['prices']) / touches,
                'touches': touches,
                'strength': min(ratio, 1),
                'confidence': 0.8 if ratio > 1 else 0.6,
                'dates': group['dates'],
                'start_date': group['dates'][0],
                'end_date': group['dates'][-1],
                'data': {
                    'touch_prices': group['prices'],
                    'price_range': {
                        'min': min(group['prices']),
                        'max': max(group['prices']),
                    },
                },
            })

    return levels
