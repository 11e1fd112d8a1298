"""
Derived fields for canonical price points.
Pure functions - inputs are never mutated; enriched copies are returned.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from analysis.calculations.statistics import percentile_rank
from analysis.calculations.volatility import intrabar_volatility_percent


def price_change_percent(point: Dict[str, Any]) -> float:
    """Open-to-close change in percent, 0.0 when open is 0."""
    open_price = float(point.get('open') or 0)
    if open_price == 0:
        return 0.0
    return (float(point.get('close') or 0) - open_price) / open_price * 100


def performance_indicator(price_change: float) -> Dict[str, Any]:
    """
    Direction and magnitude of a bar's move.

    Example:
        performance_indicator(-2.5) -> {'price_change': -2.5, 'direction': 'down', 'magnitude': 2.5}
    """
    if price_change > 0:
        direction = 'up'
    elif price_change < 0:
        direction = 'down'
    else:
        direction = 'neutral'

    return {
        'price_change': price_change,
        'direction': direction,
        'magnitude': abs(price_change),
    }


def liquidity_metrics(point: Dict[str, Any]) -> Dict[str, Any]:
    """Volume, volume per unit of close price, and trade count."""
    volume = float(point.get('volume') or 0)
    close = float(point.get('close') or 0)
    return {
        'volume': volume,
        'volume_normalized': volume / close if close else 0.0,
        'trades': point.get('trades') or 0,
    }


def enrich_price_points(points: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Add price_change, volatility, volume_percentile, performance and
    liquidity to each point.

    volume_percentile ranks each volume within the batch (0-100, rounded).

    Args:
        points: Canonical price points

    Returns:
        New list of enriched copies, empty for empty input
    """
    if not points:
        return []

    sorted_volumes = sorted(float(p.get('volume') or 0) for p in points)

    enriched = []
    for point in points:
        change = price_change_percent(point)
        volume = float(point.get('volume') or 0)
        enriched.append({
            **point,
            'price_change': change,
            'volatility': intrabar_volatility_percent(point),
            'volume_percentile': round(percentile_rank(volume, sorted_volumes)),
            'performance': performance_indicator(change),
            'liquidity': liquidity_metrics(point),
        })

    return enriched


def _range(values: List[float]) -> Optional[Dict[str, float]]:
    if not values:
        return None
    return {'min': min(values), 'max': max(values)}


def compute_data_ranges(points: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Min/max of volatility, volume and close price for color normalization.

    Points without a volatility field have it computed from their OHLC range.

    Returns:
        {volatility_range, volume_range, price_range}, or None for empty input
    """
    if not points:
        return None

    volatilities = [
        p['volatility'] if p.get('volatility') is not None else intrabar_volatility_percent(p)
        for p in points
    ]

    return {
        'volatility_range': _range(volatilities),
        'volume_range': _range([float(p.get('volume') or 0) for p in points]),
        'price_range': _range([float(p.get('close') or 0) for p in points]),
    }


def _within(value: float, bounds: Optional[Tuple[float, float]]) -> bool:
    if bounds is None:
        return True
    low, high = bounds
    return low <= value <= high


def filter_market_data(
    points: Sequence[Dict[str, Any]],
    volatility_range: Optional[Tuple[float, float]] = None,
    volume_range: Optional[Tuple[float, float]] = None
) -> List[Dict[str, Any]]:
    """
    Keep points whose volatility and volume fall inside inclusive ranges.

    Args:
        points: Price points (enriched or not)
        volatility_range: (min, max) volatility percent, None for no filter
        volume_range: (min, max) volume, None for no filter

    Returns:
        Filtered list in input order
    """
    kept = []
    for point in points:
        volatility = point.get('volatility')
        if volatility is None:
            volatility = intrabar_volatility_percent(point)
        volume = float(point.get('volume') or 0)

        if _within(volatility, volatility_range) and _within(volume, volume_range):
            kept.append(point)

    return kept
