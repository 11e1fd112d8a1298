"""
Statistical anomaly detection (population Z-scores on price and volume).
"""

from typing import Any, Dict, List, Sequence

from analysis.calculations.returns import volumes
from analysis.calculations.statistics import mean, stddev, z_score
from patterns.types import AnomalyType, PatternType, series_prices


MIN_POINTS = 30


def _confidence(z: float) -> float:
    return 0.9 if z > 3 else 0.7


def detect_anomalies(
    series: Sequence[Dict[str, Any]],
    sensitivity_level: float = 2
) -> List[Dict[str, Any]]:
    """
    Detect price and volume outliers.

    Price anomalies fire on |z| > sensitivity_level in either direction;
    volume anomalies only fire for above-average volume. A flat series
    (zero standard deviation) produces no anomalies.

    Args:
        series: Price points
        sensitivity_level: Z-score cutoff

    Returns:
        List of anomaly patterns; empty with fewer than 30 points
    """
    if not series or len(series) < MIN_POINTS:
        return []

    prices = series_prices(series)
    vols = volumes(series)

    price_mean = mean(prices)
    price_std = stddev(prices)
    volume_mean = mean(vols)
    volume_std = stddev(vols)

    anomalies = []

    for point, price, volume in zip(series, prices, vols):
        price_z = z_score(price, price_mean, price_std)
        if price_z is not None and abs(price_z) > sensitivity_level:
            z = abs(price_z)
            anomalies.append({
                'type': PatternType.ANOMALY,
                'subtype': AnomalyType.PRICE_SPIKE,
                'date': point.get('date'),
                'value': price,
                'z_score': z,
                'strength': min(z / 3, 1),
                'confidence': _confidence(z),
                'data': {
                    'baseline': price_mean,
                    'standard_deviation': price_std,
                    'deviation_percent': (
                        (price - price_mean) / price_mean * 100 if price_mean else 0.0
                    ),
                },
            })

        volume_z = z_score(volume, volume_mean, volume_std)
        if volume_z is not None and volume_z > sensitivity_level:
            anomalies.append({
                'type': PatternType.ANOMALY,
                'subtype': AnomalyType.VOLUME_ANOMALY,
                'date': point.get('date'),
                'value': volume,
                'z_score': volume_z,
                'strength': min(volume_z / 3, 1),
                'confidence': _confidence(volume_z),
                'data': {
                    'baseline': volume_mean,
                    'standard_deviation': volume_std,
                    'multiplier': volume / volume_mean if volume_mean else None,
                },
            })

    return anomalies
