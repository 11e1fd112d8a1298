"""
Volume spike detection.
"""

from typing import Any, Dict, List, Sequence

from analysis.calculations.returns import volumes
from analysis.calculations.statistics import mean
from patterns.types import PatternType


def detect_volume_spikes(
    series: Sequence[Dict[str, Any]],
    threshold: float = 2.0
) -> List[Dict[str, Any]]:
    """
    Flag bars whose volume exceeds the series average by threshold×.

    Args:
        series: Price points
        threshold: Multiple of average volume that counts as a spike

    Returns:
        List of spike patterns; empty when the series is empty or its
        average volume is not positive

    Example:
        Volumes [10, 10, 10, 10, 100] (avg 28) flag only the last bar.
    """
    if not series:
        return []

    vols = volumes(series)
    avg_volume = mean(vols)
    if avg_volume <= 0:
        return []

    spikes = []
    for point, volume in zip(series, vols):
        if volume > avg_volume * threshold:
            multiplier = volume / avg_volume
            spikes.append({
                'type': PatternType.VOLUME_SPIKE,
                'date': point.get('date'),
                'volume': volume,
                'baseline_volume': avg_volume,
                'multiplier': multiplier,
                'strength': min((volume - avg_volume) / avg_volume, 3),
                'confidence': 0.9 if multiplier > 3 else 0.7,
                'data': {
                    'percent_above_average': (multiplier - 1) * 100,
                },
            })

    return spikes
