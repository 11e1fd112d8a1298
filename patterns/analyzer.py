"""
Pattern analysis entry point.

Runs the enabled detectors over one series, ranks the combined patterns and
summarizes them by type.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from patterns.anomalies import detect_anomalies
from patterns.levels import detect_support_resistance
from patterns.seasonal import detect_seasonal_patterns
from patterns.trend import detect_trend_patterns
from patterns.types import PatternType, TrendPattern, pattern_score
from patterns.volatility_clusters import detect_volatility_clusters
from patterns.volume import detect_volume_spikes


logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = {
    'detect_trends': True,
    'detect_support_resistance': True,
    'detect_volatility_clusters': True,
    'detect_volume_spikes': True,
    'detect_anomalies': True,
    'detect_seasonal': False,
    'lookback_days': 30,
}

SUMMARY_KEYS = {
    PatternType.TREND: 'trends',
    PatternType.SUPPORT_RESISTANCE: 'support_resistance',
    PatternType.VOLATILITY_CLUSTER: 'volatility_clusters',
    PatternType.VOLUME_SPIKE: 'volume_spikes',
    PatternType.ANOMALY: 'anomalies',
    PatternType.SEASONAL: 'seasonal',
}


def summarize_patterns(patterns: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    """Count patterns per type."""
    summary = {key: 0 for key in SUMMARY_KEYS.values()}
    for pattern in patterns:
        key = SUMMARY_KEYS.get(pattern.get('type'))
        if key:
            summary[key] += 1
    return summary


def analyze_patterns(
    series: Sequence[Dict[str, Any]],
    symbol: str,
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Run pattern detection over a series.

    Args:
        series: Price points in ascending date order
        symbol: Asset symbol
        options: Detector toggles and lookback_days, merged over DEFAULT_OPTIONS

    Returns:
        Dictionary with symbol, total_patterns, patterns (sorted by
        confidence × 0.7 + strength × 0.3, descending) and summary counts.
        Short or empty input yields zero patterns.

    Example:
        >>> analyze_patterns([], 'BTC')['total_patterns']
        0
    """
    opts = dict(DEFAULT_OPTIONS)
    if options:
        opts.update(options)

    series = list(series or [])
    patterns: List[Dict[str, Any]] = []

    if opts['detect_trends']:
        patterns.extend(detect_trend_patterns(series, opts['lookback_days']))
    if opts['detect_support_resistance']:
        patterns.extend(detect_support_resistance(series))
    if opts['detect_volatility_clusters']:
        patterns.extend(detect_volatility_clusters(series))
    if opts['detect_volume_spikes']:
        patterns.extend(detect_volume_spikes(series))
    if opts['detect_anomalies']:
        patterns.extend(detect_anomalies(series))
    if opts['detect_seasonal']:
        patterns.extend(detect_seasonal_patterns(series, symbol))

    patterns.sort(key=pattern_score, reverse=True)

    logger.debug(f"Detected {len(patterns)} patterns for {symbol} over {len(series)} points")

    return {
        'symbol': symbol,
        'total_patterns': len(patterns),
        'patterns': patterns,
        'summary': summarize_patterns(patterns),
    }


def describe_pattern(pattern: Dict[str, Any]) -> str:
    """
    One-line human description of a pattern.

    Example:
        'Bullish trend: +12.50% over the window'
    """
    pattern_type = pattern.get('type')
    subtype = pattern.get('subtype')
    data = pattern.get('data', {})

    if pattern_type == PatternType.TREND:
        if subtype == TrendPattern.BREAKOUT:
            return f"Breakout: {data.get('percent_above', 0):.2f}% above {data.get('breakout_level', 0):,.2f}"
        direction = 'Bullish' if subtype == TrendPattern.BULLISH else 'Bearish'
        return f"{direction} trend: {data.get('price_change', 0):+.2f}% over the window"

    if pattern_type == PatternType.SUPPORT_RESISTANCE:
        return f"{str(subtype).capitalize()} at {pattern.get('price', 0):,.2f} ({pattern.get('touches', 0)} touches)"

    if pattern_type == PatternType.VOLATILITY_CLUSTER:
        return f"High volatility cluster: {pattern.get('avg_volatility', 0):.1f}% avg over {data.get('duration', 0)} periods"

    if pattern_type == PatternType.VOLUME_SPIKE:
        return f"Volume spike: {pattern.get('multiplier', 0):.1f}x average volume"

    if pattern_type == PatternType.ANOMALY:
        label = 'Price' if subtype == 'price_spike' else 'Volume'
        return f"{label} anomaly: z-score {pattern.get('z_score', 0):.2f}"

    if pattern_type == PatternType.SEASONAL:
        direction = 'positive' if data.get('is_positive') else 'negative'
        return f"{pattern.get('period_name')}: {direction} average return {pattern.get('avg_return', 0):+.2f}%"

    return f"Pattern: {pattern_type}"
