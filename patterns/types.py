"""
Pattern type tags shared by all detectors.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Sequence

from dateutil import parser as date_parser

from analysis.calculations.returns import closes


class PatternType(str, Enum):
    TREND = 'trend'
    SUPPORT_RESISTANCE = 'support_resistance'
    VOLATILITY_CLUSTER = 'volatility_cluster'
    VOLUME_SPIKE = 'volume_spike'
    ANOMALY = 'anomaly'
    SEASONAL = 'seasonal'


class TrendPattern(str, Enum):
    BULLISH = 'bullish'
    BEARISH = 'bearish'
    BREAKOUT = 'breakout'


class AnomalyType(str, Enum):
    PRICE_SPIKE = 'price_spike'
    VOLUME_ANOMALY = 'volume_anomaly'


def pattern_score(pattern: Dict[str, Any]) -> float:
    """Ranking score: confidence weighted 0.7, strength 0.3."""
    return pattern.get('confidence', 0) * 0.7 + (pattern.get('strength') or 0) * 0.3


def series_prices(series: Sequence[Dict[str, Any]]) -> List[float]:
    return closes(series)


def series_dates(series: Sequence[Dict[str, Any]]) -> List[Any]:
    return [point.get('date') for point in series]


def as_date(value: Any) -> date:
    """Coerce a date, datetime or ISO string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.parse(str(value)).date()
