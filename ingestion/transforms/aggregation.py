"""
Resample daily price points into weekly or monthly OHLCV bars.
"""

from typing import Any, Dict, List, Sequence

import pandas as pd


class AggregationError(Exception):
    """Raised for an unknown timeframe."""
    pass


# Weekly bins end on Sunday; monthly bins start on the 1st
RESAMPLE_RULES = {
    'weekly': 'W-SUN',
    'monthly': 'MS',
}

OHLCV_AGG = {
    'open': 'first',
    'high': 'max',
    'low': 'min',
    'close': 'last',
    'volume': 'sum',
}


def aggregate_series(points: Sequence[Dict[str, Any]], timeframe: str) -> List[Dict[str, Any]]:
    """
    Aggregate daily points into bars for the timeframe.

    Args:
        points: Daily price points in ascending date order
        timeframe: 'daily' (returned unchanged), 'weekly' or 'monthly'

    Returns:
        Price points, one per bar, dated at the bar start

    Raises:
        AggregationError: If timeframe is not supported
    """
    if timeframe == 'daily':
        return list(points)
    if timeframe not in RESAMPLE_RULES:
        raise AggregationError(f"Unsupported timeframe: {timeframe}")
    if not points:
        return []

    df = pd.DataFrame(list(points))
    df['date'] = pd.to_datetime(df['date'])
    df = df.set_index('date')

    if timeframe == 'weekly':
        # Label each Monday-Sunday week by its Monday
        bars = df.resample(RESAMPLE_RULES[timeframe], label='left', closed='right').agg(OHLCV_AGG)
        bars.index = bars.index + pd.Timedelta(days=1)
    else:
        bars = df.resample(RESAMPLE_RULES[timeframe]).agg(OHLCV_AGG)

    # Drop empty periods
    bars = bars.dropna(subset=['close'])

    return [
        {
            'date': ts.date(),
            'open': float(row['open']),
            'high': float(row['high']),
            'low': float(row['low']),
            'close': float(row['close']),
            'volume': float(row['volume']),
        }
        for ts, row in bars.iterrows()
    ]
