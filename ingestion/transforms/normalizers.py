"""
Normalizers for transforming provider data to canonical price points.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser


class NormalizationError(Exception):
    """Raised when a provider row cannot be turned into a price point."""
    pass


def to_date(value: Any, unit: str = 'ms') -> date:
    """
    Convert a provider timestamp to a UTC calendar date.

    Args:
        value: Epoch number (in `unit`), ISO string, date or datetime
        unit: 'ms' or 's' for numeric timestamps

    Raises:
        NormalizationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        if isinstance(value, (int, float)):
            seconds = value / 1000 if unit == 'ms' else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
        return date_parser.parse(str(value)).date()
    except (ValueError, OverflowError, OSError) as e:
        raise NormalizationError(f"Unparseable timestamp {value!r}: {e}") from e


def _point(row_date: date, open_: Any, high: Any, low: Any, close: Any, volume: Any,
           source: str, trades: Optional[int] = None) -> Dict[str, Any]:
    return {
        'date': row_date,
        'open': float(open_),
        'high': float(high),
        'low': float(low),
        'close': float(close),
        'volume': float(volume or 0),
        'trades': trades,
        'source': source,
    }


def _dedupe_by_date(points: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # Keep the last row per date, in first-seen order
    by_date: Dict[date, Dict[str, Any]] = {}
    for point in points:
        by_date[point['date']] = point
    return list(by_date.values())


def normalize_binance_klines(raw_rows: List[List[Any]]) -> List[Dict[str, Any]]:
    """
    Transform Binance klines to canonical price points.

    Kline layout: [open_time_ms, open, high, low, close, volume,
    close_time_ms, quote_volume, trades, ...]; prices arrive as strings.

    Returns:
        Price points deduplicated by date (last wins), provider order kept

    Raises:
        NormalizationError: If a kline is truncated or non-numeric
    """
    if not raw_rows:
        return []

    points = []
    for kline in raw_rows:
        try:
            trades = int(kline[8]) if len(kline) > 8 else None
            points.append(_point(
                to_date(kline[0], 'ms'),
                kline[1], kline[2], kline[3], kline[4], kline[5],
                source='binance',
                trades=trades,
            ))
        except (IndexError, TypeError, ValueError) as e:
            raise NormalizationError(f"Malformed binance kline {kline!r}: {e}") from e

    return _dedupe_by_date(points)


def normalize_coingecko_chart(raw_chart: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Transform a CoinGecko market chart to canonical price points.

    CoinGecko only reports a price per timestamp, so open/high/low/close
    all carry that price. Volumes are matched by position.

    Returns:
        Price points deduplicated by date (last wins)
    """
    if not raw_chart:
        return []

    prices = raw_chart.get('prices') or []
    volumes = raw_chart.get('total_volumes') or []

    points = []
    for i, entry in enumerate(prices):
        try:
            timestamp, price = entry[0], entry[1]
            volume = volumes[i][1] if i < len(volumes) else 0
            points.append(_point(
                to_date(timestamp, 'ms'), price, price, price, price, volume,
                source='coingecko',
            ))
        except (IndexError, TypeError, ValueError) as e:
            raise NormalizationError(f"Malformed coingecko chart entry {entry!r}: {e}") from e

    return _dedupe_by_date(points)


def normalize_coinbase_candles(raw_rows: List[List[Any]]) -> List[Dict[str, Any]]:
    """
    Transform Coinbase candles to canonical price points.

    Candle layout: [time_s, low, high, open, close, volume]. Coinbase
    returns candles newest first; output is ascending by date.

    Returns:
        Price points deduplicated by date (last wins)
    """
    if not raw_rows:
        return []

    points = []
    for candle in raw_rows:
        try:
            points.append(_point(
                to_date(candle[0], 's'),
                candle[3], candle[2], candle[1], candle[4], candle[5],
                source='coinbase',
            ))
        except (IndexError, TypeError, ValueError) as e:
            raise NormalizationError(f"Malformed coinbase candle {candle!r}: {e}") from e

    return sorted(_dedupe_by_date(points), key=lambda p: p['date'])


NORMALIZERS = {
    'binance': normalize_binance_klines,
    'coingecko': normalize_coingecko_chart,
    'coinbase': normalize_coinbase_candles,
}
