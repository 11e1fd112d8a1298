"""
Coinbase adapter - fetch candles and tickers from the Coinbase Exchange API.
Returns raw data in provider format - no normalization.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ingestion.providers.base import INTERVAL_DAYS, ProviderError, map_symbol, request_json


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.pro.coinbase.com'
DAILY_GRANULARITY = 86400
# Coinbase serves at most 300 candles per request
MAX_CANDLES = 300


class CoinbaseAdapter:
    """Coinbase Exchange candles (daily granularity) and tickers."""

    name = 'coinbase'
    native_intervals = ('1d',)

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 now: Optional[Callable[[], datetime]] = None):
        self.base_url = (base_url or os.getenv('COINBASE_API_BASE_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.timeout = timeout
        self._now = now or (lambda: datetime.now(timezone.utc))

    def fetch_klines(self, symbol: str, interval: str = '1d', limit: int = 30) -> List[List[Any]]:
        """
        Fetch daily candles covering `limit` bars of `interval`.

        Each candle is [time_s, low, high, open, close, volume], newest first.

        Raises:
            ProviderError: If the request fails or the payload is not a list
        """
        if limit <= 0:
            raise ProviderError(f"limit must be positive, got {limit}")

        product = map_symbol(self.name, symbol)
        days = min(limit * INTERVAL_DAYS.get(interval, 1), MAX_CANDLES)
        end = self._now()
        start = end - timedelta(days=days)
        params = {
            'start': start.isoformat(),
            'end': end.isoformat(),
            'granularity': DAILY_GRANULARITY,
        }
        data = request_json(
            self.name, f"{self.base_url}/products/{product}/candles", params, self.timeout
        )

        if not isinstance(data, list):
            raise ProviderError(f"coinbase returned unexpected candles payload for {product}")

        logger.info(f"Fetched {len(data)} candles for {product} from coinbase")
        return data

    def fetch_ticker(self, symbol: str) -> Dict[str, Any]:
        product = map_symbol(self.name, symbol)
        data = request_json(self.name, f"{self.base_url}/products/{product}/ticker", None, self.timeout)

        try:
            return {
                'symbol': symbol,
                'price': float(data['price']),
                'change_24h': None,
                'volume_24h': float(data['volume']) if data.get('volume') is not None else None,
                'high_24h': None,
                'low_24h': None,
                'source': self.name,
            }
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"coinbase ticker payload missing fields for {product}: {e}") from e
