"""
Binance adapter - fetch klines and 24h tickers from the Binance REST API.
Returns raw data in provider format - no normalization.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from ingestion.providers.base import ProviderError, map_symbol, request_json


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.binance.com/api/v3'
MAX_KLINES = 1000


class BinanceAdapter:
    """Binance spot market data (klines, 24h ticker)."""

    name = 'binance'
    native_intervals = ('1d', '1w', '1M')

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or os.getenv('BINANCE_API_BASE_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.timeout = timeout

    def fetch_klines(self, symbol: str, interval: str = '1d', limit: int = 100) -> List[List[Any]]:
        """
        Fetch raw klines.

        Each kline is [open_time_ms, open, high, low, close, volume,
        close_time_ms, quote_volume, trades, ...] with prices as strings.

        Args:
            symbol: Asset symbol ('BTC') or Binance pair ('BTCUSDT')
            interval: Binance interval ('1d', '1w', '1M')
            limit: Number of bars (capped at 1000)

        Raises:
            ProviderError: If the request fails or the payload is not a list
        """
        if limit <= 0:
            raise ProviderError(f"limit must be positive, got {limit}")

        params = {
            'symbol': map_symbol(self.name, symbol),
            'interval': interval,
            'limit': min(limit, MAX_KLINES),
        }
        data = request_json(self.name, f"{self.base_url}/klines", params, self.timeout)

        if not isinstance(data, list):
            raise ProviderError(f"binance returned unexpected klines payload for {symbol}")

        logger.info(f"Fetched {len(data)} klines for {params['symbol']} ({interval}) from binance")
        return data

    def fetch_ticker(self, symbol: str) -> Dict[str, Any]:
        """
        Fetch a 24h ticker snapshot.

        Returns:
            Dictionary with symbol, price, change_24h (percent), volume_24h,
            high_24h, low_24h and source
        """
        pair = map_symbol(self.name, symbol)
        data = request_json(self.name, f"{self.base_url}/ticker/24hr", {'symbol': pair}, self.timeout)

        try:
            return {
                'symbol': symbol,
                'price': float(data['lastPrice']),
                'change_24h': float(data['priceChangePercent']),
                'volume_24h': float(data['volume']),
                'high_24h': float(data['highPrice']),
                'low_24h': float(data['lowPrice']),
                'source': self.name,
            }
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"binance ticker payload missing fields for {pair}: {e}") from e
