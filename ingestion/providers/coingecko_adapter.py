"""
CoinGecko adapter - fetch market charts and simple prices.
Returns raw data in provider format - no normalization.
"""

import logging
import os
from typing import Any, Dict, Optional

from ingestion.providers.base import INTERVAL_DAYS, ProviderError, map_symbol, request_json


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.coingecko.com/api/v3'


class CoinGeckoAdapter:
    """CoinGecko market charts (daily close + volume only)."""

    name = 'coingecko'
    native_intervals = ('1d',)

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 vs_currency: str = 'usd'):
        self.base_url = (base_url or os.getenv('COINGECKO_API_BASE_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.timeout = timeout
        self.vs_currency = vs_currency

    def fetch_klines(self, symbol: str, interval: str = '1d', limit: int = 30) -> Dict[str, Any]:
        """
        Fetch a daily market chart covering `limit` bars of `interval`.

        Intervals other than '1d' are served as daily data over the same span.

        Returns:
            Raw chart: {'prices': [[ms, price], ...], 'total_volumes': [[ms, volume], ...]}

        Raises:
            ProviderError: If the request fails or 'prices' is missing
        """
        if limit <= 0:
            raise ProviderError(f"limit must be positive, got {limit}")

        coin_id = map_symbol(self.name, symbol)
        days = limit * INTERVAL_DAYS.get(interval, 1)
        params = {
            'vs_currency': self.vs_currency,
            'days': days,
            'interval': 'daily',
        }
        data = request_json(
            self.name, f"{self.base_url}/coins/{coin_id}/market_chart", params, self.timeout
        )

        if not isinstance(data, dict) or 'prices' not in data:
            raise ProviderError(f"coingecko returned unexpected market chart for {coin_id}")

        logger.info(f"Fetched {len(data['prices'])} chart points for {coin_id} ({days}d) from coingecko")
        return data

    def fetch_ticker(self, symbol: str) -> Dict[str, Any]:
        """
        Fetch the current price with 24h change and volume.

        Raises:
            ProviderError: If the coin is missing from the response
        """
        coin_id = map_symbol(self.name, symbol)
        params = {
            'ids': coin_id,
            'vs_currencies': self.vs_currency,
            'include_24hr_change': 'true',
            'include_24hr_vol': 'true',
        }
        data = request_json(self.name, f"{self.base_url}/simple/price", params, self.timeout)

        quote = data.get(coin_id) if isinstance(data, dict) else None
        if not quote or self.vs_currency not in quote:
            raise ProviderError(f"coingecko has no {self.vs_currency} price for {coin_id}")

        return {
            'symbol': symbol,
            'price': float(quote[self.vs_currency]),
            'change_24h': quote.get(f"{self.vs_currency}_24h_change"),
            'volume_24h': quote.get(f"{self.vs_currency}_24h_vol"),
            'high_24h': None,
            'low_24h': None,
            'source': self.name,
        }
