"""
Market data provider interface and shared HTTP plumbing.
Network IO allowed here, but minimal business logic.
"""

import logging
import os
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

import requests
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when a provider request or payload fails."""
    pass


# Exchange-specific identifiers for the supported assets
SYMBOL_MAPPING = {
    'binance': {
        'BTC': 'BTCUSDT',
        'ETH': 'ETHUSDT',
        'BNB': 'BNBUSDT',
        'ADA': 'ADAUSDT',
        'SOL': 'SOLUSDT',
        'DOT': 'DOTUSDT',
        'AVAX': 'AVAXUSDT',
        'MATIC': 'MATICUSDT',
    },
    'coingecko': {
        'BTC': 'bitcoin',
        'ETH': 'ethereum',
        'BNB': 'binancecoin',
        'ADA': 'cardano',
        'SOL': 'solana',
        'DOT': 'polkadot',
        'AVAX': 'avalanche-2',
        'MATIC': 'polygon',
    },
    'coinbase': {
        'BTC': 'BTC-USD',
        'ETH': 'ETH-USD',
        'ADA': 'ADA-USD',
        'SOL': 'SOL-USD',
        'DOT': 'DOT-USD',
        'AVAX': 'AVAX-USD',
        'MATIC': 'MATIC-USD',
    },
}

# Days covered by one bar of each interval
INTERVAL_DAYS = {'1d': 1, '1w': 7, '1M': 30}


@runtime_checkable
class MarketDataProvider(Protocol):
    """
    Capability interface every market data source implements.

    fetch_klines returns raw provider rows; the matching normalizer in
    ingestion.transforms.normalizers turns them into price points.
    native_intervals lists the bar sizes the provider can serve directly;
    other intervals are served as daily bars for the caller to aggregate.
    """

    name: str
    native_intervals: Tuple[str, ...]

    def fetch_klines(self, symbol: str, interval: str, limit: int) -> Any:
        ...

    def fetch_ticker(self, symbol: str) -> Dict[str, Any]:
        ...


def map_symbol(exchange: str, symbol: str) -> str:
    """
    Translate an asset symbol (e.g. 'BTC') into the exchange identifier.

    Unknown symbols pass through unchanged so callers may use native ids.

    Example:
        map_symbol('coingecko', 'BTC') -> 'bitcoin'
    """
    return SYMBOL_MAPPING.get(exchange, {}).get(symbol.upper(), symbol)


def default_timeout() -> float:
    return float(os.getenv('CRYPTO_API_TIMEOUT_S', '10'))


def request_json(
    provider: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None
) -> Any:
    """
    GET a JSON document.

    Args:
        provider: Provider name used in error messages
        url: Absolute URL
        params: Query parameters
        timeout: Request timeout in seconds (defaults to CRYPTO_API_TIMEOUT_S)

    Returns:
        Decoded JSON payload

    Raises:
        ProviderError: On network errors, HTTP errors or invalid JSON
    """
    try:
        response = requests.get(
            url,
            params=params,
            timeout=timeout if timeout is not None else default_timeout()
        )
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        raise ProviderError(f"{provider} API error: {e}") from e
    except ValueError as e:
        raise ProviderError(f"{provider} returned invalid JSON: {e}") from e
