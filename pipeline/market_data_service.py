"""
Market data service - fetch normalized price series with provider fallback.

Providers are tried in order; each failure is logged and the next provider
is tried. When every provider fails the caller gets a failed Result, never
placeholder data.
"""

import logging
import math
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from analysis.result import ErrorKind, Result
from ingestion.providers.base import MarketDataProvider, ProviderError
from ingestion.providers.binance_adapter import BinanceAdapter
from ingestion.providers.coinbase_adapter import CoinbaseAdapter
from ingestion.providers.coingecko_adapter import CoinGeckoAdapter
from ingestion.transforms.aggregation import aggregate_series
from ingestion.transforms.normalizers import NORMALIZERS, NormalizationError
from pipeline.cache import ResponseCache, default_ttl_seconds


logger = logging.getLogger(__name__)

TIMEFRAME_INTERVALS = {
    'daily': '1d',
    'weekly': '1w',
    'monthly': '1M',
}

MONTHLY_LIMIT = 12

PROVIDER_FACTORIES = {
    'binance': BinanceAdapter,
    'coingecko': CoinGeckoAdapter,
    'coinbase': CoinbaseAdapter,
}

DEFAULT_PROVIDER_ORDER = 'binance,coingecko,coinbase'


def resolve_request(timeframe: str, days: int) -> Tuple[str, int]:
    """
    Map a calendar timeframe and day span to a provider interval and bar count.

    Example:
        resolve_request('weekly', 30) -> ('1w', 5)
    """
    if timeframe not in TIMEFRAME_INTERVALS:
        raise ValueError(f"Unsupported timeframe: {timeframe}")

    if timeframe == 'monthly':
        return TIMEFRAME_INTERVALS[timeframe], MONTHLY_LIMIT
    if timeframe == 'weekly':
        return TIMEFRAME_INTERVALS[timeframe], max(1, math.ceil(days / 7))
    return TIMEFRAME_INTERVALS[timeframe], days


def build_providers(order: Optional[str] = None) -> List[MarketDataProvider]:
    """
    Instantiate providers from a comma-separated order string.

    Args:
        order: e.g. 'coingecko,binance'; defaults to CRYPTO_PROVIDER_ORDER

    Raises:
        ValueError: If a provider name is unknown
    """
    order = order or os.getenv('CRYPTO_PROVIDER_ORDER', DEFAULT_PROVIDER_ORDER)
    providers = []
    for name in (part.strip().lower() for part in order.split(',')):
        if not name:
            continue
        if name not in PROVIDER_FACTORIES:
            raise ValueError(f"Unknown market data provider: {name}")
        providers.append(PROVIDER_FACTORIES[name]())
    return providers


class MarketDataService:
    """
    Ordered providers (primary first, then fallbacks) sharing one cache.

    Args:
        providers: Providers to try in order; defaults to build_providers()
        cache: Response cache; defaults to a ResponseCache with CRYPTO_CACHE_TTL_S
    """

    def __init__(
        self,
        providers: Optional[Sequence[MarketDataProvider]] = None,
        cache: Optional[ResponseCache] = None
    ):
        self.providers = list(providers) if providers is not None else build_providers()
        self.cache = cache if cache is not None else ResponseCache(default_ttl_seconds())

    def fetch_series(self, symbol: str, timeframe: str = 'daily', days: int = 30) -> Result:
        """
        Fetch a normalized price series.

        Args:
            symbol: Asset symbol (e.g. 'BTC')
            timeframe: 'daily', 'weekly' or 'monthly'
            days: Span in days (monthly always fetches 12 bars)

        Returns:
            Result with the price points in ascending date order, or a
            failure: invalid_input for bad arguments, empty_response when
            every provider answered with no rows, fetch_failed otherwise
        """
        if not symbol:
            return Result.failure(ErrorKind.INVALID_INPUT, "symbol must be non-empty")
        if days <= 0:
            return Result.failure(ErrorKind.INVALID_INPUT, f"days must be positive, got {days}")
        try:
            interval, limit = resolve_request(timeframe, days)
        except ValueError as e:
            return Result.failure(ErrorKind.INVALID_INPUT, str(e))

        if not self.providers:
            return Result.failure(ErrorKind.FETCH_FAILED, "No market data providers configured")

        errors = []
        all_empty = True

        for provider in self.providers:
            key = ('klines', provider.name, symbol.upper(), interval, limit)
            try:
                points = self.cache.get_or_fetch(
                    key,
                    lambda p=provider: self._fetch_points(p, symbol, interval, limit, timeframe)
                )
            except (ProviderError, NormalizationError) as e:
                logger.warning(f"Provider {provider.name} failed for {symbol}: {e}")
                errors.append(f"{provider.name}: {e}")
                all_empty = False
                continue

            if not points:
                logger.warning(f"Provider {provider.name} returned no data for {symbol}")
                errors.append(f"{provider.name}: empty response")
                self.cache.invalidate(key)
                continue

            logger.info(f"Fetched {len(points)} {timeframe} points for {symbol} from {provider.name}")
            return Result.success(points)

        kind = ErrorKind.EMPTY_RESPONSE if all_empty else ErrorKind.FETCH_FAILED
        return Result.failure(kind, '; '.join(errors))

    def fetch_ticker(self, symbol: str) -> Result:
        """Current ticker snapshot from the first provider that answers."""
        errors = []
        for provider in self.providers:
            try:
                ticker = self.cache.get_or_fetch(
                    ('ticker', provider.name, symbol.upper()),
                    lambda p=provider: p.fetch_ticker(symbol)
                )
                return Result.success(ticker)
            except ProviderError as e:
                logger.warning(f"Provider {provider.name} ticker failed for {symbol}: {e}")
                errors.append(f"{provider.name}: {e}")

        return Result.failure(ErrorKind.FETCH_FAILED, '; '.join(errors) or "No market data providers configured")

    def _fetch_points(
        self,
        provider: MarketDataProvider,
        symbol: str,
        interval: str,
        limit: int,
        timeframe: str
    ) -> List[Dict[str, Any]]:
        normalize = NORMALIZERS.get(provider.name)
        if normalize is None:
            raise ProviderError(f"No normalizer registered for provider {provider.name}")

        points = normalize(provider.fetch_klines(symbol, interval, limit))

        # Providers without the native interval serve daily bars
        if interval not in provider.native_intervals:
            points = aggregate_series(points, timeframe)

        return points[-limit:]
