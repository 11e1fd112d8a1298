"""
Data Ingestion Module

Handles fetching, normalizing and validating market data:
- Binance, CoinGecko and Coinbase klines and tickers
- Normalization to canonical OHLCV price points
- Enrichment, filtering and weekly/monthly aggregation
"""

__version__ = "0.1.0"
