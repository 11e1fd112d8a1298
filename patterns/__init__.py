"""
Pattern Recognition Module

Detects patterns in OHLCV price series:
- Trends and breakouts
- Support and resistance levels
- Volatility clusters
- Volume spikes and statistical anomalies
- Seasonal (monthly / weekday) return patterns
"""
