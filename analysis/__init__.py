"""
Analysis Engine Module

Calculates market metrics from price series:
- Statistics, returns and volatility
- Technical indicators (SMA, EMA, RSI, MACD, Bollinger Bands)
- Drawdown and risk ratios (Sharpe, VaR, Calmar)
- Dashboard aggregation and data quality guardrails
"""

__version__ = "0.1.0"
