"""
Alerts Module

Threshold alerts (volatility, performance, volume) over price points,
configurable from YAML, with an in-memory history.
"""
