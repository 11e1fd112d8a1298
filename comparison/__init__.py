"""
Comparison Module

Side-by-side analytics for two periods of one asset or for several assets
over the same timeframe, with ranking and rule-based insights.
"""
