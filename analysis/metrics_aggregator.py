"""
Metrics aggregator - composes indicator, performance and risk calculations
into the dashboard metrics record for one symbol.
Pure functions over a price-point series.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from analysis.calculations.drawdown import drawdown_stats, max_drawdown
from analysis.calculations.indicators import bollinger_bands, macd, rsi, volume_profile
from analysis.calculations.returns import closes, price_of, trailing_returns, volumes
from analysis.calculations.risk import (
    approximate_beta,
    calmar_ratio,
    downside_deviation,
    sharpe_ratio,
    value_at_risk,
)
from analysis.calculations.statistics import mean, simple_moving_average
from analysis.calculations.volatility import (
    annualized_volatility_percent,
    daily_volatility_percent,
)
from ingestion.transforms.enrichment import enrich_price_points


CALCULATION_VERSION = '1.0.0'

# Trailing window (in bars) for the performance and risk panels
TRAILING_WINDOW = 30


def compute_technical_indicators(series: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Technical indicators for the dashboard.

    Returns:
        {} with fewer than 20 points, otherwise sma20, sma50, rsi,
        bollinger, macd, volume_profile and daily volatility (percent).
        Individual entries are None when their own lookback is not met.
    """
    if len(series) < 20:
        return {}

    prices = closes(series)

    return {
        'sma20': simple_moving_average(prices, 20),
        'sma50': simple_moving_average(prices, 50),
        'rsi': rsi(prices, 14),
        'bollinger': bollinger_bands(prices, 20),
        'macd': macd(prices),
        'volume_profile': volume_profile(volumes(series)),
        'volatility': daily_volatility_percent(prices),
    }


def compute_performance_metrics(
    series: Sequence[Dict[str, Any]],
    selected: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Performance panel metrics.

    Args:
        series: Price points in chronological order
        selected: Point the user selected (defaults to the last point)

    Returns:
        {} with fewer than 2 points, otherwise total_return (percent from the
        first close to the selected close), sharpe_ratio and avg_return
        (percent) over the trailing window, max_drawdown and volatility
        (percent)
    """
    if len(series) < 2:
        return {}

    prices = closes(series)
    selected = selected if selected is not None else series[-1]
    first_price = prices[0]

    returns = trailing_returns(prices, TRAILING_WINDOW)

    return {
        'total_return': (
            (price_of(selected) - first_price) / first_price * 100 if first_price else 0.0
        ),
        'sharpe_ratio': sharpe_ratio(returns),
        'max_drawdown': max_drawdown(series),
        'volatility': daily_volatility_percent(prices),
        'annualized_volatility': annualized_volatility_percent(prices),
        'avg_return': mean(returns) * 100,
    }


def compute_risk_metrics(series: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Risk panel metrics.

    Returns:
        {} with fewer than 10 points, otherwise var_95 and var_99 (raw signed
        returns), beta proxy, downside_deviation and calmar ratio
    """
    if len(series) < 10:
        return {}

    prices = closes(series)
    returns = trailing_returns(prices, TRAILING_WINDOW)

    return {
        'var_95': value_at_risk(returns, 0.95),
        'var_99': value_at_risk(returns, 0.99),
        'beta': approximate_beta(returns),
        'downside_deviation': downside_deviation(returns),
        'calmar': calmar_ratio(returns, max_drawdown(series)),
    }


def liquidity_score(point: Dict[str, Any]) -> float:
    """
    Liquidity score on a 0-10 scale from volume percentile and bar volatility.

    Missing fields fall back to a mid-range volume percentile (50) and a
    volatility of 5.
    """
    volume_pct = point.get('volume_percentile')
    volatility = point.get('volatility')

    volume_score = min((volume_pct if volume_pct else 50) / 10, 5)
    spread_score = max(5 - (volatility if volatility else 5), 1)
    return volume_score + spread_score


def compute_liquidity(series: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Liquidity panel for the latest bar, ranked within the whole series.

    Returns:
        {score, volume_percentile, volatility}, or None for empty input
    """
    if not series:
        return None

    last = enrich_price_points(series)[-1]
    return {
        'score': liquidity_score(last),
        'volume_percentile': last['volume_percentile'],
        'volatility': last['volatility'],
    }


def volatility_rating(volatility: Optional[float]) -> str:
    """Low / Moderate / High / Extreme label for a volatility percent."""
    if volatility is None:
        return 'N/A'
    if volatility > 10:
        return 'Extreme'
    if volatility > 5:
        return 'High'
    if volatility > 2:
        return 'Moderate'
    return 'Low'


def rsi_signal(value: Optional[float]) -> str:
    """Overbought above 70, oversold below 30."""
    if value is None:
        return 'N/A'
    if value > 70:
        return 'Overbought'
    if value < 30:
        return 'Oversold'
    return 'Neutral'


def compose_dashboard_metrics(
    series: Sequence[Dict[str, Any]],
    symbol: str
) -> Dict[str, Any]:
    """
    Compose all dashboard metrics into one record.

    Args:
        series: Price points in chronological order
        symbol: Asset symbol

    Returns:
        Dictionary with data_period, technical, performance, risk, drawdown,
        liquidity and metadata sections. Never raises on short input.
    """
    data_period = None
    drawdown = None

    if series:
        dates = [p.get('date') for p in series]
        data_period = {
            'start_date': _iso(dates[0]),
            'end_date': _iso(dates[-1]),
            'data_points': len(series),
        }
        stats = drawdown_stats(closes(series), dates)
        drawdown = {key: _iso(value) for key, value in stats.items()}

    technical = compute_technical_indicators(series)
    if technical:
        technical['rsi_signal'] = rsi_signal(technical.get('rsi'))
        technical['volatility_rating'] = volatility_rating(technical.get('volatility'))

    return {
        'symbol': symbol,
        'data_period': data_period,
        'technical': technical,
        'performance': compute_performance_metrics(series),
        'risk': compute_risk_metrics(series),
        'drawdown': drawdown,
        'liquidity': compute_liquidity(series),
        'metadata': {
            'calculated_at': datetime.now().isoformat(),
            'calculation_version': CALCULATION_VERSION,
        },
    }


def _iso(value: Any) -> Any:
    return value.isoformat() if hasattr(value, 'isoformat') else value
