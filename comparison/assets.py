"""
Cross-asset comparison and ranking over a shared timeframe.
"""

from typing import Any, Dict, List, Optional, Sequence

from analysis.calculations.returns import closes, simple_returns, total_return_percent, volumes
from analysis.calculations.statistics import mean, stddev
from comparison.insights import generate_comparison_insights


def asset_metrics(symbol: str, series: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Ranking metrics for one asset.

    sharpe_ratio here is the simplified mean(returns) / std(returns), with
    no risk-free rate, and 0 when std is 0.
    """
    prices = closes(series)
    returns = simple_returns(prices)
    avg_return = mean(returns)
    sigma = stddev(returns)

    return {
        'symbol': symbol,
        'total_return': total_return_percent(prices),
        'total_volume': sum(volumes(series)),
        'volatility': sigma * 100,
        'sharpe_ratio': avg_return / sigma if sigma != 0 else 0.0,
        'start_price': prices[0],
        'end_price': prices[-1],
        'max_price': max(prices),
        'min_price': min(prices),
        'data_points': len(series),
    }


def compare_cryptocurrencies(
    series_map: Dict[str, Optional[Sequence[Dict[str, Any]]]],
    timeframe: str
) -> Optional[Dict[str, Any]]:
    """
    Rank several assets by total return over the same timeframe.

    Args:
        series_map: Symbol -> price points
        timeframe: Label carried through to the result (e.g. 'daily')

    Returns:
        Dictionary with timeframe, rankings (sorted by total_return
        descending, each with a 1-based rank), summary and insights.
        None unless at least two symbols have data.
    """
    rankings: List[Dict[str, Any]] = [
        asset_metrics(symbol, series)
        for symbol, series in (series_map or {}).items()
        if series
    ]

    if len(rankings) < 2:
        return None

    rankings.sort(key=lambda m: m['total_return'], reverse=True)
    for position, metrics in enumerate(rankings, start=1):
        metrics['rank'] = position

    result = {
        'timeframe': timeframe,
        'rankings': rankings,
        'summary': {
            'best_performer': rankings[0],
            'worst_performer': rankings[-1],
            'avg_return': mean([m['total_return'] for m in rankings]),
            'avg_volatility': mean([m['volatility'] for m in rankings]),
            'total_volume': sum(m['total_volume'] for m in rankings),
        },
    }
    result['insights'] = generate_comparison_insights(result)

    return result
