"""
Rule-based insights over comparison results.

Each insight is a dict: {type, severity, message, value}, where severity is
'high', 'medium' or 'info'.
"""

from typing import Any, Dict, List


RETURN_DIFFERENCE_THRESHOLD = 5
RETURN_DIFFERENCE_HIGH = 20
VOLATILITY_DIFFERENCE_THRESHOLD = 2
VOLATILITY_DIFFERENCE_HIGH = 10
DIVERGENCE_THRESHOLD = 10
DIVERGENCE_HIGH = 30
HIGH_VOLATILITY_MULTIPLE = 1.5


def _insight(kind: str, severity: str, message: str, value: float) -> Dict[str, Any]:
    return {'type': kind, 'severity': severity, 'message': message, 'value': value}


def _period_insights(comparison: Dict[str, Any]) -> List[Dict[str, Any]]:
    differences = comparison['differences']
    ratios = comparison['ratios']
    insights = []

    return_diff = differences['return_difference']
    if abs(return_diff) > RETURN_DIFFERENCE_THRESHOLD:
        message = (
            f"Current period showing {return_diff:.2f}% better performance"
            if return_diff > 0
            else f"Previous period performed {abs(return_diff):.2f}% better"
        )
        severity = 'high' if abs(return_diff) > RETURN_DIFFERENCE_HIGH else 'medium'
        insights.append(_insight('performance', severity, message, return_diff))

    vol_diff = differences['volatility_difference']
    if abs(vol_diff) > VOLATILITY_DIFFERENCE_THRESHOLD:
        message = (
            f"Volatility increased by {vol_diff:.2f}%"
            if vol_diff > 0
            else f"Volatility decreased by {abs(vol_diff):.2f}%"
        )
        severity = 'high' if abs(vol_diff) > VOLATILITY_DIFFERENCE_HIGH else 'medium'
        insights.append(_insight('volatility', severity, message, vol_diff))

    volume_ratio = ratios.get('volume_ratio')
    if volume_ratio is not None and (volume_ratio > 2 or volume_ratio < 0.5):
        message = (
            f"Trading volume increased by {(volume_ratio - 1) * 100:.0f}%"
            if volume_ratio > 1
            else f"Trading volume decreased by {(1 - volume_ratio) * 100:.0f}%"
        )
        severity = 'high' if volume_ratio > 3 or volume_ratio < 0.3 else 'medium'
        insights.append(_insight('volume', severity, message, volume_ratio))

    return insights


def _asset_insights(comparison: Dict[str, Any]) -> List[Dict[str, Any]]:
    summary = comparison['summary']
    best = summary['best_performer']
    worst = summary['worst_performer']

    insights = [_insight(
        'performance', 'info',
        f"{best['symbol']} leads with {best['total_return']:.2f}% return",
        best['total_return'],
    )]

    spread = best['total_return'] - worst['total_return']
    if spread > DIVERGENCE_THRESHOLD:
        insights.append(_insight(
            'divergence',
            'high' if spread > DIVERGENCE_HIGH else 'medium',
            f"High performance divergence: {spread:.2f}% spread between top and bottom performers",
            spread,
        ))

    cutoff = summary['avg_volatility'] * HIGH_VOLATILITY_MULTIPLE
    high_vol = [m['symbol'] for m in comparison['rankings'] if m['volatility'] > cutoff]
    if high_vol:
        insights.append(_insight(
            'volatility', 'medium',
            f"{len(high_vol)} asset(s) showing high volatility: {', '.join(high_vol)}",
            len(high_vol),
        ))

    return insights


def generate_comparison_insights(comparison: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Generate insights for a two-period or multi-asset comparison.

    Two-period rules:
        |return_difference| > 5      -> performance (high above 20)
        |volatility_difference| > 2  -> volatility (high above 10)
        volume_ratio > 2 or < 0.5    -> volume (high above 3 or below 0.3)

    Multi-asset rules:
        always                       -> leader (info)
        best - worst return > 10     -> divergence (high above 30)
        volatility > 1.5x average    -> high-volatility assets (medium)

    Args:
        comparison: Result of compare_time_periods or compare_cryptocurrencies

    Returns:
        List of insights, empty for an unrecognized result
    """
    if not comparison:
        return []
    if 'period1' in comparison and 'period2' in comparison:
        return _period_insights(comparison)
    if comparison.get('rankings'):
        return _asset_insights(comparison)
    return []
