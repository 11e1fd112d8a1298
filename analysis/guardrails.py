"""
Guardrails for the analysis engine - precondition and sanity checks.
Surfaces data quality issues next to the metrics instead of silently
reshaping the input.
"""

import math
import warnings
from datetime import date
from typing import Any, Dict, List, Sequence, Tuple

from ingestion.transforms.validators import check_series_order


class DataQualityError(Exception):
    """Raised when data quality issues make the output untrustworthy."""
    pass


class DataQualityWarning(UserWarning):
    """Raised when data quality issues should be noted but don't block execution."""
    pass


# Minimum number of price points each analysis needs
MIN_POINTS_REQUIRED = {
    'sma20': 20,
    'sma50': 50,
    'rsi': 15,
    'bollinger': 20,
    'macd': 26,
    'risk_metrics': 10,
    'trend': 30,
    'support_resistance': 40,
    'volatility_clusters': 20,
    'anomalies': 30,
    'seasonal': 365,
}


def check_indicator_availability(
    series: Sequence[Dict[str, Any]],
    requested: Sequence[str] = tuple(MIN_POINTS_REQUIRED)
) -> Tuple[List[str], List[str]]:
    """
    Split requested analyses into those the series is long enough for and the rest.

    Args:
        series: Price points in chronological order
        requested: Analysis names from MIN_POINTS_REQUIRED

    Returns:
        Tuple of (available, insufficient)
    """
    available = []
    insufficient = []

    for name in requested:
        if len(series) >= MIN_POINTS_REQUIRED.get(name, 0):
            available.append(name)
        else:
            insufficient.append(name)

    if series and len(series) < MIN_POINTS_REQUIRED['rsi']:
        warnings.warn(
            f"Very short series ({len(series)} points): most indicators will be N/A",
            DataQualityWarning
        )

    return available, insufficient


def validate_price_data_integrity(series: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Detect suspicious price data.

    Args:
        series: Price points in chronological order

    Returns:
        List of integrity warnings
    """
    problems = []

    if not series:
        return problems

    # Large bar-to-bar moves (>20%)
    for i in range(1, len(series)):
        previous = series[i - 1].get('close') or 0
        current = series[i].get('close') or 0
        if previous > 0:
            change = abs(current / previous - 1)
            if change > 0.20:
                problems.append(
                    f"Large price movement on {series[i].get('date')}: "
                    f"{change:.1%} change ({previous:.2f} → {current:.2f})"
                )

    zero_volume = [p.get('date') for p in series if not p.get('volume')]
    if zero_volume:
        problems.append(f"Zero volume detected on {len(zero_volume)} bars")

    invalid = [
        p for p in series
        if p.get('high') is not None and p.get('low') is not None and (
            p['high'] < p['low']
            or p['high'] < p.get('open', p['high'])
            or p['high'] < p.get('close', p['high'])
            or p['low'] > p.get('open', p['low'])
            or p['low'] > p.get('close', p['low'])
        )
    ]
    if invalid:
        problems.append(f"Price logic violations found on {len(invalid)} bars")

    return problems


def validate_numeric_outputs(metrics: Any, path: str = 'metrics') -> None:
    """
    Ensure no NaN or infinite value leaks into an output record.

    Args:
        metrics: Nested dict/list structure of computed metrics
        path: Location prefix used in error messages

    Raises:
        DataQualityError: If a NaN or infinite value is found
    """
    if isinstance(metrics, dict):
        for key, value in metrics.items():
            validate_numeric_outputs(value, f"{path}.{key}")
    elif isinstance(metrics, (list, tuple)):
        for i, value in enumerate(metrics):
            validate_numeric_outputs(value, f"{path}[{i}]")
    elif isinstance(metrics, float):
        if math.isnan(metrics):
            raise DataQualityError(f"NaN value found in {path}")
        if math.isinf(metrics):
            raise DataQualityError(f"Infinite value found in {path}")


def run_all_guardrails(
    symbol: str,
    series: Sequence[Dict[str, Any]],
    metrics: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Run all guardrail checks and compile results.

    Args:
        symbol: Asset symbol
        series: Price points used for the metrics
        metrics: Calculated metrics

    Returns:
        Dictionary with guardrail results

    Raises:
        DataQualityError: If the metrics contain NaN or infinite values
    """
    results = {
        'symbol': symbol,
        'timestamp': date.today().isoformat(),
        'checks': {
            'availability': None,
            'series_order': None,
            'price_integrity': None,
            'numeric_validation': None,
        },
        'warnings': [],
        'errors': [],
    }

    available, insufficient = check_indicator_availability(series)
    results['checks']['availability'] = {
        'available': available,
        'insufficient': insufficient,
    }
    if insufficient:
        results['warnings'].append(f"Insufficient data for: {', '.join(insufficient)}")

    order_problems = check_series_order(series)
    results['checks']['series_order'] = order_problems
    if order_problems:
        results['warnings'].append(
            f"Series is not strictly ascending by date ({len(order_problems)} problems); "
            f"results assume ascending order"
        )

    integrity = validate_price_data_integrity(series)
    results['checks']['price_integrity'] = integrity
    results['warnings'].extend(integrity)

    try:
        validate_numeric_outputs(metrics)
        results['checks']['numeric_validation'] = 'passed'
    except DataQualityError as e:
        results['errors'].append(str(e))
        raise

    return results
