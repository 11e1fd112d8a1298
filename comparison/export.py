"""
Chart series and tabular export for comparison results.
"""

import json
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from analysis.calculations.returns import price_of


EXPORT_FORMATS = ('csv', 'json', 'rows')


class ComparisonExportError(Exception):
    """Raised for an unknown export format."""
    pass


def build_comparison_chart_data(comparison: Optional[Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
    """
    Chart-ready records for a comparison result.

    Two-period results are aligned by position and truncated to the shorter
    period; multi-asset results yield one record per ranked asset.

    Returns:
        List of records, or None for an empty/unrecognized result
    """
    if not comparison:
        return None

    if 'period1' in comparison and 'period2' in comparison:
        current = comparison['period1']['data']
        previous = comparison['period2']['data']
        return [
            {
                'index': i,
                'base_value': price_of(current[i]),
                'compare_value': price_of(previous[i]),
                'base_name': 'Current Period',
                'compare_name': 'Previous Period',
            }
            for i in range(min(len(current), len(previous)))
        ]

    if 'rankings' in comparison:
        return [
            {
                'symbol': m['symbol'],
                'return': m['total_return'],
                'volatility': m['volatility'],
                'volume': m['total_volume'],
                'sharpe_ratio': m['sharpe_ratio'],
                'start_price': m['start_price'],
                'end_price': m['end_price'],
            }
            for m in comparison['rankings']
        ]

    return None


def comparison_rows(comparison: Dict[str, Any]) -> List[List[str]]:
    """
    Header row plus formatted value rows for a comparison result.
    """
    if 'period1' in comparison and 'period2' in comparison:
        current = comparison['period1']['metrics']
        previous = comparison['period2']['metrics']
        differences = comparison['differences']
        return [
            ['Metric', 'Current Period', 'Previous Period', 'Difference'],
            [
                'Total Return (%)',
                f"{current['total_return']:.2f}",
                f"{previous['total_return']:.2f}",
                f"{differences['return_difference']:.2f}",
            ],
            [
                'Volatility (%)',
                f"{current['volatility']:.2f}",
                f"{previous['volatility']:.2f}",
                f"{differences['volatility_difference']:.2f}",
            ],
            [
                'Total Volume',
                f"{current['total_volume']:.0f}",
                f"{previous['total_volume']:.0f}",
                f"{differences['volume_difference']:.0f}",
            ],
        ]

    rows = [[
        'Symbol', 'Return (%)', 'Volatility (%)', 'Volume',
        'Sharpe Ratio', 'Start Price', 'End Price',
    ]]
    for m in comparison.get('rankings', []):
        rows.append([
            m['symbol'],
            f"{m['total_return']:.2f}",
            f"{m['volatility']:.2f}",
            f"{m['total_volume']:.0f}",
            f"{m['sharpe_ratio']:.4f}",
            f"{m['start_price']:.4f}",
            f"{m['end_price']:.4f}",
        ])
    return rows


def export_comparison(
    comparison: Optional[Dict[str, Any]],
    fmt: str = 'csv'
) -> Optional[Union[str, List[List[str]]]]:
    """
    Export a comparison result.

    Args:
        comparison: Result of compare_time_periods or compare_cryptocurrencies
        fmt: 'csv' (text), 'json' (full result, indented) or 'rows'
            (list of string rows, header first)

    Returns:
        Exported data, or None for an empty result

    Raises:
        ComparisonExportError: If fmt is not a supported format
    """
    if fmt not in EXPORT_FORMATS:
        raise ComparisonExportError(f"Unsupported export format: {fmt}")

    if not comparison:
        return None

    if fmt == 'json':
        return json.dumps(comparison, indent=2, default=str)

    rows = comparison_rows(comparison)
    if fmt == 'rows':
        return rows

    df = pd.DataFrame(rows[1:], columns=rows[0])
    return df.to_csv(index=False, lineterminator='\n').rstrip('\n')
