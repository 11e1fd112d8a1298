"""
Orchestrated analysis job - price series to analysis JSON.
Calls the pure metric and pattern functions, runs guardrails, and
optionally persists the result atomically.
"""

import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from dotenv import load_dotenv

from analysis.guardrails import run_all_guardrails
from analysis.metrics_aggregator import CALCULATION_VERSION, compose_dashboard_metrics
from ingestion.transforms.enrichment import compute_data_ranges, enrich_price_points
from patterns.analyzer import analyze_patterns
from reports.atomic_writer import write_json_atomic

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def default_output_path(symbol: str, as_of: Optional[date] = None) -> Path:
    """
    Output file under ANALYSIS_OUTPUT_DIR (default ./data/analysis).

    Example:
        default_output_path('BTC', date(2024, 3, 1)) -> data/analysis/BTC/2024-03-01.json
    """
    as_of = as_of or date.today()
    base_dir = Path(os.getenv('ANALYSIS_OUTPUT_DIR', './data/analysis'))
    return base_dir / symbol.upper() / f"{as_of.isoformat()}.json"


def build_analysis(
    series: Sequence[Dict[str, Any]],
    symbol: str,
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Compose the full analysis record for one symbol.

    Args:
        series: Price points in ascending date order
        symbol: Asset symbol
        options: Pattern detector options (see patterns.analyzer.DEFAULT_OPTIONS)

    Returns:
        {symbol, data_period, dashboard, patterns, data_ranges, guardrails, metadata}

    Raises:
        DataQualityError: If a computed metric is NaN or infinite
    """
    dashboard = compose_dashboard_metrics(series, symbol)
    patterns = analyze_patterns(series, symbol, options)
    guardrails = run_all_guardrails(symbol, series, dashboard)

    for warning in guardrails['warnings']:
        logger.warning(f"{symbol}: {warning}")

    return {
        'symbol': symbol,
        'data_period': dashboard['data_period'],
        'dashboard': dashboard,
        'patterns': patterns,
        'data_ranges': compute_data_ranges(enrich_price_points(series)),
        'guardrails': guardrails,
        'metadata': {
            'calculated_at': datetime.now().isoformat(),
            'calculation_version': CALCULATION_VERSION,
            'pattern_options': options or {},
        },
    }


def analyze_series(
    series: Sequence[Dict[str, Any]],
    symbol: str,
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Run the complete analysis for a series and optionally save it to JSON.

    Args:
        series: Price points in ascending date order
        symbol: Asset symbol
        output_path: Where to write the analysis JSON (not written if None)
        options: Pattern detector options

    Returns:
        Status record {symbol, status, output_path, data_points,
        patterns_found, duration_seconds, analysis}; failed runs carry
        error_message and no analysis
    """
    start_time = datetime.now()
    symbol = symbol.upper()

    def failed(message: str) -> Dict[str, Any]:
        logger.error(f"Analysis failed for {symbol}: {message}")
        return {
            'symbol': symbol,
            'status': 'failed',
            'error_message': message,
            'output_path': None,
            'data_points': len(series) if series else 0,
            'patterns_found': 0,
            'duration_seconds': (datetime.now() - start_time).total_seconds(),
        }

    if not series:
        return failed(f"No price data for {symbol}")

    try:
        analysis = build_analysis(series, symbol, options)
    except Exception as e:
        return failed(str(e))

    written_path = None
    if output_path is not None:
        write_result = write_json_atomic(analysis, output_path)
        if write_result['status'] != 'completed':
            return failed(f"Write failed: {write_result.get('error', 'unknown')}")
        written_path = write_result['output_path']
        logger.info(f"Wrote {symbol} analysis to {written_path}")

    return {
        'symbol': symbol,
        'status': 'completed',
        'output_path': written_path,
        'data_points': len(series),
        'patterns_found': analysis['patterns']['total_patterns'],
        'duration_seconds': (datetime.now() - start_time).total_seconds(),
        'analysis': analysis,
    }
