#!/usr/bin/env python3
"""
Main CLI for the crypto market calendar workbench.
Usage: python cli.py {fetch,analyze,patterns,compare} SYMBOL [options]
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from alerts.alert_engine import AlertConfigError, AlertHistory, check_alerts, load_alert_rules
from analysis.analysis_job import analyze_series, default_output_path
from analysis.calculations.returns import volumes
from analysis.calculations.statistics import mean
from comparison.assets import compare_cryptocurrencies
from comparison.export import EXPORT_FORMATS, export_comparison
from comparison.periods import compare_time_periods
from patterns.analyzer import analyze_patterns, describe_pattern
from pipeline.calendar_data_dag import CalendarDataConfig, run_calendar_data
from pipeline.market_data_service import TIMEFRAME_INTERVALS, MarketDataService
from reports.atomic_writer import write_json_atomic, write_text_atomic
from reports.formatters import (
    format_currency,
    format_date_display,
    format_percent,
    format_volume,
)
from storage.loaders import LoaderError, load_series_csv, load_series_json

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root logging from LOG_LEVEL (default INFO)."""
    level = os.getenv('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Crypto market calendar analytics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py fetch BTC --days 60 --alerts
  python cli.py analyze ETH --input data/eth.csv --seasonal
  python cli.py patterns SOL --days 90
  python cli.py compare BTC ETH SOL --days 30 --format csv
  python cli.py compare BTC --halves --days 60
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    def add_series_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument('--timeframe', choices=sorted(TIMEFRAME_INTERVALS), default='daily',
                         help='Bar size (default: daily)')
        sub.add_argument('--days', type=int, default=30,
                         help='Span in days (default: 30)')

    fetch = subparsers.add_parser('fetch', help='Fetch and enrich calendar data')
    fetch.add_argument('symbol', help='Asset symbol (e.g., BTC)')
    add_series_args(fetch)
    fetch.add_argument('--output', help='Write the calendar data JSON here')
    fetch.add_argument('--alerts', action='store_true',
                       help='Evaluate alert rules (ALERT_RULES_PATH) against each day')

    analyze = subparsers.add_parser('analyze', help='Full metrics and pattern analysis')
    analyze.add_argument('symbol', help='Asset symbol (e.g., BTC)')
    add_series_args(analyze)
    analyze.add_argument('--input', help='Load the series from a CSV or JSON file instead of fetching')
    analyze.add_argument('--output', help='Analysis JSON path (default: under ANALYSIS_OUTPUT_DIR)')
    analyze.add_argument('--seasonal', action='store_true', help='Include seasonal patterns')

    patterns = subparsers.add_parser('patterns', help='List detected patterns')
    patterns.add_argument('symbol', help='Asset symbol (e.g., BTC)')
    add_series_args(patterns)
    patterns.add_argument('--input', help='Load the series from a CSV or JSON file instead of fetching')
    patterns.add_argument('--seasonal', action='store_true', help='Include seasonal patterns')
    patterns.add_argument('--limit', type=int, default=10, help='Patterns to show (default: 10)')

    compare = subparsers.add_parser('compare', help='Compare assets or periods')
    compare.add_argument('symbols', nargs='+', help='Two or more symbols, or one with --halves')
    add_series_args(compare)
    compare.add_argument('--halves', action='store_true',
                         help='Compare the recent half of the span against the earlier half')
    compare.add_argument('--format', choices=[f for f in EXPORT_FORMATS if f != 'rows'],
                         default='csv', help='Export format (default: csv)')
    compare.add_argument('--output', help='Write the export here instead of stdout')

    return parser


def load_series(
    symbol: str,
    timeframe: str,
    days: int,
    input_path: Optional[str],
    service: MarketDataService
) -> Optional[List[Dict[str, Any]]]:
    """Series from a file when given, otherwise through the calendar data pipeline."""
    if input_path:
        loader = load_series_csv if Path(input_path).suffix.lower() == '.csv' else load_series_json
        try:
            return loader(input_path)
        except LoaderError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return None

    result = run_calendar_data(CalendarDataConfig(symbol, timeframe, days), service)
    if not result.is_ok:
        print(f"ERROR: {symbol}: {result.error_kind.value}: {result.error_message}", file=sys.stderr)
        return None
    return result.value['points']


def cmd_fetch(args: argparse.Namespace, service: MarketDataService) -> int:
    result = run_calendar_data(CalendarDataConfig(args.symbol, args.timeframe, args.days), service)
    if not result.is_ok:
        print(f"ERROR: {args.symbol}: {result.error_kind.value}: {result.error_message}", file=sys.stderr)
        return 1

    payload = result.value
    points = payload['points']
    last = points[-1]

    print(f"{payload['symbol']} {payload['timeframe']}: {len(points)} bars "
          f"({format_date_display(points[0]['date'])} to {format_date_display(last['date'])})")
    print(f"   Last close: {format_currency(last['close'])} "
          f"({format_percent(last['price_change'])}, volume {format_volume(last['volume'])})")
    for warning in payload['validation_warnings'] + payload['order_problems']:
        print(f"   WARNING: {warning}")

    if args.alerts:
        try:
            rules = load_alert_rules()
        except AlertConfigError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        history = AlertHistory()
        avg_volume = mean(volumes(points))
        for point in points:
            history.extend(check_alerts(point, payload['symbol'], rules, avg_volume))

        print(f"   Alerts: {len(history)}")
        for alert in history.filter()[:10]:
            print(f"   [{alert['severity']}] {alert['date']} {alert['message']}")

    if args.output:
        write_result = write_json_atomic(payload, args.output)
        if write_result['status'] != 'completed':
            print(f"ERROR: Write failed: {write_result['error']}", file=sys.stderr)
            return 1
        print(f"Saved to: {write_result['output_path']}")

    return 0


def cmd_analyze(args: argparse.Namespace, service: MarketDataService) -> int:
    symbol = args.symbol.upper()
    series = load_series(symbol, args.timeframe, args.days, args.input, service)
    if series is None:
        return 1

    output_path = Path(args.output) if args.output else default_output_path(symbol)
    result = analyze_series(series, symbol, output_path, {'detect_seasonal': args.seasonal})

    if result['status'] != 'completed':
        print(f"ERROR: Analysis failed for {symbol}: {result['error_message']}", file=sys.stderr)
        return 1

    performance = result['analysis']['dashboard']['performance']
    print(f"{symbol}: {result['data_points']} bars, {result['patterns_found']} patterns")
    if performance:
        print(f"   Total return: {format_percent(performance['total_return'])}")
        print(f"   Max drawdown: {format_percent(performance['max_drawdown'])}")
        print(f"   Volatility: {format_percent(performance['volatility'])}")
    print(f"Saved to: {result['output_path']}")
    return 0


def cmd_patterns(args: argparse.Namespace, service: MarketDataService) -> int:
    symbol = args.symbol.upper()
    series = load_series(symbol, args.timeframe, args.days, args.input, service)
    if series is None:
        return 1

    analysis = analyze_patterns(series, symbol, {'detect_seasonal': args.seasonal})
    print(f"{symbol}: {analysis['total_patterns']} patterns")
    for key, count in analysis['summary'].items():
        if count:
            print(f"   {key}: {count}")
    for pattern in analysis['patterns'][:args.limit]:
        print(f"   - {describe_pattern(pattern)} (confidence {pattern.get('confidence', 0):.2f})")
    return 0


def cmd_compare(args: argparse.Namespace, service: MarketDataService) -> int:
    symbols = [s.upper() for s in args.symbols]

    if args.halves:
        if len(symbols) != 1:
            print("ERROR: --halves compares one symbol", file=sys.stderr)
            return 1
        series = load_series(symbols[0], args.timeframe, args.days, None, service)
        if series is None:
            return 1
        middle = len(series) // 2
        comparison = compare_time_periods(series[middle:], series[:middle], symbols[0])
    else:
        if len(symbols) < 2:
            print("ERROR: compare needs at least two symbols", file=sys.stderr)
            return 1
        series_map = {
            symbol: load_series(symbol, args.timeframe, args.days, None, service)
            for symbol in symbols
        }
        comparison = compare_cryptocurrencies(series_map, args.timeframe)

    if comparison is None:
        print("ERROR: Not enough data to compare", file=sys.stderr)
        return 1

    exported = export_comparison(comparison, args.format)
    if args.output:
        write_result = write_text_atomic(exported, args.output)
        if write_result['status'] != 'completed':
            print(f"ERROR: Write failed: {write_result['error']}", file=sys.stderr)
            return 1
        print(f"Saved to: {write_result['output_path']}")
    else:
        print(exported)

    for insight in comparison['insights']:
        print(f"   [{insight['severity']}] {insight['message']}")
    return 0


COMMANDS = {
    'fetch': cmd_fetch,
    'analyze': cmd_analyze,
    'patterns': cmd_patterns,
    'compare': cmd_compare,
}


def main(argv: Optional[List[str]] = None, service: Optional[MarketDataService] = None) -> int:
    """Main CLI entry point; returns the process exit code."""
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        CalendarDataConfig(args.symbol if hasattr(args, 'symbol') else args.symbols[0],
                           args.timeframe, args.days)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    service = service or MarketDataService()
    return COMMANDS[args.command](args, service)


if __name__ == '__main__':
    sys.exit(main())
