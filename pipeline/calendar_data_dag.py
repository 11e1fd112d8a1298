"""
Calendar data DAG - produces the enriched series behind one calendar view.
Composes: Service (fetch + normalize) → Validate → Order check → Enrich → Ranges.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from analysis.result import ErrorKind, Result
from ingestion.transforms.enrichment import compute_data_ranges, enrich_price_points
from ingestion.transforms.validators import ValidationError, check_series_order, validate_price_point
from pipeline.market_data_service import MarketDataService, resolve_request


logger = logging.getLogger(__name__)


@dataclass
class CalendarDataConfig:
    """Configuration for one calendar data run."""
    symbol: str
    timeframe: str = 'daily'
    days: int = 30

    def __post_init__(self):
        """Validate and normalize."""
        if not self.symbol or not isinstance(self.symbol, str):
            raise ValueError("symbol must be non-empty string")
        self.symbol = self.symbol.upper()

        if self.days <= 0:
            raise ValueError("days must be positive")

        # Raises ValueError for unknown timeframes
        resolve_request(self.timeframe, self.days)

    @property
    def interval(self) -> str:
        return resolve_request(self.timeframe, self.days)[0]

    @property
    def limit(self) -> int:
        return resolve_request(self.timeframe, self.days)[1]


def run_calendar_data(
    config: CalendarDataConfig,
    service: Optional[MarketDataService] = None
) -> Result:
    """
    Run the calendar data pipeline.

    Pipeline stages:
    1. Fetch normalized points through the service (provider fallback)
    2. Validate each point, dropping invalid ones with a warning
    3. Report ordering problems (the series is never re-sorted)
    4. Enrich points with derived fields
    5. Compute data ranges for color normalization

    Args:
        config: Pipeline configuration
        service: Market data service (a default one is built if omitted)

    Returns:
        Result carrying {symbol, timeframe, points, data_ranges,
        validation_warnings, order_problems, fetched_at}; the fetch failure
        is passed through, and a series where every point fails validation
        is an empty_response failure
    """
    service = service or MarketDataService()

    fetched = service.fetch_series(config.symbol, config.timeframe, config.days)
    if not fetched.is_ok:
        logger.error(f"Calendar data fetch failed for {config.symbol}: {fetched.error_message}")
        return fetched

    raw_points = fetched.value
    valid_points: List[Dict[str, Any]] = []
    warnings: List[str] = []

    for point in raw_points:
        try:
            validate_price_point(point)
            valid_points.append(point)
        except ValidationError as e:
            message = f"{config.symbol} {point.get('date', 'unknown')}: {e}"
            logger.warning(f"Validation warning for {message}")
            warnings.append(message)

    if not valid_points:
        return Result.failure(
            ErrorKind.EMPTY_RESPONSE,
            f"All {len(raw_points)} points failed validation for {config.symbol}"
        )

    order_problems = check_series_order(valid_points)
    for problem in order_problems:
        logger.warning(f"Series order problem for {config.symbol}: {problem}")

    enriched = enrich_price_points(valid_points)

    logger.info(
        f"Calendar data ready for {config.symbol} ({config.timeframe}): "
        f"{len(enriched)} points, {len(warnings)} validation warnings"
    )

    return Result.success({
        'symbol': config.symbol,
        'timeframe': config.timeframe,
        'points': enriched,
        'data_ranges': compute_data_ranges(enriched),
        'validation_warnings': warnings,
        'order_problems': order_problems,
        'fetched_at': datetime.now().isoformat(),
    })
