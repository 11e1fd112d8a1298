"""
Display formatters for calendar and comparison output.
Deterministic string formatting for percentages, currency, volume and dates.
"""

from datetime import datetime, date
from typing import Optional, Union


class FormatterError(Exception):
    """Raised when formatter input validation fails."""
    pass


NOT_AVAILABLE = "N/A"

VOLUME_SCALES = [
    (1e9, 'B'),
    (1e6, 'M'),
    (1e3, 'K'),
]


def _check_numeric(value, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatterError(f"{label} value must be numeric, got {type(value)}")


def format_percent(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a value that is already in percent units.

    Args:
        value: Percent value (12.5 = 12.5%)
        decimal_places: Number of decimal places (default: 2)

    Returns:
        Formatted percentage string (e.g., "12.50%")
    """
    if value is None:
        return NOT_AVAILABLE
    _check_numeric(value, "Percentage")
    return f"{value:.{decimal_places}f}%"


def format_currency(value: Optional[float], decimal_places: int = 2) -> str:
    """
    Format a price in dollars with thousands separators.

    Returns:
        Formatted currency string (e.g., "$42,150.25", "-$3.10")
    """
    if value is None:
        return NOT_AVAILABLE
    _check_numeric(value, "Currency")

    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimal_places}f}"


def format_volume(value: Optional[float]) -> str:
    """
    Format a traded volume with B/M/K scale.

    Scales apply strictly above each boundary, so 1e6 itself is "1000.00K".

    Returns:
        Formatted volume string (e.g., "2.35B", "512")
    """
    if value is None:
        return NOT_AVAILABLE
    _check_numeric(value, "Volume")

    for boundary, suffix in VOLUME_SCALES:
        if value > boundary:
            return f"{value / boundary:.2f}{suffix}"
    return f"{value:.0f}"


def format_ratio(value: Optional[float]) -> str:
    """Format a multiplier (e.g., "1.85x")."""
    if value is None:
        return NOT_AVAILABLE
    _check_numeric(value, "Ratio")
    return f"{value:.2f}x"


def format_comparison_value(value: Optional[float], kind: str = 'percent') -> str:
    """
    Format a comparison metric by kind.

    Args:
        value: Metric value or None
        kind: 'percent', 'currency', 'volume', 'ratio'; anything else
            gets two decimals

    Returns:
        Formatted string, "N/A" for None
    """
    if value is None:
        return NOT_AVAILABLE

    if kind == 'percent':
        return format_percent(value)
    if kind == 'currency':
        return f"${value:.2f}"
    if kind == 'volume':
        return format_volume(value)
    if kind == 'ratio':
        return format_ratio(value)

    _check_numeric(value, "Comparison")
    return f"{value:.2f}"


def format_date_display(date_input: Union[str, date, datetime, None]) -> str:
    """
    Format date as "Month D, YYYY".

    Args:
        date_input: Date as ISO string, date object, or datetime object

    Returns:
        Formatted date string (e.g., "July 15, 2025")
    """
    if date_input is None:
        return NOT_AVAILABLE

    if isinstance(date_input, str):
        try:
            if 'T' in date_input:
                dt = datetime.fromisoformat(date_input.replace('Z', '+00:00'))
                date_obj = dt.date()
            else:
                date_obj = date.fromisoformat(date_input)
        except ValueError:
            raise FormatterError(f"Invalid date string: {date_input}")
    elif isinstance(date_input, datetime):
        date_obj = date_input.date()
    elif isinstance(date_input, date):
        date_obj = date_input
    else:
        raise FormatterError(f"Date must be string, date, or datetime, got {type(date_input)}")

    return f"{date_obj.strftime('%B')} {date_obj.day}, {date_obj.year}"
