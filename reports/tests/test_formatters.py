"""
Tests for display formatters.
"""

from datetime import date, datetime

import pytest

from reports.formatters import (
    FormatterError,
    format_comparison_value,
    format_currency,
    format_date_display,
    format_percent,
    format_ratio,
    format_volume,
)


class TestFormatPercent:
    """Tests for format_percent."""

    def test_two_decimals(self):
        assert format_percent(12.5) == "12.50%"
        assert format_percent(-3.14159) == "-3.14%"

    def test_precision(self):
        assert format_percent(7.25, decimal_places=1) == "7.2%"
        assert format_percent(7, decimal_places=0) == "7%"

    def test_none(self):
        assert format_percent(None) == "N/A"

    def test_non_numeric(self):
        with pytest.raises(FormatterError):
            format_percent("12%")


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_thousands_separator(self):
        assert format_currency(42150.25) == "$42,150.25"

    def test_negative(self):
        assert format_currency(-3.1) == "-$3.10"

    def test_small_price(self):
        assert format_currency(0.000123, decimal_places=6) == "$0.000123"

    def test_none(self):
        assert format_currency(None) == "N/A"


class TestFormatVolume:
    """Tests for format_volume."""

    def test_scales(self):
        assert format_volume(2_350_000_000) == "2.35B"
        assert format_volume(12_500_000) == "12.50M"
        assert format_volume(4_200) == "4.20K"
        assert format_volume(512) == "512"

    def test_boundary_is_exclusive(self):
        assert format_volume(1_000_000) == "1000.00K"

    def test_none(self):
        assert format_volume(None) == "N/A"


class TestFormatComparisonValue:
    """Tests for format_comparison_value."""

    def test_kinds(self):
        assert format_comparison_value(4.5) == "4.50%"
        assert format_comparison_value(42150.256, 'currency') == "$42150.26"
        assert format_comparison_value(3e9, 'volume') == "3.00B"
        assert format_comparison_value(1.5, 'ratio') == "1.50x"
        assert format_comparison_value(0.123, 'sharpe') == "0.12"

    def test_none_for_every_kind(self):
        for kind in ('percent', 'currency', 'volume', 'ratio', 'other'):
            assert format_comparison_value(None, kind) == "N/A"

    def test_ratio(self):
        assert format_ratio(2) == "2.00x"


class TestFormatDateDisplay:
    """Tests for format_date_display."""

    def test_date_inputs(self):
        assert format_date_display(date(2025, 7, 5)) == "July 5, 2025"
        assert format_date_display(datetime(2025, 7, 15, 9, 30)) == "July 15, 2025"
        assert format_date_display('2024-02-29') == "February 29, 2024"
        assert format_date_display('2024-02-29T23:00:00Z') == "February 29, 2024"

    def test_invalid(self):
        with pytest.raises(FormatterError):
            format_date_display('not a date')
        with pytest.raises(FormatterError):
            format_date_display(20240229)

    def test_none(self):
        assert format_date_display(None) == "N/A"
