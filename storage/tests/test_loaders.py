"""
Tests for series loaders - CSV/JSON files via pandas.
"""

import json
from datetime import date, timedelta

import pandas as pd
import pytest

from analysis.analysis_job import analyze_series
from storage.loaders import (
    LoaderError,
    frame_to_series,
    load_series_csv,
    load_series_json,
    series_to_frame,
)


CSV_CONTENT = (
    "date,open,high,low,close,volume,source\n"
    "2024-01-01,42000,43000,41500,42800,1500.5,binance\n"
    "2024-01-02,42800,44000,42500,43900,1720,binance\n"
)


class TestLoadSeriesCsv:
    """Tests for load_series_csv."""

    def test_loads_points(self, tmp_path):
        path = tmp_path / 'btc.csv'
        path.write_text(CSV_CONTENT)

        points = load_series_csv(path)

        assert len(points) == 2
        assert points[0]['date'] == date(2024, 1, 1)
        assert points[0]['close'] == 42800.0
        assert isinstance(points[1]['volume'], float)
        assert points[1]['source'] == 'binance'

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoaderError, match="not found"):
            load_series_csv(tmp_path / 'absent.csv')

    def test_missing_columns(self, tmp_path):
        path = tmp_path / 'btc.csv'
        path.write_text("date,close\n2024-01-01,42800\n")

        with pytest.raises(LoaderError, match="Missing required columns"):
            load_series_csv(path)

    def test_blank_volume_loads_as_zero(self, tmp_path):
        """One missing volume cell does not block a full analysis."""
        lines = ['date,open,high,low,close,volume']
        for i in range(40):
            day = date(2024, 1, 1) + timedelta(days=i)
            price = 100 + i + (3 if i % 2 else -3)
            volume = '' if i == 5 else str(1000 + i * 10)
            lines.append(f"{day.isoformat()},{price},{price + 2},{price - 2},{price + 1},{volume}")
        path = tmp_path / 'btc.csv'
        path.write_text('\n'.join(lines) + '\n')

        points = load_series_csv(path)

        assert points[5]['volume'] == 0.0
        assert points[6]['volume'] == 1060.0

        result = analyze_series(points, 'BTC')
        assert result['status'] == 'completed'
        assert result['data_points'] == 40

    def test_blank_close_is_rejected(self, tmp_path):
        path = tmp_path / 'btc.csv'
        path.write_text(
            "date,open,high,low,close,volume\n"
            "2024-01-01,42000,43000,41500,42800,1500\n"
            "2024-01-02,42800,44000,42500,,1720\n"
        )

        with pytest.raises(LoaderError, match=r"Missing OHLC values in rows \[1\]"):
            load_series_csv(path)

    def test_non_numeric_price_is_rejected(self, tmp_path):
        path = tmp_path / 'btc.csv'
        path.write_text(
            "date,open,high,low,close,volume\n"
            "2024-01-01,42000,43000,41500,n/a-ish,1500\n"
        )

        with pytest.raises(LoaderError, match='Non-numeric'):
            load_series_csv(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.csv'
        path.write_text("")

        with pytest.raises(LoaderError):
            load_series_csv(path)


class TestLoadSeriesJson:
    """Tests for load_series_json."""

    def test_list_payload(self, tmp_path):
        path = tmp_path / 'btc.json'
        path.write_text(json.dumps([
            {'date': '2024-01-01', 'open': 1, 'high': 2, 'low': 0.5, 'close': 1.5,
             'volume': 10, 'trades': 7},
            {'date': '2024-01-02', 'open': 1.5, 'high': 2, 'low': 1, 'close': 1.8,
             'volume': 12, 'trades': None},
        ]))

        points = load_series_json(path)

        assert [p['date'] for p in points] == [date(2024, 1, 1), date(2024, 1, 2)]
        assert points[0]['trades'] == 7
        assert 'trades' not in points[1]

    def test_points_payload(self, tmp_path):
        path = tmp_path / 'calendar.json'
        path.write_text(json.dumps({'symbol': 'BTC', 'points': [
            {'date': '2024-01-01', 'open': 1, 'high': 2, 'low': 0.5, 'close': 1.5, 'volume': 10},
        ]}))

        assert len(load_series_json(path)) == 1

    def test_empty_list(self, tmp_path):
        path = tmp_path / 'empty.json'
        path.write_text("[]")

        assert load_series_json(path) == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text("{not json")

        with pytest.raises(LoaderError, match="Failed to read"):
            load_series_json(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps({'symbol': 'BTC'}))

        with pytest.raises(LoaderError, match="'points' list"):
            load_series_json(path)


class TestFrameConversion:
    """Tests for series_to_frame and frame_to_series."""

    def test_series_to_frame(self):
        df = series_to_frame([
            {'date': date(2024, 1, 1), 'open': 1.0, 'high': 2.0, 'low': 0.5,
             'close': 1.5, 'volume': 10.0},
        ])

        assert list(df.columns) == ['date', 'open', 'high', 'low', 'close', 'volume']
        assert pd.api.types.is_datetime64_any_dtype(df['date'])

    def test_empty_series(self):
        df = series_to_frame([])

        assert df.empty
        assert 'close' in df.columns
        assert frame_to_series(df) == []

    def test_bad_dates(self):
        df = pd.DataFrame([{'date': 'yesterday-ish', 'open': 1, 'high': 1, 'low': 1,
                            'close': 1, 'volume': 1}])

        with pytest.raises(LoaderError, match="Unparseable date"):
            frame_to_series(df)
