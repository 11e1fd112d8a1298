"""
Series loaders - read and write price series as CSV/JSON via pandas.
Thin IO layer; rows come back as canonical price points in file order.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd


class LoaderError(Exception):
    """Raised when a series file cannot be read."""
    pass


PRICE_COLUMNS = ['open', 'high', 'low', 'close', 'volume']


def series_to_frame(points: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """
    Price points to a DataFrame with a datetime 'date' column.

    Empty input gives an empty frame with the date and OHLCV columns.
    """
    if not points:
        return pd.DataFrame(columns=['date'] + PRICE_COLUMNS)

    df = pd.DataFrame(list(points))
    df['date'] = pd.to_datetime(df['date'])
    return df


def frame_to_series(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    DataFrame rows to canonical price points.

    Requires date and OHLCV columns; extra columns are carried through with
    missing values dropped. A missing volume loads as 0.0.

    Raises:
        LoaderError: If required columns are missing, dates do not parse,
            or an OHLC value is missing or non-numeric
    """
    missing = {'date', *PRICE_COLUMNS} - set(df.columns)
    if missing:
        raise LoaderError(f"Missing required columns: {sorted(missing)}")
    if df.empty:
        return []

    try:
        dates = pd.to_datetime(df['date'])
    except (ValueError, TypeError) as e:
        raise LoaderError(f"Unparseable date column: {e}") from e

    try:
        prices = df[PRICE_COLUMNS].apply(pd.to_numeric).fillna({'volume': 0.0})
    except (ValueError, TypeError) as e:
        raise LoaderError(f"Non-numeric price value: {e}") from e

    gaps = prices.isna().any(axis=1)
    if gaps.any():
        rows = [int(i) for i in gaps[gaps].index]
        raise LoaderError(f"Missing OHLC values in rows {rows}")

    points = []
    for row_date, (_, row), (_, values) in zip(dates, df.iterrows(), prices.iterrows()):
        point = {'date': row_date.date()}
        for column in PRICE_COLUMNS:
            point[column] = float(values[column])
        for column, value in row.items():
            if column in point or column == 'date':
                continue
            if not isinstance(value, (dict, list)) and pd.isna(value):
                continue
            point[column] = value.item() if hasattr(value, 'item') else value
        points.append(point)

    return points


def load_series_csv(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load a price series from CSV with a header row.

    Raises:
        LoaderError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise LoaderError(f"Series file not found: {path}")

    try:
        df = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise LoaderError(f"Failed to read {path}: {e}") from e

    return frame_to_series(df)


def load_series_json(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load a price series from JSON.

    Accepts a list of point objects or an object with a 'points' list
    (the shape written by the calendar data pipeline).

    Raises:
        LoaderError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise LoaderError(f"Series file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Failed to read {path}: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get('points')
    if not isinstance(payload, list):
        raise LoaderError(f"{path} must hold a list of points or a 'points' list")
    if not payload:
        return []

    return frame_to_series(pd.DataFrame(payload))
