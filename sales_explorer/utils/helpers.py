"""
Utility functions for turning raw CSV columns into typed values.
Handles mixed date formats, numeric coercion and text normalization.
"""

import numpy as np
import pandas as pd
from typing import List, Optional


def normalize_text(value: Optional[str]) -> str:
    """Trimmed, case-folded form used for every categorical comparison."""
    if value is None:
        return ""
    return str(value).strip().lower()


def parse_sales_dates(date_series: pd.Series) -> pd.Series:
    """
    Parse the Date column (ISO dates, MM/DD/YYYY, timestamps with offsets...).
    Unparseable values become NaT; all values are interpreted as UTC.
    """
    return pd.to_datetime(date_series, errors="coerce", utc=True, format="mixed")


def dates_to_epoch_ms(dates: pd.Series) -> List[Optional[int]]:
    """Epoch milliseconds per row, None where the date is missing."""
    return [None if pd.isna(d) else int(round(d.timestamp() * 1000)) for d in dates]


def dates_to_years(dates: pd.Series) -> List[Optional[str]]:
    """Calendar year as string ("2022"), None where the date is missing."""
    years = dates.dt.year
    return [None if pd.isna(y) else str(int(y)) for y in years]


def to_int_list(series: pd.Series, default: Optional[int] = None) -> List[Optional[int]]:
    """Integer part of each value; `default` where it is not numeric (e.g. "", "n/a")."""
    numeric = pd.to_numeric(series, errors="coerce")
    floored = np.floor(numeric.to_numpy(dtype="float64"))
    return [default if np.isnan(v) else int(v) for v in floored]


def to_float_list(series: pd.Series, default: float = 0.0) -> List[float]:
    numeric = pd.to_numeric(series, errors="coerce").fillna(default)
    return [float(v) for v in numeric]
