"""Row filters and option enumeration."""

from __future__ import annotations

from typing import Any, List

import pandas as pd

from .config import ALL_SENTINEL


def _coerce_to_column(series: pd.Series, value: Any) -> Any:
    """Convert ``value`` to the natural type of ``series``.

    Returns ``None`` when the value cannot be represented (e.g. ``"abc"``
    for an integer year column), which then matches no rows.
    """
    if pd.api.types.is_integer_dtype(series):
        try:
            as_float = float(value)
        except (TypeError, ValueError):
            return None
        return int(as_float) if as_float.is_integer() else None
    if pd.api.types.is_float_dtype(series):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    return str(value)


def filter_by_field(df: pd.DataFrame, field: str, value: Any) -> pd.DataFrame:
    """Return the rows where ``df[field] == value``, in source order.

    ``"All"`` disables the filter and returns every row.  An empty
    result is valid; callers decide how to present it.
    """
    if field not in df.columns:
        raise KeyError(f"Unknown field: {field!r}")
    if value == ALL_SENTINEL:
        return df.copy()

    target = _coerce_to_column(df[field], value)
    if target is None:
        return df.iloc[0:0].copy()
    return df.loc[df[field] == target].copy()


def distinct_values(df: pd.DataFrame, field: str) -> List[Any]:
    """Distinct values of ``field`` in first-seen order."""
    if field not in df.columns:
        raise KeyError(f"Unknown field: {field!r}")
    return df[field].drop_duplicates().tolist()
