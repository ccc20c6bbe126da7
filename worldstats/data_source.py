"""Dataset loading for the world statistics dashboard.

The CSV holds one row per country and year.  Fields are parsed once here
into a typed DataFrame so downstream code never coerces strings again:

* ``location`` stays a string,
* ``time`` becomes an integer year and ``date`` the matching timestamp,
* ``pop_mlns``, ``fertility_rate`` and ``life_expectancy`` become floats.

Rows that fail to parse are dropped and reported through ``logging``.
Nothing is cached: every call re-reads the resource in full.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List

import pandas as pd

from .config import NUMERIC_COLUMNS, REQUIRED_COLUMNS, YEAR_FORMAT, resolve_data_path
from .errors import LoadError

# Module‑level logger
logger = logging.getLogger(__name__)


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise an error if the DataFrame lacks any of the required columns."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise KeyError(f"Missing expected columns: {missing}")


def read_raw(path: str | Path) -> pd.DataFrame:
    """Read the CSV with every field as a string.

    Raises
    ------
    LoadError
        If the file cannot be opened or is not parseable as CSV.
    """
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise LoadError(f"Could not read dataset {path}: {exc}") from exc


def prepare_rows(raw: pd.DataFrame) -> pd.DataFrame:
    """Coerce raw string fields into typed columns.

    Parameters
    ----------
    raw : pd.DataFrame
        Frame as returned by :func:`read_raw`.

    Returns
    -------
    pd.DataFrame
        Typed rows in source order with a fresh ``RangeIndex``.  Rows with
        an empty location, an unparsable year or a missing or non-finite
        numeric field are dropped.
    """
    df = raw.copy()
    df["location"] = df["location"].astype(str).str.strip()

    time_str = df["time"].astype(str).str.strip()
    # Exactly four digits; pandas would otherwise accept e.g. "2000-01".
    four_digits = time_str.str.fullmatch(r"\d{4}")
    df["date"] = pd.to_datetime(
        time_str.where(four_digits), format=YEAR_FORMAT, errors="coerce"
    )
    df["time"] = df["date"].dt.year.astype("Int64")

    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col].astype(str).str.strip(), errors="coerce")
    # "inf" and overflowing literals parse to +/-inf; treat them as unparsable.
    numbers = df[NUMERIC_COLUMNS]
    df[NUMERIC_COLUMNS] = numbers.where(numbers.abs() != float("inf"))

    bad = (
        df["location"].eq("")
        | df["date"].isna()
        | df[NUMERIC_COLUMNS].isna().any(axis=1)
    )
    if bad.any():
        logger.warning(
            "Dropping %d unparsable row(s); first at data row %d",
            int(bad.sum()),
            int(bad.idxmax()),
        )
    df = df.loc[~bad].reset_index(drop=True)
    df["time"] = df["time"].astype(int)

    ordered = ["location", "time", "date", *NUMERIC_COLUMNS]
    extras = [c for c in df.columns if c not in ordered]
    return df[ordered + extras]


def load_dataset(path: str | Path | None = None) -> pd.DataFrame:
    """Load the full dataset from ``path`` (default: configured data path).

    Raises
    ------
    LoadError
        If the resource is unreachable, malformed or lacks a required column.
    """
    source = Path(path) if path is not None else resolve_data_path()
    raw = read_raw(source)
    try:
        ensure_columns(raw, REQUIRED_COLUMNS)
    except KeyError as exc:
        raise LoadError(f"Dataset {source} is malformed: {exc.args[0]}") from exc

    df = prepare_rows(raw)
    logger.info("Loaded %d rows from %s", len(df), source)
    return df


async def load_dataset_async(path: str | Path | None = None) -> pd.DataFrame:
    """Run :func:`load_dataset` in a worker thread."""
    return await asyncio.to_thread(load_dataset, path)
