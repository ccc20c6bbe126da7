"""Min/max bounds used as scale domains.

Three policies are available:

``PLAIN``
    The raw extrema.
``SNAP_EACH_ROW``
    After each row is folded in, the running min and running max are
    each rounded up to the next 1/20 (``ceil(x * 20) / 20``).  This is
    how the dashboard has always computed fertility/life-expectancy
    axes.  Because the snap rounds *up*, the lower bound can sit above
    the smallest value.
``SNAP_EXTREMA``
    The raw extrema are found first and then each is snapped once.
    Snapping is idempotent (``ceil((k / 20) * 20) == k`` for integer
    ``k``), so this always gives the same bounds as ``SNAP_EACH_ROW``.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Dict, Iterable

import pandas as pd

from .config import SNAP_INCREMENT
from .errors import EmptyRangeError


class RangePolicy(str, enum.Enum):
    PLAIN = "plain"
    SNAP_EACH_ROW = "snap_each_row"
    SNAP_EXTREMA = "snap_extrema"


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


def snap(x: float, increment: int = SNAP_INCREMENT) -> float:
    """Round ``x`` up to the nearest ``1 / increment``."""
    return math.ceil(x * increment) / increment


def compute_range(
    df: pd.DataFrame,
    field: str,
    policy: RangePolicy = RangePolicy.PLAIN,
) -> Range:
    """Scan ``df[field]`` once and return its bounds under ``policy``.

    Missing values are skipped.

    Raises
    ------
    EmptyRangeError
        If there is no value to scan.
    """
    if field not in df.columns:
        raise KeyError(f"Unknown field: {field!r}")

    values = pd.to_numeric(df[field], errors="coerce").dropna().tolist()
    if not values:
        raise EmptyRangeError(field)

    lo = hi = float(values[0])
    if policy is RangePolicy.SNAP_EACH_ROW:
        lo, hi = snap(lo), snap(hi)

    for value in values[1:]:
        lo = min(value, lo)
        hi = max(value, hi)
        if policy is RangePolicy.SNAP_EACH_ROW:
            lo, hi = snap(lo), snap(hi)

    if policy is RangePolicy.SNAP_EXTREMA:
        lo, hi = snap(lo), snap(hi)

    return Range(float(lo), float(hi))


def compute_ranges(
    df: pd.DataFrame,
    fields: Iterable[str],
    policy: RangePolicy = RangePolicy.PLAIN,
) -> Dict[str, Range]:
    """Bounds for several fields at once (one scan per field)."""
    return {field: compute_range(df, field, policy) for field in fields}
