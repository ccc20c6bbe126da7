"""Domain-to-pixel scales.

A scale is a small immutable object that maps a domain value (a number
or a timestamp) linearly onto a pixel interval.  Scales also know how to
pick "nice" tick positions, which the renderer uses for both the axis
ticks and the background gridlines so the two always line up.

Tick steps follow the usual 1/2/5 x 10^k progression.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

import pandas as pd

from .config import YEAR_FORMAT

# Thresholds between the 1, 2, 5 and 10 step multipliers.
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)

_YEAR_RE = re.compile(r"\d{4}")


# ---------------------------------------------------------------------------
# Tick helpers
# ---------------------------------------------------------------------------


def tick_increment(start: float, stop: float, count: int) -> float:
    """Signed tick increment for roughly ``count`` ticks over [start, stop].

    Positive results are the step itself; negative results ``-n`` mean a
    step of ``1 / n``, which keeps fractional ticks exact.
    """
    step = (stop - start) / max(1, count)
    if step <= 0:
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return float(factor * 10**power)
    return -(10 ** (-power)) / factor


def linear_ticks(start: float, stop: float, count: int) -> List[float]:
    """Evenly spaced round values inside [start, stop]."""
    if start == stop:
        return [float(start)]
    lo, hi = min(start, stop), max(start, stop)
    inc = tick_increment(lo, hi, count)
    if inc > 0:
        first, last = math.ceil(lo / inc), math.floor(hi / inc)
        return [i * inc for i in range(first, last + 1)]
    if inc < 0:
        inv = -inc
        first, last = math.ceil(lo * inv), math.floor(hi * inv)
        return [i / inv for i in range(first, last + 1)]
    return []


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Extend [start, stop] outward to tick-step boundaries."""
    if start == stop:
        return float(start), float(stop)
    previous = None
    for _ in range(10):
        inc = tick_increment(start, stop, count)
        if inc == previous or inc == 0:
            break
        if inc > 0:
            start = math.floor(start / inc) * inc
            stop = math.ceil(stop / inc) * inc
        else:
            start = math.ceil(start * inc) / inc
            stop = math.floor(stop * inc) / inc
        previous = inc
    return float(start), float(stop)


# ---------------------------------------------------------------------------
# Scales
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    output_range: Tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.output_range
        if d0 == d1:
            return (r0 + r1) / 2
        t = (float(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.output_range
        if r0 == r1:
            return (d0 + d1) / 2
        t = (float(pixel) - r0) / (r1 - r0)
        return d0 + t * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)

    def nice(self, count: int = 10) -> "LinearScale":
        return LinearScale(nice_domain(*self.domain, count=count), self.output_range)


@dataclass(frozen=True)
class TimeScale:
    domain: Tuple[pd.Timestamp, pd.Timestamp]
    output_range: Tuple[float, float]

    def __call__(self, value) -> float:
        d0, d1 = self.domain
        r0, r1 = self.output_range
        if d0 == d1:
            return (r0 + r1) / 2
        t = (pd.Timestamp(value) - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> pd.Timestamp:
        d0, d1 = self.domain
        r0, r1 = self.output_range
        if r0 == r1:
            return d0 + (d1 - d0) / 2
        t = (float(pixel) - r0) / (r1 - r0)
        return d0 + (d1 - d0) * t

    def ticks(self, count: int = 10) -> List[pd.Timestamp]:
        """January-first ticks at a whole-year step."""
        d0, d1 = self.domain
        first_year = d0.year if (d0.month, d0.day) == (1, 1) else d0.year + 1
        last_year = d1.year
        if last_year < first_year:
            return []
        step = max(1, int(tick_increment(first_year, last_year, count)))
        start = math.ceil(first_year / step) * step
        return [
            pd.Timestamp(year=year, month=1, day=1)
            for year in range(start, last_year + 1, step)
        ]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def parse_year(value) -> pd.Timestamp:
    """Parse a four-digit year (``"1999"`` or ``1999``) into January 1st."""
    text = str(value).strip()
    if not _YEAR_RE.fullmatch(text):
        raise ValueError(f"Not a four-digit year: {value!r}")
    return pd.Timestamp(datetime.strptime(text, YEAR_FORMAT))


def linear_scale(
    domain: Sequence[float],
    output_range: Sequence[float],
    nice: bool = False,
) -> LinearScale:
    """Build a linear scale; ``nice`` rounds the domain outward first."""
    d0, d1 = (float(v) for v in domain)
    r0, r1 = (float(v) for v in output_range)
    scale = LinearScale((d0, d1), (r0, r1))
    return scale.nice() if nice else scale


def time_scale(domain: Sequence, output_range: Sequence[float]) -> TimeScale:
    """Build a time scale over ``[min_date, max_date]``."""
    d0, d1 = (pd.Timestamp(v) for v in domain)
    r0, r1 = (float(v) for v in output_range)
    return TimeScale((d0, d1), (r0, r1))
