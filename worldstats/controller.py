"""Selection handling for the dashboard.

The controller turns UI events (a country or year chosen, previous/next
stepping, hovering a point) into redraws.  Every redraw:

1. clears the surface it targets,
2. reloads the dataset (no caching),
3. filters, computes ranges and scales, and renders a fresh figure.

Each surface is a :class:`ChartSlot` that numbers its redraw requests.
A load that completes after a newer request was issued for the same
slot is discarded, so a slow first load can never paint over the result
of a later selection.

Errors derived from :class:`~worldstats.errors.WorldStatsError` end the
current redraw only: the slot is left empty with a status message and
the next selection is handled normally.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from .config import ALL_SENTINEL, CHOOSE_SENTINEL, NO_DATA_MESSAGE
from .data_source import load_dataset, load_dataset_async
from .errors import EmptyRangeError, LoadError, WorldStatsError
from .filters import distinct_values
from .plotting import create_country_figure, create_tooltip_figure, create_year_figure

logger = logging.getLogger(__name__)

Loader = Callable[[Optional[Path]], pd.DataFrame]
AsyncLoader = Callable[[Optional[Path]], Awaitable[pd.DataFrame]]
Builder = Callable[[pd.DataFrame, Any], go.Figure]


@dataclass
class RedrawResult:
    request_id: int
    figure: Optional[go.Figure] = None
    message: Optional[str] = None
    stale: bool = False


def _error_message(exc: WorldStatsError) -> str:
    if isinstance(exc, EmptyRangeError):
        return NO_DATA_MESSAGE
    if isinstance(exc, LoadError):
        return f"Could not load data: {exc}"
    return str(exc)


class ChartSlot:
    """One drawing surface and the id of the newest redraw aimed at it."""

    def __init__(self, name: str):
        self.name = name
        self.figure: Optional[go.Figure] = None
        self.message: Optional[str] = None
        self._latest = 0

    def begin(self) -> int:
        """Start a redraw: clear the surface and issue a new request id."""
        self._latest += 1
        self.figure = None
        self.message = None
        return self._latest

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest

    def stale(self, request_id: int) -> RedrawResult:
        logger.debug(
            "Discarding %s redraw %d; superseded by %d",
            self.name,
            request_id,
            self._latest,
        )
        return RedrawResult(request_id, stale=True)

    def idle(self, request_id: int) -> RedrawResult:
        return RedrawResult(request_id)

    def commit(self, request_id: int, figure: go.Figure) -> RedrawResult:
        if not self.is_current(request_id):
            return self.stale(request_id)
        self.figure = figure
        return RedrawResult(request_id, figure=figure)

    def fail(self, request_id: int, exc: WorldStatsError) -> RedrawResult:
        if not self.is_current(request_id):
            return self.stale(request_id)
        logger.warning("%s redraw %d failed: %s", self.name, request_id, exc)
        self.figure = None
        self.message = _error_message(exc)
        return RedrawResult(request_id, message=self.message)


class OptionStepper:
    """Bounded previous/next navigation over a list of options."""

    def __init__(self, options: Sequence[str], index: int = 0):
        if not options:
            raise ValueError("OptionStepper needs at least one option.")
        self.options: List[str] = list(options)
        self.index = min(max(index, 0), len(self.options) - 1)

    @property
    def selected(self) -> str:
        return self.options[self.index]

    def select(self, value: str) -> None:
        self.index = self.options.index(value)

    def previous(self) -> str:
        if self.index > 0:
            self.index -= 1
        return self.selected

    def next(self) -> str:
        if self.index < len(self.options) - 1:
            self.index += 1
        return self.selected


class ChartController:
    """
    Owns the current selections and the three chart surfaces.

    Parameters
    ----------
    data_path : Path | None
        CSV to read; ``None`` uses the configured default.
    loader : callable, default :func:`~worldstats.data_source.load_dataset`
        Synchronous dataset loader.
    async_loader : callable | None
        Awaitable loader used by the ``*_async`` methods.  Defaults to
        :func:`~worldstats.data_source.load_dataset_async`, or to running a
        custom ``loader`` in a worker thread.
    """

    def __init__(
        self,
        data_path: Optional[Path] = None,
        *,
        loader: Loader = load_dataset,
        async_loader: Optional[AsyncLoader] = None,
    ):
        self.data_path = data_path
        self._loader = loader
        if async_loader is None:
            async_loader = (
                load_dataset_async
                if loader is load_dataset
                else lambda path: asyncio.to_thread(loader, path)
            )
        self._async_loader = async_loader

        self.country: str = CHOOSE_SENTINEL
        self.year: str = CHOOSE_SENTINEL
        self.hovered_year: Optional[str] = None
        self.year_stepper = OptionStepper([CHOOSE_SENTINEL])

        self.country_chart = ChartSlot("country")
        self.year_chart = ChartSlot("year")
        self.tooltip_chart = ChartSlot("tooltip")
        self.status: Optional[str] = None

    # ------------------------------------------------------------------
    # Option population
    # ------------------------------------------------------------------

    def populate_options(self, field: str) -> List[str]:
        """Option list for a select control: sentinel first, then values.

        The country control also offers ``"All"``.  Year options also
        reset the previous/next stepper.  On a load error only the
        sentinel is returned.
        """
        try:
            df = self._loader(self.data_path)
        except WorldStatsError as exc:
            logger.warning("Could not populate %s options: %s", field, exc)
            self.status = _error_message(exc)
            return [CHOOSE_SENTINEL]

        options = [CHOOSE_SENTINEL]
        if field == "location":
            options.append(ALL_SENTINEL)
        options.extend(str(v) for v in distinct_values(df, field))

        if field == "time":
            self.year_stepper = OptionStepper(options)
        return options

    # ------------------------------------------------------------------
    # Redraw plumbing
    # ------------------------------------------------------------------

    def _redraw(self, slot: ChartSlot, value: Any, build: Builder) -> RedrawResult:
        request_id = slot.begin()
        if value == CHOOSE_SENTINEL or value is None:
            return slot.idle(request_id)
        try:
            df = self._loader(self.data_path)
            figure = build(df, value)
        except WorldStatsError as exc:
            return slot.fail(request_id, exc)
        return slot.commit(request_id, figure)

    async def _redraw_async(
        self, slot: ChartSlot, value: Any, build: Builder
    ) -> RedrawResult:
        request_id = slot.begin()
        if value == CHOOSE_SENTINEL or value is None:
            return slot.idle(request_id)
        try:
            df = await self._async_loader(self.data_path)
        except WorldStatsError as exc:
            return slot.fail(request_id, exc)
        if not slot.is_current(request_id):
            return slot.stale(request_id)
        try:
            figure = build(df, value)
        except WorldStatsError as exc:
            return slot.fail(request_id, exc)
        return slot.commit(request_id, figure)

    def _sync_stepper(self, value: str) -> None:
        if value in self.year_stepper.options:
            self.year_stepper.select(value)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def select_country(self, value: str) -> RedrawResult:
        self.country = value
        self.unhover()
        return self._redraw(self.country_chart, value, create_country_figure)

    def select_year(self, value: str) -> RedrawResult:
        self.year = value
        self._sync_stepper(value)
        return self._redraw(self.year_chart, value, create_year_figure)

    def previous_year(self) -> RedrawResult:
        return self.select_year(self.year_stepper.previous())

    def next_year(self) -> RedrawResult:
        return self.select_year(self.year_stepper.next())

    def hover(self, year: Any) -> RedrawResult:
        self.hovered_year = str(year)
        return self._redraw(self.tooltip_chart, year, create_tooltip_figure)

    def unhover(self) -> None:
        self.hovered_year = None
        self.tooltip_chart.begin()

    async def select_country_async(self, value: str) -> RedrawResult:
        self.country = value
        self.unhover()
        return await self._redraw_async(self.country_chart, value, create_country_figure)

    async def select_year_async(self, value: str) -> RedrawResult:
        self.year = value
        self._sync_stepper(value)
        return await self._redraw_async(self.year_chart, value, create_year_figure)

    async def hover_async(self, year: Any) -> RedrawResult:
        self.hovered_year = str(year)
        return await self._redraw_async(self.tooltip_chart, year, create_tooltip_figure)
