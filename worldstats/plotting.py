"""Chart rendering onto plotly figures.

``render`` is the single drawing routine: it takes an explicit figure
(the drawing surface), the rows, two scales and the fields to plot, and
adds axes, gridlines, axis labels and one mark per row.  The
``create_*`` builders run the whole pipeline (filter -> range -> scale ->
render) for each of the dashboard's charts.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union

import pandas as pd
import plotly.graph_objects as go

from .config import (
    AXIS_TICKS,
    COUNTRY_VIEW_FIELDS,
    FIELD_LABELS,
    FILLED_MARK_OPACITY,
    GRID_COLOR,
    LINE_MARKER_RADIUS,
    MAIN_HEIGHT,
    MAIN_MARGIN,
    MAIN_WIDTH,
    MARK_COLOR,
    POPULATION_MULTIPLIER,
    SIZE_RANGE,
    TOOLTIP_HEIGHT,
    TOOLTIP_MARGIN,
    TOOLTIP_TITLE,
    TOOLTIP_WIDTH,
    YEAR_VIEW_FIELDS,
)
from .errors import EmptyRangeError
from .filters import filter_by_field
from .ranges import Range, RangePolicy, compute_range, compute_ranges
from .scales import LinearScale, TimeScale, linear_scale, parse_year, time_scale

Scale = Union[LinearScale, TimeScale]
HoverText = Callable[[pd.Series], str]


# ============================================================
# Helper functions
# ============================================================


def number_with_commas(x: Union[int, float]) -> str:
    """``1234567`` -> ``"1,234,567"``; floats are rounded to whole units."""
    return f"{int(round(x)):,}"


def population_text(pop_mlns: float) -> str:
    return number_with_commas(pop_mlns * POPULATION_MULTIPLIER)


def default_hover_text(row: pd.Series) -> str:
    return (
        f"Country: {row['location']}<br>"
        f"Year: {row['time']}<br>"
        f"Population: {population_text(row['pop_mlns'])}"
    )


def _axis_values(df: pd.DataFrame, field: str, scale: Scale) -> List:
    if isinstance(scale, TimeScale):
        return [parse_year(v) for v in df[field]]
    return df[field].astype(float).tolist()


def _axis_range(scale: Scale) -> List:
    d0, d1 = scale.domain
    if d0 != d1:
        return [d0, d1]
    # Symmetric padding keeps a lone value in the middle, as the scale does.
    pad = pd.Timedelta(days=183) if isinstance(scale, TimeScale) else 0.5
    return [d0 - pad, d1 + pad]


def _axis_layout(scale: Scale, title: str) -> Dict:
    ticks = scale.ticks(AXIS_TICKS)
    layout = dict(
        title_text=title,
        range=_axis_range(scale),
        tickmode="array",
        tickvals=ticks,
        showgrid=True,
        gridcolor=GRID_COLOR,
        showline=True,
        linecolor="black",
        ticks="outside",
        zeroline=False,
    )
    if isinstance(scale, TimeScale):
        layout["type"] = "date"
        layout["ticktext"] = [str(t.year) for t in ticks]
    else:
        layout["type"] = "linear"
    return layout


def _surface_layout(x_scale: Scale, y_scale: Scale, margin: Dict[str, int]) -> Dict:
    """Figure size and margins so the plot area spans the scales' pixel ranges."""
    x0, x1 = sorted(x_scale.output_range)
    y0, y1 = sorted(y_scale.output_range)
    width = int(x1 + x0 + margin["right"])
    height = int(y1 + y0 + margin["bottom"])
    return dict(
        width=width,
        height=height,
        margin=dict(l=int(x0), r=int(width - x1), t=int(y0), b=int(height - y1)),
    )


def size_scale(df: pd.DataFrame, size_field: str) -> LinearScale:
    """Radius scale mapping the extent of ``size_field`` to ``SIZE_RANGE``."""
    extent = compute_range(df, size_field, RangePolicy.PLAIN)
    return linear_scale(extent.as_tuple(), SIZE_RANGE)


# ============================================================
# Main rendering function
# ============================================================


def render(
    surface: go.Figure,
    dataset: pd.DataFrame,
    x_scale: Scale,
    y_scale: Scale,
    x_field: str,
    y_field: str,
    size_field: Optional[str] = None,
    *,
    hover_text: Optional[HoverText] = None,
    margin: Dict[str, int] = MAIN_MARGIN,
) -> None:
    """
    Draw axes, gridlines, labels and marks for ``dataset`` onto ``surface``.

    Parameters
    ----------
    surface : go.Figure
        Figure to draw into.  It is mutated in place.
    dataset : pd.DataFrame
        Typed rows to plot, one mark per row.
    x_scale, y_scale : LinearScale | TimeScale
        Domain-to-pixel scales.  Axis ranges, ticks and gridlines are
        taken from them.
    x_field, y_field : str
        Columns plotted on each axis.
    size_field : str | None, default None
        When given, marks are filled circles whose radius is scaled from
        this column to ``SIZE_RANGE`` (cross-sectional mode).  Otherwise
        rows are connected by a line per location with unfilled circles
        (time-series mode).
    hover_text : callable | None
        Builds the tooltip text for a row; defaults to country, year and
        population with thousands separators.
    margin : dict, default MAIN_MARGIN
        Right and bottom padding around the plot area; left and top come
        from the scales' pixel ranges.

    Raises
    ------
    EmptyRangeError
        In cross-sectional mode when ``dataset`` is empty.
    """
    describe = hover_text or default_hover_text

    # ------------------------------------------------------------------
    # 1. Axes and gridlines
    # ------------------------------------------------------------------
    surface.update_layout(
        template="plotly_white",
        plot_bgcolor="white",
        showlegend=False,
        hovermode="closest",
        **_surface_layout(x_scale, y_scale, margin),
    )
    surface.update_xaxes(**_axis_layout(x_scale, FIELD_LABELS.get(x_field, x_field)))
    surface.update_yaxes(**_axis_layout(y_scale, FIELD_LABELS.get(y_field, y_field)))

    if dataset.empty:
        if size_field is not None:
            raise EmptyRangeError(size_field)
        return

    # ------------------------------------------------------------------
    # 2. Marks
    # ------------------------------------------------------------------
    if size_field is None:
        for location, sub in dataset.groupby("location", sort=False):
            surface.add_trace(
                go.Scatter(
                    x=_axis_values(sub, x_field, x_scale),
                    y=_axis_values(sub, y_field, y_scale),
                    mode="lines+markers",
                    name=str(location),
                    line=dict(width=2, color=MARK_COLOR),
                    marker=dict(
                        symbol="circle-open",
                        size=2 * LINE_MARKER_RADIUS,
                        color=MARK_COLOR,
                        line=dict(width=2),
                    ),
                    text=[describe(row) for _, row in sub.iterrows()],
                    customdata=sub[["location", "time"]].values.tolist(),
                    hovertemplate="%{text}<extra></extra>",
                )
            )
        return

    radius = size_scale(dataset, size_field)
    surface.add_trace(
        go.Scatter(
            x=_axis_values(dataset, x_field, x_scale),
            y=_axis_values(dataset, y_field, y_scale),
            mode="markers",
            name=FIELD_LABELS.get(size_field, size_field),
            marker=dict(
                size=[2 * radius(v) for v in dataset[size_field]],
                sizemode="diameter",
                color=MARK_COLOR,
                opacity=FILLED_MARK_OPACITY,
            ),
            text=[describe(row) for _, row in dataset.iterrows()],
            customdata=dataset[["location", "time"]].values.tolist(),
            hovertemplate="%{text}<extra></extra>",
        )
    )


# ============================================================
# Chart builders
# ============================================================


def _pixel_ranges(width: int, height: int, margin: Dict[str, int]):
    return (margin["left"], width), (height, margin["top"])


def create_country_figure(df: pd.DataFrame, country: str) -> go.Figure:
    """Population over time for ``country`` (``"All"`` plots every row).

    Raises
    ------
    EmptyRangeError
        If no rows match the country.
    """
    x_field, y_field = COUNTRY_VIEW_FIELDS
    rows = filter_by_field(df, "location", country)
    y_extent = compute_range(rows, y_field, RangePolicy.PLAIN)
    years = compute_range(rows, x_field, RangePolicy.PLAIN)

    x_px, y_px = _pixel_ranges(MAIN_WIDTH, MAIN_HEIGHT, MAIN_MARGIN)
    x_scale = time_scale(
        (parse_year(int(years.min)), parse_year(int(years.max))), x_px
    )
    y_scale = linear_scale(y_extent.as_tuple(), y_px, nice=True)

    fig = go.Figure()
    render(fig, rows, x_scale, y_scale, x_field, y_field)
    fig.update_layout(title_text=f"Population of {country}", title_x=0.5)
    return fig


def year_view_ranges(df: pd.DataFrame) -> Dict[str, Range]:
    """Axis bounds for the year view, shared by every year."""
    x_field, y_field, _ = YEAR_VIEW_FIELDS
    return compute_ranges(df, (x_field, y_field), RangePolicy.SNAP_EACH_ROW)


def create_year_figure(
    df: pd.DataFrame, year, ranges: Optional[Dict[str, Range]] = None
) -> go.Figure:
    """Fertility vs. life expectancy for ``year``, sized by population.

    Axis bounds come from the whole of ``df`` (or ``ranges``) so they do
    not move while stepping between years.

    Raises
    ------
    EmptyRangeError
        If no rows fall in ``year``.
    """
    x_field, y_field, z_field = YEAR_VIEW_FIELDS
    bounds = ranges if ranges is not None else year_view_ranges(df)
    rows = filter_by_field(df, "time", year)
    if rows.empty:
        raise EmptyRangeError("time")

    x_px, y_px = _pixel_ranges(MAIN_WIDTH, MAIN_HEIGHT, MAIN_MARGIN)
    x_scale = linear_scale(bounds[x_field].as_tuple(), x_px, nice=True)
    y_scale = linear_scale(bounds[y_field].as_tuple(), y_px, nice=True)

    fig = go.Figure()
    render(fig, rows, x_scale, y_scale, x_field, y_field, z_field)
    fig.update_layout(
        title_text=f"Life Expectancy and Fertility Rate in {year}", title_x=0.5
    )
    return fig


def create_tooltip_figure(df: pd.DataFrame, year) -> go.Figure:
    """Secondary chart shown while hovering a point of the country view."""
    x_field, y_field, z_field = YEAR_VIEW_FIELDS
    rows = filter_by_field(df, "time", year)
    bounds = compute_ranges(rows, (x_field, y_field), RangePolicy.SNAP_EACH_ROW)

    x_px, y_px = _pixel_ranges(TOOLTIP_WIDTH, TOOLTIP_HEIGHT, TOOLTIP_MARGIN)
    x_scale = linear_scale(bounds[x_field].as_tuple(), x_px, nice=True)
    y_scale = linear_scale(bounds[y_field].as_tuple(), y_px, nice=True)

    fig = go.Figure()
    render(fig, rows, x_scale, y_scale, x_field, y_field, z_field, margin=TOOLTIP_MARGIN)
    fig.update_layout(
        title_text=TOOLTIP_TITLE.format(year=year),
        title_x=0.5,
        font=dict(size=10),
    )
    return fig
