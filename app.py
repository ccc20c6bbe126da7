from shiny import reactive
from shiny.express import input, render, ui
from shinywidgets import render_plotly

# Import organized modules
from worldstats.config import CHOOSE_SENTINEL
from worldstats.controller import ChartController

# ======================================================
#  REACTIVE STATE
# ======================================================
# One controller per session; the dataset is re-read on every redraw.
controller = ChartController()

COUNTRY_OPTIONS = controller.populate_options("location")
YEAR_OPTIONS = controller.populate_options("time")

country_figure = reactive.value(None)
country_message = reactive.value("")
year_figure = reactive.value(None)
year_message = reactive.value("")
tooltip_figure = reactive.value(None)
hovered_year = reactive.value(None)


@reactive.effect
@reactive.event(input.country)
async def _redraw_country():
    # Drop the old chart before the reload finishes.
    country_figure.set(None)
    tooltip_figure.set(None)
    result = await controller.select_country_async(input.country())
    if result.stale:
        return
    country_figure.set(result.figure)
    country_message.set(result.message or "")


@reactive.effect
@reactive.event(input.year)
async def _redraw_year():
    year_figure.set(None)
    result = await controller.select_year_async(input.year())
    if result.stale:
        return
    year_figure.set(result.figure)
    year_message.set(result.message or "")


@reactive.effect
@reactive.event(input.prev_year)
def _step_previous():
    controller.year_stepper.select(input.year())
    ui.update_select("year", selected=controller.year_stepper.previous())


@reactive.effect
@reactive.event(input.next_year)
def _step_next():
    controller.year_stepper.select(input.year())
    ui.update_select("year", selected=controller.year_stepper.next())


@reactive.effect
@reactive.event(hovered_year)
async def _redraw_tooltip():
    year = hovered_year.get()
    if year is None:
        controller.unhover()
        tooltip_figure.set(None)
        return
    result = await controller.hover_async(year)
    if not result.stale:
        tooltip_figure.set(result.figure)


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="World Population, Fertility and Life Expectancy",
    fillable=False,
    fillable_mobile=True,
    full_width=True,
    id="page",
    lang="en",
)

with ui.navset_tab(id="views"):
    with ui.nav_panel("By country"):
        with ui.layout_columns(col_widths=(3, 9)):
            with ui.div():
                ui.input_select(
                    "country", "Country", COUNTRY_OPTIONS, selected=CHOOSE_SENTINEL
                )

                @render.text
                def country_status():
                    return country_message.get()

            with ui.div():

                @render_plotly
                def country_plot():
                    return country_figure.get()

                @render_plotly
                def tooltip_plot():
                    return tooltip_figure.get()

    with ui.nav_panel("By year"):
        with ui.layout_columns(col_widths=(3, 9)):
            with ui.div():
                ui.input_select("year", "Year", YEAR_OPTIONS, selected=CHOOSE_SENTINEL)
                ui.input_action_button("prev_year", "Previous", class_="me-2")
                ui.input_action_button("next_year", "Next")

                @render.text
                def year_status():
                    return year_message.get()

            with ui.div():

                @render_plotly
                def year_plot():
                    return year_figure.get()


# ======================================================
#  HOVER WIRING
# ======================================================
def _on_point_hover(trace, points, state):
    if not points.point_inds:
        return
    _location, year = trace.customdata[points.point_inds[0]]
    hovered_year.set(str(year))


def _on_point_unhover(trace, points, state):
    hovered_year.set(None)


@reactive.effect
def _attach_hover_handlers():
    widget = country_plot.widget
    if widget is None:
        return
    for trace in widget.data:
        trace.on_hover(_on_point_hover)
        trace.on_unhover(_on_point_unhover)
