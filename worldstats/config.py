"""
Configuration constants for the world statistics dashboard.
"""

import os
from pathlib import Path
from typing import Dict, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
REPO_ROOT: Path = Path(__file__).resolve().parent.parent

# Bundled dataset; ``WORLDSTATS_DATA_PATH`` points the app at another file.
DEFAULT_DATA_PATH: Path = REPO_ROOT / "data" / "dataEveryYear.csv"

REQUIRED_COLUMNS: List[str] = [
    "location",
    "time",
    "pop_mlns",
    "fertility_rate",
    "life_expectancy",
]
NUMERIC_COLUMNS: List[str] = ["pop_mlns", "fertility_rate", "life_expectancy"]

YEAR_FORMAT: str = "%Y"

# Population is stored in millions; tooltips show persons.
POPULATION_MULTIPLIER: int = 1_000_000


def resolve_data_path() -> Path:
    """Return the CSV path, honouring the ``WORLDSTATS_DATA_PATH`` override."""
    env = os.getenv("WORLDSTATS_DATA_PATH")
    if env:
        return Path(env).expanduser().resolve()
    return DEFAULT_DATA_PATH


# ======================================================
#  SELECTION SENTINELS
# ======================================================
CHOOSE_SENTINEL: str = "Choose..."
ALL_SENTINEL: str = "All"

# ======================================================
#  CHART LAYOUT
# ======================================================
# Margins are (top, left, bottom, right) in pixels.
MAIN_MARGIN: Dict[str, int] = {"top": 50, "left": 70, "bottom": 20, "right": 10}
MAIN_WIDTH: int = 960 - MAIN_MARGIN["left"] - MAIN_MARGIN["right"]
MAIN_HEIGHT: int = 500 - MAIN_MARGIN["top"] - MAIN_MARGIN["bottom"]

TOOLTIP_MARGIN: Dict[str, int] = {"top": 50, "left": 70, "bottom": 20, "right": 10}
TOOLTIP_WIDTH: int = 480 - TOOLTIP_MARGIN["left"] - TOOLTIP_MARGIN["right"]
TOOLTIP_HEIGHT: int = 300 - TOOLTIP_MARGIN["top"] - TOOLTIP_MARGIN["bottom"]

AXIS_TICKS: int = 5
SNAP_INCREMENT: int = 20

# Radius range (px) for population-sized marks.
SIZE_RANGE: Tuple[float, float] = (3.0, 20.0)
LINE_MARKER_RADIUS: float = 4.0

MARK_COLOR: str = "steelblue"
FILLED_MARK_OPACITY: float = 0.8
GRID_COLOR: str = "#e6ecf5"

# ======================================================
#  FIELDS PER VIEW
# ======================================================
COUNTRY_VIEW_FIELDS: Tuple[str, str] = ("time", "pop_mlns")
YEAR_VIEW_FIELDS: Tuple[str, str, str] = (
    "fertility_rate",
    "life_expectancy",
    "pop_mlns",
)

FIELD_LABELS: Dict[str, str] = {
    "time": "Time (Years)",
    "pop_mlns": "Population (millions)",
    "fertility_rate": "Fertility Rate",
    "life_expectancy": "Life Expectancy",
}

TOOLTIP_TITLE: str = "World Life Expectancy and Fertility Rate in {year}"

NO_DATA_MESSAGE: str = "No data for this selection"
