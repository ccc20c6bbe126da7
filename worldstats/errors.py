"""
Exceptions raised while turning a selection into a chart.
"""


class WorldStatsError(Exception):
    """Base class for errors that abort a single redraw."""


class LoadError(WorldStatsError):
    """The dataset resource is missing, unreadable or malformed."""


class EmptyRangeError(WorldStatsError, ValueError):
    """A min/max was requested over a selection with no rows."""

    def __init__(self, field: str):
        super().__init__(f"No values to compute a range for {field!r}.")
        self.field = field
