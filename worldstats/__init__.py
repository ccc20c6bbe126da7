"""worldstats package initializer.

This package contains the data pipeline behind the world statistics
dashboard: CSV loading, row filtering, range and scale computation,
plotly chart rendering and the selection controller used by the Shiny
application.  See individual module docstrings for details.
"""
