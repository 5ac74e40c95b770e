"""
Figure building for multizoom.

Lays out overview/zoom chart pairs for a set of series and derives the
bounds handed to the zoomer.
"""

from multizoom.viewer.paired_plot import PairedSeriesPlot, configure_logging
from multizoom.viewer.series import SeriesSet

__all__ = [
    "PairedSeriesPlot",
    "SeriesSet",
    "configure_logging",
]
