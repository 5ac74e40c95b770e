"""
multizoom: paired overview and zoom charts with a shared X window

Keeps any number of overview/zoom chart pairs in step: one X window shared by
every zoom chart, an independent Y window per zoom chart, and a rectangle on
each overview chart showing what the zoom charts are looking at.
"""

from multizoom.viewer.paired_plot import PairedSeriesPlot, configure_logging
from multizoom.viewer.series import SeriesSet
from multizoom.zoomer.chart_host import ChartHost, MatplotlibChartHost, PairHandles
from multizoom.zoomer.gestures import ChartRef, GestureController
from multizoom.zoomer.multi_zoomer import MultiZoomer
from multizoom.zoomer.overlay_sync import OverlaySync
from multizoom.zoomer.viewport import ChartKind, ChartPair, ViewportModel, ViewportState

__all__ = [
    # Zoom synchronisation core
    "MultiZoomer",
    "ViewportModel",
    "ViewportState",
    "ChartPair",
    "ChartKind",
    "ChartRef",
    "GestureController",
    "OverlaySync",
    "ChartHost",
    "MatplotlibChartHost",
    "PairHandles",
    # Figure building
    "PairedSeriesPlot",
    "SeriesSet",
    "configure_logging",
]
