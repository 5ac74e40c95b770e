"""
Zoom synchronisation core for multizoom.

Range arithmetic, the shared viewport model, gesture handling and the
projection of viewport state onto the charts.
"""

from multizoom.zoomer.chart_host import ChartHost, MatplotlibChartHost, PairHandles
from multizoom.zoomer.gestures import ChartRef, GestureController
from multizoom.zoomer.multi_zoomer import MultiZoomer
from multizoom.zoomer.overlay_sync import OverlaySync
from multizoom.zoomer.viewport import ChartKind, ChartPair, ViewportModel, ViewportState

__all__ = [
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
]
