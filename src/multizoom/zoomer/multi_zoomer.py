from typing import Any, Dict, List, Optional, Sequence

import matplotlib.axes
import matplotlib.figure
from loguru import logger

from .chart_host import MatplotlibChartHost, PairHandles, Point
from .geometry import Interval
from .gestures import ChartRef, GestureController
from .overlay_sync import OverlaySync, attach_overlays
from .viewport import ChartKind, ViewportModel, ViewportState


class MultiZoomer:
    """
    Keeps paired overview and zoom charts on one figure in step.

    The figure holds two equally sized sets of charts: overview charts
    showing the whole of each series and zoom charts showing a section of
    them. The X axes of all zoom charts are locked together, while each zoom
    chart has its own Y range. The overview charts never move; translucent
    rectangles drawn over them show where the zoom charts are focused.

    Creating and laying out the axes is left to the caller. Panning and
    zooming is done by:

    - calling :meth:`pan`, :meth:`zoom`, :meth:`zoom_to_range` and friends,
    - the mouse wheel over any chart,
    - clicking or dragging a box on an overview chart (and on zoom charts
      enabled with :meth:`handle_mouse_input`).

    Limits changed elsewhere, by the navigation toolbar or ``set_xlim`` on a
    zoom chart, are taken up by every chart; overview charts snap back to
    their bounds. The toolbar Home button calls :meth:`home`.

    Nothing happens until :meth:`set_limits` has been called with the data
    bounds.
    """

    DEFAULT_WHEEL_RATIO = GestureController.DEFAULT_WHEEL_RATIO
    DEFAULT_OVERLAY_COLOR = MatplotlibChartHost.DEFAULT_OVERLAY_COLOR
    DEFAULT_OVERLAY_ALPHA = MatplotlibChartHost.DEFAULT_OVERLAY_ALPHA

    def __init__(
        self,
        figure: matplotlib.figure.Figure,
        overview_axes: Sequence[matplotlib.axes.Axes],
        zoom_axes: Sequence[matplotlib.axes.Axes],
        wheel_ratio: float = DEFAULT_WHEEL_RATIO,
        invert_wheel: bool = False,
        overlay_color: str = DEFAULT_OVERLAY_COLOR,
        overlay_alpha: float = DEFAULT_OVERLAY_ALPHA,
    ):
        """
        Attach to existing axes and install the canvas callbacks.

        Parameters
        ----------
        figure : matplotlib.figure.Figure
            Figure holding every chart.
        overview_axes : Sequence[matplotlib.axes.Axes]
            Overview charts, one per series.
        zoom_axes : Sequence[matplotlib.axes.Axes]
            Zoom charts, in the same order as ``overview_axes``.
        wheel_ratio : float, default=0.2
            Zoom weight of one wheel step.
        invert_wheel : bool, default=False
            Swap the zoom direction of the wheel.
        overlay_color : str, default="b"
            Fill colour of the zoom area indicators.
        overlay_alpha : float, default=0.3
            Fill alpha of the zoom area indicators.

        Raises
        ------
        ValueError
            If the axes lists are empty or differ in length.
        """
        if len(overview_axes) != len(zoom_axes):
            raise ValueError(
                f"Got {len(overview_axes)} overview charts but {len(zoom_axes)} zoom charts."
            )
        if len(overview_axes) == 0:
            raise ValueError("At least one overview/zoom chart pair is required.")

        self.figure = figure
        self.host = MatplotlibChartHost(figure, overlay_color, overlay_alpha)
        self.handles: List[PairHandles] = [
            PairHandles(overview, zoom) for overview, zoom in zip(overview_axes, zoom_axes)
        ]
        self.model = ViewportModel(len(self.handles))
        self.sync = OverlaySync(self.host, self.handles)
        self.gestures = GestureController(
            self.model, self.host, self.handles, wheel_ratio, invert_wheel
        )

        self._chart_refs: Dict[Any, ChartRef] = {}
        for i, pair in enumerate(self.handles):
            self._chart_refs[pair.zoom] = ChartRef(ChartKind.ZOOM, i)
        for i, pair in enumerate(self.handles):
            self._chart_refs[pair.overview] = ChartRef(ChartKind.OVERVIEW, i)

        self.model.subscribe(self.sync.push)
        self.host.connect(
            self.gestures.on_wheel,
            self._on_press,
            self.gestures.on_release,
            self.gestures.on_motion,
        )
        self.host.watch_ranges(list(self._chart_refs), self._on_range_changed)
        self.host.override_home(self.home)
        logger.info(f"MultiZoomer attached to {self.num_chart_pairs} chart pairs")

    @property
    def num_chart_pairs(self) -> int:
        return len(self.handles)

    @property
    def state(self) -> Optional[ViewportState]:
        return self.model.snapshot()

    @property
    def x_zoom(self) -> Optional[Interval]:
        return self.model.x_zoom

    def y_zoom(self, chart_index: int) -> Optional[Interval]:
        self.model._check_pair_index(chart_index)
        state = self.model.snapshot()
        if state is None:
            return None
        return state.zoom_y[chart_index]

    def _on_press(self, chart: matplotlib.axes.Axes, canvas_point: Point) -> None:
        ref = self._chart_refs.get(chart)
        if ref is None:
            return
        self.gestures.on_press(ref, canvas_point)

    def _on_range_changed(
        self, chart: matplotlib.axes.Axes, x_range: Interval, y_range: Interval
    ) -> None:
        # Limits moved by the toolbar or by user code rather than by the zoomer
        ref = self._chart_refs.get(chart)
        if ref is None or not self.model.has_limits:
            return
        if ref.kind is ChartKind.OVERVIEW:
            logger.debug(f"Overview chart {ref.index} moved externally, restoring its limits")
            self.sync.invalidate()
            self.sync.push(self.model.snapshot())
            return
        logger.debug(f"Zoom chart {ref.index} moved externally to x={x_range}, y={y_range}")
        self.model.zoom_to_range(ref.index, x_range, y_range)

    def create_zoom_area_indicators(self) -> None:
        """
        Draw the rectangles showing the zoom area on every overview chart.

        Call this after plotting the data so the rectangles lie over the
        lines. Any existing rectangles are removed first.
        """
        attach_overlays(self.host, self.handles)
        self.sync.push(self.model.snapshot())

    def set_limits(
        self,
        x_limit: Sequence[float],
        y_limits: Sequence[Sequence[float]],
        x_zoom: Optional[Sequence[float]] = None,
    ) -> ViewportState:
        """
        Set the extent of the overview charts and reset the zoom.

        Parameters
        ----------
        x_limit : Sequence[float]
            ``(x_min, x_max)`` shared by all charts.
        y_limits : Sequence[Sequence[float]]
            ``(y_min, y_max)`` per chart pair.
        x_zoom : Optional[Sequence[float]], default=None
            Initial X window of the zoom charts. Whole domain if None.
        """
        return self.model.set_limits(x_limit, y_limits, x_zoom)

    def pan(self, dx: float) -> Optional[ViewportState]:
        """
        Pan the zoomed section left or right.

        ``dx`` is the distance in window widths: +1 shifts right by the full
        width, -0.5 pans left keeping half of the previous view. Stops at the
        ends of the X limit.
        """
        return self.model.pan(dx)

    def zoom(self, k: float) -> Optional[ViewportState]:
        """Zoom X about the window centre; 2 doubles magnification, 0.5 halves it."""
        return self.model.zoom(k)

    def zoom_to_range(
        self, chart_index: int, x_range: Sequence[float], y_range: Sequence[float]
    ) -> Optional[ViewportState]:
        return self.model.zoom_to_range(chart_index, x_range, y_range)

    def set_x_zoom(self, x_min: float, x_max: float) -> Optional[ViewportState]:
        return self.model.set_x_zoom(x_min, x_max)

    def set_y_zoom(self, chart_index: int, y_range: Sequence[float]) -> Optional[ViewportState]:
        return self.model.set_y_zoom(chart_index, y_range)

    def home(self) -> Optional[ViewportState]:
        return self.model.home()

    def handle_mouse_input(self, chart_index: int) -> None:
        """Give clicks and drags in a zoom chart the same control as in an overview chart."""
        self.gestures.enable_zoom_chart_input(chart_index)

    def disconnect(self) -> None:
        """Remove the canvas callbacks and stop updating the charts."""
        self.host.disconnect()
        self.model.unsubscribe(self.sync.push)
        logger.info("MultiZoomer detached")
