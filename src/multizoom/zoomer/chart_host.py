from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

import matplotlib.axes
import matplotlib.figure
from loguru import logger
from matplotlib.backend_bases import MouseButton, MouseEvent
from matplotlib.patches import Rectangle

from .geometry import Interval

Point = Tuple[float, float]
Extent = Tuple[float, float, float, float]
Corners = Tuple[Point, Point, Point, Point]


@dataclass
class PairHandles:
    """Non-owning references to the host objects of one chart pair."""

    overview: Any
    zoom: Any
    overlay: Any = None


class ChartHost(Protocol):
    """
    Everything the zoom core needs from the application's charts.

    Chart and overlay handles are opaque to the core; they are only ever
    passed back to the host that produced them.
    """

    def chart_extent(self, chart: Any) -> Extent:
        """Screen-space ``(x, y, width, height)`` of a chart."""
        ...

    def to_data(self, chart: Any, canvas_point: Point) -> Point:
        """Convert a canvas position into a chart's data coordinates."""
        ...

    def set_x_range(self, chart: Any, x_range: Interval) -> None: ...

    def set_y_range(self, chart: Any, y_range: Interval) -> None: ...

    def create_overlay(self, chart: Any) -> Any: ...

    def remove_overlay(self, overlay: Any) -> None: ...

    def set_overlay_corners(self, overlay: Any, corners: Corners) -> None: ...

    def show_drag_box(self, chart: Any, p1: Point, p2: Point) -> None:
        """Show the box spanned by two data points while a drag is in progress."""
        ...

    def hide_drag_box(self) -> None: ...

    def redraw(self) -> None: ...


class MatplotlibChartHost:
    """
    :class:`ChartHost` backed by matplotlib axes on a single figure.

    Overlays are translucent filled polygons drawn over the overview axes.
    Canvas events are forwarded to the callbacks given to :meth:`connect`
    with positions in display (pixel) coordinates. Limit changes made by
    anything other than this host, such as the navigation toolbar, are
    reported through :meth:`watch_ranges`.
    """

    DEFAULT_OVERLAY_COLOR = "b"
    DEFAULT_OVERLAY_ALPHA = 0.3
    DEFAULT_OVERLAY_ZORDER = 10
    DEFAULT_DRAG_BOX_COLOR = "k"

    def __init__(
        self,
        figure: matplotlib.figure.Figure,
        overlay_color: str = DEFAULT_OVERLAY_COLOR,
        overlay_alpha: float = DEFAULT_OVERLAY_ALPHA,
        overlay_zorder: int = DEFAULT_OVERLAY_ZORDER,
        drag_box_color: str = DEFAULT_DRAG_BOX_COLOR,
    ):
        self.figure = figure
        self.overlay_color = overlay_color
        self.overlay_alpha = overlay_alpha
        self.overlay_zorder = overlay_zorder
        self.drag_box_color = drag_box_color
        self._connection_ids: List[int] = []
        self._range_connections: List[Tuple[matplotlib.axes.Axes, int]] = []
        self._pushing_range = False
        self._drag_box: Optional[Rectangle] = None
        self._toolbar = None
        self._original_home: Optional[Callable] = None

    # -- queries -------------------------------------------------------------

    def chart_extent(self, chart: matplotlib.axes.Axes) -> Extent:
        x, y, w, h = chart.get_window_extent().bounds
        return float(x), float(y), float(w), float(h)

    def to_data(self, chart: matplotlib.axes.Axes, canvas_point: Point) -> Point:
        x, y = chart.transData.inverted().transform(canvas_point)
        return float(x), float(y)

    # -- mutations -----------------------------------------------------------

    def set_x_range(self, chart: matplotlib.axes.Axes, x_range: Interval) -> None:
        self._pushing_range = True
        try:
            chart.set_xlim(x_range[0], x_range[1])
        finally:
            self._pushing_range = False

    def set_y_range(self, chart: matplotlib.axes.Axes, y_range: Interval) -> None:
        self._pushing_range = True
        try:
            chart.set_ylim(y_range[0], y_range[1])
        finally:
            self._pushing_range = False

    def create_overlay(self, chart: matplotlib.axes.Axes):
        # Filled but translucent so the data lines stay visible underneath
        (polygon,) = chart.fill(
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            color=self.overlay_color,
            alpha=self.overlay_alpha,
            zorder=self.overlay_zorder,
            label="_zoom_area",
        )
        return polygon

    def remove_overlay(self, overlay) -> None:
        overlay.remove()

    def set_overlay_corners(self, overlay, corners: Corners) -> None:
        overlay.set_xy(corners)

    def show_drag_box(self, chart: matplotlib.axes.Axes, p1: Point, p2: Point) -> None:
        x0, x1 = sorted((p1[0], p2[0]))
        y0, y1 = sorted((p1[1], p2[1]))
        if self._drag_box is not None and self._drag_box.axes is not chart:
            self.hide_drag_box()
        if self._drag_box is None:
            self._drag_box = Rectangle(
                (x0, y0),
                x1 - x0,
                y1 - y0,
                fill=False,
                edgecolor=self.drag_box_color,
                linestyle="--",
                linewidth=1.0,
                zorder=self.overlay_zorder + 1,
                label="_drag_box",
            )
            chart.add_patch(self._drag_box)
        else:
            self._drag_box.set_bounds(x0, y0, x1 - x0, y1 - y0)
        self.figure.canvas.draw_idle()

    def hide_drag_box(self) -> None:
        if self._drag_box is None:
            return
        self._drag_box.remove()
        self._drag_box = None
        self.figure.canvas.draw_idle()

    def redraw(self) -> None:
        self.figure.canvas.draw_idle()

    # -- events --------------------------------------------------------------

    def _navigation_active(self) -> bool:
        """True while the toolbar's own pan or zoom mode owns the mouse."""
        toolbar = getattr(self.figure.canvas, "toolbar", None)
        return toolbar is not None and getattr(toolbar, "mode", "") != ""

    def connect(
        self,
        on_wheel: Callable[[float, Point], None],
        on_press: Callable[[matplotlib.axes.Axes, Point], None],
        on_release: Callable[[Point], None],
        on_motion: Callable[[Point], None],
    ) -> None:
        """
        Install canvas callbacks forwarding wheel, press, motion and release events.

        Only left-button presses that land inside an axes are forwarded, and
        none while a toolbar navigation mode is active.
        """
        if self._connection_ids:
            logger.warning("Canvas callbacks already connected, reconnecting")
            self._disconnect_canvas()

        def handle_scroll(event: MouseEvent) -> None:
            on_wheel(event.step, (event.x, event.y))

        def handle_press(event: MouseEvent) -> None:
            if event.button != MouseButton.LEFT or event.inaxes is None:
                return
            if self._navigation_active():
                logger.debug("Toolbar navigation active, ignoring press")
                return
            on_press(event.inaxes, (event.x, event.y))

        def handle_motion(event: MouseEvent) -> None:
            on_motion((event.x, event.y))

        def handle_release(event: MouseEvent) -> None:
            if event.button != MouseButton.LEFT:
                return
            on_release((event.x, event.y))

        canvas = self.figure.canvas
        self._connection_ids = [
            canvas.mpl_connect("scroll_event", handle_scroll),
            canvas.mpl_connect("button_press_event", handle_press),
            canvas.mpl_connect("motion_notify_event", handle_motion),
            canvas.mpl_connect("button_release_event", handle_release),
        ]
        logger.debug(f"Connected canvas callbacks: {self._connection_ids}")

    def watch_ranges(
        self,
        charts: Sequence[matplotlib.axes.Axes],
        on_range_changed: Callable[[matplotlib.axes.Axes, Interval, Interval], None],
    ) -> None:
        """
        Report limit changes on ``charts`` that this host did not make itself.

        ``on_range_changed`` receives the axes and its new X and Y limits.
        """
        def handle_limits(ax: matplotlib.axes.Axes) -> None:
            if self._pushing_range:
                return
            on_range_changed(ax, ax.get_xlim(), ax.get_ylim())

        for ax in charts:
            for signal in ("xlim_changed", "ylim_changed"):
                self._range_connections.append((ax, ax.callbacks.connect(signal, handle_limits)))

    def override_home(self, on_home: Callable[[], Any]) -> None:
        """Send the toolbar's Home button (and the ``h`` key) to ``on_home``."""
        toolbar = getattr(self.figure.canvas, "toolbar", None)
        if toolbar is None:
            return

        def custom_home(*args, **kwargs):
            logger.debug("Toolbar home button pressed - restoring the home view")
            on_home()

        self._toolbar = toolbar
        self._original_home = getattr(toolbar, "home", None)
        toolbar.home = custom_home
        self._bind_home_button(toolbar, custom_home)

    @staticmethod
    def _bind_home_button(toolbar, callback: Callable) -> None:
        # Qt and Tk toolbars bind their buttons to the method when built
        actions = getattr(toolbar, "_actions", None)
        if isinstance(actions, dict) and "home" in actions:
            actions["home"].triggered.disconnect()
            actions["home"].triggered.connect(callback)
            logger.debug("Connected home callback to Qt action")
        buttons = getattr(toolbar, "_buttons", None)
        if isinstance(buttons, dict) and "Home" in buttons and hasattr(buttons["Home"], "configure"):
            buttons["Home"].configure(command=callback)
            logger.debug("Connected home callback to Tkinter button")

    def _disconnect_canvas(self) -> None:
        for cid in self._connection_ids:
            self.figure.canvas.mpl_disconnect(cid)
        self._connection_ids = []

    def disconnect(self) -> None:
        """Remove every callback and restore the toolbar's own Home."""
        self._disconnect_canvas()
        for ax, cid in self._range_connections:
            ax.callbacks.disconnect(cid)
        self._range_connections = []
        self.hide_drag_box()
        if self._toolbar is not None and self._original_home is not None:
            self._toolbar.home = self._original_home
            self._bind_home_button(self._toolbar, self._original_home)
        self._toolbar = None
        self._original_home = None
