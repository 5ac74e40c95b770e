from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Set, Tuple

import numpy as np
from loguru import logger

from .chart_host import ChartHost, Extent, PairHandles, Point
from .viewport import ChartKind, ViewportModel, ViewportState


@dataclass(frozen=True)
class ChartRef:
    """Identifies one chart: its kind and the pair it belongs to."""

    kind: ChartKind
    index: int


def _contains(extent: Extent, point: Point) -> bool:
    x, y, w, h = extent
    return x <= point[0] <= x + w and y <= point[1] <= y + h


class GestureController:
    """
    Turns wheel, click and drag-box gestures into viewport updates.

    Gestures carry no state from one to the next. A drag is captured as a
    press followed by a release, with the box drawn by the host as the
    pointer moves in between. The chart pressed on decides which pair's
    Y window the box sets, while the X window is shared by all pairs.
    """

    DEFAULT_WHEEL_RATIO = 0.2

    def __init__(
        self,
        model: ViewportModel,
        host: ChartHost,
        handles: Sequence[PairHandles],
        wheel_ratio: float = DEFAULT_WHEEL_RATIO,
        invert_wheel: bool = False,
    ):
        """
        Initialise the controller.

        Parameters
        ----------
        model : ViewportModel
            Model receiving the updates.
        host : ChartHost
            Host used for hit-testing and coordinate conversion.
        handles : Sequence[PairHandles]
            Chart handles, one entry per pair, in pair order.
        wheel_ratio : float, default=0.2
            Fraction of the distance to the pointer each wheel step moves the
            window ends by.
        invert_wheel : bool, default=False
            By default scrolling up (away from the user) zooms in. True swaps
            the directions, for hosts using "natural" scrolling.

        Raises
        ------
        ValueError
            If ``wheel_ratio`` is not in (0, 1) or the handle count does not
            match the model's pair count.
        """
        if not 0 < wheel_ratio < 1:
            raise ValueError(f"wheel_ratio must be between 0 and 1, got {wheel_ratio}.")
        if len(handles) != model.num_pairs:
            raise ValueError(
                f"Got {len(handles)} chart pairs for a model of {model.num_pairs} pairs."
            )
        self.model = model
        self.host = host
        self.handles: List[PairHandles] = list(handles)
        self.wheel_ratio = wheel_ratio
        self.invert_wheel = invert_wheel

        self._zoom_input_enabled: Set[int] = set()
        self._drag_origin: Optional[Tuple[ChartRef, Point]] = None

    def chart_handle(self, ref: ChartRef) -> Any:
        pair = self.handles[ref.index]
        return pair.overview if ref.kind is ChartKind.OVERVIEW else pair.zoom

    def find_chart_under_pointer(self, canvas_point: Point) -> Optional[ChartRef]:
        """
        Find the chart whose screen extent contains ``canvas_point``.

        Overview charts are scanned before zoom charts, so an overview chart
        wins where extents overlap. Returns None when over no chart.
        """
        for i, pair in enumerate(self.handles):
            if _contains(self.host.chart_extent(pair.overview), canvas_point):
                return ChartRef(ChartKind.OVERVIEW, i)
        for i, pair in enumerate(self.handles):
            if _contains(self.host.chart_extent(pair.zoom), canvas_point):
                return ChartRef(ChartKind.ZOOM, i)
        return None

    def enable_zoom_chart_input(self, pair_index: int) -> None:
        """Let clicks and drags on a zoom chart steer the viewport too."""
        if pair_index < 0 or pair_index >= len(self.handles):
            raise ValueError(
                f"Invalid pair index: {pair_index}. Must be between 0 and {len(self.handles) - 1}."
            )
        self._zoom_input_enabled.add(pair_index)
        logger.debug(f"Mouse input enabled on zoom chart {pair_index}")

    def accepts_press(self, ref: ChartRef) -> bool:
        return ref.kind is ChartKind.OVERVIEW or ref.index in self._zoom_input_enabled

    # -- wheel ---------------------------------------------------------------

    def on_wheel(self, step: float, canvas_point: Point) -> Optional[ViewportState]:
        """Zoom by one wheel step over whichever chart is under the pointer."""
        if step == 0 or not np.isfinite(step):
            return None
        target = self.find_chart_under_pointer(canvas_point)
        if target is None:
            logger.debug(f"Wheel at {canvas_point} is not over any chart")
            return None

        k = self.wheel_ratio if step > 0 else -self.wheel_ratio
        if self.invert_wheel:
            k = -k
        pointer_x, pointer_y = self.host.to_data(self.chart_handle(target), canvas_point)
        logger.debug(
            f"Wheel over {target.kind.value} chart {target.index}: k={k}, pointer=({pointer_x:.6g}, {pointer_y:.6g})"
        )
        return self.model.wheel_zoom_at(target.kind, target.index, pointer_x, pointer_y, k)

    # -- click / drag --------------------------------------------------------

    @property
    def drag_pending(self) -> bool:
        return self._drag_origin is not None

    def on_press(self, ref: ChartRef, canvas_point: Point) -> bool:
        """
        Start a drag on a chart. Returns False if the chart ignores mouse input.

        A press while another drag is pending restarts the drag from here.
        """
        if not self.accepts_press(ref):
            return False
        if self._drag_origin is not None:
            logger.debug("Press while a drag is pending, restarting drag")
            self.host.hide_drag_box()
        point = self.host.to_data(self.chart_handle(ref), canvas_point)
        self._drag_origin = (ref, point)
        return True

    def on_motion(self, canvas_point: Point) -> None:
        """Show the box from the press position to the pointer while dragging."""
        if self._drag_origin is None:
            return
        ref, p1 = self._drag_origin
        p2 = self.host.to_data(self.chart_handle(ref), canvas_point)
        if not np.all(np.isfinite(p2)):
            return
        self.host.show_drag_box(self.chart_handle(ref), p1, p2)

    def on_release(self, canvas_point: Point) -> Optional[ViewportState]:
        """Finish a pending drag, measuring the release in the pressed chart."""
        if self._drag_origin is None:
            return None
        ref, p1 = self._drag_origin
        self._drag_origin = None
        self.host.hide_drag_box()
        p2 = self.host.to_data(self.chart_handle(ref), canvas_point)
        return self.on_drag(ref, p1, p2)

    def on_drag(self, ref: ChartRef, p1: Point, p2: Point) -> Optional[ViewportState]:
        """
        Apply a complete click or drag-box gesture given in data coordinates.

        Equal corners are a click: the X window is recentred on the click.
        Otherwise the box sets the shared X window and the Y window of the
        pair owning ``ref``. A side of zero size leaves that window as it is.
        """
        if tuple(p1) == tuple(p2):
            logger.debug(f"Click on {ref.kind.value} chart {ref.index} at x={p1[0]:.6g}")
            return self.model.center_on(p1[0])

        x_lo, x_hi = sorted((p1[0], p2[0]))
        y_lo, y_hi = sorted((p1[1], p2[1]))
        logger.debug(
            f"Drag box on {ref.kind.value} chart {ref.index}: x=({x_lo:.6g}, {x_hi:.6g}), y=({y_lo:.6g}, {y_hi:.6g})"
        )
        if x_lo == x_hi:
            return self.model.set_y_zoom(ref.index, (y_lo, y_hi))
        if y_lo == y_hi:
            return self.model.set_x_zoom(x_lo, x_hi)
        return self.model.zoom_to_range(ref.index, (x_lo, x_hi), (y_lo, y_hi))
