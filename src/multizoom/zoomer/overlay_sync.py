from typing import Any, List, Optional, Sequence

from loguru import logger

from .chart_host import ChartHost, Corners, PairHandles
from .geometry import Interval
from .viewport import ViewportState


def overlay_corners(x_zoom: Interval, y_zoom: Interval) -> Corners:
    """Corners of the viewport box, anticlockwise from the lower left."""
    x0, x1 = x_zoom
    y0, y1 = y_zoom
    return ((x0, y0), (x1, y0), (x1, y1), (x0, y1))


class OverlaySync:
    """
    Projects viewport snapshots onto the charts.

    Every zoom chart gets the shared X window and its pair's Y window, and
    every overlay is reshaped to the same box. Overview charts are only
    touched when the snapshot carries new limits.
    """

    def __init__(self, host: ChartHost, handles: Sequence[PairHandles]):
        self.host = host
        self.handles: List[PairHandles] = list(handles)
        self._limits_generation: Optional[int] = None

    def invalidate(self) -> None:
        """Force the overview ranges to be pushed with the next snapshot."""
        self._limits_generation = None

    def push(self, state: Optional[ViewportState]) -> None:
        if state is None:
            return
        if state.num_pairs != len(self.handles):
            raise ValueError(
                f"Snapshot has {state.num_pairs} pairs but {len(self.handles)} chart pairs are attached."
            )

        if state.limits_generation != self._limits_generation:
            for i, pair in enumerate(self.handles):
                self.host.set_x_range(pair.overview, state.x_bounds)
                self.host.set_y_range(pair.overview, state.overview_bounds[i])
            self._limits_generation = state.limits_generation
            logger.debug(f"Overview ranges pushed (generation {state.limits_generation})")

        for i, pair in enumerate(self.handles):
            self.host.set_x_range(pair.zoom, state.x_zoom)
            self.host.set_y_range(pair.zoom, state.zoom_y[i])
            if pair.overlay is not None:
                self.host.set_overlay_corners(
                    pair.overlay, overlay_corners(state.x_zoom, state.zoom_y[i])
                )
        self.host.redraw()


def attach_overlays(host: ChartHost, handles: Sequence[PairHandles]) -> List[Any]:
    """Replace the overlay on every overview chart, returning the new overlays."""
    overlays = []
    for pair in handles:
        if pair.overlay is not None:
            host.remove_overlay(pair.overlay)
        pair.overlay = host.create_overlay(pair.overview)
        overlays.append(pair.overlay)
    logger.debug(f"Created {len(overlays)} zoom area indicators")
    return overlays
