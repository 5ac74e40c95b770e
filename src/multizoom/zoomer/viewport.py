import enum
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from . import geometry
from .geometry import Interval


class ChartKind(enum.Enum):
    OVERVIEW = "overview"
    ZOOM = "zoom"


@dataclass
class ChartPair:
    """Numeric state of one overview/zoom chart pair."""

    index: int
    overview_bounds: Interval
    zoom_y: Interval


@dataclass(frozen=True)
class ViewportState:
    """
    Immutable snapshot of the whole viewport, published after every mutation.

    ``limits_generation`` increases each time the fixed bounds are replaced,
    letting observers tell a limits reset from an ordinary pan or zoom.
    """

    x_bounds: Interval
    x_zoom: Interval
    overview_bounds: Tuple[Interval, ...]
    zoom_y: Tuple[Interval, ...]
    limits_generation: int

    @property
    def num_pairs(self) -> int:
        return len(self.zoom_y)


StateCallback = Callable[[ViewportState], None]


def _validated_bounds(bounds: Sequence[float], label: str) -> Interval:
    if len(bounds) != 2:
        raise ValueError(f"{label} must be a (min, max) pair, got {bounds!r}.")
    lo, hi = float(bounds[0]), float(bounds[1])
    if not geometry.is_finite_interval((lo, hi)):
        raise ValueError(f"{label} must be finite, got ({lo}, {hi}).")
    if lo >= hi:
        raise ValueError(f"{label} must satisfy min < max, got ({lo}, {hi}).")
    return lo, hi


class ViewportModel:
    """
    Single source of truth for the shared X window and the per-pair Y windows.

    Holds the fixed data bounds set by :meth:`set_limits` and the current
    zoom windows. Every public mutation clamps its result into the bounds,
    publishes a :class:`ViewportState` to the subscribers and returns it.
    Mutations requested before any limits are set are ignored.
    """

    def __init__(self, num_pairs: int):
        """
        Initialise an empty model.

        Parameters
        ----------
        num_pairs : int
            Number of overview/zoom chart pairs. Fixed for the model's lifetime.

        Raises
        ------
        ValueError
            If ``num_pairs`` is less than one.
        """
        if num_pairs < 1:
            raise ValueError(f"num_pairs must be at least 1, got {num_pairs}.")
        self.num_pairs = num_pairs
        self.pairs: List[ChartPair] = []
        self.x_bounds: Optional[Interval] = None
        self.x_zoom: Optional[Interval] = None

        self._default_x_zoom: Optional[Interval] = None
        self._limits_generation = 0
        self._subscribers: List[StateCallback] = []

    # -- observation ---------------------------------------------------------

    @property
    def has_limits(self) -> bool:
        return self.x_bounds is not None

    def snapshot(self) -> Optional[ViewportState]:
        """Current state, or ``None`` before limits have been set."""
        if not self.has_limits:
            return None
        return ViewportState(
            x_bounds=self.x_bounds,
            x_zoom=self.x_zoom,
            overview_bounds=tuple(p.overview_bounds for p in self.pairs),
            zoom_y=tuple(p.zoom_y for p in self.pairs),
            limits_generation=self._limits_generation,
        )

    def subscribe(self, callback: StateCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: StateCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self) -> ViewportState:
        state = self.snapshot()
        logger.debug(f"Viewport: x_zoom={state.x_zoom}, zoom_y={state.zoom_y}")
        for callback in list(self._subscribers):
            callback(state)
        return state

    def _require_limits(self, operation: str) -> bool:
        if not self.has_limits:
            logger.warning(f"Limits not set yet, ignoring {operation}.")
            return False
        return True

    def _check_pair_index(self, pair_index: int) -> None:
        if pair_index < 0 or pair_index >= self.num_pairs:
            raise ValueError(
                f"Invalid pair index: {pair_index}. Must be between 0 and {self.num_pairs - 1}."
            )

    # -- limits --------------------------------------------------------------

    def set_limits(
        self,
        x_bounds: Sequence[float],
        per_pair_y_bounds: Sequence[Sequence[float]],
        initial_x_zoom: Optional[Sequence[float]] = None,
    ) -> ViewportState:
        """
        Replace the fixed bounds and reset both zoom windows.

        Every pair's Y window is reset to its overview bounds. Nothing is
        modified unless every argument is valid.

        Parameters
        ----------
        x_bounds : Sequence[float]
            ``(x_min, x_max)`` domain shared by all charts.
        per_pair_y_bounds : Sequence[Sequence[float]]
            One ``(y_min, y_max)`` per pair, in pair order.
        initial_x_zoom : Optional[Sequence[float]], default=None
            Initial shared X window, clamped into ``x_bounds``. The whole
            domain is used if None.

        Returns
        -------
        ViewportState
            The new state.

        Raises
        ------
        ValueError
            If the number of Y bounds differs from the pair count, any bound
            is non-finite or not strictly increasing, or ``initial_x_zoom`` is
            not a finite pair.
        """
        if len(per_pair_y_bounds) != self.num_pairs:
            raise ValueError(
                f"Expected {self.num_pairs} Y bounds (one per chart pair), got {len(per_pair_y_bounds)}."
            )
        x_lim = _validated_bounds(x_bounds, "x_bounds")
        y_lims = [
            _validated_bounds(b, f"Y bounds of pair {i}")
            for i, b in enumerate(per_pair_y_bounds)
        ]

        if initial_x_zoom is None:
            x_zoom = x_lim
        else:
            if len(initial_x_zoom) != 2:
                raise ValueError(
                    f"initial_x_zoom must be a (min, max) pair, got {initial_x_zoom!r}."
                )
            if not geometry.is_finite_interval(initial_x_zoom):
                raise ValueError(f"initial_x_zoom must be finite, got {initial_x_zoom!r}.")
            x_zoom = geometry.clamp_interval(initial_x_zoom[0], initial_x_zoom[1], x_lim)
            if geometry.width(x_zoom) <= 0:
                logger.warning(
                    f"initial_x_zoom {tuple(initial_x_zoom)} is empty within {x_lim}, using the whole domain"
                )
                x_zoom = x_lim

        self.x_bounds = x_lim
        self.x_zoom = x_zoom
        self._default_x_zoom = x_zoom
        self.pairs = [ChartPair(i, b, b) for i, b in enumerate(y_lims)]
        self._limits_generation += 1
        logger.info(
            f"Limits set: x_bounds={x_lim}, x_zoom={x_zoom}, {self.num_pairs} chart pairs"
        )
        return self._publish()

    def home(self) -> Optional[ViewportState]:
        """Restore the windows given to the last :meth:`set_limits` call."""
        if not self._require_limits("home"):
            return None
        self.x_zoom = self._default_x_zoom
        for pair in self.pairs:
            pair.zoom_y = pair.overview_bounds
        logger.info(f"Home view restored: x_zoom={self.x_zoom}")
        return self._publish()

    # -- X window ------------------------------------------------------------

    def pan(self, dx: float) -> Optional[ViewportState]:
        """
        Pan the shared X window by ``dx`` window widths.

        ``+1`` moves right by a full width, ``-0.5`` moves left by half a
        width. The width is preserved: at a domain edge the window stops
        against the edge instead of shrinking.
        """
        if not self._require_limits("pan"):
            return None
        if not np.isfinite(dx):
            logger.warning(f"Ignoring pan by non-finite amount {dx}")
            return self.snapshot()

        lo, hi = self.x_zoom
        span = hi - lo
        if dx < 0:
            lo = max(self.x_bounds[0], lo + dx * span)
            hi = lo + span
        else:
            hi = min(hi + dx * span, self.x_bounds[1])
            lo = hi - span
        self.x_zoom = geometry.clamp_interval(lo, hi, self.x_bounds)
        return self._publish()

    def zoom(self, ratio: float) -> Optional[ViewportState]:
        """
        Zoom the shared X window about its centre.

        Parameters
        ----------
        ratio : float
            Magnification ratio: 2 doubles magnification (halves the window),
            0.5 halves it and 1 leaves the window unchanged. Each end is
            clamped against the domain independently, so near an edge the
            window grows mostly towards the free side.
        """
        if not self._require_limits("zoom"):
            return None
        if not np.isfinite(ratio) or ratio <= 0:
            logger.warning(f"Ignoring zoom by invalid ratio {ratio}")
            return self.snapshot()
        return self.zoom_by_fraction(geometry.magnification_to_fraction(ratio))

    def zoom_by_fraction(self, k: float) -> Optional[ViewportState]:
        """
        Move each end of the X window ``k`` of the width towards the other.

        Negative ``k`` widens the window. ``k`` of 0.5 or more would close or
        flip the window and is ignored.
        """
        if not self._require_limits("zoom"):
            return None
        if not np.isfinite(k) or k >= 0.5:
            logger.warning(f"Ignoring zoom by invalid fraction {k}")
            return self.snapshot()
        lo, hi = geometry.scale_around(self.x_zoom, k)
        self.x_zoom = geometry.clamp_interval(lo, hi, self.x_bounds)
        return self._publish()

    def set_x_zoom(self, lo: float, hi: float) -> Optional[ViewportState]:
        """Set the shared X window, in either order, clamped to the domain."""
        if not self._require_limits("set_x_zoom"):
            return None
        if not geometry.is_finite_interval((lo, hi)):
            logger.warning(f"Ignoring non-finite X window ({lo}, {hi})")
            return self.snapshot()
        self.x_zoom = geometry.clamp_interval(lo, hi, self.x_bounds)
        return self._publish()

    def center_on(self, x: float) -> Optional[ViewportState]:
        """Recentre the X window on ``x`` keeping its width, stopping at the edges."""
        if not self._require_limits("center_on"):
            return None
        if not np.isfinite(x):
            logger.warning(f"Ignoring recentre on non-finite position {x}")
            return self.snapshot()

        span = geometry.width(self.x_zoom)
        lo = max(self.x_bounds[0], x - span / 2)
        hi = min(lo + span, self.x_bounds[1])
        lo = hi - span
        self.x_zoom = geometry.clamp_interval(lo, hi, self.x_bounds)
        return self._publish()

    # -- Y windows -----------------------------------------------------------

    def set_y_zoom(self, pair_index: int, y_range: Sequence[float]) -> Optional[ViewportState]:
        """Set one pair's Y window, clamped to that pair's overview bounds."""
        self._check_pair_index(pair_index)
        if not self._require_limits("set_y_zoom"):
            return None
        if not geometry.is_finite_interval(y_range):
            logger.warning(f"Ignoring non-finite Y window {y_range!r} for pair {pair_index}")
            return self.snapshot()
        pair = self.pairs[pair_index]
        pair.zoom_y = geometry.clamp_interval(y_range[0], y_range[1], pair.overview_bounds)
        return self._publish()

    def zoom_to_range(
        self,
        pair_index: int,
        x_range: Sequence[float],
        y_range: Sequence[float],
    ) -> Optional[ViewportState]:
        """
        Set the shared X window and one pair's Y window in a single update.

        Parameters
        ----------
        pair_index : int
            Index of the pair whose Y window is set.
        x_range : Sequence[float]
            New X window, clamped to the domain.
        y_range : Sequence[float]
            New Y window, clamped to the pair's overview bounds.
        """
        self._check_pair_index(pair_index)
        if not self._require_limits("zoom_to_range"):
            return None
        if not (geometry.is_finite_interval(x_range) and geometry.is_finite_interval(y_range)):
            logger.warning(f"Ignoring non-finite zoom range x={x_range!r}, y={y_range!r}")
            return self.snapshot()
        pair = self.pairs[pair_index]
        self.x_zoom = geometry.clamp_interval(x_range[0], x_range[1], self.x_bounds)
        pair.zoom_y = geometry.clamp_interval(y_range[0], y_range[1], pair.overview_bounds)
        return self._publish()

    # -- wheel ---------------------------------------------------------------

    def wheel_zoom_at(
        self,
        target_kind: ChartKind,
        pair_index: int,
        pointer_x: float,
        pointer_y: float,
        k: float,
    ) -> Optional[ViewportState]:
        """
        Apply one wheel step over a chart.

        Over an overview chart the X window is scaled by ``k / 2`` about its
        centre and the pointer is ignored. Over a zoom chart both the X window
        and that pair's Y window are scaled by ``k`` towards the pointer, each
        clamped against its own bounds.

        Parameters
        ----------
        target_kind : ChartKind
            Kind of chart under the pointer.
        pair_index : int
            Pair owning that chart.
        pointer_x, pointer_y : float
            Pointer position in the chart's data coordinates.
        k : float
            Signed step weight, positive to zoom in.
        """
        self._check_pair_index(pair_index)
        if not self._require_limits("wheel zoom"):
            return None

        if target_kind is ChartKind.OVERVIEW:
            return self.zoom_by_fraction(k / 2)

        if not geometry.is_finite_interval((pointer_x, pointer_y)):
            logger.warning(f"Ignoring wheel at non-finite pointer ({pointer_x}, {pointer_y})")
            return self.snapshot()
        pair = self.pairs[pair_index]
        # The pointer lies inside the zoom chart, whose ranges are these windows
        pivot_x = float(np.clip(pointer_x, *self.x_zoom))
        pivot_y = float(np.clip(pointer_y, *pair.zoom_y))
        x_lo, x_hi = geometry.scale_toward(self.x_zoom, k, pivot_x)
        y_lo, y_hi = geometry.scale_toward(pair.zoom_y, k, pivot_y)
        self.x_zoom = geometry.clamp_interval(x_lo, x_hi, self.x_bounds)
        pair.zoom_y = geometry.clamp_interval(y_lo, y_hi, pair.overview_bounds)
        return self._publish()
