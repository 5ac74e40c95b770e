from typing import Tuple

import numpy as np

Interval = Tuple[float, float]


def width(interval: Interval) -> float:
    """Width of an interval."""
    return interval[1] - interval[0]


def center(interval: Interval) -> float:
    """Midpoint of an interval."""
    return (interval[0] + interval[1]) / 2


def is_finite_interval(interval: Interval) -> bool:
    """True if both ends of the interval are finite numbers."""
    return bool(np.isfinite(interval[0]) and np.isfinite(interval[1]))


def clamp_interval(lo: float, hi: float, bounds: Interval) -> Interval:
    """
    Clip both ends of ``[lo, hi]`` into ``bounds`` and return them in order.

    Each end is clipped independently, so an interval hanging over one edge
    is shortened on that side only.

    Parameters
    ----------
    lo, hi : float
        Interval ends, in either order.
    bounds : Interval
        ``(min, max)`` limits.

    Returns
    -------
    Interval
        The clipped interval with ``lo <= hi``.
    """
    lo_c = float(np.clip(lo, bounds[0], bounds[1]))
    hi_c = float(np.clip(hi, bounds[0], bounds[1]))
    if lo_c > hi_c:
        lo_c, hi_c = hi_c, lo_c
    return lo_c, hi_c


def scale_around(interval: Interval, k: float) -> Interval:
    """
    Scale an interval about its centre by interpolating between its ends.

    Each end moves towards the opposite end by ``k`` of the width, so the new
    width is ``width * (1 - 2k)``. Positive ``k`` contracts (zoom in),
    negative ``k`` expands (zoom out) and ``k == 0`` leaves it unchanged.
    """
    lo, hi = interval
    return lo * (1 - k) + hi * k, hi * (1 - k) + lo * k


def scale_toward(interval: Interval, k: float, pivot: float) -> Interval:
    """
    Scale an interval towards (``k > 0``) or away from (``k < 0``) a pivot.

    Both ends move by ``k`` of their distance to ``pivot``, so the end nearer
    the pivot moves less. Used for wheel zooming about the pointer.
    """
    lo, hi = interval
    return lo * (1 - k) + pivot * k, hi * (1 - k) + pivot * k


def shift_by_fraction(interval: Interval, dx: float) -> Interval:
    """Translate an interval by ``dx`` times its width."""
    offset = dx * width(interval)
    return interval[0] + offset, interval[1] + offset


def magnification_to_fraction(ratio: float) -> float:
    """
    Convert a magnification ratio into a :func:`scale_around` weight.

    ``ratio == 2`` halves the width (weight 0.25), ``ratio == 0.5`` doubles it
    (weight -0.5) and ``ratio == 1`` gives 0. ``ratio`` must be positive.
    """
    return (1.0 - 1.0 / ratio) / 2.0
