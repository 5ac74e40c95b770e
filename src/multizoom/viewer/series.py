from typing import List, Optional, Tuple, Union

import numpy as np
from loguru import logger

DEFAULT_COLORS = [
    "black",
    "blue",
    "red",
    "green",
    "purple",
    "orange",
    "brown",
    "pink",
    "gray",
    "olive",
]

ArrayInput = Union[np.ndarray, List[np.ndarray]]


class SeriesSet:
    """
    The series shown by a set of overview/zoom chart pairs, one per pair.

    Series may share one X array or each have their own. The set also
    derives the fixed chart bounds: the X domain covering every series and a
    padded Y range per series.
    """

    DEFAULT_NAME = "Series"

    def __init__(
        self,
        t: ArrayInput,
        x: ArrayInput,
        name: Union[str, List[str]] = DEFAULT_NAME,
        colors: Optional[List[str]] = None,
    ):
        """
        Standardise and validate the series.

        Parameters
        ----------
        t : Union[np.ndarray, List[np.ndarray]]
            X array shared by all series, or a list with one array per series.
        x : Union[np.ndarray, List[np.ndarray]]
            Series values. With a shared ``t`` this can be a 2D array
            (series x samples) or a list of 1D arrays.
        name : Union[str, List[str]], default="Series"
            A list with one name per series, or a single base name.
        colors : Optional[List[str]], default=None
            Line colours. Missing entries fall back to a default cycle.

        Raises
        ------
        ValueError
            If the arrays disagree in count or length, or a series is empty.
        """
        self.t_arrays, self.x_arrays = self._standardize_arrays(t, x)
        for i, (t_arr, x_arr) in enumerate(zip(self.t_arrays, self.x_arrays)):
            self._validate(t_arr, x_arr, i)
        self.names = self._standardize_names(name)
        self.colors = self._standardize_colors(colors)

    @staticmethod
    def _standardize_arrays(t: ArrayInput, x: ArrayInput) -> Tuple[List[np.ndarray], List[np.ndarray]]:
        if isinstance(x, list):
            x_arrays = [np.asarray(x_arr, dtype=np.float64) for x_arr in x]
        else:
            x = np.asarray(x, dtype=np.float64)
            x_arrays = [x[i] for i in range(x.shape[0])] if x.ndim == 2 else [x]

        if isinstance(t, list):
            t_arrays = [np.asarray(t_arr, dtype=np.float64) for t_arr in t]
            if len(t_arrays) != len(x_arrays):
                raise ValueError(
                    f"Number of series ({len(x_arrays)}) must match number of X arrays ({len(t_arrays)})"
                )
        else:
            t_arr = np.asarray(t, dtype=np.float64)
            t_arrays = [t_arr for _ in x_arrays]

        if len(x_arrays) == 0:
            raise ValueError("At least one series is required")
        return t_arrays, x_arrays

    @staticmethod
    def _validate(t: np.ndarray, x: np.ndarray, series_idx: int) -> None:
        if t.ndim != 1 or x.ndim != 1:
            raise ValueError(f"Series {series_idx} must be one-dimensional")
        if len(t) != len(x):
            raise ValueError(
                f"X and value arrays for series {series_idx} must have the same length. Got t={len(t)}, x={len(x)}"
            )
        if len(t) == 0:
            raise ValueError(f"Series {series_idx} is empty")
        if len(t) > 1 and not np.all(np.diff(t) > 0):
            logger.warning(
                f"X array for series {series_idx} is not strictly increasing; the domain uses its min and max"
            )

    def _standardize_names(self, name: Union[str, List[str]]) -> List[str]:
        n = self.num_series
        if isinstance(name, list):
            if len(name) == n:
                return list(name)
            logger.warning(
                f"Number of names ({len(name)}) doesn't match number of series ({n}). Using defaults."
            )
            return [f"{self.DEFAULT_NAME} {i + 1}" for i in range(n)]
        if n == 1:
            return [name]
        return [f"{name} {i + 1}" for i in range(n)]

    def _standardize_colors(self, colors: Optional[List[str]]) -> List[str]:
        given = list(colors) if colors is not None else []
        if colors is not None and len(given) < self.num_series:
            logger.warning(
                f"Not enough colors provided ({len(given)}). Using defaults for remaining series."
            )
        return [
            given[i] if i < len(given) else DEFAULT_COLORS[i % len(DEFAULT_COLORS)]
            for i in range(self.num_series)
        ]

    @property
    def num_series(self) -> int:
        return len(self.x_arrays)

    def _check_index(self, series_idx: int) -> None:
        if series_idx < 0 or series_idx >= self.num_series:
            raise ValueError(
                f"Invalid series index: {series_idx}. Must be between 0 and {self.num_series - 1}."
            )

    def get_color(self, series_idx: int = 0) -> str:
        self._check_index(series_idx)
        return self.colors[series_idx]

    def get_name(self, series_idx: int = 0) -> str:
        self._check_index(series_idx)
        return self.names[series_idx]

    def global_x_range(self) -> Tuple[float, float]:
        """Smallest interval containing the X values of every series."""
        lo = min(float(np.nanmin(t_arr)) for t_arr in self.t_arrays)
        hi = max(float(np.nanmax(t_arr)) for t_arr in self.t_arrays)
        if hi <= lo:
            logger.warning(f"X values span a single point {lo}, widening the domain to a unit interval")
            return lo - 0.5, lo + 0.5
        return lo, hi

    def y_bounds(
        self,
        series_idx: int,
        margin_fraction: float = 0.05,
        min_range: float = 1e-9,
    ) -> Tuple[float, float]:
        """
        Overview Y range for one series.

        The data range is widened by ``margin_fraction`` of itself on each
        side. A range narrower than ``min_range`` is replaced by one of
        ``min_range`` centred on the data.
        """
        self._check_index(series_idx)
        values = self.x_arrays[series_idx]
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            logger.warning(f"Series {series_idx} has no finite values, using (0, 1)")
            return 0.0, 1.0

        y_min, y_max = float(np.min(finite)), float(np.max(finite))
        data_range = y_max - y_min
        if data_range < min_range:
            mid = (y_min + y_max) / 2
            return mid - min_range / 2, mid + min_range / 2
        margin = margin_fraction * data_range
        return y_min - margin, y_max + margin
