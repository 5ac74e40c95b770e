import sys
from typing import List, Optional, Tuple, Union

import matplotlib as mpl
import matplotlib.pyplot as plt
from loguru import logger

from multizoom.viewer.series import ArrayInput, SeriesSet
from multizoom.zoomer.multi_zoomer import MultiZoomer


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )


class PairedSeriesPlot:
    """
    Figure with one overview chart and one zoom chart per series.

    Overview charts sit in the left column and zoom charts in the right,
    one row per series. A :class:`MultiZoomer` keeps them in step.
    """

    DEFAULT_Y_MARGIN_FRACTION = 0.05
    DEFAULT_MIN_Y_RANGE = 1e-9
    DEFAULT_INITIAL_ZOOM_FRACTION = 0.1
    DEFAULT_LINE_WIDTH = 1.0
    DEFAULT_LINE_ALPHA = 0.75

    def __init__(
        self,
        t: ArrayInput,
        x: ArrayInput,
        name: Union[str, List[str]] = SeriesSet.DEFAULT_NAME,
        colors: Optional[List[str]] = None,
        y_margin_fraction: float = DEFAULT_Y_MARGIN_FRACTION,
        min_y_range: float = DEFAULT_MIN_Y_RANGE,
        initial_zoom_fraction: float = DEFAULT_INITIAL_ZOOM_FRACTION,
        line_width: float = DEFAULT_LINE_WIDTH,
        line_alpha: float = DEFAULT_LINE_ALPHA,
        wheel_ratio: float = MultiZoomer.DEFAULT_WHEEL_RATIO,
        invert_wheel: bool = False,
        zoom_chart_input: bool = False,
        figsize: Tuple[float, float] = (12, 6),
    ):
        """
        Initialise the plot. Nothing is drawn until :meth:`render`.

        Parameters
        ----------
        t, x, name, colors
            Series data, see :class:`SeriesSet`.
        y_margin_fraction : float, default=0.05
            Fraction of each series' range added above and below it.
        min_y_range : float, default=1e-9
            Smallest Y range of an overview chart.
        initial_zoom_fraction : float, default=0.1
            Part of the X domain, from its start, shown by the zoom charts
            after rendering.
        line_width, line_alpha : float
            Line styling.
        wheel_ratio : float, default=0.2
            Zoom weight of one wheel step.
        invert_wheel : bool, default=False
            Swap the wheel zoom direction.
        zoom_chart_input : bool, default=False
            Also let clicks and drags on the zoom charts steer the view.
        figsize : Tuple[float, float], default=(12, 6)
            Figure size in inches.
        """
        if not 0 < initial_zoom_fraction <= 1:
            raise ValueError(
                f"initial_zoom_fraction must be in (0, 1], got {initial_zoom_fraction}."
            )
        self.series = SeriesSet(t, x, name, colors)
        self.y_margin_fraction = y_margin_fraction
        self.min_y_range = min_y_range
        self.initial_zoom_fraction = initial_zoom_fraction
        self.line_width = line_width
        self.line_alpha = line_alpha
        self.wheel_ratio = wheel_ratio
        self.invert_wheel = invert_wheel
        self.zoom_chart_input = zoom_chart_input
        self.figsize = figsize

        self.fig: Optional[mpl.figure.Figure] = None
        self.overview_axes: List[mpl.axes.Axes] = []
        self.zoom_axes: List[mpl.axes.Axes] = []
        self.zoomer: Optional[MultiZoomer] = None

    def limits(self) -> Tuple[Tuple[float, float], List[Tuple[float, float]], Tuple[float, float]]:
        """X domain, per-series Y bounds and initial X window passed to the zoomer."""
        x_lim = self.series.global_x_range()
        y_lims = [
            self.series.y_bounds(i, self.y_margin_fraction, self.min_y_range)
            for i in range(self.series.num_series)
        ]
        x_zoom = (x_lim[0], x_lim[0] + self.initial_zoom_fraction * (x_lim[1] - x_lim[0]))
        return x_lim, y_lims, x_zoom

    def render(self) -> None:
        """Create the figure, plot every series twice and attach the zoomer."""
        if self.fig is not None:
            logger.warning("Plot already rendered. Call `home()` to reset or create a new instance.")
            return

        logger.info(f"Rendering {self.series.num_series} chart pairs...")
        n = self.series.num_series
        self.fig, axes = plt.subplots(n, 2, figsize=self.figsize, squeeze=False)
        self.overview_axes = list(axes[:, 0])
        self.zoom_axes = list(axes[:, 1])

        for i in range(n):
            for ax in (self.overview_axes[i], self.zoom_axes[i]):
                ax.plot(
                    self.series.t_arrays[i],
                    self.series.x_arrays[i],
                    color=self.series.get_color(i),
                    linewidth=self.line_width,
                    alpha=self.line_alpha,
                )
            self.overview_axes[i].set_ylabel(self.series.get_name(i))
        self.overview_axes[0].set_title("Overview")
        self.zoom_axes[0].set_title("Zoom")

        self.zoomer = MultiZoomer(
            self.fig,
            self.overview_axes,
            self.zoom_axes,
            wheel_ratio=self.wheel_ratio,
            invert_wheel=self.invert_wheel,
        )
        # Overlays go on after the lines so they are drawn over them
        self.zoomer.create_zoom_area_indicators()
        if self.zoom_chart_input:
            for i in range(n):
                self.zoomer.handle_mouse_input(i)

        x_lim, y_lims, x_zoom = self.limits()
        self.zoomer.set_limits(x_lim, y_lims, x_zoom)
        logger.info("Plot rendering complete.")

    def home(self) -> None:
        """Return the zoom charts to the initial window."""
        if self.zoomer is None:
            logger.warning("Plot not rendered yet. Cannot go home.")
            return
        self.zoomer.home()

    def save(self, filepath: str) -> None:
        """
        Save the current figure to a file.

        Parameters
        ----------
        filepath : str
            Path to save the plot image.
        """
        if self.fig is None:
            raise RuntimeError("Plot has not been rendered yet.")
        self.fig.savefig(filepath)
        logger.info(f"Plot saved to {filepath}")

    def show(self) -> None:
        """Display the plot."""
        if self.fig is None:
            self.render()
        plt.show()
