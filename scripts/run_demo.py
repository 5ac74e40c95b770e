from warnings import warn

import matplotlib as mpl
import numpy as np

from multizoom import PairedSeriesPlot, configure_logging

# --- User configuration dictionary ---
CONFIG = {
    "LOG_LEVEL": "INFO",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    "DURATION": 60.0,  # length of the synthetic series (seconds)
    "SAMPLE_RATE": 200.0,  # samples per second
    "NUM_SERIES": 3,  # number of overview/zoom chart pairs
    "NOISE": 0.1,  # standard deviation of the added noise
    "SEED": 3,  # random seed for the noise
    "INITIAL_ZOOM_FRACTION": 0.1,  # part of the domain shown by the zoom charts at start
    "WHEEL_RATIO": 0.2,  # zoom weight of one wheel step
    "INVERT_WHEEL": False,  # True for "natural" scrolling
    "ZOOM_CHART_INPUT": True,  # allow clicks and drags on the zoom charts too
    "NAMES": ["Sensor 1", "Sensor 2", "Sensor 3"],
}


def make_series(config):
    """Synthetic sensor-like series: slow drift plus a periodic component and noise."""
    rng = np.random.default_rng(config["SEED"])
    t = np.arange(0.0, config["DURATION"], 1.0 / config["SAMPLE_RATE"])
    x = []
    for i in range(config["NUM_SERIES"]):
        period = 5.0 * (i + 1)
        drift = 0.02 * (i + 1) * t
        x.append(
            drift
            + np.sin(2 * np.pi * t / period)
            + config["NOISE"] * rng.standard_normal(t.size)
        )
    return t, x


def main() -> None:
    """
    Build the demo figure and show it.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))

    t, x = make_series(CONFIG)
    plot = PairedSeriesPlot(
        t,
        x,
        name=CONFIG["NAMES"],
        initial_zoom_fraction=CONFIG.get("INITIAL_ZOOM_FRACTION", 0.1),
        wheel_ratio=CONFIG.get("WHEEL_RATIO", 0.2),
        invert_wheel=CONFIG.get("INVERT_WHEEL", False),
        zoom_chart_input=CONFIG.get("ZOOM_CHART_INPUT", False),
    )
    plot.show()


if __name__ == "__main__":
    # Set Matplotlib rcParams directly here
    for optn, val in {
        "figure.constrained_layout.use": True,
        "figure.dpi": 90,
        "font.family": ("sans-serif",),
        "font.size": 11,
        "lines.linewidth": 1.2,
        "xtick.labelsize": 10,
        "xtick.direction": "in",
        "ytick.labelsize": 10,
        "ytick.direction": "in",
        "axes.formatter.useoffset": False,
        "axes.linewidth": 1.4,
        "axes.labelsize": 11,
    }.items():
        if isinstance(val, (list, tuple)):
            val = tuple(val)
        try:
            mpl.rcParams[optn] = val
        except KeyError:
            warn(f"mpl rcparams key '{optn}' not recognised as a valid rc parameter.")
    main()
