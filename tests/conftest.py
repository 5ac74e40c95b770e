"""Shared fixtures: a recording chart host and a two-pair rig built on it."""

import matplotlib

matplotlib.use("Agg")

import pytest

from multizoom.zoomer.chart_host import PairHandles
from multizoom.zoomer.gestures import GestureController
from multizoom.zoomer.overlay_sync import OverlaySync, attach_overlays
from multizoom.zoomer.viewport import ViewportModel

X_BOUNDS = (0.0, 100.0)
Y_BOUNDS = [(-5.0, 5.0), (0.0, 10.0)]
INITIAL_X_ZOOM = (40.0, 60.0)


class FakeChart:
    """A chart occupying ``extent`` pixels and showing ``x_range`` by ``y_range``."""

    def __init__(self, name, extent, x_range=(0.0, 1.0), y_range=(0.0, 1.0)):
        self.name = name
        self.extent = extent
        self.x_range = x_range
        self.y_range = y_range

    def __repr__(self):
        return f"FakeChart({self.name!r})"


class FakeOverlay:
    def __init__(self, chart):
        self.chart = chart
        self.corners = None
        self.removed = False


class FakeHost:
    """ChartHost that records every push instead of drawing."""

    def __init__(self):
        self.calls = []
        self.overlays = []
        self.redraws = 0
        self.drag_box = None

    def chart_extent(self, chart):
        return chart.extent

    def to_data(self, chart, canvas_point):
        ex, ey, ew, eh = chart.extent
        x0, x1 = chart.x_range
        y0, y1 = chart.y_range
        return (
            x0 + (canvas_point[0] - ex) / ew * (x1 - x0),
            y0 + (canvas_point[1] - ey) / eh * (y1 - y0),
        )

    def set_x_range(self, chart, x_range):
        self.calls.append(("x", chart.name, tuple(x_range)))
        chart.x_range = tuple(x_range)

    def set_y_range(self, chart, y_range):
        self.calls.append(("y", chart.name, tuple(y_range)))
        chart.y_range = tuple(y_range)

    def create_overlay(self, chart):
        overlay = FakeOverlay(chart)
        self.overlays.append(overlay)
        return overlay

    def remove_overlay(self, overlay):
        overlay.removed = True

    def set_overlay_corners(self, overlay, corners):
        overlay.corners = corners

    def show_drag_box(self, chart, p1, p2):
        self.drag_box = (chart.name, tuple(p1), tuple(p2))

    def hide_drag_box(self):
        self.drag_box = None

    def redraw(self):
        self.redraws += 1


def make_handles():
    """Two pairs: overview charts on the left, zoom charts on the right."""
    return [
        PairHandles(
            overview=FakeChart("overview0", (0.0, 0.0, 100.0, 50.0)),
            zoom=FakeChart("zoom0", (200.0, 0.0, 100.0, 50.0)),
        ),
        PairHandles(
            overview=FakeChart("overview1", (0.0, 100.0, 100.0, 50.0)),
            zoom=FakeChart("zoom1", (200.0, 100.0, 100.0, 50.0)),
        ),
    ]


class Rig:
    def __init__(self):
        self.host = FakeHost()
        self.handles = make_handles()
        self.model = ViewportModel(len(self.handles))
        self.sync = OverlaySync(self.host, self.handles)
        self.model.subscribe(self.sync.push)
        attach_overlays(self.host, self.handles)
        self.gestures = GestureController(self.model, self.host, self.handles)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def model():
    m = ViewportModel(2)
    m.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    return m


@pytest.fixture
def rig():
    r = Rig()
    r.model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    return r


def assert_invariants(state, handles=None):
    """Check the viewport invariants, and that the charts reflect ``state``."""
    b0, b1 = state.x_bounds
    z0, z1 = state.x_zoom
    assert b0 <= z0 <= z1 <= b1
    for (o0, o1), (y0, y1) in zip(state.overview_bounds, state.zoom_y):
        assert o0 <= y0 <= y1 <= o1
    if handles is not None:
        for i, pair in enumerate(handles):
            assert pair.zoom.x_range == state.x_zoom
            assert pair.zoom.y_range == state.zoom_y[i]
            if pair.overlay is not None:
                (x0, y0), (x1, _), (_, y1), _ = pair.overlay.corners
                assert (x0, x1) == state.x_zoom
                assert (y0, y1) == state.zoom_y[i]
