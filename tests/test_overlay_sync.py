import pytest
from conftest import INITIAL_X_ZOOM, X_BOUNDS, Y_BOUNDS, FakeHost, assert_invariants, make_handles

from multizoom.zoomer.overlay_sync import OverlaySync, attach_overlays, overlay_corners
from multizoom.zoomer.viewport import ViewportModel


@pytest.fixture
def wired():
    host = FakeHost()
    handles = make_handles()
    attach_overlays(host, handles)
    model = ViewportModel(len(handles))
    sync = OverlaySync(host, handles)
    model.subscribe(sync.push)
    return host, handles, model, sync


def test_overlay_corners_order():
    assert overlay_corners((1.0, 2.0), (3.0, 4.0)) == (
        (1.0, 3.0),
        (2.0, 3.0),
        (2.0, 4.0),
        (1.0, 4.0),
    )


def test_nothing_is_pushed_before_limits(wired):
    host, handles, model, sync = wired
    sync.push(model.snapshot())
    assert host.calls == []
    assert host.redraws == 0


def test_limits_reset_pushes_overview_and_zoom_ranges(wired):
    host, handles, model, sync = wired
    state = model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)

    for i, pair in enumerate(handles):
        assert pair.overview.x_range == X_BOUNDS
        assert pair.overview.y_range == Y_BOUNDS[i]
    assert_invariants(state, handles)
    assert host.redraws == 1


def test_overview_charts_untouched_by_ordinary_updates(wired):
    host, handles, model, sync = wired
    model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    host.calls.clear()

    state = model.pan(0.5)

    touched = {name for _, name, _ in host.calls}
    assert touched == {"zoom0", "zoom1"}
    assert_invariants(state, handles)


def test_every_zoom_chart_shares_the_x_window(wired):
    host, handles, model, sync = wired
    model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    state = model.zoom_to_range(1, (10.0, 30.0), (2.0, 4.0))

    assert handles[0].zoom.x_range == handles[1].zoom.x_range == (10.0, 30.0)
    assert handles[0].zoom.y_range == Y_BOUNDS[0]
    assert handles[1].overlay.corners == overlay_corners((10.0, 30.0), (2.0, 4.0))
    assert_invariants(state, handles)


def test_set_limits_resets_overlay_heights(wired):
    host, handles, model, sync = wired
    model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    model.set_y_zoom(0, (-1.0, 1.0))
    model.set_y_zoom(1, (4.0, 6.0))

    state = model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)

    for i, pair in enumerate(handles):
        (_, y0), _, (_, y1), _ = pair.overlay.corners
        assert (y0, y1) == Y_BOUNDS[i]
    assert_invariants(state, handles)


def test_invalidate_forces_overview_push(wired):
    host, handles, model, sync = wired
    model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
    handles[0].overview.x_range = (0.0, 1.0)

    sync.invalidate()
    sync.push(model.snapshot())

    assert handles[0].overview.x_range == X_BOUNDS


def test_pair_count_mismatch_raises(wired):
    host, handles, model, sync = wired
    other = ViewportModel(3)
    state = other.set_limits(X_BOUNDS, Y_BOUNDS + [(0.0, 1.0)])
    with pytest.raises(ValueError):
        sync.push(state)


def test_attach_overlays_replaces_existing(host):
    handles = make_handles()
    first = attach_overlays(host, handles)
    second = attach_overlays(host, handles)

    assert all(o.removed for o in first)
    assert not any(o.removed for o in second)
    assert [p.overlay for p in handles] == second
    assert [o.chart for o in second] == [p.overview for p in handles]
