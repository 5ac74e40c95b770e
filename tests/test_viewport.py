import dataclasses

import numpy as np
import pytest
from conftest import INITIAL_X_ZOOM, X_BOUNDS, Y_BOUNDS, assert_invariants

from multizoom.zoomer.viewport import ChartKind, ViewportModel


class TestSetLimits:
    def test_resets_every_y_window_to_overview_bounds(self, model):
        model.set_y_zoom(0, (-1.0, 1.0))
        model.wheel_zoom_at(ChartKind.ZOOM, 1, 50.0, 5.0, 0.2)

        state = model.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)

        assert state.zoom_y == tuple(Y_BOUNDS)
        assert state.overview_bounds == tuple(Y_BOUNDS)
        assert state.x_zoom == INITIAL_X_ZOOM

    def test_initial_zoom_defaults_to_whole_domain(self):
        model = ViewportModel(2)
        state = model.set_limits(X_BOUNDS, Y_BOUNDS)
        assert state.x_zoom == X_BOUNDS

    def test_initial_zoom_is_clamped(self):
        model = ViewportModel(2)
        state = model.set_limits(X_BOUNDS, Y_BOUNDS, (-20.0, 30.0))
        assert state.x_zoom == (0.0, 30.0)

    def test_initial_zoom_outside_domain_falls_back_to_domain(self):
        model = ViewportModel(2)
        state = model.set_limits(X_BOUNDS, Y_BOUNDS, (150.0, 200.0))
        assert state.x_zoom == X_BOUNDS

    def test_pair_count_mismatch_is_fatal_and_changes_nothing(self, model):
        before = model.snapshot()
        with pytest.raises(ValueError, match="Expected 2 Y bounds"):
            model.set_limits((0.0, 10.0), [(-1.0, 1.0)], (2.0, 3.0))
        assert model.snapshot() == before

    @pytest.mark.parametrize(
        "x_bounds, y_bounds",
        [
            ((10.0, 0.0), Y_BOUNDS),
            ((0.0, float("nan")), Y_BOUNDS),
            (X_BOUNDS, [(-5.0, 5.0), (3.0, 3.0)]),
        ],
    )
    def test_invalid_bounds_raise_before_mutation(self, model, x_bounds, y_bounds):
        before = model.snapshot()
        with pytest.raises(ValueError):
            model.set_limits(x_bounds, y_bounds)
        assert model.snapshot() == before

    @pytest.mark.parametrize("x_zoom", [(10.0,), (10.0, 20.0, 30.0)])
    def test_initial_zoom_must_be_a_pair(self, model, x_zoom):
        before = model.snapshot()
        with pytest.raises(ValueError, match="initial_x_zoom"):
            model.set_limits(X_BOUNDS, Y_BOUNDS, x_zoom)
        assert model.snapshot() == before

    def test_limits_generation_increases(self, model):
        first = model.snapshot().limits_generation
        assert model.set_limits(X_BOUNDS, Y_BOUNDS).limits_generation == first + 1

    def test_zero_pairs_rejected(self):
        with pytest.raises(ValueError):
            ViewportModel(0)


class TestBeforeLimits:
    def test_mutations_are_ignored(self):
        model = ViewportModel(1)
        assert model.snapshot() is None
        assert model.pan(0.5) is None
        assert model.zoom(2.0) is None
        assert model.center_on(3.0) is None
        assert model.home() is None
        assert model.wheel_zoom_at(ChartKind.OVERVIEW, 0, 1.0, 1.0, 0.2) is None
        assert model.snapshot() is None


class TestPan:
    def test_preserves_width_inside_domain(self, model):
        state = model.pan(0.5)
        assert state.x_zoom == (50.0, 70.0)
        state = model.pan(-1.0)
        assert state.x_zoom == (30.0, 50.0)

    def test_left_edge_stops_without_shrinking(self, model):
        state = model.pan(-3.0)
        assert state.x_zoom == (0.0, 20.0)

    def test_right_edge_stops_without_shrinking(self, model):
        state = model.pan(5.0)
        assert state.x_zoom == (80.0, 100.0)

    def test_zero_is_a_no_op(self, model):
        assert model.pan(0.0).x_zoom == INITIAL_X_ZOOM

    def test_non_finite_is_ignored(self, model):
        assert model.pan(float("inf")).x_zoom == INITIAL_X_ZOOM


class TestZoom:
    def test_ratio_one_is_a_no_op(self, model):
        assert model.zoom(1.0).x_zoom == INITIAL_X_ZOOM

    def test_ratio_two_doubles_magnification(self, model):
        assert model.zoom(2.0).x_zoom == pytest.approx((45.0, 55.0))

    def test_zoom_in_then_out_round_trips(self, model):
        model.zoom(2.0)
        assert model.zoom(0.5).x_zoom == pytest.approx(INITIAL_X_ZOOM)

    def test_zoom_out_near_edge_clamps_asymmetrically(self, model):
        model.set_x_zoom(0.0, 20.0)
        state = model.zoom(0.5)
        assert state.x_zoom == pytest.approx((0.0, 30.0))

    def test_zoom_out_never_leaves_domain(self, model):
        state = model.zoom(0.01)
        assert state.x_zoom == X_BOUNDS

    @pytest.mark.parametrize("k", [0.5, 0.8, float("nan")])
    def test_fraction_that_would_close_the_window_is_ignored(self, model, k):
        assert model.zoom_by_fraction(k).x_zoom == INITIAL_X_ZOOM

    def test_negative_fraction_widens(self, model):
        assert model.zoom_by_fraction(-0.5).x_zoom == (30.0, 70.0)

    @pytest.mark.parametrize("ratio", [0.0, -2.0, float("nan")])
    def test_invalid_ratio_is_ignored(self, model, ratio):
        assert model.zoom(ratio).x_zoom == INITIAL_X_ZOOM


class TestRanges:
    def test_zoom_to_range_clamps_both_axes(self, model):
        state = model.zoom_to_range(1, (-10.0, 50.0), (-2.0, 30.0))
        assert state.x_zoom == (0.0, 50.0)
        assert state.zoom_y[1] == (0.0, 10.0)
        assert state.zoom_y[0] == Y_BOUNDS[0]

    def test_set_y_zoom_sorts_and_only_touches_one_pair(self, model):
        state = model.set_y_zoom(0, (3.0, -2.0))
        assert state.zoom_y == ((-2.0, 3.0), Y_BOUNDS[1])
        assert state.x_zoom == INITIAL_X_ZOOM

    def test_set_x_zoom_clamps(self, model):
        assert model.set_x_zoom(90.0, 140.0).x_zoom == (90.0, 100.0)

    @pytest.mark.parametrize("index", [-1, 2])
    def test_invalid_pair_index_raises(self, model, index):
        with pytest.raises(ValueError, match="Invalid pair index"):
            model.set_y_zoom(index, (0.0, 1.0))

    def test_non_finite_range_is_ignored(self, model):
        state = model.zoom_to_range(0, (0.0, float("nan")), (0.0, 1.0))
        assert state.x_zoom == INITIAL_X_ZOOM


class TestCenterOn:
    def test_recentre_inside_domain(self, model):
        assert model.center_on(30.0).x_zoom == (20.0, 40.0)

    def test_recentre_near_left_edge(self, model):
        assert model.center_on(10.0).x_zoom == (0.0, 20.0)

    def test_recentre_near_right_edge(self, model):
        assert model.center_on(95.0).x_zoom == (80.0, 100.0)


class TestWheelZoomAt:
    def test_overview_zooms_gently_about_centre(self, model):
        state = model.wheel_zoom_at(ChartKind.OVERVIEW, 0, 5.0, 0.0, 0.2)
        assert state.x_zoom == pytest.approx((42.0, 58.0))
        assert state.zoom_y == tuple(Y_BOUNDS)

    def test_overview_ignores_pointer(self, model):
        a = ViewportModel(2)
        a.set_limits(X_BOUNDS, Y_BOUNDS, INITIAL_X_ZOOM)
        s1 = a.wheel_zoom_at(ChartKind.OVERVIEW, 1, 1.0, 1.0, -0.2)
        s2 = model.wheel_zoom_at(ChartKind.OVERVIEW, 1, 99.0, 9.0, -0.2)
        assert s1.x_zoom == s2.x_zoom

    def test_zoom_chart_zooms_toward_pointer(self, model):
        state = model.wheel_zoom_at(ChartKind.ZOOM, 0, 45.0, 1.0, 0.2)
        lo, hi = state.x_zoom
        assert (lo, hi) == pytest.approx((41.0, 57.0))
        # the end nearer the pointer moves less
        assert abs(lo - 40.0) < abs(hi - 60.0)
        assert state.zoom_y[0] == pytest.approx((-3.8, 4.2))
        assert state.zoom_y[1] == Y_BOUNDS[1]

    def test_zoom_chart_zoom_out_is_clamped(self, model):
        for _ in range(30):
            state = model.wheel_zoom_at(ChartKind.ZOOM, 1, 50.0, 5.0, -0.2)
        assert state.x_zoom == X_BOUNDS
        assert state.zoom_y[1] == Y_BOUNDS[1]

    def test_non_finite_pointer_is_ignored(self, model):
        state = model.wheel_zoom_at(ChartKind.ZOOM, 0, float("nan"), 0.0, 0.2)
        assert state.x_zoom == INITIAL_X_ZOOM


class TestObservation:
    def test_subscribers_see_each_published_state(self, model):
        seen = []
        model.subscribe(seen.append)
        model.pan(0.5)
        model.zoom(2.0)
        assert [s.x_zoom for s in seen] == [(50.0, 70.0), pytest.approx((55.0, 65.0))]

        model.unsubscribe(seen.append)
        model.pan(0.5)
        assert len(seen) == 2

    def test_snapshot_is_immutable(self, model):
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.snapshot().x_zoom = (0.0, 1.0)

    def test_home_restores_limits_defaults(self, model):
        model.pan(2.0)
        model.set_y_zoom(1, (2.0, 3.0))
        state = model.home()
        assert state.x_zoom == INITIAL_X_ZOOM
        assert state.zoom_y == tuple(Y_BOUNDS)


def test_invariants_hold_over_random_gesture_sequences(model):
    rng = np.random.default_rng(1234)
    for _ in range(500):
        op = rng.integers(6)
        if op == 0:
            state = model.pan(rng.uniform(-2, 2))
        elif op == 1:
            state = model.zoom(rng.uniform(0.2, 5))
        elif op == 2:
            kind = ChartKind.OVERVIEW if rng.random() < 0.5 else ChartKind.ZOOM
            k = 0.2 if rng.random() < 0.5 else -0.2
            state = model.wheel_zoom_at(
                kind, int(rng.integers(2)), rng.uniform(-20, 120), rng.uniform(-8, 12), k
            )
        elif op == 3:
            state = model.center_on(rng.uniform(-20, 120))
        elif op == 4:
            state = model.zoom_to_range(
                int(rng.integers(2)), rng.uniform(-20, 120, 2), rng.uniform(-8, 12, 2)
            )
        else:
            state = model.set_y_zoom(int(rng.integers(2)), rng.uniform(-8, 12, 2))
        assert_invariants(state)
