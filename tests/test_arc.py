"""Tests for arc to Bézier conversion."""

import math

import pytest

from arc import arc_center_parameters, arc_to_bezier, segment_count


def test_quarter_arc_center():
    params = arc_center_parameters((1, 0), (0, 1), 1, 1, 0.0, False, True)
    assert params.cx == pytest.approx(0, abs=1e-9)
    assert params.cy == pytest.approx(0, abs=1e-9)
    assert params.theta1 == pytest.approx(0, abs=1e-9)
    assert params.delta == pytest.approx(math.pi / 2)


def test_quarter_arc_single_segment():
    points = arc_to_bezier((1, 0), (0, 1), 1, 1, 0, False, True)
    assert len(points) == 3
    alpha = (math.sqrt(7) - 1) / 3
    assert points[0] == pytest.approx((1, alpha))
    assert points[1] == pytest.approx((alpha, 1))
    assert points[2] == (0, 1)


@pytest.mark.parametrize("large_arc", [False, True])
@pytest.mark.parametrize("sweep", [False, True])
def test_endpoints_are_reproduced(large_arc, sweep):
    start, end = (0.0, 0.0), (30.0, 20.0)
    params = arc_center_parameters(start, end, 40, 30, math.radians(30), large_arc, sweep)

    assert params.point_at(params.theta1) == pytest.approx(start, abs=1e-6)
    assert params.point_at(params.theta1 + params.delta) == pytest.approx(end, abs=1e-6)

    if sweep:
        assert params.delta > 0
    else:
        assert params.delta < 0

    if large_arc:
        assert abs(params.delta) > math.pi
    else:
        assert abs(params.delta) < math.pi


@pytest.mark.parametrize("large_arc", [False, True])
@pytest.mark.parametrize("sweep", [False, True])
def test_bezier_chain_ends_at_endpoint(large_arc, sweep):
    points = arc_to_bezier((0, 0), (30, 20), 40, 30, 30, large_arc, sweep)
    assert len(points) % 3 == 0
    assert points[-1] == (30, 20)


def test_segments_cover_at_most_a_quarter_turn():
    start, end = (0.0, 0.0), (30.0, 20.0)
    params = arc_center_parameters(start, end, 40, 30, math.radians(30), True, True)
    points = arc_to_bezier(start, end, 40, 30, 30, True, True)
    count = len(points) // 3
    assert count == segment_count(params.delta)
    assert abs(params.delta) / count <= math.pi / 2 + 1e-9


def test_half_circle_uses_two_segments():
    points = arc_to_bezier((0, 0), (10, 0), 5, 5, 0, False, True)
    assert len(points) == 6
    # midpoint of the chain sits on the circle
    assert points[2][0] == pytest.approx(5)
    assert abs(points[2][1]) == pytest.approx(5)


def test_radii_too_small_are_scaled_up():
    params = arc_center_parameters((0, 0), (10, 0), 1, 1, 0.0, False, True)
    assert params.rx == pytest.approx(5)
    assert params.ry == pytest.approx(5)
    assert abs(params.delta) == pytest.approx(math.pi)
    assert params.point_at(params.theta1 + params.delta) == pytest.approx((10, 0), abs=1e-6)


def test_scaled_radii_keep_their_ratio():
    params = arc_center_parameters((0, 0), (40, 0), 2, 1, 0.0, False, True)
    assert params.rx / params.ry == pytest.approx(2)
    assert params.point_at(params.theta1) == pytest.approx((0, 0), abs=1e-6)
    assert params.point_at(params.theta1 + params.delta) == pytest.approx((40, 0), abs=1e-6)


def test_zero_radius_is_rejected():
    with pytest.raises(ValueError):
        arc_to_bezier((0, 0), (10, 0), 0, 5, 0, False, True)


def test_coincident_endpoints_give_no_segments():
    assert arc_to_bezier((3, 4), (3, 4), 5, 5, 0, False, True) == []


@pytest.mark.parametrize("delta, expected", [
    (0.0, 1),
    (math.pi / 2, 1),
    (-math.pi / 2, 1),
    (math.pi / 2 + 0.01, 2),
    (math.pi, 2),
    (-3 * math.pi / 2, 3),
    (2 * math.pi, 4),
])
def test_segment_count(delta, expected):
    assert segment_count(delta) == expected
