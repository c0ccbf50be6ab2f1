from __future__ import annotations

import math

import pytest

from penturtle import geometry
from penturtle.geometry import Segment, wrap_line


def _approx_xy(xy):
    return pytest.approx(xy, abs=1e-9)


def test_crossing_right_edge_wraps_to_left_edge():
    result = wrap_line((90.0, 0.0), 90.0, 30.0, 100.0, 100.0, wrap=True)

    assert len(result.segments) == 2
    first, second = result.segments
    assert first.start == _approx_xy((90.0, 0.0))
    assert first.end == _approx_xy((100.0, 0.0))
    assert second.start == _approx_xy((-100.0, 0.0))
    assert second.end == _approx_xy((-80.0, 0.0))
    assert result.end == _approx_xy((-80.0, 0.0))


def test_crossing_top_edge_wraps_to_bottom_edge():
    result = wrap_line((0.0, 90.0), 0.0, 30.0, 100.0, 100.0)

    assert len(result.segments) == 2
    assert result.segments[0].end == _approx_xy((0.0, 100.0))
    assert result.segments[1].start == _approx_xy((0.0, -100.0))
    assert result.end == _approx_xy((0.0, -80.0))


def test_wrapping_disabled_draws_single_segment_off_canvas():
    result = wrap_line((90.0, 0.0), 90.0, 30.0, 100.0, 100.0, wrap=False)

    assert len(result.segments) == 1
    assert result.end == _approx_xy((120.0, 0.0))


def test_negative_distance_walks_backwards_and_wraps():
    result = wrap_line((-90.0, 0.0), 90.0, -30.0, 100.0, 100.0)

    assert result.segments[0].end == _approx_xy((-100.0, 0.0))
    assert result.end == _approx_xy((80.0, 0.0))


def test_long_move_wraps_several_times():
    result = wrap_line((0.0, 0.0), 90.0, 450.0, 100.0, 100.0)

    assert len(result.segments) == 3
    assert result.end == _approx_xy((50.0, 0.0))


def test_zero_distance_is_a_no_op():
    result = wrap_line((12.0, -3.0), 33.0, 0.0, 100.0, 100.0)

    assert result.segments == []
    assert result.end == (12.0, -3.0)


def test_axis_parallel_heading_stays_finite():
    result = wrap_line((0.0, 0.0), 0.0, 1000.0, 100.0, 100.0)

    for seg in result.segments:
        for value in (*seg.start, *seg.end):
            assert math.isfinite(value)
    assert result.end[0] == pytest.approx(0.0, abs=1e-9)


def test_corner_crossing_wraps_both_axes(monkeypatch):
    # Exactly equal edge distances on both axes.  The X edge is taken first,
    # but the second crossing then starts on the Y edge and has zero length,
    # so the output is the same whichever axis wraps first.
    monkeypatch.setattr(geometry, "heading_vector", lambda degrees: (0.5, 0.5))

    result = wrap_line((95.0, 95.0), 45.0, 14.0, 100.0, 100.0)

    assert result.segments == [
        Segment((95.0, 95.0), (100.0, 100.0)),
        Segment((-100.0, -100.0), (-98.0, -98.0)),
    ]
    assert result.end == (-98.0, -98.0)


def test_start_outside_canvas_moving_away_never_wraps():
    result = wrap_line((150.0, 0.0), 90.0, 10.0, 100.0, 100.0)

    assert len(result.segments) == 1
    assert result.end == _approx_xy((160.0, 0.0))


def test_degenerate_canvas_does_not_loop():
    result = wrap_line((0.0, 0.0), 90.0, 25.0, 0.0, 0.0)

    assert result.end == _approx_xy((25.0, 0.0))


def test_non_finite_distance_leaves_turtle_in_place():
    result = wrap_line((1.0, 2.0), 10.0, math.inf, 100.0, 100.0)

    assert result.segments == []
    assert result.end == (1.0, 2.0)


@pytest.mark.parametrize("wrap", [True, False])
@pytest.mark.parametrize(
    "start,heading,distance",
    [
        ((0.0, 0.0), 37.0, 523.0),
        ((80.0, -60.0), 200.0, 180.0),
        ((-10.0, 99.0), -45.0, 77.5),
        ((0.0, 0.0), 123.0, -641.0),
    ],
)
def test_segment_lengths_add_up_to_distance(start, heading, distance, wrap):
    result = wrap_line(start, heading, distance, 100.0, 80.0, wrap=wrap)

    assert result.total_length() == pytest.approx(abs(distance), rel=1e-9)


def test_forward_then_backward_without_wrapping_returns_home():
    there = wrap_line((13.0, -7.0), 71.0, 350.0, 100.0, 100.0, wrap=False)
    back = wrap_line(there.end, 71.0, -350.0, 100.0, 100.0, wrap=False)

    assert back.end == pytest.approx((13.0, -7.0), abs=1e-9)


def test_wrapped_segments_stay_on_canvas():
    result = wrap_line((0.0, 0.0), 17.0, 900.0, 100.0, 60.0)

    for seg in result.segments:
        for x, y in (seg.start, seg.end):
            assert -100.0 - 1e-9 <= x <= 100.0 + 1e-9
            assert -60.0 - 1e-9 <= y <= 60.0 + 1e-9


@pytest.mark.parametrize("half_extent", [7.0, 95.0, 380.0])
def test_diagonal_moves_keep_wrapping_on_both_axes(half_extent):
    distance = 40.0 * half_extent
    result = wrap_line((0.0, 0.0), 45.0, distance, half_extent, half_extent)

    limit = half_extent + 1e-6
    assert abs(result.end[0]) <= limit
    assert abs(result.end[1]) <= limit
    for seg in result.segments:
        for value in (*seg.start, *seg.end):
            assert abs(value) <= limit
    assert result.total_length() == pytest.approx(distance)


def test_coordinate_rounded_past_edge_still_wraps():
    # one float step past the top edge while heading up
    y = math.nextafter(100.0, math.inf)
    result = wrap_line((0.0, y), 0.0, 10.0, 100.0, 100.0)

    assert result.end == _approx_xy((0.0, -90.0))
    assert result.total_length() == pytest.approx(10.0)
