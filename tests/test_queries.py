"""
Tests for geometric queries on fitted segments.
"""

import math
import pytest
import numpy as np

from trackfit.core.models.kinds import MotionKind
from trackfit.core.points import PointSequence
from trackfit.core.segments import (
    Segment,
    SegmentArena,
    Which,
    direction_vector,
    initial_vector,
    final_vector,
    distance_traversed,
    snap_to_line,
    parameterize,
    dot_with,
)
from trackfit.core.validation import NoFitForKindError, ValidationError

DTYPES = [np.float32, np.float64]


def horizontal_track(dtype=np.float64):
    return PointSequence.from_points([(float(x), 0.0) for x in range(5)], dtype=dtype)


def quarter_circle_track(dtype=np.float64):
    """Counter-clockwise quarter circle about (2, -1) with radius 3."""
    return PointSequence.from_points(
        [(2.0 + 3.0 * math.cos(math.radians(d)), -1.0 + 3.0 * math.sin(math.radians(d)))
         for d in range(0, 91, 15)],
        dtype=dtype)


class TestHorizontalScenario:
    """Four points along the x axis, fitted as one straight segment."""

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_end_to_end(self, dtype):
        """The line is horizontal, three units long and points along +x."""
        points = PointSequence.from_points([(0, 0), (1, 0), (2, 0), (3, 0)], dtype=dtype)
        segment = Segment.over(points, MotionKind.STRAIGHT, 0, 3)
        params = segment.fit.params
        assert abs(params.a) == pytest.approx(1.0)
        assert params.b == pytest.approx(0.0)
        assert distance_traversed(segment) == pytest.approx(3.0)
        direction = initial_vector(segment)
        assert direction[0] > 0
        assert direction[1] == pytest.approx(0.0, abs=1e-12)

    def test_parallel_coordinate_is_monotonic(self):
        """Points further along the track have larger line coordinates."""
        points = PointSequence.from_points([(0, 1), (1, 2), (2, 3), (3, 4)])
        segment = Segment.over(points, MotionKind.STRAIGHT, 0, 3)
        coords = [parameterize(segment, points[i]) for i in range(4)]
        assert coords == sorted(coords) or coords == sorted(coords, reverse=True)
        assert all(segment.squared_error(points[i]) == pytest.approx(0.0, abs=1e-12) for i in range(4))
        assert segment.squared_error((10.0, 11.0)) == pytest.approx(0.0, abs=1e-9)


class TestDirectionVector:
    """Tests for direction vectors."""

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_horizontal_line(self, dtype):
        """Travel along +x gives a +x direction as long as the segment."""
        segment = Segment.over(horizontal_track(dtype), MotionKind.STRAIGHT, 0, 4)
        np.testing.assert_allclose(initial_vector(segment), [4.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(final_vector(segment), [4.0, 0.0], atol=1e-9)

    def test_direction_is_projected_onto_line(self):
        """Noise perpendicular to the line does not change the direction."""
        points = PointSequence.from_points([(0.0, 0.3), (1.0, -0.3), (2.0, -0.3), (3.0, 0.3)])
        segment = Segment.over(points, MotionKind.STRAIGHT, 0, 3)
        vector = initial_vector(segment)
        assert vector[1] == pytest.approx(0.0, abs=1e-9)
        assert vector[0] == pytest.approx(3.0)

    def test_reverse_travel(self):
        """Travel along -x gives a -x direction."""
        points = PointSequence.from_points([(float(-x), 1.0) for x in range(5)])
        segment = Segment.over(points, MotionKind.STRAIGHT, 0, 4)
        np.testing.assert_allclose(initial_vector(segment), [-4.0, 0.0], atol=1e-9)

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_arc_uses_midpoint_tangent(self, dtype):
        """Arc directions follow the tangent at the chord midpoint."""
        points = quarter_circle_track(dtype)
        segment = Segment.over(points, MotionKind.ARC, 0, len(points) - 1)
        np.testing.assert_allclose(initial_vector(segment), [-3.0, 3.0], atol=1e-4)

    def test_dwell_uses_raw_displacement(self):
        """Dwell directions are the plain displacement between the ends."""
        points = PointSequence.from_points([(0.0, 0.0), (0.5, 0.2), (1.0, 2.0)])
        segment = Segment.over(points, MotionKind.DWELL, 0, 2)
        np.testing.assert_allclose(initial_vector(segment), [1.0, 2.0])

    def test_endpoint_intervals(self):
        """Endpoints split the segment into separately queried intervals."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        segment.endpoints = [0, 1, 4]
        np.testing.assert_allclose(direction_vector(segment, Which.INITIAL), [1.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(direction_vector(segment, 'final'), [3.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(direction_vector(segment, Which.NTH, 1), [3.0, 0.0], atol=1e-9)

    def test_nth_out_of_range_raises(self):
        """Asking for a missing interval is an error."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        segment.endpoints = [0, 4]
        with pytest.raises(ValidationError):
            direction_vector(segment, Which.NTH, 1)

    @pytest.mark.parametrize("kind", [MotionKind.WEIRD, MotionKind.CLUTTER])
    def test_fitless_kinds_raise(self, kind):
        """Kinds without a fit have no direction."""
        segment = Segment.over(horizontal_track(), kind, 0, 4)
        with pytest.raises(NoFitForKindError):
            initial_vector(segment)


class TestDistanceTraversed:
    """Tests for distance along a segment."""

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_straight_distance(self, dtype):
        """Straight segments report the distance between their ends."""
        segment = Segment.over(horizontal_track(dtype), MotionKind.STRAIGHT, 0, 4)
        assert distance_traversed(segment) == pytest.approx(4.0)

    def test_distance_sums_endpoint_intervals(self):
        """With endpoints the total is the sum over the intervals."""
        points = PointSequence.from_points([(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)])
        segment = Segment.over(points, MotionKind.STRAIGHT, 0, 4)
        segment.endpoints = [0, 2, 4]
        assert distance_traversed(segment, 0) == pytest.approx(2.0)
        assert distance_traversed(segment, 1) == pytest.approx(2.0)
        assert distance_traversed(segment) == pytest.approx(4.0)

    def test_out_of_range_interval_is_zero(self):
        """Intervals that do not exist have zero length."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        assert distance_traversed(segment, 3) == 0.0
        segment.endpoints = [0, 4]
        assert distance_traversed(segment, 1) == 0.0
        assert distance_traversed(segment, -1) == 0.0

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_arc_reports_arclength(self, dtype):
        """Arcs report R times the swept angle."""
        points = quarter_circle_track(dtype)
        segment = Segment.over(points, MotionKind.ARC, 0, len(points) - 1)
        assert distance_traversed(segment) == pytest.approx(3.0 * math.pi / 2, abs=1e-4)


class TestSnapToLine:
    """Tests for projecting points onto the fitted curve."""

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_line_snap_is_idempotent(self, dtype):
        """Snapping twice gives the same point, in the input precision."""
        segment = Segment.over(horizontal_track(dtype), MotionKind.STRAIGHT, 0, 4)
        once = snap_to_line(segment, np.array([2.0, 5.0], dtype=dtype))
        twice = snap_to_line(segment, once)
        assert once.dtype == dtype
        np.testing.assert_allclose(once, [2.0, 0.0], atol=1e-6)
        np.testing.assert_allclose(twice, once, atol=1e-6)

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_arc_snap_is_idempotent(self, dtype):
        """Points are pulled radially onto the circle."""
        points = quarter_circle_track(dtype)
        segment = Segment.over(points, MotionKind.ARC, 0, len(points) - 1)
        once = snap_to_line(segment, np.array([8.0, -1.0], dtype=dtype))
        twice = snap_to_line(segment, once)
        assert once.dtype == dtype
        np.testing.assert_allclose(once, [5.0, -1.0], atol=1e-4)
        np.testing.assert_allclose(twice, once, atol=1e-4)

    def test_line_snap_corrects_one_side_only(self):
        """Points with a negative offset from the line come back unchanged."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        assert segment.fit.offset((2.0, -5.0)) < 0
        np.testing.assert_allclose(snap_to_line(segment, (2.0, -5.0)), [2.0, -5.0])

    def test_arc_centre_is_unchanged(self):
        """The circle centre has no radial direction to snap along."""
        points = quarter_circle_track()
        segment = Segment.over(points, MotionKind.ARC, 0, len(points) - 1)
        centre = segment.fit.center()
        np.testing.assert_allclose(snap_to_line(segment, centre), centre)

    def test_other_kinds_unchanged(self):
        """Dwell segments leave points where they are."""
        segment = Segment.over(horizontal_track(), MotionKind.DWELL, 0, 4)
        np.testing.assert_allclose(snap_to_line(segment, (7.0, 3.0)), [7.0, 3.0])

    def test_integer_input_returns_float64(self):
        """Non-floating input is snapped in float64."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        assert snap_to_line(segment, np.array([2, 5])).dtype == np.float64


class TestParameterize:
    """Tests for positions along the curve."""

    def test_line_parameter_tracks_distance(self):
        """Parameters along a line differ by the distance between points."""
        segment = Segment.over(horizontal_track(), MotionKind.STRAIGHT, 0, 4)
        assert abs(parameterize(segment, (3.0, 0.0)) - parameterize(segment, (1.0, 0.0))) == pytest.approx(2.0)

    def test_arc_parameter_is_angle(self):
        """Parameters along an arc are angles about the centre."""
        points = quarter_circle_track()
        segment = Segment.over(points, MotionKind.ARC, 0, len(points) - 1)
        assert parameterize(segment, (2.0, 2.0)) == pytest.approx(math.pi / 2, abs=1e-6)

    def test_dwell_parameter_is_zero(self):
        segment = Segment.over(horizontal_track(), MotionKind.DWELL, 0, 4)
        assert parameterize(segment, (1.0, 1.0)) == 0.0


class TestParentQueries:
    """Tests for queries on segments that hold children instead of a fit."""

    def test_arc_parent_has_no_curve(self):
        """Curve queries on an adopted arc run raise instead of reading a fit."""
        points = quarter_circle_track()
        arena = SegmentArena(points)
        parent = arena[arena.adopt([arena.create(MotionKind.ARC, 0, 2),
                                    arena.create(MotionKind.ARC, 3, 6)])]
        assert parent.fit is None
        with pytest.raises(NoFitForKindError):
            distance_traversed(parent)
        with pytest.raises(NoFitForKindError):
            snap_to_line(parent, (2.0, 0.0))
        with pytest.raises(NoFitForKindError):
            parameterize(parent, (2.0, 0.0))

    def test_straight_parent_measures_chord(self):
        """A straight parent still reports the distance between its ends."""
        arena = SegmentArena(horizontal_track())
        parent = arena[arena.adopt([arena.create(MotionKind.STRAIGHT, 0, 1),
                                    arena.create(MotionKind.STRAIGHT, 2, 4)])]
        assert distance_traversed(parent) == pytest.approx(4.0)
        with pytest.raises(NoFitForKindError):
            snap_to_line(parent, (2.0, 5.0))
        with pytest.raises(NoFitForKindError):
            parameterize(parent, (2.0, 0.0))
        with pytest.raises(NoFitForKindError):
            initial_vector(parent)


class TestDotWith:
    """Tests for alignment between neighbouring segments."""

    def test_continuing_straight_on(self):
        """Two segments along the same line align with dot 1."""
        points = PointSequence.from_points([(float(x), 0.0) for x in range(10)])
        first = Segment.over(points, MotionKind.STRAIGHT, 0, 4)
        second = Segment.over(points, MotionKind.STRAIGHT, 5, 9)
        assert dot_with(first, second) == pytest.approx(1.0)
        assert dot_with(second, first) == pytest.approx(1.0)

    def test_reversal(self):
        """Turning back along the same line gives dot -1."""
        xs = [0, 1, 2, 3, 4, 3, 2, 1, 0, -1]
        points = PointSequence.from_points([(float(x), 0.0) for x in xs])
        first = Segment.over(points, MotionKind.STRAIGHT, 0, 4)
        second = Segment.over(points, MotionKind.STRAIGHT, 5, 9)
        assert dot_with(first, second) == pytest.approx(-1.0)

    def test_right_angle(self):
        """A right-angle turn gives dot 0."""
        points = PointSequence.from_points([(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (2, 3)])
        first = Segment.over(points, MotionKind.STRAIGHT, 0, 2)
        second = Segment.over(points, MotionKind.STRAIGHT, 3, 5)
        assert dot_with(first, second) == pytest.approx(0.0, abs=1e-9)

    def test_zero_length_direction_is_nan(self):
        """A single-point dwell has no direction to compare."""
        points = PointSequence.from_points([(0, 0), (1, 0), (2, 0), (3, 0)])
        dwell = Segment.over(points, MotionKind.DWELL, 0, 0)
        line = Segment.over(points, MotionKind.STRAIGHT, 1, 3)
        assert math.isnan(dot_with(dwell, line))
