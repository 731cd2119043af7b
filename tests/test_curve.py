"""Test module for vecpath.curve

The tests are run using pytest.
These tests cover curves as views on segments and locations on curves.
"""

import math

import pytest

from vecpath.curve import Curve, CurveLocation
from vecpath.geom import Point
from vecpath.path import Path

KAPPA = 4.0 / 3.0 * (math.sqrt(2.0) - 1.0)


@pytest.fixture
def quarter_circle():
    """Quarter circle of radius 100 from (100, 0) to (0, 100)."""
    return Curve.from_points((100, 0), (100, 100 * KAPPA), (100 * KAPPA, 100), (0, 100))


class TestCurve:
    """Control points, length and evaluation."""

    def test_control_points(self, quarter_circle):
        """Handles are absolute on the curve and relative on the segments."""
        assert quarter_circle.point1 == Point(100.0, 0.0)
        assert quarter_circle.handle1.is_close((100.0, 100.0 * KAPPA))
        assert quarter_circle.segment1.handle_out.is_close((0.0, 100.0 * KAPPA))
        assert quarter_circle.values[3] == (0.0, 100.0)
        assert not quarter_circle.is_linear()

    def test_length(self, quarter_circle):
        """The length is close to the true quarter arc."""
        assert quarter_circle.length == pytest.approx(math.pi * 50.0, rel=1e-3)
        assert quarter_circle.get_length(0.0, 0.5) == pytest.approx(quarter_circle.length / 2, rel=1e-9)

    def test_length_cache_follows_segments(self):
        """Editing a segment is visible through the curve, also for the cached length."""
        curve = Curve.from_points((0, 0), (0, 0), (10, 0), (10, 0))
        assert curve.is_linear()
        assert curve.length == pytest.approx(10.0)
        curve.segment2.point = (20, 0)
        assert curve.length == pytest.approx(20.0)

    def test_parameter_round_trip(self, quarter_circle):
        """get_parameter inverts get_length."""
        t = quarter_circle.get_parameter(40.0)
        assert quarter_circle.get_length(0.0, t) == pytest.approx(40.0, rel=1e-7)

    def test_tangent_and_normal(self, quarter_circle):
        """Unit tangent along the circle, normal rotated by +90 degrees."""
        tangent = quarter_circle.get_tangent(0.0)
        assert tangent.is_close((0.0, 1.0))
        assert quarter_circle.get_normal(0.0).is_close((-1.0, 0.0))
        assert quarter_circle.get_tangent(0.5).length == pytest.approx(1.0)

    def test_tangent_with_zero_handles(self):
        """Without handles the tangent at the ends is the chord direction."""
        curve = Curve.from_points((0, 0), (0, 0), (0, 10), (0, 10))
        assert curve.get_tangent(0.0).is_close((0.0, 1.0))
        assert curve.get_tangent(1.0).is_close((0.0, 1.0))

    def test_reverse(self, quarter_circle):
        """The reversed copy runs from the end to the start."""
        reversed_curve = quarter_circle.reverse()
        assert reversed_curve.point1 == quarter_circle.point2
        assert reversed_curve.handle1.is_close(quarter_circle.handle2)
        assert reversed_curve.path is None

    def test_curve_neighbours_in_closed_path(self):
        """next and previous wrap on closed paths."""
        path = Path([(0, 0), (10, 0), (10, 10)], closed=True)
        first, second, third = path.curves
        assert first.next is second
        assert third.next is first
        assert first.previous is third
        assert third.index == 2


class TestCurveLocation:
    """Derived values of curve locations."""

    def test_location_values(self, quarter_circle):
        """Point, tangent and offsets are computed from the curve."""
        location = quarter_circle.get_location_at(0.5, is_parameter=True)
        assert location.point.is_close(quarter_circle.get_point(0.5))
        assert location.tangent.is_close(quarter_circle.get_tangent(0.5))
        assert location.curve_offset == pytest.approx(quarter_circle.length / 2, rel=1e-9)
        assert location.offset == pytest.approx(location.curve_offset)

    def test_nearest_segment(self, quarter_circle):
        """The segment closest by arc length is reported."""
        assert CurveLocation(quarter_circle, 0.2).segment is quarter_circle.segment1
        assert CurveLocation(quarter_circle, 0.8).segment is quarter_circle.segment2

    def test_equality(self, quarter_circle):
        """Locations compare by curve identity and parameter."""
        assert CurveLocation(quarter_circle, 0.5) == CurveLocation(quarter_circle, 0.5)
        assert CurveLocation(quarter_circle, 0.5) != CurveLocation(quarter_circle, 0.25)
        assert len({CurveLocation(quarter_circle, 0.5), CurveLocation(quarter_circle, 0.5)}) == 1

    def test_location_beyond_curve(self, quarter_circle):
        """Offsets outside the curve length or parameters outside [0, 1] give None."""
        length = quarter_circle.length
        assert quarter_circle.get_location_at(length + 1e-3) is None
        assert quarter_circle.get_location_at(-1e-3) is None
        assert quarter_circle.get_location_at(1.5, is_parameter=True) is None
        assert quarter_circle.get_location_at(length).parameter == pytest.approx(1.0)

    def test_offset_on_path(self):
        """The offset of a location on a path includes the preceding curves."""
        path = Path([(0, 0), (10, 0), (10, 10)])
        location = path.get_location_at(15.0)
        assert location.index == 1
        assert location.offset == pytest.approx(15.0)
        assert location.point.is_close((10.0, 5.0), 1e-6)
