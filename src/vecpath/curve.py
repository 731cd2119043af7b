"""Curves between two segments and locations on them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from vecpath.bezier import BezierCurve
from vecpath.consts import LENGTH_TOLERANCE
from vecpath.geom import Point
from vecpath.segment import Segment

if TYPE_CHECKING:
    from vecpath.path import Path


###############################################################################
# Curve
###############################################################################


class Curve:
    """
    The cubic Bezier curve spanned by two consecutive segments.

    A curve is a view: its control points are read from the segments every
    time, so edits of the segments are visible immediately. The curve list of
    a path only holds references to segments, never copies.

    Control points:
        point1 = segment1.point
        handle1 = segment1.point + segment1.handle_out   (absolute)
        handle2 = segment2.point + segment2.handle_in    (absolute)
        point2 = segment2.point
    """

    __slots__ = ("_path", "_segment1", "_segment2", "_length", "_length_key")

    def __init__(self, path: Optional[Path], segment1: Segment, segment2: Segment):
        self._path = path
        self._segment1 = segment1
        self._segment2 = segment2
        self._length: Optional[float] = None
        self._length_key: Optional[Tuple] = None

    @classmethod
    def from_points(
        cls, point1: Point, handle1: Point, handle2: Point, point2: Point
    ) -> Curve:
        """Create a standalone curve from four absolute control points."""
        point1 = Point.read(point1)
        point2 = Point.read(point2)
        return cls(
            None,
            Segment(point1, None, Point.read(handle1) - point1),
            Segment(point2, Point.read(handle2) - point2, None),
        )

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def segment1(self) -> Segment:
        """The segment this curve starts at."""
        return self._segment1

    @property
    def segment2(self) -> Segment:
        """The segment this curve ends at."""
        return self._segment2

    @property
    def point1(self) -> Point:
        return self._segment1.point

    @property
    def point2(self) -> Point:
        return self._segment2.point

    @property
    def handle1(self) -> Point:
        """Point: The absolute position of the first control handle."""
        return self._segment1.point + self._segment1.handle_out

    @property
    def handle2(self) -> Point:
        """Point: The absolute position of the second control handle."""
        return self._segment2.point + self._segment2.handle_in

    @property
    def values(self) -> Tuple[Tuple[float, float], ...]:
        """The four absolute control points as (x, y) tuples."""
        p1 = self._segment1.point
        h1 = self._segment1.handle_out
        h2 = self._segment2.handle_in
        p2 = self._segment2.point
        return (
            (p1.x, p1.y),
            (p1.x + h1.x, p1.y + h1.y),
            (p2.x + h2.x, p2.y + h2.y),
            (p2.x, p2.y),
        )

    @property
    def index(self) -> Optional[int]:
        """Index of this curve in the curve list of its path (same as segment1.index)."""
        return self._segment1.index

    @property
    def next(self) -> Optional[Curve]:
        if self._path is None:
            return None
        curves = self._path.curves
        index = self.index
        if index + 1 < len(curves):
            return curves[index + 1]
        return curves[0] if self._path.closed and curves else None

    @property
    def previous(self) -> Optional[Curve]:
        if self._path is None:
            return None
        curves = self._path.curves
        index = self.index
        if index > 0:
            return curves[index - 1]
        return curves[-1] if self._path.closed and curves else None

    def is_linear(self) -> bool:
        """Return True if both handles of the curve are zero."""
        return self._segment1.handle_out.is_zero() and self._segment2.handle_in.is_zero()

    ###########################################################################
    # Length and parameters
    ###########################################################################

    def get_length(self, t0: float = 0.0, t1: float = 1.0) -> float:
        """
        Arc length between the parameters _t0_ and _t1_.

        The full length is cached and recomputed as soon as one of the
        control points differs from the cached ones.
        """
        full = t0 == 0.0 and t1 == 1.0
        values = self.values
        if full:
            if self._length is not None and self._length_key == values:
                return self._length
            if self.is_linear():
                length = self.point1.distance_to(self.point2)
            else:
                length = BezierCurve.length(values)
            self._length = length
            self._length_key = values
            return length
        return BezierCurve.length(values, t0, t1)

    @property
    def length(self) -> float:
        return self.get_length()

    def get_parameter(self, length: float, start: float = 0.0) -> float:
        """Curve parameter at which the arc length measured from _start_ equals _length_."""
        return BezierCurve.parameter_at_length(self.values, length, start)

    ###########################################################################
    # Evaluation
    ###########################################################################

    def get_point(self, t: float) -> Point:
        return Point(*BezierCurve.evaluate(self.values, t))

    def get_tangent(self, t: float) -> Point:
        """
        The unit tangent at parameter _t_.

        Where the derivative vanishes (a zero handle at an end point), the
        direction towards the nearest distinct control point is used instead.
        """
        values = self.values
        tangent = Point(*BezierCurve.derivative(values, t))
        if tangent.is_zero():
            points = [Point(*p) for p in values]
            if t < 0.5:
                origin = points[0]
                candidates = points[1:]
                sign = 1.0
            else:
                origin = points[3]
                candidates = points[2::-1]
                sign = -1.0
            for candidate in candidates:
                delta = candidate - origin
                if not delta.is_zero():
                    tangent = delta * sign
                    break
        return tangent.normalize()

    def get_normal(self, t: float) -> Point:
        """The unit normal at parameter _t_: the tangent rotated by +90 degrees."""
        return self.get_tangent(t).rotate90()

    def get_location_at(self, offset: float, is_parameter: bool = False) -> Optional[CurveLocation]:
        """Location on this curve at an arc length _offset_ (or parameter if _is_parameter_)."""
        if is_parameter:
            if not 0.0 <= offset <= 1.0:
                return None
            return CurveLocation(self, offset)
        if not 0.0 <= offset <= self.get_length() * (1.0 + LENGTH_TOLERANCE):
            return None
        return CurveLocation(self, self.get_parameter(offset))

    def reverse(self) -> Curve:
        """Return a standalone copy running in the opposite direction."""
        return Curve(None, self._segment2.reverse(), self._segment1.reverse())

    def __repr__(self):
        return f"Curve({', '.join(str(p) for p in self.values)})"


###############################################################################
# CurveLocation
###############################################################################


class CurveLocation:
    """
    An immutable location on a curve given by the curve and a parameter in [0, 1].

    Point, tangent, normal and offsets are derived on demand.
    """

    __slots__ = ("_curve", "_parameter")

    def __init__(self, curve: Curve, parameter: float):
        self._curve = curve
        self._parameter = float(parameter)

    @property
    def curve(self) -> Curve:
        return self._curve

    @property
    def parameter(self) -> float:
        return self._parameter

    @property
    def index(self) -> Optional[int]:
        """The index of the curve within its path."""
        return self._curve.index

    @property
    def path(self) -> Optional[Path]:
        return self._curve.path

    @property
    def segment(self) -> Segment:
        """The segment of the curve closest to this location (by arc length)."""
        curve = self._curve
        if self._parameter == 0.0:
            return curve.segment1
        if self._parameter == 1.0:
            return curve.segment2
        half = curve.get_length() / 2
        return curve.segment1 if self.curve_offset < half else curve.segment2

    @property
    def point(self) -> Point:
        return self._curve.get_point(self._parameter)

    @property
    def tangent(self) -> Point:
        return self._curve.get_tangent(self._parameter)

    @property
    def normal(self) -> Point:
        return self._curve.get_normal(self._parameter)

    @property
    def curve_offset(self) -> float:
        """Arc length from the start of the curve to this location."""
        return self._curve.get_length(0.0, self._parameter)

    @property
    def offset(self) -> Optional[float]:
        """Arc length from the start of the path to this location."""
        path = self._curve.path
        if path is None:
            return self.curve_offset
        return path.get_offset(self)

    def __eq__(self, other):
        if not isinstance(other, CurveLocation):
            return NotImplemented
        return self._curve is other._curve and self._parameter == other._parameter

    def __hash__(self):
        return hash((id(self._curve), self._parameter))

    def __repr__(self):
        return f"CurveLocation(index={self.index}, parameter={self._parameter})"
