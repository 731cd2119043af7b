"""Handling geometries: points, rectangles and affine helpers"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from vecpath.common import AffineTrafo
from vecpath.consts import EPSILON


###############################################################################
# Point
###############################################################################
@dataclass(frozen=True)
class Point:
    """
    Immutable 2D point, also used as vector.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def read(cls, value: Union[Point, Sequence[float], float], y: Optional[float] = None) -> Point:
        """
        Convert a point-like value into a Point.

        Accepts either a Point, a sequence (x, y) or two scalars.

        Args:
            value: Point, (x, y) sequence or the x-coordinate if _y_ is given.
            y: The y-coordinate when _value_ is a scalar.

        Returns:
            Point: the converted point

        Raises:
            TypeError: If _value_ cannot be read as a point.
        """
        if y is not None:
            return cls(float(value), float(y))  # type: ignore[arg-type]
        if isinstance(value, Point):
            return value
        try:
            x_val, y_val = value  # type: ignore[misc]
        except (TypeError, ValueError) as err:
            raise TypeError(f"Cannot read a point from {value!r}") from err
        return cls(float(x_val), float(y_val))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def __add__(self, other: Union[Point, Sequence[float]]) -> Point:
        other = Point.read(other)
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Union[Point, Sequence[float]]) -> Point:
        other = Point.read(other)
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    @property
    def length(self) -> float:
        """float: Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """float: Angle of the vector in radians, measured from the positive x-axis."""
        return math.atan2(self.y, self.x)

    def normalize(self, length: float = 1.0) -> Point:
        """Return the vector scaled to the given length (zero vector stays zero)."""
        current = self.length
        if current == 0.0:
            return Point(0.0, 0.0)
        scale = length / current
        return Point(self.x * scale, self.y * scale)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point) -> float:
        return self.x * other.y - self.y * other.x

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def rotate90(self) -> Point:
        """Return the vector rotated by +90 degrees: (x, y) -> (-y, x)."""
        return Point(-self.y, self.x)

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0

    def is_nan(self) -> bool:
        return math.isnan(self.x) or math.isnan(self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def equals(self, other: Point) -> bool:
        """Exact coordinate equality."""
        return self.x == other.x and self.y == other.y

    def is_close(self, other: Union[Point, Sequence[float]], tolerance: float = 1e-9) -> bool:
        other = Point.read(other)
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance

    def __str__(self):
        return f"Point(x={self.x}, y={self.y})"


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def transform_point(affine_trafo: AffineTrafo, point: Union[Point, Sequence[float]]) -> Point:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Point or Tuple/List[float]): 2D point - (x, y)

        Returns:
            Point: the transformed point
        """
        x, y = point
        x_new = float(affine_trafo[0] * x + affine_trafo[1] * y + affine_trafo[4])
        y_new = float(affine_trafo[2] * x + affine_trafo[3] * y + affine_trafo[5])
        return Point(x_new, y_new)

    @staticmethod
    def transform_vector(affine_trafo: AffineTrafo, vector: Union[Point, Sequence[float]]) -> Point:
        """Apply only the linear part (no translation) of _affine_trafo_ to _vector_."""
        x, y = vector
        return Point(
            float(affine_trafo[0] * x + affine_trafo[1] * y),
            float(affine_trafo[2] * x + affine_trafo[3] * y),
        )

    @staticmethod
    def is_identity(affine_trafo: Optional[AffineTrafo]) -> bool:
        """Return True if _affine_trafo_ is None or the identity transformation."""
        if affine_trafo is None:
            return True
        return tuple(float(v) for v in affine_trafo) == (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @staticmethod
    def intersect_lines(point1: Point, vector1: Point, point2: Point, vector2: Point) -> Optional[Point]:
        """
        Intersect two infinite lines given by a point and a direction vector each.

        Returns:
            Optional[Point]: the intersection, or None if the lines are parallel.
        """
        denominator = vector1.cross(vector2)
        if abs(denominator) <= EPSILON:
            return None
        delta = point2 - point1
        t = delta.cross(vector2) / denominator
        return point1 + vector1 * t


###############################################################################
# Rect
###############################################################################
@dataclass
class Rect:
    """
    Axis-aligned rectangle given by its extent.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        """Initialize Rect with coordinates.

        Args:
            xmin: The minimum x-coordinate
            ymin: The minimum y-coordinate
            xmax: The maximum x-coordinate
            ymax: The maximum y-coordinate
        """
        self._xmin = float(xmin)
        self._ymin = float(ymin)
        self._xmax = float(xmax)
        self._ymax = float(ymax)

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @classmethod
    def from_point(cls, point: Point) -> Rect:
        """Create a zero-sized Rect at _point_."""
        return cls(point.x, point.y, point.x, point.y)

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> Rect:
        """Create a Rect of the given size centered on _center_."""
        half_w = width / 2
        half_h = height / 2
        return cls(center.x - half_w, center.y - half_h, center.x + half_w, center.y + half_h)

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the rectangle as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        return self._ymax - self._ymin

    @property
    def center(self) -> Point:
        """Point: The center of the rectangle."""
        return Point((self._xmin + self._xmax) / 2, (self._ymin + self._ymax) / 2)

    def include(self, point: Union[Point, Sequence[float]]) -> Rect:
        """Return the smallest Rect containing this one and _point_."""
        point = Point.read(point)
        return Rect(
            min(self._xmin, point.x),
            min(self._ymin, point.y),
            max(self._xmax, point.x),
            max(self._ymax, point.y),
        )

    def unite(self, other: Rect) -> Rect:
        """Return the smallest Rect containing this one and _other_."""
        return Rect(
            min(self._xmin, other.xmin),
            min(self._ymin, other.ymin),
            max(self._xmax, other.xmax),
            max(self._ymax, other.ymax),
        )

    def expand(self, dx: float, dy: Optional[float] = None) -> Rect:
        """Return this Rect grown by _dx_ horizontally and _dy_ vertically on each side."""
        if dy is None:
            dy = dx
        return Rect(self._xmin - dx, self._ymin - dy, self._xmax + dx, self._ymax + dy)

    def with_center(self, center: Point) -> Rect:
        """Return a Rect of the same size centered on _center_."""
        return Rect.from_center(center, self.width, self.height)

    def contains_point(self, point: Union[Point, Sequence[float]], tolerance: float = 0.0) -> bool:
        point = Point.read(point)
        return (
            self._xmin - tolerance <= point.x <= self._xmax + tolerance
            and self._ymin - tolerance <= point.y <= self._ymax + tolerance
        )

    def contains_rect(self, other: Rect, tolerance: float = 0.0) -> bool:
        return (
            self._xmin - tolerance <= other.xmin
            and self._ymin - tolerance <= other.ymin
            and other.xmax <= self._xmax + tolerance
            and other.ymax <= self._ymax + tolerance
        )

    def is_close(self, other: Rect, tolerance: float = 1e-9) -> bool:
        """Return True if all four coordinates differ by at most _tolerance_."""
        return all(abs(a - b) <= tolerance for a, b in zip(self.extent, other.extent))

    def transform_affine(self, affine_trafo: AffineTrafo) -> Rect:
        """
        Transform the Rect using the given affine transformation [a00, a01, a10, a11, b0, b1].

        All four corners are transformed and enclosed, so the result stays
        axis-aligned for rotations as well.

        Args:
            affine_trafo (List[float]): Affine transformation [a00, a01, a10, a11, b0, b1]

        Returns:
            Rect: The transformed rectangle
        """
        corners = [
            GeomMath.transform_point(affine_trafo, (x, y))
            for x in (self._xmin, self._xmax)
            for y in (self._ymin, self._ymax)
        ]
        xs = [c.x for c in corners]
        ys = [c.y for c in corners]
        return Rect(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def from_dict(cls, data: Dict) -> Rect:
        """Create a Rect instance from a dictionary."""
        return cls(
            xmin=data.get("xmin", 0.0),
            ymin=data.get("ymin", 0.0),
            xmax=data.get("xmax", 0.0),
            ymax=data.get("ymax", 0.0),
        )

    def to_dict(self) -> Dict:
        """Convert the Rect instance to a dictionary."""
        return {
            "xmin": self.xmin,
            "ymin": self.ymin,
            "xmax": self.xmax,
            "ymax": self.ymax,
        }

    def __str__(self):
        """Returns a string representation of the Rect instance."""
        return (
            f"Rect(xmin={self.xmin}, ymin={self.ymin}, "
            f"xmax={self.xmax}, ymax={self.ymax}, "
            f"width={self.width}, height={self.height})"
        )
