"""Cubic Bezier curve math used by curves, bounds, flattening and fitting."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from vecpath.consts import EPSILON, GAUSS_LEGENDRE_ORDER, PARAMETER_MAX_ITERATIONS

ControlPoints = Union[Sequence[Sequence[float]], NDArray[np.float64]]

# Gauss-Legendre nodes and weights on [-1, 1], computed once.
_GL_NODES, _GL_WEIGHTS = np.polynomial.legendre.leggauss(GAUSS_LEGENDRE_ORDER)


class BezierCurve:
    """Class to handle cubic Bezier curve operations.

    All methods take the four control points p0, p1, p2, p3 as absolute
    coordinates, either as a sequence of (x, y) pairs or as an array of
    shape (4, 2).
    """

    @staticmethod
    def evaluate(points: ControlPoints, t: float) -> Tuple[float, float]:
        """Evaluate B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3."""
        pt0, pt1, pt2, pt3 = points
        omt = 1.0 - t
        w0 = omt * omt * omt
        w1 = 3.0 * omt * omt * t
        w2 = 3.0 * omt * t * t
        w3 = t * t * t
        x = w0 * pt0[0] + w1 * pt1[0] + w2 * pt2[0] + w3 * pt3[0]
        y = w0 * pt0[1] + w1 * pt1[1] + w2 * pt2[1] + w3 * pt3[1]
        return (float(x), float(y))

    @staticmethod
    def derivative(points: ControlPoints, t: float) -> Tuple[float, float]:
        """First derivative B'(t)."""
        pt0, pt1, pt2, pt3 = points
        omt = 1.0 - t
        w0 = 3.0 * omt * omt
        w1 = 6.0 * omt * t
        w2 = 3.0 * t * t
        x = w0 * (pt1[0] - pt0[0]) + w1 * (pt2[0] - pt1[0]) + w2 * (pt3[0] - pt2[0])
        y = w0 * (pt1[1] - pt0[1]) + w1 * (pt2[1] - pt1[1]) + w2 * (pt3[1] - pt2[1])
        return (float(x), float(y))

    @staticmethod
    def _speeds(points_array: NDArray[np.float64], t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Vectorized |B'(t)| for an array of parameters."""
        omt = 1.0 - t
        w0 = (3.0 * omt * omt)[:, None]
        w1 = (6.0 * omt * t)[:, None]
        w2 = (3.0 * t * t)[:, None]
        d = (
            w0 * (points_array[1] - points_array[0])
            + w1 * (points_array[2] - points_array[1])
            + w2 * (points_array[3] - points_array[2])
        )
        return np.hypot(d[:, 0], d[:, 1])

    @classmethod
    def length(cls, points: ControlPoints, t0: float = 0.0, t1: float = 1.0) -> float:
        """
        Arc length of the curve between the parameters _t0_ and _t1_.

        Integrates the speed |B'(t)| with Gauss-Legendre quadrature. The
        integrand is non-negative, so the result grows with _t1_.

        Args:
            points: The four control points.
            t0: Start parameter.
            t1: End parameter.

        Returns:
            float: The arc length (negative if t1 < t0).
        """
        if t0 == t1:
            return 0.0
        points_array = np.asarray(points, dtype=np.float64)
        half = 0.5 * (t1 - t0)
        t = half * _GL_NODES + 0.5 * (t1 + t0)
        return float(half * np.dot(_GL_WEIGHTS, cls._speeds(points_array, t)))

    @classmethod
    def parameter_at_length(cls, points: ControlPoints, length: float, start: float = 0.0) -> float:
        """
        Invert the arc length: find t with length(points, start, t) == _length_.

        Uses Newton iteration, safeguarded by bisection on the bracket
        [start, 1]. Lengths outside [0, length(start, 1)] are clamped.

        Args:
            points: The four control points.
            length: Arc length measured from _start_.
            start: Parameter to measure from.

        Returns:
            float: The parameter in [start, 1].
        """
        if length <= 0.0:
            return start
        points_array = np.asarray(points, dtype=np.float64)
        total = cls.length(points_array, start, 1.0)
        if length >= total:
            return 1.0
        tolerance = EPSILON * max(1.0, total) * 100.0
        lower, upper = start, 1.0
        t = start + (1.0 - start) * length / total
        for _ in range(PARAMETER_MAX_ITERATIONS):
            diff = cls.length(points_array, start, t) - length
            if abs(diff) <= tolerance:
                break
            if diff > 0.0:
                upper = t
            else:
                lower = t
            speed = float(cls._speeds(points_array, np.array([t]))[0])
            candidate = t - diff / speed if speed > EPSILON else lower - 1.0
            # Fall back to bisection when Newton leaves the bracket
            if not lower < candidate < upper:
                candidate = 0.5 * (lower + upper)
            t = candidate
        return t

    @staticmethod
    def extrema_parameters(v0: float, v1: float, v2: float, v3: float, t_min: float, t_max: float) -> List[float]:
        """
        Parameters of the extrema of one coordinate polynomial of the cubic.

        The derivative of the cubic polynomial, divided by 3, is the quadratic
        a*t^2 + b*t + c with the coefficients below. Dividing by 3 leads to
        the same roots with simpler coefficients. Only roots strictly inside
        (t_min, t_max) are returned.

        Args:
            v0, v1, v2, v3: One coordinate of the four control points.
            t_min: Exclusive lower bound for valid roots.
            t_max: Exclusive upper bound for valid roots.

        Returns:
            List[float]: zero, one or two parameters.
        """
        a = 3.0 * (v1 - v2) - v0 + v3
        b = 2.0 * (v0 + v2) - 4.0 * v1
        c = v1 - v0

        roots: List[float] = []
        if a == 0.0:
            if b == 0.0:
                return roots
            t = -c / b
            if t_min < t < t_max:
                roots.append(t)
            return roots

        b2ac = b * b - 4.0 * a * c
        if b2ac < 0.0:
            return roots
        sqrt = math.sqrt(b2ac)
        f = 1.0 / (a * -2.0)
        for t in ((b - sqrt) * f, (b + sqrt) * f):
            if t_min < t < t_max:
                roots.append(t)
        return roots

    @staticmethod
    def split(
        points: ControlPoints, t: float
    ) -> Tuple[Tuple[Tuple[float, float], ...], Tuple[Tuple[float, float], ...]]:
        """Split the curve at _t_ (de Casteljau), returning the control points of both parts."""
        (x0, y0), (x1, y1), (x2, y2), (x3, y3) = ((float(p[0]), float(p[1])) for p in points)
        omt = 1.0 - t
        x4, y4 = omt * x0 + t * x1, omt * y0 + t * y1
        x5, y5 = omt * x1 + t * x2, omt * y1 + t * y2
        x6, y6 = omt * x2 + t * x3, omt * y2 + t * y3
        x7, y7 = omt * x4 + t * x5, omt * y4 + t * y5
        x8, y8 = omt * x5 + t * x6, omt * y5 + t * y6
        x9, y9 = omt * x7 + t * x8, omt * y7 + t * y8
        left = ((x0, y0), (x4, y4), (x7, y7), (x9, y9))
        right = ((x9, y9), (x8, y8), (x6, y6), (x3, y3))
        return left, right

    @classmethod
    def part(cls, points: ControlPoints, t0: float, t1: float) -> Tuple[Tuple[float, float], ...]:
        """Control points of the sub-curve between the parameters _t0_ and _t1_."""
        if t0 > 0.0:
            points = cls.split(points, t0)[1]
            # Map t1 into the parameter range of the remaining part
            t1 = (t1 - t0) / (1.0 - t0) if t0 < 1.0 else 1.0
        if t1 < 1.0:
            points = cls.split(points, t1)[0]
        return tuple((float(p[0]), float(p[1])) for p in points)

    @classmethod
    def polygonize_cubic_curve_python_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: ControlPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer using pure Python.
        Optimized using forward differencing for O(1) per point computation.
        """
        pt0, pt1, pt2, pt3 = points
        p0x, p0y = pt0[0], pt0[1]

        # Exact discrete differences derived from the first curve samples
        h = 1.0 / steps
        b1_x, b1_y = cls.evaluate(points, h)
        b2_x, b2_y = cls.evaluate(points, 2.0 * h)
        b3_x, b3_y = cls.evaluate(points, 3.0 * h)

        dx_first = b1_x - p0x
        dy_first = b1_y - p0y
        dx_second = b2_x - 2.0 * b1_x + p0x
        dy_second = b2_y - 2.0 * b1_y + p0y
        # Third differences are constant for cubic curves
        dx_third = b3_x - 3.0 * b2_x + 3.0 * b1_x - p0x
        dy_third = b3_y - 3.0 * b2_y + 3.0 * b1_y - p0y

        x, y = p0x, p0y
        output_idx = start_index
        if not skip_first:
            output_buffer[output_idx, 0] = x
            output_buffer[output_idx, 1] = y
            output_idx += 1

        for i in range(1, steps + 1):
            x += dx_first
            y += dy_first
            dx_first += dx_second
            dy_first += dy_second
            dx_second += dx_third
            dy_second += dy_third
            if i == steps:
                # Pin the end point to avoid accumulated drift
                x, y = pt3[0], pt3[1]
            output_buffer[output_idx, 0] = x
            output_buffer[output_idx, 1] = y
            output_idx += 1

        return steps + (1 if not skip_first else 0)

    @classmethod
    def polygonize_cubic_curve_numpy_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: ControlPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer using NumPy.
        Uses direct evaluation with vectorized operations.
        """
        points_array = np.asarray(points, dtype=np.float64)

        t = np.linspace(0, 1, steps + 1, dtype=np.float64)
        if skip_first:
            t = t[1:]

        omt = 1 - t
        omt2 = omt**2
        t2 = t**2
        weights = np.column_stack([omt2 * omt, 3 * omt2 * t, 3 * omt * t2, t2 * t])
        curve_points = weights @ points_array

        num_points = len(t)
        end_idx = start_index + num_points
        output_buffer[start_index:end_idx, :2] = curve_points
        return num_points

    @classmethod
    def polygonize_cubic_curve_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: ControlPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer.
        Uses pure Python for small step counts, NumPy for larger ones.

        Args:
            points: Control points as Sequence[Tuple[float, float]] or NDArray[np.float64]
            steps: Number of segments to divide the curve into
            output_buffer: Pre-allocated buffer of shape (n, 2) or wider
            start_index: Index of the first row to write
            skip_first: If True, the start point (t=0) is not written

        Returns:
            Number of points written to buffer
        """
        if steps < 70:
            return cls.polygonize_cubic_curve_python_inplace(points, steps, output_buffer, start_index, skip_first)
        return cls.polygonize_cubic_curve_numpy_inplace(points, steps, output_buffer, start_index, skip_first)

    @classmethod
    def polygonize_cubic_curve(cls, points: ControlPoints, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a cubic Bezier curve into line segments.

        Args:
            points: Control points as Sequence[Tuple[float, float]] or NDArray[np.float64]
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the polygonized points
        """
        result = np.empty((steps + 1, 2), dtype=np.float64)
        cls.polygonize_cubic_curve_inplace(points, steps, result, start_index=0, skip_first=False)
        return result

    @staticmethod
    def fit_cubic_with_tangents(
        xy_points: NDArray[np.float64],
        params: NDArray[np.float64],
        tangent1: Tuple[float, float],
        tangent2: Tuple[float, float],
    ) -> Optional[NDArray[np.float64]]:
        """Least-squares cubic through the first and last sample with fixed end tangents.

        The control points are p1 = p0 + alpha1 * tangent1 and
        p2 = p3 + alpha2 * tangent2; the two scalars alpha1, alpha2 minimize
        the squared distance between the samples and the curve evaluated at
        _params_.

        Args:
            xy_points: Samples of shape (n, 2), n >= 2.
            params: Curve parameter of every sample, shape (n,).
            tangent1: Unit tangent leaving the start point.
            tangent2: Unit tangent leaving the end point backwards.

        Returns:
            Array of shape (4, 2) with the control points, or None if the
            system is singular or the solution is not usable.
        """
        start = xy_points[0]
        end = xy_points[-1]
        tan1 = np.asarray(tangent1, dtype=np.float64)
        tan2 = np.asarray(tangent2, dtype=np.float64)

        omt = 1.0 - params
        omt2 = omt * omt
        t2 = params * params
        w1 = 3.0 * omt2 * params
        w2 = 3.0 * omt * t2

        a1 = w1[:, None] * tan1
        a2 = w2[:, None] * tan2
        base = (omt2 * omt)[:, None] * start + (t2 * params)[:, None] * end
        residual = xy_points - base

        c11 = float(np.sum(a1 * a1))
        c12 = float(np.sum(a1 * a2))
        c22 = float(np.sum(a2 * a2))
        x1 = float(np.sum(a1 * residual))
        x2 = float(np.sum(a2 * residual))

        det = c11 * c22 - c12 * c12
        if abs(det) <= EPSILON or not math.isfinite(det):
            return None
        alpha1 = (x1 * c22 - x2 * c12) / det
        alpha2 = (c11 * x2 - c12 * x1) / det

        chord = float(np.hypot(*(end - start)))
        if not (math.isfinite(alpha1) and math.isfinite(alpha2)):
            return None
        if alpha1 <= EPSILON * chord or alpha2 <= EPSILON * chord:
            return None

        result = np.empty((4, 2), dtype=np.float64)
        result[0] = start
        result[1] = start + alpha1 * tan1
        result[2] = end + alpha2 * tan2
        result[3] = end
        return result

    @staticmethod
    def squared_errors(
        xy_points: NDArray[np.float64], params: NDArray[np.float64], control_points: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Squared distance between every sample and the curve evaluated at its parameter."""
        omt = 1.0 - params
        t2 = params * params
        omt2 = omt * omt

        weights = np.column_stack([omt2 * omt, 3.0 * omt2 * params, 3.0 * omt * t2, t2 * params])
        curve_points = weights @ control_points
        diff = xy_points - curve_points
        return np.einsum("ij,ij->i", diff, diff)
