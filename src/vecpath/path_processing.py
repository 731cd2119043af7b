"""Curve fitting: rebuild smooth Bezier segments from a sequence of points."""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray

from vecpath.bezier import BezierCurve
from vecpath.common import PointLike
from vecpath.consts import DEFAULT_FIT_TOLERANCE, EPSILON
from vecpath.geom import Point
from vecpath.segment import Segment

logger = logging.getLogger(__name__)

# Reparameterisation rounds before a region is split
FIT_MAX_ITERATIONS: int = 4


###############################################################################
# PathFitter
###############################################################################
class PathFitter:
    """
    Fits a chain of cubic Bezier curves through a sequence of points.

    Recursive least-squares fitting after Schneider ("An Algorithm for
    Automatically Fitting Digitized Curves", Graphics Gems, 1990):
    chord-length parameterisation, a least-squares cubic with fixed end
    tangents, Newton reparameterisation while the error shrinks, and a split
    at the point of maximum error with a shared centre tangent otherwise.

    Consecutive duplicate points are ignored. For closed input the fit runs
    once around the loop and the start and end meet with a common tangent.
    """

    def __init__(self, points: Sequence[PointLike], tolerance: float = DEFAULT_FIT_TOLERANCE, closed: bool = False):
        """
        Args:
            points: The points to fit.
            tolerance: Maximum accepted distance between a point and the fitted curve.
            closed: If True, the points describe a closed loop.
        """
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        unique: List[Point] = []
        for value in points:
            point = Point.read(value)
            if not unique or not unique[-1].equals(point):
                unique.append(point)
        if closed and len(unique) > 1 and unique[0].equals(unique[-1]):
            unique.pop()
        self._closed = closed and len(unique) > 2
        if self._closed:
            unique.append(unique[0])
        self._points: NDArray[np.float64] = np.array([(p.x, p.y) for p in unique], dtype=np.float64).reshape(-1, 2)
        self._tolerance = float(tolerance)
        self._segments: List[Segment] = []

    def process(self) -> List[Segment]:
        """
        Run the fit.

        Returns:
            List[Segment]: New unattached segments. Fewer than two distinct
            points are returned as plain corner segments.
        """
        points = self._points
        count = len(points)
        if count < 2:
            return [Segment(tuple(p)) for p in points]
        self._segments = [Segment(tuple(points[0]))]
        if self._closed:
            # Common tangent through the closing point
            tan1 = self._unit(points[1] - points[-2])
            tan2 = -tan1
        else:
            tan1 = self._unit(points[1] - points[0])
            tan2 = self._unit(points[-2] - points[-1])
        self._fit_cubic(0, count - 1, tan1, tan2)

        segments = self._segments
        if self._closed:
            last = segments.pop()
            segments[0].handle_in = last.handle_in
        logger.debug("Fitted %d points with %d segments", count, len(segments))
        return segments

    @staticmethod
    def _unit(vector: NDArray[np.float64]) -> NDArray[np.float64]:
        length = float(np.hypot(vector[0], vector[1]))
        return vector / length if length > 0.0 else vector

    def _fit_cubic(self, first: int, last: int, tan1: NDArray[np.float64], tan2: NDArray[np.float64]) -> None:
        points = self._points
        if last - first == 1:
            # Two points: handles along the tangents at a third of the distance
            pt1 = points[first]
            pt2 = points[last]
            dist = float(np.hypot(*(pt2 - pt1))) / 3.0
            self._add_curve(np.array([pt1, pt1 + tan1 * dist, pt2 + tan2 * dist, pt2]))
            return

        samples = points[first : last + 1]
        params = self._chord_length_parameterize(samples)
        tolerance_sq = self._tolerance * self._tolerance
        # Errors above this are not improved by reparameterisation
        iteration_error = 4.0 * tolerance_sq
        split = first + (last - first + 1) // 2
        for _ in range(FIT_MAX_ITERATIONS + 1):
            curve = self._generate_bezier(samples, params, tan1, tan2)
            errors = BezierCurve.squared_errors(samples, params, curve)
            max_index = int(np.argmax(errors))
            max_error = float(errors[max_index])
            if max_error < tolerance_sq:
                self._add_curve(curve)
                return
            if 0 < max_index < len(samples) - 1:
                split = first + max_index
            if max_error >= iteration_error:
                break
            params = self._reparameterize(samples, params, curve)
            iteration_error = max_error

        logger.debug("Splitting fit region [%d, %d] at %d", first, last, split)
        tan_center = self._unit((points[split - 1] - points[split + 1]) / 2.0)
        self._fit_cubic(first, split, tan1, tan_center)
        self._fit_cubic(split, last, -tan_center, tan2)

    def _add_curve(self, curve: NDArray[np.float64]) -> None:
        previous = self._segments[-1]
        previous.handle_out = tuple(curve[1] - curve[0])
        self._segments.append(Segment(tuple(curve[3]), tuple(curve[2] - curve[3])))

    @staticmethod
    def _generate_bezier(
        samples: NDArray[np.float64],
        params: NDArray[np.float64],
        tan1: NDArray[np.float64],
        tan2: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        curve = BezierCurve.fit_cubic_with_tangents(samples, params, tuple(tan1), tuple(tan2))
        if curve is None:
            # Degenerate system: Wu/Barsky heuristic
            start = samples[0]
            end = samples[-1]
            alpha = float(np.hypot(*(end - start))) / 3.0
            curve = np.array([start, start + tan1 * alpha, end + tan2 * alpha, end])
        return curve

    @staticmethod
    def _chord_length_parameterize(samples: NDArray[np.float64]) -> NDArray[np.float64]:
        distances = np.concatenate([[0.0], np.cumsum(np.hypot(*np.diff(samples, axis=0).T))])
        total = distances[-1]
        if total <= 0.0:
            return np.linspace(0.0, 1.0, len(samples))
        return distances / total

    @staticmethod
    def _reparameterize(
        samples: NDArray[np.float64], params: NDArray[np.float64], curve: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """One Newton-Raphson step per sample towards the closest curve parameter."""
        t = params
        omt = 1.0 - t
        weights = np.column_stack([omt * omt * omt, 3.0 * omt * omt * t, 3.0 * omt * t * t, t * t * t])
        d1_weights = np.column_stack(
            [-3.0 * omt * omt, 3.0 * omt * (1.0 - 3.0 * t), 3.0 * t * (2.0 - 3.0 * t), 3.0 * t * t]
        )
        d2_weights = np.column_stack([6.0 * omt, 6.0 * (3.0 * t - 2.0), 6.0 * (1.0 - 3.0 * t), 6.0 * t])
        diff = weights @ curve - samples
        d1 = d1_weights @ curve
        d2 = d2_weights @ curve
        numerator = np.einsum("ij,ij->i", diff, d1)
        denominator = np.einsum("ij,ij->i", d1, d1) + np.einsum("ij,ij->i", diff, d2)
        safe = np.abs(denominator) > EPSILON
        result = t.copy()
        result[safe] = t[safe] - numerator[safe] / denominator[safe]
        return np.clip(result, 0.0, 1.0)
