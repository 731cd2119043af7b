"""Path flattening: arc-length parameterised polylines of a path."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from vecpath.bezier import BezierCurve
from vecpath.consts import FLATTEN_STEPS
from vecpath.geom import Point

if TYPE_CHECKING:
    from vecpath.path import Path
    from vecpath.renderer import DrawingContext

logger = logging.getLogger(__name__)


class PathFlattener:
    """
    Approximates the curves of a path by a polyline with cumulative arc lengths.

    Every curve is sampled at _steps_ equally spaced parameters (straight
    curves at their two end points only). An arc length offset is mapped to a
    curve and a parameter by linear interpolation between the neighbouring
    samples; points and tangents are then evaluated on the exact curve, on
    straight curves by chord fraction.
    """

    def __init__(self, path: Path, steps: int = FLATTEN_STEPS):
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")
        curves = path.curves
        self._values = [np.asarray(curve.values, dtype=np.float64) for curve in curves]
        self._linear = [curve.is_linear() for curve in curves]
        curve_steps = [1 if linear else steps for linear in self._linear]

        total = sum(s + 1 for s in curve_steps)
        points = np.empty((total, 2), dtype=np.float64)
        params = np.empty(total, dtype=np.float64)
        curve_index = np.empty(total, dtype=np.int64)
        index = 0
        for i, (values, curve_step) in enumerate(zip(self._values, curve_steps)):
            count = BezierCurve.polygonize_cubic_curve_inplace(values, curve_step, points, index)
            params[index : index + count] = np.linspace(0.0, 1.0, curve_step + 1)
            curve_index[index : index + count] = i
            index += count

        distances = np.hypot(*np.diff(points, axis=0).T) if total > 1 else np.empty(0)
        self._points: NDArray[np.float64] = points
        self._params: NDArray[np.float64] = params
        self._curve_index: NDArray[np.int64] = curve_index
        self._offsets: NDArray[np.float64] = np.concatenate([[0.0], np.cumsum(distances)])
        logger.debug("Flattened %d curves into %d samples", len(curves), total)

    @property
    def length(self) -> float:
        """float: Length of the polyline."""
        return float(self._offsets[-1]) if len(self._points) else 0.0

    @property
    def points(self) -> NDArray[np.float64]:
        """The polyline samples, shape (n, 2)."""
        return self._points

    def _locate(self, offset: float) -> Tuple[int, float]:
        """Curve index and parameter at the arc length _offset_ (clamped to the path)."""
        offsets = self._offsets
        i = int(np.searchsorted(offsets, offset, side="left"))
        if i == 0:
            return int(self._curve_index[0]), float(self._params[0])
        if i >= len(offsets):
            return int(self._curve_index[-1]), float(self._params[-1])
        # Samples i - 1 and i always lie on the same curve: every curve
        # repeats its start sample, so a curve change is a zero-length step
        o0 = offsets[i - 1]
        o1 = offsets[i]
        u = (offset - o0) / (o1 - o0) if o1 > o0 else 0.0
        t = self._params[i - 1] + u * (self._params[i] - self._params[i - 1])
        return int(self._curve_index[i]), float(t)

    def evaluate(self, offset: float, kind: int) -> Optional[Point]:
        """
        Evaluate the path at arc length _offset_.

        Args:
            offset: Arc length along the polyline, clamped to [0, length].
            kind: 0 for the point, 1 for the unit tangent.

        Returns:
            Optional[Point]: The point or tangent, None for a path without curves.
        """
        if not self._values:
            return None
        index, t = self._locate(offset)
        values = self._values[index]
        if kind == 0:
            if self._linear[index]:
                return Point.read(values[0] + t * (values[3] - values[0]))
            return Point(*BezierCurve.evaluate(values, t))
        if kind == 1:
            if self._linear[index]:
                return Point.read(values[3] - values[0]).normalize()
            return Point(*BezierCurve.derivative(values, t)).normalize()
        raise ValueError(f"Unknown evaluation kind {kind}")

    def get_point_at(self, offset: float) -> Optional[Point]:
        return self.evaluate(offset, 0)

    def get_tangent_at(self, offset: float) -> Optional[Point]:
        return self.evaluate(offset, 1)

    def draw_part(self, ctx: DrawingContext, start: float, end: float) -> None:
        """
        Emit the part of the path between the arc lengths _start_ and _end_.

        The part is drawn as exact sub-curves: one move_to followed by one
        bezier_curve_to (line_to for straight curves) per touched curve.
        """
        start = max(start, 0.0)
        end = min(end, self.length)
        if not self._values or start >= end:
            return
        index1, t1 = self._locate(start)
        index2, t2 = self._locate(end)
        for index in range(index1, index2 + 1):
            values = self._values[index]
            part_start = t1 if index == index1 else 0.0
            part_end = t2 if index == index2 else 1.0
            if self._linear[index]:
                point1 = values[0] + part_start * (values[3] - values[0])
                point2 = values[0] + part_end * (values[3] - values[0])
                if index == index1:
                    ctx.move_to(*point1)
                ctx.line_to(*point2)
                continue
            part = BezierCurve.part(values, part_start, part_end)
            if index == index1:
                ctx.move_to(*part[0])
            ctx.bezier_curve_to(*part[1], *part[2], *part[3])
