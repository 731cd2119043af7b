"""Support routines for path smoothing."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from vecpath.geom import Point
from vecpath.segment import Segment

# Closed paths are extended by this many wrapped points on both ends,
# a cubic spline joint only influences about four neighbours.
SMOOTH_MAX_OVERLAP: int = 4


def solve_first_control_points(rhs: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Solve the tridiagonal system for the first Bezier control points.

    The matrix has 2 in the first row, 4 on the interior diagonal, 2 in the
    last row and 1 on both off-diagonals. Solved by forward elimination and
    back substitution (Thomas algorithm), independently for every column of
    _rhs_.

    Args:
        rhs: Right-hand side of shape (n,) or (n, k).

    Returns:
        The solution, same shape as _rhs_.
    """
    n = rhs.shape[0]
    x = np.empty_like(rhs, dtype=np.float64)
    tmp = np.zeros(n, dtype=np.float64)
    b = 2.0
    x[0] = rhs[0] / b
    # Decomposition and forward substitution
    for i in range(1, n):
        tmp[i] = 1.0 / b
        b = (4.0 if i < n - 1 else 2.0) - tmp[i]
        x[i] = (rhs[i] - x[i - 1]) / b
    # Back substitution
    for i in range(1, n):
        x[n - i - 1] -= tmp[n - i] * x[n - i]
    return x


def smooth_segments(segments: Sequence[Segment], closed: bool) -> None:
    """
    Recompute all handles so the curves through the anchors are C1 smooth.

    Anchor points are not moved. Open chains are solved as one system. Closed
    chains are extended by up to four wrapped points on both ends, solved as
    open, and the overlapping solutions are linearly faded into each other
    so start and end meet without a seam.

    Fewer than three segments are left untouched.
    """
    size = len(segments)
    if size <= 2:
        return

    if closed:
        overlap = min(size, SMOOTH_MAX_OVERLAP)
        n = size + 2 * overlap
    else:
        overlap = 0
        n = size - 1

    knots = np.empty((size + 2 * overlap, 2), dtype=np.float64)
    for i, segment in enumerate(segments):
        knots[i + overlap] = (segment.point.x, segment.point.y)
    if closed:
        # Repeat the last points at the beginning and the first ones at the end
        for i in range(overlap):
            knots[i] = tuple(segments[i + size - overlap].point)
            knots[i + size + overlap] = tuple(segments[i].point)

    rhs = np.empty((n, 2), dtype=np.float64)
    rhs[1 : n - 1] = 4.0 * knots[1 : n - 1] + 2.0 * knots[2:n]
    rhs[0] = knots[0] + 2.0 * knots[1]
    rhs[n - 1] = 3.0 * knots[n - 1]
    ctrl = solve_first_control_points(rhs)

    if closed:
        # Fade linearly between the overlapping beginning and end solutions
        for i in range(overlap):
            j = size + i
            f1 = i / overlap
            f2 = 1.0 - f1
            ctrl[j] = ctrl[i] * f1 + ctrl[j] * f2
            ie = i + overlap
            je = j + overlap
            ctrl[je] = ctrl[ie] * f2 + ctrl[je] * f1
        n -= 1

    handle_in = None
    for i in range(overlap, n - overlap + 1):
        segment = segments[i - overlap]
        point = segment.point
        if handle_in is not None:
            segment.handle_in = handle_in - point
        if i < n:
            segment.handle_out = Point(*ctrl[i]) - point
            if i < n - 1:
                handle_in = Point(*(2.0 * knots[i + 1] - ctrl[i + 1]))
            else:
                handle_in = Point(*((knots[n] + ctrl[n - 1]) / 2.0))
    if closed and handle_in is not None:
        segment = segments[0]
        segment.handle_in = handle_in - segment.point
