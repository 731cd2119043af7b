"""Bounding boxes of paths: geometric bounds and stroke bounds."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from vecpath.bezier import BezierCurve
from vecpath.common import AffineTrafo, StrokeCap, StrokeJoin
from vecpath.consts import TOLERANCE
from vecpath.geom import GeomMath, Point, Rect
from vecpath.segment import Segment

if TYPE_CHECKING:
    from vecpath.path import Path


def _segment_coords(segment: Segment, affine_trafo: Optional[AffineTrafo]) -> List[float]:
    """Absolute coordinates [point, handle_in, handle_out] of _segment_, optionally transformed."""
    point = segment.point
    handle_in = point + segment.handle_in
    handle_out = point + segment.handle_out
    if affine_trafo is not None:
        point = GeomMath.transform_point(affine_trafo, point)
        handle_in = GeomMath.transform_point(affine_trafo, handle_in)
        handle_out = GeomMath.transform_point(affine_trafo, handle_out)
    return [point.x, point.y, handle_in.x, handle_in.y, handle_out.x, handle_out.y]


def get_bounds(
    segments: Sequence[Segment],
    closed: bool,
    affine_trafo: Optional[AffineTrafo] = None,
    stroke_padding: Optional[Tuple[float, float]] = None,
) -> Optional[Rect]:
    """
    Tight bounding box of the curves spanned by _segments_.

    Each cubic is treated as two scalar polynomials. The roots of their
    derivatives inside (TOLERANCE, 1 - TOLERANCE) are the extrema; together
    with the anchor points they define the bounds. The roots close to t=0 and
    t=1 are excluded as the anchors are added anyway.

    Args:
        segments: The segments of the path.
        closed: If True, the closing curve from the last to the first segment is included.
        affine_trafo: Optional transformation applied to all coordinates first.
        stroke_padding: Optional (x, y) padding added around the extrema inside the curves.
            The corners at the anchors are handled by the join and cap code.

    Returns:
        Optional[Rect]: the bounds, None for an empty path.
    """
    if not segments:
        return None
    if GeomMath.is_identity(affine_trafo):
        affine_trafo = None

    prev_coords = _segment_coords(segments[0], affine_trafo)
    min_xy = [prev_coords[0], prev_coords[1]]
    max_xy = [prev_coords[0], prev_coords[1]]
    t_min = TOLERANCE
    t_max = 1.0 - t_min

    def add(value: float, padding: float, i: int) -> None:
        left = value - padding
        right = value + padding
        if left < min_xy[i]:
            min_xy[i] = left
        if right > max_xy[i]:
            max_xy[i] = right

    def process_segment(segment: Segment) -> None:
        nonlocal prev_coords
        coords = _segment_coords(segment, affine_trafo)
        for i in range(2):
            v0 = prev_coords[i]  # prev.point
            v1 = prev_coords[i + 4]  # prev.handle_out
            v2 = coords[i + 2]  # segment.handle_in
            v3 = coords[i]  # segment.point
            add(v3, 0.0, i)
            padding = stroke_padding[i] if stroke_padding else 0.0
            for t in BezierCurve.extrema_parameters(v0, v1, v2, v3, t_min, t_max):
                u = 1.0 - t
                value = u * u * u * v0 + 3.0 * u * u * t * v1 + 3.0 * u * t * t * v2 + t * t * t * v3
                add(value, padding, i)
        prev_coords = coords

    for segment in segments[1:]:
        process_segment(segment)
    if closed and len(segments) > 1:
        process_segment(segments[0])

    return Rect(min_xy[0], min_xy[1], max_xy[0], max_xy[1])


def get_pen_padding(radius: float, affine_trafo: Optional[AffineTrafo] = None) -> Tuple[float, float]:
    """
    Horizontal and vertical half-extent of the stroke pen.

    Without a transformation this is just the radius. With a transformation
    the pen circle becomes an ellipse; the extrema of
        x(t) = r * (a00 * cos(t) + a01 * sin(t))
        y(t) = r * (a10 * cos(t) + a11 * sin(t))
    are r * hypot(a00, a01) and r * hypot(a10, a11). Translation does not
    matter for the pen shape.
    """
    if GeomMath.is_identity(affine_trafo):
        return (radius, radius)
    return (
        abs(radius) * math.hypot(affine_trafo[0], affine_trafo[1]),
        abs(radius) * math.hypot(affine_trafo[2], affine_trafo[3]),
    )


def get_stroke_bounds(path: Path, affine_trafo: Optional[AffineTrafo] = None) -> Optional[Rect]:
    """
    Bounds of the stroked outline of _path_: geometry plus joins and caps.

    Falls back to the geometric bounds if the path has no stroke colour or a
    zero stroke width.
    """
    style = path.style
    segments = path.segments
    closed = path.closed
    if not style.stroke_color or not style.stroke_width:
        return get_bounds(segments, closed, affine_trafo)
    if GeomMath.is_identity(affine_trafo):
        affine_trafo = None

    width = style.stroke_width
    radius = width / 2
    padding = get_pen_padding(radius, affine_trafo)
    # The miter limit is relative to the width; half of it is measured below
    miter = style.miter_limit * width / 2
    bounds = get_bounds(segments, closed, affine_trafo, padding)
    if bounds is None:
        return None
    join_bounds = Rect(0.0, 0.0, 2 * padding[0], 2 * padding[1])

    def add(point: Point) -> None:
        nonlocal bounds
        bounds = bounds.include(GeomMath.transform_point(affine_trafo, point) if affine_trafo else point)

    def add_round(segment: Segment) -> None:
        nonlocal bounds
        center = GeomMath.transform_point(affine_trafo, segment.point) if affine_trafo else segment.point
        bounds = bounds.unite(join_bounds.with_center(center))

    def add_bevel_join(curve, t: float) -> None:
        point = curve.get_point(t)
        normal = curve.get_normal(t) * radius
        add(point + normal)
        add(point - normal)

    def add_join(segment: Segment, join: StrokeJoin) -> None:
        curve2 = segment.curve
        curve1 = curve2.previous if curve2 is not None else None
        # Both handles set: the join setting is ignored and round is used
        if join is StrokeJoin.ROUND or (segment.handle_in_if_set and segment.handle_out_if_set) or curve1 is None:
            add_round(segment)
            return
        match join:
            case StrokeJoin.BEVEL:
                add_bevel_join(curve2, 0.0)
                add_bevel_join(curve1, 1.0)
            case StrokeJoin.MITER:
                point = segment.point
                tangent1 = curve1.get_tangent(1.0)
                tangent2 = curve2.get_tangent(0.0)
                normal1 = tangent1.rotate90() * radius
                normal2 = tangent2.rotate90() * radius
                # Outer corner lies against the turning direction
                outward = tangent1 - tangent2
                corner = None
                for sign in (1.0, -1.0):
                    candidate = GeomMath.intersect_lines(
                        point + normal1 * sign, tangent1, point + normal2 * sign, tangent2
                    )
                    if candidate is not None and (candidate - point).dot(outward) > 0.0:
                        corner = candidate
                        break
                if corner is None or point.distance_to(corner) > miter:
                    add_join(segment, StrokeJoin.BEVEL)
                else:
                    add(corner)

    def add_cap(segment: Segment, cap: StrokeCap, t: float) -> None:
        curve = segment.curve
        if curve is None:
            # Single point: only a round cap leaves a mark
            if cap is StrokeCap.ROUND:
                add_round(segment)
            return
        match cap:
            case StrokeCap.ROUND:
                add_round(segment)
            case StrokeCap.BUTT | StrokeCap.SQUARE:
                point = curve.get_point(t)
                normal = curve.get_normal(t) * radius
                if cap is StrokeCap.SQUARE:
                    # Step outwards along the tangent: backwards at the start, forwards at the end
                    tangent = curve.get_tangent(t) * radius
                    point = point - tangent if t == 0.0 else point + tangent
                add(point + normal)
                add(point - normal)

    length = len(segments)
    for i in range(1, length - (0 if closed else 1)):
        add_join(segments[i], style.stroke_join)
    if closed and length > 1:
        add_join(segments[0], style.stroke_join)
    else:
        add_cap(segments[0], style.stroke_cap, 0.0)
        if length > 1:
            add_cap(segments[-1], style.stroke_cap, 1.0)
    return bounds
