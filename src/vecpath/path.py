"""Paths of cubic Bezier segments with cached geometry and drawing commands."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from vecpath.common import AffineTrafo, ChangeFlag, PathUsageError, PointLike, SelectionState
from vecpath.consts import ARC_MAX_SEGMENTS, CHECK_INVARIANTS, DEFAULT_FIT_TOLERANCE, EPSILON, LENGTH_TOLERANCE
from vecpath.curve import Curve, CurveLocation
from vecpath.geom import GeomMath, Point, Rect
from vecpath.path_bounds import get_bounds, get_stroke_bounds
from vecpath.path_polygonizer import PathFlattener
from vecpath.path_processing import PathFitter
from vecpath.path_support import smooth_segments
from vecpath.renderer import DrawingContext, DrawParams, PathRenderer
from vecpath.segment import Segment
from vecpath.style import PathStyle

if TYPE_CHECKING:
    from vecpath.selection import SelectionListener

logger = logging.getLogger(__name__)

SegmentLike = Union[Segment, PointLike]


class Path:
    """
    An ordered list of segments connected by cubic Bezier curves.

    The path owns its segments and keeps their `path` and `index` references
    consistent. The curves are a lazily built view over the segments; once
    built, the list is patched in place by every structural edit instead of
    being rebuilt.

    Length, bounds, stroke bounds, position and orientation are cached and
    dropped together whenever the geometry changes. The stroke bounds alone
    are dropped when only the stroke style changes.
    """

    def __init__(
        self,
        segments: Optional[Iterable[SegmentLike]] = None,
        closed: bool = False,
        style: Optional[PathStyle] = None,
        project: Optional[SelectionListener] = None,
    ):
        """
        Args:
            segments: Initial segments or points. Segments owned by another path are copied.
            closed: Whether the path is closed.
            style: Style used for drawing and stroke bounds. Defaults to PathStyle().
            project: Document notified about selection changes of this path.
        """
        self._segments: List[Segment] = []
        self._curves: Optional[List[Curve]] = None
        self._closed: bool = False
        self._selected_segment_count: int = 0
        self._style: PathStyle = style if style is not None else PathStyle()
        self._project: Optional[SelectionListener] = project
        self._length: Optional[float] = None
        self._bounds: Optional[Rect] = None
        self._stroke_bounds: Optional[Rect] = None
        self._position: Optional[Point] = None
        self._clockwise: Optional[bool] = None
        if segments is not None:
            self._add([Segment.read(s) for s in segments])
        if closed:
            self.closed = True

    def _changed(self, flags: ChangeFlag) -> None:
        """Drop the caches that depend on the changed aspect."""
        if flags & ChangeFlag.GEOMETRY:
            self._length = None
            self._bounds = None
            self._position = None
            self._stroke_bounds = None
            # Orientation is unknown as soon as geometry changes
            self._clockwise = None
        elif flags & ChangeFlag.STROKE:
            self._stroke_bounds = None

    def _segment_changed(self, segment: Segment) -> None:
        self._changed(ChangeFlag.GEOMETRY)

    def _check_invariants(self) -> None:
        segments = self._segments
        count = len(segments)
        for i, segment in enumerate(segments):
            assert segment._path is self, f"segment {i} does not refer to its path"
            assert segment._index == i, f"segment at {i} has index {segment._index}"
        assert self._selected_segment_count == sum(1 for s in segments if s._selection_state), (
            f"selected segment count {self._selected_segment_count} is out of sync"
        )
        if self._curves is not None:
            assert len(self._curves) == self._curve_count(), (
                f"{len(self._curves)} curves for {count} segments (closed={self._closed})"
            )
            for i, curve in enumerate(self._curves):
                assert curve.segment1 is segments[i], f"curve {i} starts at the wrong segment"
                assert curve.segment2 is segments[(i + 1) % count], f"curve {i} ends at the wrong segment"

    def _curve_count(self) -> int:
        count = len(self._segments)
        if self._closed:
            return count if count > 1 else 0
        return max(count - 1, 0)

    ###########################################################################
    # Segments and curves
    ###########################################################################

    @property
    def segments(self) -> List[Segment]:
        """
        The segments of the path, in winding order.

        The returned list is the internal one: use the mutation methods of the
        path to change it.
        """
        return self._segments

    @segments.setter
    def segments(self, segments: Iterable[SegmentLike]) -> None:
        self.set_segments(segments)

    def set_segments(self, segments: Iterable[SegmentLike]) -> None:
        """Replace all segments of the path."""
        new_segments = [Segment.read(s) for s in segments]
        self.set_selected(False)
        for segment in self._segments:
            segment._path = None
            segment._index = None
        self._segments = []
        self._curves = None
        self._add(new_segments)

    @property
    def first_segment(self) -> Optional[Segment]:
        return self._segments[0] if self._segments else None

    @property
    def last_segment(self) -> Optional[Segment]:
        return self._segments[-1] if self._segments else None

    @property
    def curves(self) -> List[Curve]:
        """
        The curves of the path: one per pair of consecutive segments, plus the
        closing curve from the last to the first segment on closed paths.
        """
        if self._curves is None:
            segments = self._segments
            count = len(segments)
            self._curves = [Curve(self, segments[i], segments[(i + 1) % count]) for i in range(self._curve_count())]
            logger.debug("Built %d curves for %d segments", len(self._curves), count)
        return self._curves

    @property
    def first_curve(self) -> Optional[Curve]:
        curves = self.curves
        return curves[0] if curves else None

    @property
    def last_curve(self) -> Optional[Curve]:
        curves = self.curves
        return curves[-1] if curves else None

    @property
    def closed(self) -> bool:
        """bool: If True, a closing curve connects the last segment back to the first."""
        return self._closed

    @closed.setter
    def closed(self, closed: bool) -> None:
        closed = bool(closed)
        if self._closed == closed:
            return
        self._closed = closed
        curves = self._curves
        segments = self._segments
        if curves is not None and len(segments) > 1:
            if closed:
                curves.append(Curve(self, segments[-1], segments[0]))
            else:
                curves.pop()
        self._changed(ChangeFlag.GEOMETRY)
        if CHECK_INVARIANTS:
            self._check_invariants()

    def close_path(self) -> None:
        """Close the path."""
        self.closed = True

    ###########################################################################
    # Mutation
    ###########################################################################

    def _add(self, segs: List[Segment], index: Optional[int] = None) -> List[Segment]:
        """
        Insert already converted segments at _index_ (append if None).

        Segments owned by a path are replaced by copies in _segs_. If the
        curves were built already they are patched in place.
        """
        segments = self._segments
        amount = len(segs)
        if index is None:
            index = len(segments)
        elif not 0 <= index <= len(segments):
            raise IndexError(f"Insertion index {index} out of range for {len(segments)} segments")
        if not amount:
            return segs

        for i in range(amount):
            segment = segs[i]
            if segment._path is not None:
                segment = segs[i] = segment.clone()
                segment._selection_state = SelectionState.NONE
            segment._path = self
            segment._index = index + i
            if segment._selection_state:
                self._update_selection(segment)

        old_count = len(segments)
        segments[index:index] = segs
        for i in range(index + amount, len(segments)):
            segments[i]._index = i

        curves = self._curves
        if curves is not None:
            if old_count < 2:
                # No curve could be patched, build from scratch on next access
                self._curves = None
            elif index > 0:
                # New curves end at the new segments; the curve that started
                # before the insertion now starts at the last new segment
                curves[index - 1 : index - 1] = [
                    Curve(self, segments[i], segments[i + 1]) for i in range(index - 1, index + amount - 1)
                ]
                following = index + amount - 1
                if following < len(curves):
                    curves[following]._segment1 = segments[following]
            else:
                curves[0:0] = [Curve(self, segments[i], segments[i + 1]) for i in range(amount)]
                if self._closed:
                    curves[-1]._segment2 = segments[0]

        self._changed(ChangeFlag.GEOMETRY)
        if CHECK_INVARIANTS:
            self._check_invariants()
        return segs

    def add(self, *segments: SegmentLike) -> Union[Segment, List[Segment]]:
        """
        Add one or more segments (or points) to the end of the path.

        Returns:
            The added segment if one was passed, otherwise the list of added
            segments. These are copies if the originals belonged to another path.
        """
        added = self._add([Segment.read(s) for s in segments])
        return added[0] if len(added) == 1 else added

    def insert(self, index: int, *segments: SegmentLike) -> Union[Segment, List[Segment]]:
        """Insert one or more segments (or points) at _index_, see add()."""
        added = self._add([Segment.read(s) for s in segments], index)
        return added[0] if len(added) == 1 else added

    def add_segments(self, segments: Iterable[SegmentLike]) -> List[Segment]:
        return self._add([Segment.read(s) for s in segments])

    def insert_segments(self, index: int, segments: Iterable[SegmentLike]) -> List[Segment]:
        return self._add([Segment.read(s) for s in segments], index)

    def remove_segment(self, index: int) -> Optional[Segment]:
        """Remove the segment at _index_ and return it, None if there is no such segment."""
        if not 0 <= index < len(self._segments):
            return None
        removed = self.remove_segments(index, index + 1)
        return removed[0] if removed else None

    def remove_segments(self, start: int = 0, end: Optional[int] = None) -> List[Segment]:
        """
        Remove the segments in the index range [start, end).

        Removed segments are detached and deselected. Returns the removed
        segments, an empty list if the range is empty.
        """
        segments = self._segments
        start = max(start, 0)
        end = len(segments) if end is None else min(end, len(segments))
        if start >= end:
            return []
        removed = segments[start:end]
        del segments[start:end]

        for segment in removed:
            if segment._selection_state:
                segment._selection_state = SelectionState.NONE
                self._update_selection(segment)
            segment._path = None
            segment._index = None
        count = len(segments)
        for i in range(start, count):
            segments[i]._index = i

        curves = self._curves
        if curves is not None:
            if count < 2:
                self._curves = None
            else:
                # Curves starting at a removed segment go away; the curve
                # before the gap gets a new end segment
                del curves[start:end]
                if self._closed:
                    curves[start - 1 if start > 0 else -1]._segment2 = segments[start % count]
                elif start > 0:
                    if start < count:
                        curves[start - 1]._segment2 = segments[start]
                    else:
                        del curves[start - 1 :]

        self._changed(ChangeFlag.GEOMETRY)
        if CHECK_INVARIANTS:
            self._check_invariants()
        return removed

    ###########################################################################
    # Selection
    ###########################################################################

    @property
    def project(self) -> Optional[SelectionListener]:
        """The document notified when this path enters or leaves the selection."""
        return self._project

    @project.setter
    def project(self, project: Optional[SelectionListener]) -> None:
        self._project = project

    def _update_selection(self, segment: Segment) -> None:
        """Apply the selection delta of _segment_ to the selected segment count."""
        delta = 1 if segment._selection_state else -1
        self._selected_segment_count += delta
        count = self._selected_segment_count
        if self._project is not None and count == (1 if delta > 0 else 0):
            self._project.select_item(self, count == 1)

    @property
    def selected_segment_count(self) -> int:
        return self._selected_segment_count

    @property
    def selected(self) -> bool:
        """bool: True if at least one segment is (partially) selected."""
        return self._selected_segment_count > 0

    @selected.setter
    def selected(self, selected: bool) -> None:
        self.set_selected(selected)

    def set_selected(self, selected: bool) -> None:
        """Select the anchor points of all segments, or deselect everything."""
        selected = bool(selected)
        segments = self._segments
        if self.selected != selected and segments and self._project is not None:
            self._project.select_item(self, selected)
        self._selected_segment_count = len(segments) if selected else 0
        state = SelectionState.POINT if selected else SelectionState.NONE
        for segment in segments:
            segment._selection_state = state

    @property
    def fully_selected(self) -> bool:
        """bool: True if every segment of a non-empty path is selected."""
        return bool(self._segments) and self._selected_segment_count == len(self._segments)

    @fully_selected.setter
    def fully_selected(self, selected: bool) -> None:
        self.set_selected(selected)

    ###########################################################################
    # Length and locations
    ###########################################################################

    @property
    def length(self) -> float:
        """float: The arc length of all curves of the path."""
        if self._length is None:
            self._length = sum(curve.get_length() for curve in self.curves)
        return self._length

    def get_offset(self, location: CurveLocation) -> Optional[float]:
        """Arc length from the start of the path to _location_, None if it is not on this path."""
        if location is None or location.path is not self:
            return None
        index = location.index
        curves = self.curves
        if index is None or not 0 <= index < len(curves):
            return None
        offset = sum(curve.get_length() for curve in curves[:index])
        return offset + curves[index].get_length(0.0, location.parameter)

    def get_location_at(self, offset: float, is_parameter: bool = False) -> Optional[CurveLocation]:
        """
        Location at an arc length _offset_ from the start of the path.

        If _is_parameter_ is True, the integer part of _offset_ is the curve
        index and the fractional part the parameter on that curve.

        An offset that exceeds the summed curve lengths by at most
        LENGTH_TOLERANCE (relative) maps to the end of the last curve. Larger or
        negative offsets give None.
        """
        curves = self.curves
        if not curves:
            return None
        if is_parameter:
            index = math.floor(offset)
            if index == len(curves) and offset == index:
                return CurveLocation(curves[-1], 1.0)
            if not 0 <= index < len(curves):
                return None
            return CurveLocation(curves[index], offset - index)

        if offset < 0.0:
            return None
        length = 0.0
        for curve in curves:
            start = length
            length += curve.get_length()
            if length >= offset:
                return CurveLocation(curve, curve.get_parameter(offset - start))
        if offset <= length * (1.0 + LENGTH_TOLERANCE):
            return CurveLocation(curves[-1], 1.0)
        return None

    def get_point_at(self, offset: float, is_parameter: bool = False) -> Optional[Point]:
        location = self.get_location_at(offset, is_parameter)
        return location.point if location is not None else None

    def get_tangent_at(self, offset: float, is_parameter: bool = False) -> Optional[Point]:
        """Unit tangent at _offset_, see get_location_at()."""
        location = self.get_location_at(offset, is_parameter)
        return location.tangent if location is not None else None

    def get_normal_at(self, offset: float, is_parameter: bool = False) -> Optional[Point]:
        """Unit normal at _offset_, see get_location_at()."""
        location = self.get_location_at(offset, is_parameter)
        return location.normal if location is not None else None

    ###########################################################################
    # Orientation
    ###########################################################################

    def is_clockwise(self) -> bool:
        """
        Return True if the control polygon of the path winds clockwise.

        Anchors and handle end points are the vertices of a closed polygon
        whose orientation is the sign of the edge sum
            sum((x_i - x_{i+1}) * (y_i + y_{i+1}))
        In a y-down coordinate system a positive sum is clockwise on screen.
        """
        if self._clockwise is not None:
            return self._clockwise
        total = 0.0
        prev_x = prev_y = None
        segments = self._segments
        count = len(segments)
        for i, segment1 in enumerate(segments):
            segment2 = segments[i + 1 if i + 1 < count else 0]
            point1 = segment1.point
            handle1 = segment1.handle_out
            handle2 = segment2.handle_in
            point2 = segment2.point
            for x, y in (
                (point1.x, point1.y),
                (point1.x + handle1.x, point1.y + handle1.y),
                (point2.x + handle2.x, point2.y + handle2.y),
                (point2.x, point2.y),
            ):
                if prev_x is not None:
                    total += (prev_x - x) * (y + prev_y)
                prev_x, prev_y = x, y
        self._clockwise = total > 0.0
        return self._clockwise

    def set_clockwise(self, clockwise: bool) -> None:
        """Reverse the path if its orientation differs from _clockwise_."""
        clockwise = bool(clockwise)
        if self.is_clockwise() != clockwise:
            self.reverse()
            self._clockwise = clockwise

    @property
    def clockwise(self) -> bool:
        return self.is_clockwise()

    @clockwise.setter
    def clockwise(self, clockwise: bool) -> None:
        self.set_clockwise(clockwise)

    def reverse(self) -> None:
        """Reverse the segment order and swap the handles of every segment."""
        clockwise = self._clockwise
        self._segments.reverse()
        for i, segment in enumerate(self._segments):
            segment._swap_handles()
            segment._index = i
        self._curves = None
        self._changed(ChangeFlag.GEOMETRY)
        if clockwise is not None:
            self._clockwise = not clockwise
        if CHECK_INVARIANTS:
            self._check_invariants()

    ###########################################################################
    # Joining and smoothing
    ###########################################################################

    def join(self, path: Optional[Path]) -> bool:
        """
        Append the segments of _path_ to this path and remove _path_.

        The paths are connected at coinciding end points: _path_ is reversed
        if needed so it continues where this path ends (or leads into where it
        starts). The duplicate segment at the contact point is dropped, its
        handle on the far side is kept. If the joined path then starts where
        it ends, it is closed.

        Returns:
            bool: False if no path was given, True otherwise.
        """
        if path is None:
            return False
        if path is self:
            raise PathUsageError("A path cannot be joined with itself")
        other = path._segments
        if not self._segments:
            self._add(list(other))
        elif other:
            last1 = self.last_segment
            if last1.point.equals(path.last_segment.point):
                path.reverse()
            first2 = path.first_segment
            if last1.point.equals(first2.point):
                last1.handle_out = first2.handle_out
                self._add(list(other[1:]))
            else:
                first1 = self.first_segment
                if first1.point.equals(first2.point):
                    path.reverse()
                last2 = path.last_segment
                if first1.point.equals(last2.point):
                    first1.handle_in = last2.handle_in
                    self._add(list(other[:-1]), 0)
                else:
                    self._add(list(other))
        path.remove()

        first1 = self.first_segment
        last1 = self.last_segment
        if len(self._segments) > 1 and last1.point.equals(first1.point):
            first1.handle_in = last1.handle_in
            last1.remove()
            self.closed = True
        self._changed(ChangeFlag.GEOMETRY)
        return True

    def smooth(self) -> None:
        """Recompute all handles for a smooth curve through the unchanged anchor points."""
        smooth_segments(self._segments, self._closed)

    ###########################################################################
    # Drawing commands
    ###########################################################################

    def _current_segment(self) -> Segment:
        if not self._segments:
            raise PathUsageError("The path has no current segment, use move_to() first")
        return self._segments[-1]

    def move_to(self, point: PointLike, y: Optional[float] = None) -> None:
        """Start the path at _point_. Does nothing if the path has segments already."""
        if not self._segments:
            self._add([Segment(Point.read(point, y))])

    def line_to(self, point: PointLike, y: Optional[float] = None) -> None:
        """Add a straight line to _point_. On an empty path this acts as move_to()."""
        self._add([Segment(Point.read(point, y))])

    def cubic_curve_to(self, handle1: PointLike, handle2: PointLike, to: PointLike) -> None:
        """
        Add a cubic Bezier curve from the current segment to _to_.

        Args:
            handle1: Absolute position of the first control point.
            handle2: Absolute position of the second control point.
            to: The end point.

        Raises:
            PathUsageError: If the path is empty.
        """
        handle1 = Point.read(handle1)
        handle2 = Point.read(handle2)
        to = Point.read(to)
        current = self._current_segment()
        current.handle_out = handle1 - current.point
        self._add([Segment(to, handle2 - to)])

    def quadratic_curve_to(self, handle: PointLike, to: PointLike) -> None:
        """
        Add a quadratic Bezier curve, converted exactly to a cubic one.

        For the quadratic A E D the cubic A B C D has
            B = E + (A - E) / 3
            C = E + (D - E) / 3
        """
        handle = Point.read(handle)
        to = Point.read(to)
        current = self._current_segment().point
        self.cubic_curve_to(handle + (current - handle) * (1 / 3), handle + (to - handle) * (1 / 3), to)

    def curve_to(self, through: PointLike, to: PointLike, parameter: float = 0.5) -> None:
        """
        Add a curve to _to_ that passes through _through_ at _parameter_.

        The single quadratic control point is
            (through - (1 - t)^2 * current - t^2 * to) / (2 * (1 - t) * t)

        Raises:
            PathUsageError: If the path is empty or the parameter gives no finite
                control point (t = 0 or t = 1).
        """
        through = Point.read(through)
        to = Point.read(to)
        t = float(parameter)
        t1 = 1.0 - t
        current = self._current_segment().point
        denominator = 2.0 * t * t1
        handle = None
        if denominator != 0.0:
            handle = (through - current * (t1 * t1) - to * (t * t)) / denominator
        if handle is None or not handle.is_finite():
            raise PathUsageError(f"Cannot put a curve through points with parameter={t}")
        self.quadratic_curve_to(handle, to)

    def arc_to(self, to: PointLike, through: Optional[PointLike] = None, clockwise: bool = True) -> None:
        """
        Add a circular arc from the current segment to _to_.

        The circle is the one through the current point, _through_ and _to_.
        Without _through_ a half circle is drawn in the given direction. The
        arc is split into at most four cubic curves of up to 90 degrees; the
        first one only sets the outgoing handle of the current segment.

        If the three points are collinear no circle exists and a straight line
        is added instead.

        Raises:
            PathUsageError: If the path is empty.
        """
        current = self._current_segment()
        start = current.point
        to = Point.read(to)
        if through is None:
            middle = (start + to) / 2
            step = middle - start
            through = middle + Point(step.y, -step.x) if clockwise else middle + Point(-step.y, step.x)
        else:
            through = Point.read(through)

        x1, y1 = start.x, start.y
        x2, y2 = through.x, through.y
        x3, y3 = to.x, to.y
        f = x3 * x3 - x3 * x2 - x1 * x3 + x1 * x2 + y3 * y3 - y3 * y2 - y1 * y3 + y1 * y2
        g = x3 * y1 - x3 * y2 + x1 * y2 - x1 * y3 + x2 * y3 - x2 * y1
        if abs(g) <= EPSILON:
            logger.warning("arc_to: points %s, %s, %s are collinear, adding a straight line", start, through, to)
            self.line_to(to)
            return
        m = f / g
        e = x1 * x2 + y1 * y2 - m * (x1 * y2 - y1 * x2)
        cx = (x1 + x2 - m * (y2 - y1)) / 2
        cy = (y1 + y2 - m * (x1 - x2)) / 2
        radius = math.sqrt(max(cx * cx + cy * cy - e, 0.0))
        angle = math.atan2(y1 - cy, x1 - cx)
        middle_angle = math.atan2(y2 - cy, x2 - cx)
        extent = math.atan2(y3 - cy, x3 - cx)

        # Direction from the through point, span normalized into (-2pi, 2pi]
        diff = middle_angle - angle
        if diff < -math.pi:
            diff += 2 * math.pi
        elif diff > math.pi:
            diff -= 2 * math.pi
        extent -= angle
        if extent <= 0.0:
            extent += 2 * math.pi
        if diff < 0.0:
            extent -= 2 * math.pi

        arc_segs = ARC_MAX_SEGMENTS if abs(extent) >= 2 * math.pi else max(math.ceil(abs(extent) * 2 / math.pi), 1)
        inc = min(max(extent, -2 * math.pi), 2 * math.pi) / arc_segs
        z = 4 / 3 * math.sin(inc / 2) / (1 + math.cos(inc / 2))

        segments = []
        for i in range(arc_segs + 1):
            rel_x = math.cos(angle)
            rel_y = math.sin(angle)
            handle_out = None if i == arc_segs else Point(-z * rel_y * radius, z * rel_x * radius)
            if i == 0:
                current.handle_out = handle_out
            else:
                point = to if i == arc_segs else Point(cx + rel_x * radius, cy + rel_y * radius)
                segments.append(Segment(point, Point(z * rel_y * radius, -z * rel_x * radius), handle_out))
            angle += inc
        self._add(segments)

    def line_by(self, vector: PointLike) -> None:
        """Add a straight line by _vector_ relative to the current point."""
        current = self._current_segment().point
        self.line_to(current + Point.read(vector))

    def curve_by(self, through_vector: PointLike, to_vector: PointLike, parameter: float = 0.5) -> None:
        """curve_to() with points relative to the current point."""
        current = self._current_segment().point
        self.curve_to(current + Point.read(through_vector), current + Point.read(to_vector), parameter)

    def arc_by(self, through_vector: PointLike, to_vector: PointLike) -> None:
        """arc_to() through a point with both points relative to the current point."""
        current = self._current_segment().point
        self.arc_to(current + Point.read(to_vector), through=current + Point.read(through_vector))

    ###########################################################################
    # Bounds
    ###########################################################################

    def get_bounds(self, affine_trafo: Optional[AffineTrafo] = None) -> Optional[Rect]:
        """
        Tight bounds of the path geometry, None for an empty path.

        Args:
            affine_trafo: Optional [a00, a01, a10, a11, b0, b1] transformation
                applied before measuring. Only untransformed bounds are cached.
        """
        if not GeomMath.is_identity(affine_trafo):
            return get_bounds(self._segments, self._closed, affine_trafo)
        if self._bounds is None:
            self._bounds = get_bounds(self._segments, self._closed)
        return self._bounds

    def get_stroke_bounds(self, affine_trafo: Optional[AffineTrafo] = None) -> Optional[Rect]:
        """Bounds including stroke width, joins and caps, None for an empty path."""
        if not GeomMath.is_identity(affine_trafo):
            return get_stroke_bounds(self, affine_trafo)
        if self._stroke_bounds is None:
            self._stroke_bounds = get_stroke_bounds(self)
        return self._stroke_bounds

    @property
    def bounds(self) -> Optional[Rect]:
        return self.get_bounds()

    @property
    def stroke_bounds(self) -> Optional[Rect]:
        return self.get_stroke_bounds()

    @property
    def position(self) -> Optional[Point]:
        """Point: The centre of the bounds, None for an empty path."""
        if self._position is None:
            bounds = self.get_bounds()
            if bounds is not None:
                self._position = bounds.center
        return self._position

    ###########################################################################
    # Style, copies and transformation
    ###########################################################################

    @property
    def style(self) -> PathStyle:
        return self._style

    @style.setter
    def style(self, style: PathStyle) -> None:
        old_style = self._style
        self._style = style
        if old_style.stroke_geometry_differs(style):
            self._changed(ChangeFlag.STROKE)

    def clone(self) -> Path:
        """Return an unattached copy with copied segments, same closedness, style and known orientation."""
        copy = Path([segment.clone() for segment in self._segments], self._closed, self._style)
        if self._clockwise is not None:
            copy._clockwise = self._clockwise
        return copy

    def transform(self, affine_trafo: AffineTrafo) -> None:
        """Apply an affine transformation [a00, a01, a10, a11, b0, b1] to all segments."""
        if not GeomMath.is_identity(affine_trafo):
            for segment in self._segments:
                segment._transform_coordinates(affine_trafo)
        self._changed(ChangeFlag.GEOMETRY)

    def remove(self) -> bool:
        """
        Detach the path from its document, deselecting it first.

        Returns:
            bool: False if the path was not part of a document.
        """
        project = self._project
        if project is None:
            return False
        self.set_selected(False)
        project.remove_item(self)
        self._project = None
        return True

    ###########################################################################
    # Resampling
    ###########################################################################

    def curves_to_points(self, max_distance: float) -> None:
        """
        Replace the segments by straight corners evenly spaced along the path.

        The spacing is the largest value not above _max_distance_ that divides
        the length into equal steps. Closed paths do not repeat the first point.
        """
        if max_distance <= 0:
            raise ValueError(f"max_distance must be positive, got {max_distance}")
        if not self._segments:
            return
        flattener = PathFlattener(self)
        length = flattener.length
        if length == 0.0:
            return
        steps = max(math.ceil(length / max_distance), 1)
        step = length / steps
        count = steps if self._closed else steps + 1
        self.set_segments([Segment(flattener.evaluate(i * step, 0)) for i in range(count)])

    def points_to_curves(self, tolerance: float = DEFAULT_FIT_TOLERANCE) -> None:
        """Replace the segments by curves fitted through the anchor points within _tolerance_."""
        fitter = PathFitter([segment.point for segment in self._segments], tolerance, self._closed)
        self.set_segments(fitter.process())

    ###########################################################################
    # Drawing
    ###########################################################################

    def draw(self, ctx: DrawingContext, params: Optional[DrawParams] = None) -> None:
        """Emit the path to a drawing context."""
        PathRenderer.draw(self, ctx, params if params is not None else DrawParams())

    def __repr__(self):
        return f"Path(segments={len(self._segments)}, closed={self._closed})"
