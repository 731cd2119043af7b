"""Path segments: one anchor point plus two handles relative to it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from vecpath.common import AffineTrafo, PointLike, SelectionState
from vecpath.geom import GeomMath, Point

if TYPE_CHECKING:
    from vecpath.curve import Curve
    from vecpath.path import Path


class Segment:
    """
    A segment of a path: an anchor point with an incoming and outgoing handle.

    The handles are stored relative to the anchor point, a zero handle means a
    straight corner on that side. A segment belongs to at most one path at a
    time; the path keeps `path` and `index` up to date.
    """

    __slots__ = ("_point", "_handle_in", "_handle_out", "_path", "_index", "_selection_state")

    def __init__(
        self,
        point: PointLike = (0.0, 0.0),
        handle_in: Optional[PointLike] = None,
        handle_out: Optional[PointLike] = None,
    ):
        """
        Args:
            point: The anchor point.
            handle_in: Incoming handle relative to _point_. Defaults to zero.
            handle_out: Outgoing handle relative to _point_. Defaults to zero.
        """
        self._point = Point.read(point)
        self._handle_in = Point.read(handle_in) if handle_in is not None else Point()
        self._handle_out = Point.read(handle_out) if handle_out is not None else Point()
        self._path: Optional[Path] = None
        self._index: Optional[int] = None
        self._selection_state = SelectionState.NONE

    @classmethod
    def read(cls, value) -> Segment:
        """Return _value_ if it is a Segment, otherwise create a Segment at the point _value_."""
        if isinstance(value, Segment):
            return value
        return cls(value)

    def _changed(self) -> None:
        if self._path is not None:
            self._path._segment_changed(self)

    @property
    def point(self) -> Point:
        """Point: The anchor point of the segment."""
        return self._point

    @point.setter
    def point(self, point: PointLike) -> None:
        self._point = Point.read(point)
        self._changed()

    @property
    def handle_in(self) -> Point:
        """Point: The incoming handle, relative to the anchor point."""
        return self._handle_in

    @handle_in.setter
    def handle_in(self, handle: Optional[PointLike]) -> None:
        self._handle_in = Point.read(handle) if handle is not None else Point()
        self._changed()

    @property
    def handle_out(self) -> Point:
        """Point: The outgoing handle, relative to the anchor point."""
        return self._handle_out

    @handle_out.setter
    def handle_out(self, handle: Optional[PointLike]) -> None:
        self._handle_out = Point.read(handle) if handle is not None else Point()
        self._changed()

    @property
    def handle_in_if_set(self) -> Optional[Point]:
        """The incoming handle, or None if it is zero."""
        return None if self._handle_in.is_zero() else self._handle_in

    @property
    def handle_out_if_set(self) -> Optional[Point]:
        """The outgoing handle, or None if it is zero."""
        return None if self._handle_out.is_zero() else self._handle_out

    def is_linear(self) -> bool:
        """Return True if both handles are zero."""
        return self._handle_in.is_zero() and self._handle_out.is_zero()

    @property
    def path(self) -> Optional[Path]:
        """The path owning this segment, None if unattached."""
        return self._path

    @property
    def index(self) -> Optional[int]:
        """Position of this segment in its path, None if unattached."""
        return self._index

    ###########################################################################
    # Selection
    ###########################################################################

    @property
    def selection_state(self) -> SelectionState:
        return self._selection_state

    @selection_state.setter
    def selection_state(self, state: SelectionState) -> None:
        was_selected = bool(self._selection_state)
        self._selection_state = SelectionState(state)
        if self._path is not None and was_selected != bool(self._selection_state):
            self._path._update_selection(self)

    @property
    def selected(self) -> bool:
        """bool: True if the anchor point is selected."""
        return bool(self._selection_state & SelectionState.POINT)

    @selected.setter
    def selected(self, selected: bool) -> None:
        self.set_selected(SelectionState.POINT, selected)

    def is_selected(self, part: SelectionState = SelectionState.POINT) -> bool:
        """Return True if the given part (point or one of the handles) is selected."""
        return bool(self._selection_state & part)

    def set_selected(self, part: SelectionState, selected: bool) -> None:
        """Select or deselect a part (point, handle_in or handle_out) of the segment."""
        if selected:
            self.selection_state = self._selection_state | part
        else:
            self.selection_state = self._selection_state & ~part

    ###########################################################################
    # Neighbourhood
    ###########################################################################

    @property
    def curve(self) -> Optional[Curve]:
        """
        The curve starting at this segment.

        For the last segment of an open path this is the curve ending here.
        """
        if self._path is None:
            return None
        curves = self._path.curves
        if not curves:
            return None
        index = self._index
        # The last segment of an open path has no curve of its own
        if not self._path.closed and index == len(self._path.segments) - 1:
            index -= 1
        return curves[index]

    @property
    def next(self) -> Optional[Segment]:
        """The following segment, wrapping around on closed paths."""
        if self._path is None:
            return None
        segments = self._path.segments
        if self._index + 1 < len(segments):
            return segments[self._index + 1]
        return segments[0] if self._path.closed else None

    @property
    def previous(self) -> Optional[Segment]:
        """The preceding segment, wrapping around on closed paths."""
        if self._path is None:
            return None
        segments = self._path.segments
        if self._index > 0:
            return segments[self._index - 1]
        return segments[-1] if self._path.closed else None

    def is_first(self) -> bool:
        return self._index == 0

    def is_last(self) -> bool:
        return self._path is not None and self._index == len(self._path.segments) - 1

    ###########################################################################
    # Operations
    ###########################################################################

    def clone(self) -> Segment:
        """Return an unattached copy with the same point and handles (selection is kept)."""
        copy = Segment(self._point, self._handle_in, self._handle_out)
        copy._selection_state = self._selection_state
        return copy

    def reverse(self) -> Segment:
        """Return an unattached copy with swapped handles."""
        return Segment(self._point, self._handle_out, self._handle_in)

    def remove(self) -> bool:
        """Remove this segment from its path. Returns False if it was unattached."""
        if self._path is None:
            return False
        return self._path.remove_segment(self._index) is not None

    def transform(self, affine_trafo: AffineTrafo) -> None:
        """Apply an affine transformation to the anchor point and both handles."""
        self._transform_coordinates(affine_trafo)
        self._changed()

    def _transform_coordinates(self, affine_trafo: AffineTrafo) -> None:
        # Handles are relative, so only the linear part applies to them
        self._point = GeomMath.transform_point(affine_trafo, self._point)
        self._handle_in = GeomMath.transform_vector(affine_trafo, self._handle_in)
        self._handle_out = GeomMath.transform_vector(affine_trafo, self._handle_out)

    def _swap_handles(self) -> None:
        self._handle_in, self._handle_out = self._handle_out, self._handle_in

    def __repr__(self):
        parts = [f"point={self._point.x, self._point.y}"]
        if not self._handle_in.is_zero():
            parts.append(f"handle_in={self._handle_in.x, self._handle_in.y}")
        if not self._handle_out.is_zero():
            parts.append(f"handle_out={self._handle_out.x, self._handle_out.y}")
        return f"Segment({', '.join(parts)})"

