"""Test module for the segment list bookkeeping of vecpath.path

The tests are run using pytest.
These tests ensure that indices, curve lists, selection counts and
caches stay consistent under every kind of structural edit.
"""

import random

import pytest

from vecpath.common import ChangeFlag, SelectionState
from vecpath.geom import Point
from vecpath.path import Path
from vecpath.segment import Segment
from vecpath.style import PathStyle


def assert_consistent(path: Path) -> None:
    """Every index is the true position and the curve list matches the segments."""
    segments = path.segments
    count = len(segments)
    for i, segment in enumerate(segments):
        assert segment.index == i, f"segment at {i} has index {segment.index}"
        assert segment.path is path
    expected = count if path.closed and count > 1 else max(count - 1, 0)
    curves = path.curves
    assert len(curves) == expected, f"{len(curves)} curves for {count} segments, closed={path.closed}"
    for i, curve in enumerate(curves):
        assert curve.segment1 is segments[i]
        assert curve.segment2 is segments[(i + 1) % count]


###############################################################################
# Construction
###############################################################################


class TestConstruction:
    """Creating paths."""

    def test_empty_path(self):
        """An empty path has no segments, curves or bounds."""
        path = Path()
        assert path.segments == []
        assert path.curves == []
        assert path.first_segment is None and path.last_curve is None
        assert path.length == 0.0
        assert path.bounds is None
        assert path.position is None

    def test_points_become_segments(self):
        """Points and segments are accepted together."""
        path = Path([(0, 0), Segment((10, 0), handle_in=(-5, 0)), Point(10, 10)])
        assert len(path.segments) == 3
        assert path.segments[1].handle_in == Point(-5.0, 0.0)
        assert_consistent(path)

    def test_closed_single_segment_has_no_curves(self):
        """A closed path needs two segments for a closing curve."""
        path = Path([(5, 5)], closed=True)
        assert path.curves == []
        path.add((10, 10))
        assert len(path.curves) == 2
        assert_consistent(path)


###############################################################################
# Insertion and removal
###############################################################################


class TestMutation:
    """add, insert, remove and replace."""

    def test_consistency_scan_is_opt_in(self, monkeypatch):
        """Without the flag, edits never run the full consistency scan."""

        def fail(path):
            raise AssertionError("consistency scan ran")

        monkeypatch.setattr("vecpath.path.CHECK_INVARIANTS", False)
        monkeypatch.setattr(Path, "_check_invariants", fail)
        path = Path()
        path.move_to(0, 0)
        for i in range(1, 50):
            path.line_to(i, i % 3)
        path.closed = True
        path.remove_segments(10, 20)
        path.reverse()
        assert len(path.curves) == 40

    def test_segments_of_other_path_are_copied(self):
        """A segment owned by another path is cloned, never shared."""
        source = Path([(0, 0), (1, 1)])
        target = Path()
        added = target.add(source.segments[1])
        assert added is not source.segments[1]
        assert added.point == Point(1.0, 1.0)
        assert source.segments[1].path is source
        assert added.path is target

    def test_add_returns_segment_or_list(self):
        """One argument gives one segment, several give a list."""
        path = Path()
        single = path.add((0, 0))
        assert isinstance(single, Segment)
        several = path.add((1, 0), (2, 0))
        assert [s.index for s in several] == [1, 2]

    @pytest.mark.parametrize("closed", [False, True])
    def test_insert_patches_built_curves(self, closed):
        """Insertion keeps a built curve list in sync without rebuilding it."""
        path = Path([(0, 0), (10, 0), (10, 10), (0, 10)], closed=closed)
        curves = path.curves
        kept_first = curves[0]
        path.insert(2, (20, 5), (15, 8))
        assert path.curves is curves
        assert curves[0] is kept_first
        assert_consistent(path)
        path.insert(0, (-5, -5))
        assert_consistent(path)
        path.add((-10, 5), (-10, 0))
        assert_consistent(path)

    @pytest.mark.parametrize("closed", [False, True])
    @pytest.mark.parametrize("start,end", [(0, 1), (1, 3), (3, 5), (0, 5), (2, 4), (4, 5)])
    def test_remove_patches_built_curves(self, closed, start, end):
        """Removal of any range keeps a built curve list in sync."""
        path = Path([(0, 0), (10, 0), (10, 10), (0, 10), (-5, 5)], closed=closed)
        path.curves
        removed = path.remove_segments(start, end)
        assert len(removed) == end - start
        assert all(s.path is None and s.index is None for s in removed)
        assert_consistent(path)

    def test_remove_segment_out_of_range(self):
        """Removing a missing index gives None."""
        path = Path([(0, 0)])
        assert path.remove_segment(3) is None
        assert path.remove_segment(0).point == Point(0.0, 0.0)
        assert path.segments == []

    def test_remove_segments_defaults_to_all(self):
        """Without arguments every segment is removed."""
        path = Path([(0, 0), (1, 1), (2, 2)])
        assert len(path.remove_segments()) == 3
        assert path.segments == []

    def test_insert_index_out_of_range(self):
        """An insertion index beyond the end raises IndexError."""
        path = Path([(0, 0)])
        with pytest.raises(IndexError):
            path.insert(5, (1, 1))

    def test_set_segments_detaches_old(self):
        """Replacing the segments detaches the previous ones."""
        path = Path([(0, 0), (1, 1)])
        old = list(path.segments)
        path.segments = [(5, 5), (6, 6), (7, 7)]
        assert all(s.path is None for s in old)
        assert len(path.segments) == 3
        assert_consistent(path)

    def test_toggle_closed_patches_curves(self):
        """Closing adds the closing curve, opening removes it."""
        path = Path([(0, 0), (10, 0), (10, 10)])
        curves = path.curves
        path.close_path()
        assert path.curves is curves and len(curves) == 3
        assert_consistent(path)
        path.closed = False
        assert len(curves) == 2
        assert_consistent(path)

    def test_random_edit_sequence(self):
        """Random edits never break the bookkeeping."""
        rng = random.Random(1234)
        path = Path([(0, 0), (1, 0)])
        for step in range(200):
            count = len(path.segments)
            action = rng.random()
            if step % 7 == 0:
                path.curves
            if action < 0.4 or count < 2:
                index = rng.randint(0, count)
                points = [(rng.uniform(-50, 50), rng.uniform(-50, 50)) for _ in range(rng.randint(1, 3))]
                path.insert_segments(index, points)
            elif action < 0.75:
                start = rng.randint(0, count - 1)
                path.remove_segments(start, rng.randint(start + 1, count))
            elif action < 0.9:
                path.closed = not path.closed
            else:
                path.reverse()
            assert_consistent(path)


###############################################################################
# Selection
###############################################################################


class RecordingDocument:
    """Selection listener collecting every notification."""

    def __init__(self):
        self.events = []

    def select_item(self, item, selected):
        self.events.append(("select", selected))

    def remove_item(self, item):
        self.events.append(("remove", None))


class TestSelection:
    """Selected segment count and document notifications."""

    def test_notifications_only_on_transitions(self):
        """The document hears about 0 -> 1 and 1 -> 0 only."""
        document = RecordingDocument()
        path = Path([(0, 0), (10, 0), (10, 10)], project=document)
        path.segments[0].selected = True
        path.segments[1].selected = True
        path.segments[0].selected = False
        assert document.events == [("select", True)]
        path.segments[1].selected = False
        assert document.events == [("select", True), ("select", False)]
        assert path.selected_segment_count == 0

    def test_adding_selected_segments_counts(self):
        """Selected segments added to a path raise the count."""
        document = RecordingDocument()
        path = Path(project=document)
        segment = Segment((1, 1))
        segment.selected = True
        path.add(segment)
        assert path.selected_segment_count == 1
        assert document.events == [("select", True)]

    def test_copied_segment_starts_deselected(self):
        """A selected segment taken from another path is added as an unselected copy."""
        source = Path([(0, 0), (1, 1)])
        source.segments[1].selected = True
        document = RecordingDocument()
        target = Path(project=document)
        added = target.add(source.segments[1])
        assert not added.selected
        assert target.selected_segment_count == 0
        assert document.events == []
        assert source.segments[1].selected

    def test_removing_selected_segments_counts(self):
        """Removed selected segments are deselected and uncounted."""
        path = Path([(0, 0), (10, 0), (10, 10)])
        path.segments[1].selected = True
        path.segments[2].set_selected(SelectionState.HANDLE_OUT, True)
        assert path.selected_segment_count == 2
        removed = path.remove_segments(1, 3)
        assert path.selected_segment_count == 0
        assert all(s.selection_state == SelectionState.NONE for s in removed)

    def test_path_selection(self):
        """Selecting the path selects every anchor point."""
        document = RecordingDocument()
        path = Path([(0, 0), (10, 0)], project=document)
        path.selected = True
        assert path.fully_selected
        assert all(s.selected for s in path.segments)
        path.selected = True
        assert document.events == [("select", True)]
        path.fully_selected = False
        assert not path.selected
        assert document.events == [("select", True), ("select", False)]

    def test_remove_path_from_document(self):
        """A removed path is deselected and detached from its document."""
        document = RecordingDocument()
        path = Path([(0, 0), (10, 0)], project=document)
        path.selected = True
        assert path.remove()
        assert document.events == [("select", True), ("select", False), ("remove", None)]
        assert path.project is None
        assert not path.remove()


###############################################################################
# Caches
###############################################################################


class TestCaches:
    """Invalidation of cached values."""

    def test_geometry_change_drops_everything(self):
        """Length, bounds and orientation are recomputed after an edit."""
        path = Path([(0, 0), (10, 0), (10, 10)], closed=True)
        assert path.bounds.extent == (0.0, 0.0, 10.0, 10.0)
        assert path.is_clockwise()
        path.segments[1].point = (-10, 0)
        assert path.bounds.extent == (-10.0, 0.0, 10.0, 10.0)
        assert not path.is_clockwise()

    def test_stroke_change_keeps_geometry(self):
        """A stroke style change only drops the stroke bounds."""
        path = Path([(0, 0), (10, 0)], style=PathStyle(stroke_color="black", stroke_width=2.0))
        bounds = path.bounds
        assert path.stroke_bounds.extent == (0.0, -1.0, 10.0, 1.0)
        path.style = PathStyle(stroke_color="black", stroke_width=4.0)
        assert path.bounds is bounds
        assert path.stroke_bounds.extent == (0.0, -2.0, 10.0, 2.0)

    def test_non_geometry_style_change_keeps_stroke_bounds(self):
        """Changing only the fill keeps the cached stroke bounds."""
        path = Path([(0, 0), (10, 0)], style=PathStyle(stroke_color="black"))
        stroke_bounds = path.stroke_bounds
        path.style = PathStyle(stroke_color="black", fill_color="red")
        assert path.stroke_bounds is stroke_bounds

    def test_changed_stroke_flag(self):
        """The STROKE signal leaves the geometric bounds alone."""
        path = Path([(0, 0), (10, 0)])
        bounds = path.bounds
        path._changed(ChangeFlag.STROKE)
        assert path.bounds is bounds

    def test_clone(self):
        """A clone copies segments, closedness, style and known orientation."""
        style = PathStyle(stroke_color="blue")
        path = Path([(0, 0), (10, 0), (10, 10)], closed=True, style=style)
        path.is_clockwise()
        copy = path.clone()
        assert copy.closed and copy.style is style
        assert copy._clockwise is True
        assert all(a is not b and a.point == b.point for a, b in zip(path.segments, copy.segments))

    def test_transform(self):
        """transform moves anchors and scales handles."""
        path = Path([Segment((0, 0), handle_out=(1, 0)), (10, 0)])
        path.transform([2, 0, 0, 2, 5, 5])
        assert path.segments[0].point == Point(5.0, 5.0)
        assert path.segments[0].handle_out == Point(2.0, 0.0)
        assert path.bounds.extent == (5.0, 5.0, 25.0, 5.0)
