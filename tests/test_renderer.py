"""Test module for vecpath.renderer

The tests are run using pytest.
These tests record the calls a path makes on a drawing context and check
their order for the different drawing modes.
"""

import pytest

from vecpath.common import SelectionState
from vecpath.path import Path
from vecpath.renderer import SELECTION_STYLE, DrawParams, PathRenderer
from vecpath.segment import Segment
from vecpath.style import PathStyle


class RecordingContext:
    """Drawing context recording every call as (name, args)."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, tuple(float(a) if isinstance(a, (int, float)) else a for a in args)))

        return record

    def names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def square():
    return Path([(0, 0), (100, 0), (100, 100), (0, 100)], closed=True)


class TestDrawSegments:
    """Geometry emission."""

    def test_closed_polygon(self, square):
        """Closed paths return to the first point before closing."""
        ctx = RecordingContext()
        PathRenderer.draw_segments(ctx, square.segments, True)
        assert ctx.calls == [
            ("move_to", (0.0, 0.0)),
            ("line_to", (100.0, 0.0)),
            ("line_to", (100.0, 100.0)),
            ("line_to", (0.0, 100.0)),
            ("line_to", (0.0, 0.0)),
            ("close_path", ()),
        ]

    def test_curves_use_absolute_handles(self):
        """A curve is emitted with absolute control points."""
        ctx = RecordingContext()
        segments = [Segment((0, 0), handle_out=(10, 0)), Segment((50, 50), handle_in=(0, -10))]
        PathRenderer.draw_segments(ctx, segments, False)
        assert ctx.calls == [("move_to", (0.0, 0.0)), ("bezier_curve_to", (10.0, 0.0, 50.0, 40.0, 50.0, 50.0))]

    def test_single_closed_segment(self):
        """A single segment is just a move, even when closed."""
        ctx = RecordingContext()
        PathRenderer.draw_segments(ctx, [Segment((1, 1))], True)
        assert ctx.names() == ["move_to"]


class TestDraw:
    """Drawing modes."""

    def test_fill_before_stroke(self, square):
        """A styled path is filled, then stroked, inside save and restore."""
        square.style = PathStyle(stroke_color="black", fill_color="red")
        ctx = RecordingContext()
        square.draw(ctx)
        names = ctx.names()
        assert names[0] == "begin_path"
        assert names[-5:] == ["save", "apply_style", "fill", "stroke", "restore"]
        assert ctx.calls[-4] == ("apply_style", (square.style,))

    def test_no_style_draws_nothing(self, square):
        """Without fill and stroke only the path is begun."""
        ctx = RecordingContext()
        square.draw(ctx)
        assert ctx.names() == ["begin_path"]

    def test_compound(self, square):
        """Compound drawing only emits geometry and does not begin a path."""
        square.style = PathStyle(stroke_color="black")
        ctx = RecordingContext()
        square.draw(ctx, DrawParams(compound=True))
        assert ctx.names() == ["move_to", "line_to", "line_to", "line_to", "line_to", "close_path"]

    def test_clip(self, square):
        """Clipping uses the geometry regardless of the style."""
        ctx = RecordingContext()
        square.draw(ctx, DrawParams(clip=True))
        assert ctx.names()[-2:] == ["close_path", "clip"]
        assert "stroke" not in ctx.names()

    def test_dashes(self, square):
        """A dashed stroke is drawn as one sub-path per dash."""
        square.style = PathStyle(stroke_color="black", dash_array=(100.0, 50.0))
        ctx = RecordingContext()
        square.draw(ctx)
        moves = [args for name, args in ctx.calls if name == "move_to"]
        assert moves == [(0.0, 0.0), pytest.approx((100.0, 50.0)), pytest.approx((0.0, 100.0))]
        assert ctx.names()[-2:] == ["stroke", "restore"]
        assert "fill" not in ctx.names()

    def test_dash_offset(self):
        """The dash offset shifts where the first dash starts."""
        path = Path([(0, 0), (100, 0)], style=PathStyle(stroke_color="black", dash_array=(10.0,), dash_offset=5.0))
        ctx = RecordingContext()
        path.draw(ctx)
        moves = [args for name, args in ctx.calls if name == "move_to"]
        assert moves[0] == pytest.approx((5.0, 0.0))
        assert len(moves) == 5


class TestSelectionDrawing:
    """Selection outline, anchors and handles."""

    def test_selection_outline_and_anchors(self):
        """The outline is stroked in the selection style, every anchor gets a square."""
        path = Path([(0, 0), (100, 0), (100, 100)])
        ctx = RecordingContext()
        path.draw(ctx, DrawParams(selection=True))
        assert ("apply_style", (SELECTION_STYLE,)) in ctx.calls
        assert ctx.names().count("rect") == 6
        assert ctx.names()[-1] == "restore"

    def test_selected_handles_are_drawn(self):
        """Handles of selected segments get a line and a square."""
        path = Path([Segment((0, 0), handle_out=(20, 0)), Segment((100, 0), handle_in=(-20, 10))])
        path.segments[0].selected = True
        path.segments[1].set_selected(SelectionState.HANDLE_IN, True)
        ctx = RecordingContext()
        PathRenderer.draw_handles(ctx, path.segments)
        lines = [args for name, args in ctx.calls if name == "line_to"]
        assert lines == [(20.0, 0.0), (80.0, 10.0)]
        # Two handle squares, two anchors, one of them hollow
        assert ctx.names().count("rect") == 5
