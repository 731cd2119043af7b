"""Rendering traversal of paths onto an abstract drawing context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Sequence

from vecpath.common import SelectionState
from vecpath.path_polygonizer import PathFlattener
from vecpath.style import PathStyle

if TYPE_CHECKING:
    from vecpath.path import Path
    from vecpath.segment import Segment

# Outline and handle style used when drawing the selection of a path
SELECTION_STYLE = PathStyle(stroke_color="#009dec", fill_color="#009dec", stroke_width=1.0)
SELECTION_INNER_STYLE = PathStyle(fill_color="#ffffff")
ANCHOR_SIZE: float = 4.0
HANDLE_SIZE: float = 3.5


class DrawingContext(Protocol):
    """Drawing backend in the style of a 2D canvas context.

    Geometry calls add to the current path; stroke(), fill() and clip()
    consume it with the current style.
    """

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...

    def clip(self) -> None: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def apply_style(self, style: PathStyle) -> None: ...


@dataclass(frozen=True)
class DrawParams:
    """Drawing mode.

    Attributes:
        compound: Only emit geometry, the caller fills or strokes several paths together.
        selection: Draw the selection outline with anchors and handles instead of the style.
        clip: Use the geometry as clip region.
    """

    compound: bool = False
    selection: bool = False
    clip: bool = False


class PathRenderer:
    """Emits paths to a DrawingContext."""

    @staticmethod
    def draw_segments(ctx: DrawingContext, segments: Sequence[Segment], closed: bool) -> None:
        """
        Emit the geometry of the segments.

        A straight line is used between two segments whose adjoining handles
        are both zero, a cubic Bezier curve otherwise.
        """
        count = len(segments)
        handle_out = None
        out_x = out_y = 0.0

        def draw_segment(segment: Segment) -> None:
            nonlocal handle_out, out_x, out_y
            point = segment.point
            handle_in = segment.handle_in
            if handle_out is None:
                ctx.move_to(point.x, point.y)
            elif handle_in.is_zero() and handle_out.is_zero():
                ctx.line_to(point.x, point.y)
            else:
                ctx.bezier_curve_to(out_x, out_y, point.x + handle_in.x, point.y + handle_in.y, point.x, point.y)
            handle_out = segment.handle_out
            out_x = point.x + handle_out.x
            out_y = point.y + handle_out.y

        for segment in segments:
            draw_segment(segment)
        if closed and count > 1:
            draw_segment(segments[0])
            ctx.close_path()

    @staticmethod
    def draw_handles(ctx: DrawingContext, segments: Sequence[Segment]) -> None:
        """Draw anchor squares and the non-zero handles of selected parts."""
        for segment in segments:
            point = segment.point
            point_selected = segment.selection_state == SelectionState.POINT
            for part, handle in (
                (SelectionState.HANDLE_IN, segment.handle_in),
                (SelectionState.HANDLE_OUT, segment.handle_out),
            ):
                if (point_selected or segment.is_selected(part)) and not handle.is_zero():
                    end_x = point.x + handle.x
                    end_y = point.y + handle.y
                    ctx.begin_path()
                    ctx.move_to(point.x, point.y)
                    ctx.line_to(end_x, end_y)
                    ctx.stroke()
                    ctx.begin_path()
                    ctx.rect(end_x - HANDLE_SIZE / 2, end_y - HANDLE_SIZE / 2, HANDLE_SIZE, HANDLE_SIZE)
                    ctx.fill()
            ctx.begin_path()
            ctx.rect(point.x - ANCHOR_SIZE / 2, point.y - ANCHOR_SIZE / 2, ANCHOR_SIZE, ANCHOR_SIZE)
            ctx.fill()
            if not point_selected:
                # Unselected anchors are hollow
                ctx.save()
                ctx.apply_style(SELECTION_INNER_STYLE)
                ctx.begin_path()
                ctx.rect(point.x - ANCHOR_SIZE / 4, point.y - ANCHOR_SIZE / 4, ANCHOR_SIZE / 2, ANCHOR_SIZE / 2)
                ctx.fill()
                ctx.restore()

    @staticmethod
    def draw_dashes(ctx: DrawingContext, path: Path, dash_array: Sequence[float], dash_offset: float) -> None:
        """Emit the dashes of the path as separate sub-paths."""
        flattener = PathFlattener(path)
        start = dash_offset
        i = 0
        while start < flattener.length:
            end = start + dash_array[i % len(dash_array)]
            i += 1
            flattener.draw_part(ctx, start, end)
            start = end + dash_array[i % len(dash_array)]
            i += 1

    @classmethod
    def draw(cls, path: Path, ctx: DrawingContext, params: DrawParams) -> None:
        """
        Draw _path_ according to _params_ and the style of the path.

        Fill is drawn before stroke. Dashed strokes are drawn from the
        flattened path instead of the segment geometry.
        """
        if not params.compound:
            ctx.begin_path()
        style = path.style
        has_dash = style.has_dash

        direct_stroke = style.stroke_color and not has_dash
        if params.compound or params.selection or params.clip or style.fill_color or direct_stroke:
            cls.draw_segments(ctx, path.segments, path.closed)

        if params.selection:
            ctx.save()
            ctx.apply_style(SELECTION_STYLE)
            ctx.stroke()
            cls.draw_handles(ctx, path.segments)
            ctx.restore()
        elif params.clip:
            ctx.clip()
        elif not params.compound and (style.fill_color or style.stroke_color):
            ctx.save()
            ctx.apply_style(style)
            if style.fill_color:
                ctx.fill()
            if style.stroke_color:
                if has_dash:
                    ctx.begin_path()
                    cls.draw_dashes(ctx, path, style.dash_array, style.dash_offset)
                ctx.stroke()
            ctx.restore()
