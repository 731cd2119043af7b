"""SVG page and drawing context backed by svgwrite."""

from __future__ import annotations

import copy
import gzip
import io
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

import svgwrite
import svgwrite.base
import svgwrite.container
import svgwrite.elementfactory
from svgwrite.extensions import Inkscape

from vecpath.common import StrokeCap, StrokeJoin
from vecpath.renderer import DrawParams
from vecpath.style import PathStyle

if TYPE_CHECKING:
    from vecpath.path import Path

logger = logging.getLogger(__name__)


###############################################################################
# SvgDrawingContext
###############################################################################


@dataclass(frozen=True)
class _GraphicsState:
    """Current style and target container of an SvgDrawingContext."""

    target: svgwrite.container.Group
    fill: str = "#000000"
    stroke: str = "#000000"
    stroke_width: float = 1.0
    stroke_join: StrokeJoin = StrokeJoin.MITER
    stroke_cap: StrokeCap = StrokeCap.BUTT
    miter_limit: float = 10.0
    opacity: float = 1.0


class SvgDrawingContext:
    """
    Drawing context writing svgwrite path elements.

    Geometry calls collect SVG path data. stroke() and fill() add one path
    element with the current style to the current target group. clip() turns
    the collected geometry into a clipPath and makes a group clipped by it the
    target until the matching restore().
    """

    def __init__(self, drawing: svgwrite.Drawing, target: svgwrite.container.Group):
        self._drawing = drawing
        self._data: List[str] = []
        self._state = _GraphicsState(target)
        self._stack: List[_GraphicsState] = []
        self._clip_count = 0

    @staticmethod
    def _fmt(value: float) -> str:
        return f"{float(value):.10g}"

    def _add_command(self, command: str, *values: float) -> None:
        self._data.append(command + " ".join(self._fmt(v) for v in values))

    @property
    def path_data(self) -> str:
        """str: The SVG path data collected since the last begin_path()."""
        return " ".join(self._data)

    def begin_path(self) -> None:
        self._data = []

    def move_to(self, x: float, y: float) -> None:
        self._add_command("M", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._add_command("L", x, y)

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float) -> None:
        self._add_command("C", cp1x, cp1y, cp2x, cp2y, x, y)

    def close_path(self) -> None:
        self._data.append("Z")

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self._add_command("M", x, y)
        self._add_command("h", width)
        self._add_command("v", height)
        self._add_command("h", -width)
        self._data.append("Z")

    def stroke(self) -> None:
        if not self._data:
            return
        state = self._state
        element = self._drawing.path(
            d=self.path_data,
            fill="none",
            stroke=state.stroke,
            stroke_width=state.stroke_width,
            stroke_linejoin=state.stroke_join.name.lower(),
            stroke_linecap=state.stroke_cap.name.lower(),
            stroke_miterlimit=state.miter_limit,
        )
        if state.opacity != 1.0:
            element["opacity"] = state.opacity
        state.target.add(element)

    def fill(self) -> None:
        if not self._data:
            return
        state = self._state
        element = self._drawing.path(d=self.path_data, fill=state.fill, stroke="none")
        if state.opacity != 1.0:
            element["opacity"] = state.opacity
        state.target.add(element)

    def clip(self) -> None:
        self._clip_count += 1
        clip_id = f"clip{id(self):x}-{self._clip_count}"
        clip_path = self._drawing.defs.add(self._drawing.clipPath(id=clip_id))
        # An empty clip path hides everything
        if self._data:
            clip_path.add(self._drawing.path(d=self.path_data))
        group = self._state.target.add(self._drawing.g(clip_path=f"url(#{clip_id})"))
        self._state = replace(self._state, target=group)

    def save(self) -> None:
        self._stack.append(self._state)

    def restore(self) -> None:
        if self._stack:
            self._state = self._stack.pop()

    def apply_style(self, style: PathStyle) -> None:
        state = self._state
        self._state = replace(
            state,
            fill=style.fill_color if style.fill_color is not None else state.fill,
            stroke=style.stroke_color if style.stroke_color is not None else state.stroke,
            stroke_width=style.stroke_width,
            stroke_join=style.stroke_join,
            stroke_cap=style.stroke_cap,
            miter_limit=style.miter_limit,
            opacity=style.opacity,
        )


###############################################################################
# SvgPage
###############################################################################


class SvgPage:
    """A page (canvas) described by SVG with a viewbox to draw inside.

    The viewbox uses the coordinate system of the paths: x to the right and
    y downwards. Contains groups/layers:
        - root       -- (group) holds the layers
            - main   -- editable->locked=False  --  hidden->display="block"
            - debug  -- editable->locked=False  --  hidden->display="none"
    """

    def __init__(
        self,
        width: float,
        height: float,
        viewbox: Optional[Tuple[float, float, float, float]] = None,
        unit: str = "px",
    ):
        """
        Initialize the SVG page.

        Args:
            width (float): The width of the page in _unit_.
            height (float): The height of the page in _unit_.
            viewbox (Tuple[float, float, float, float], optional): (x, y, width, height) of the
                visible area in path coordinates. Defaults to (0, 0, width, height).
            unit (str, optional): Unit of the page size. Defaults to "px".
        """
        vb_x, vb_y, vb_width, vb_height = viewbox if viewbox is not None else (0.0, 0.0, width, height)

        # profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{width}{unit}", f"{height}{unit}"),
            viewBox=f"{vb_x} {vb_y} {vb_width} {vb_height}",
            profile="full",
        )
        self.root_group = self.drawing.g(id="root")

        # Initialize Inkscape extension for layer support
        self._inkscape = Inkscape(self.drawing)
        self.main_layer = self._inkscape.layer(label="main", locked=False)
        self.debug_layer = self._inkscape.layer(label="debug", locked=False, display="none")

    def add(
        self,
        element: Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder],
        add_to_debug_layer: bool = False,
    ) -> Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder]:
        """Add a SVG element as subelement either to main or debug layer.

        Args:
            element (svgwrite.base.BaseElement): append this SVG element
            add_to_debug_layer (bool, optional): True if element should be added to debug layer. Defaults to False.

        Returns:
            svgwrite.base.BaseElement: the added element
        """
        if add_to_debug_layer:
            return self.debug_layer.add(element)
        return self.main_layer.add(element)

    def context(self, add_to_debug_layer: bool = False) -> SvgDrawingContext:
        """Return a drawing context emitting into the main or debug layer."""
        return SvgDrawingContext(self.drawing, self.debug_layer if add_to_debug_layer else self.main_layer)

    def draw_path(self, path: Path, params: Optional[DrawParams] = None, add_to_debug_layer: bool = False) -> None:
        """Draw _path_ into the main or debug layer."""
        path.draw(self.context(add_to_debug_layer), params)

    def _assembled_copy(self, include_debug_layer: bool) -> svgwrite.Drawing:
        return self.assemble_tree(
            copy.deepcopy(self.drawing),
            copy.deepcopy(self.root_group),
            copy.deepcopy(self.main_layer),
            copy.deepcopy(self.debug_layer),
            include_debug_layer,
        )

    def tostring(self, include_debug_layer: bool = False) -> str:
        """Return the SVG document as string."""
        return self._assembled_copy(include_debug_layer).tostring()

    def save_as(
        self,
        filename: str,
        include_debug_layer: bool = False,
        pretty: bool = False,
        indent: int = 2,
        compressed: bool = False,
    ):
        """Save as SVG file

        Args:
            filename (str): path and filename
            include_debug_layer (bool, optional): True if file should contain debug_layer. Defaults to False.
            pretty (bool, optional): True for easy readable output. Defaults to False.
            indent (int, optional): Indention if pretty is enabled. Defaults to 2 spaces.
            compressed (bool, optional): Save as compressed svgz-file. Defaults to False.
        """
        drawing_for_save = self._assembled_copy(include_debug_layer)

        # setup IO:
        svg_buffer = io.StringIO()
        drawing_for_save.write(svg_buffer, pretty=pretty, indent=indent)
        output_data = svg_buffer.getvalue().encode("utf-8")
        if compressed:
            output_data = gzip.compress(output_data)

        # save file:
        with open(filename, "wb") as svg_file:
            svg_file.write(output_data)
        logger.debug("Saved %d bytes to %s", len(output_data), filename)

    @classmethod
    def assemble_tree(
        cls,
        drawing: svgwrite.Drawing,
        root_group: svgwrite.container.Group,
        main_layer: svgwrite.container.Group,
        debug_layer: Optional[svgwrite.container.Group] = None,
        include_debug_layer: bool = False,
    ) -> svgwrite.Drawing:
        """Assemble a tree out of the given SVG elements.

        Args:
            drawing (svgwrite.Drawing): The main SVG drawing element.
            root_group (svgwrite.container.Group): The root group of the drawing.
            main_layer (svgwrite.container.Group): The main layer of the drawing.
            debug_layer (svgwrite.container.Group): The debug layer of the drawing.
            include_debug_layer (bool, optional): Include the debug layer in the tree. Defaults to False.

        Returns:
            svgwrite.Drawing: The given drawing with assembled SVG drawing elements.
        """
        drawing.add(root_group)
        if include_debug_layer and debug_layer is not None:
            root_group.add(debug_layer)
        root_group.add(main_layer)
        return drawing
