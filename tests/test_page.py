"""Test module for vecpath.page

The tests are run using pytest.
These tests ensure that paths end up in the SVG output with the right
path data, style attributes and layers.
"""

import gzip

from vecpath.common import StrokeJoin
from vecpath.page import SvgDrawingContext, SvgPage
from vecpath.path import Path
from vecpath.renderer import DrawParams
from vecpath.segment import Segment
from vecpath.style import PathStyle


def square(style=None) -> Path:
    return Path([(0, 0), (100, 0), (100, 100), (0, 100)], closed=True, style=style)


class TestSvgDrawingContext:
    """Path data and style attributes."""

    def test_path_data(self):
        """Commands are collected as SVG path data."""
        page = SvgPage(200, 100)
        ctx = page.context()
        ctx.move_to(0, 0)
        ctx.bezier_curve_to(1.5, 0, 3, 1, 3, 2.25)
        ctx.close_path()
        assert ctx.path_data == "M0 0 C1.5 0 3 1 3 2.25 Z"
        ctx.begin_path()
        ctx.rect(1, 2, 3, 4)
        assert ctx.path_data == "M1 2 h3 v4 h-3 Z"

    def test_stroke_attributes(self):
        """Stroking writes the current style as attributes."""
        page = SvgPage(200, 100)
        ctx = page.context()
        ctx.apply_style(PathStyle(stroke_color="#ff0000", stroke_width=2.5, stroke_join=StrokeJoin.ROUND, opacity=0.5))
        ctx.move_to(0, 0)
        ctx.line_to(10, 0)
        ctx.stroke()
        svg = page.tostring()
        assert 'd="M0 0 L10 0"' in svg
        assert 'stroke="#ff0000"' in svg
        assert 'stroke-width="2.5"' in svg
        assert 'stroke-linejoin="round"' in svg
        assert 'opacity="0.5"' in svg
        assert 'fill="none"' in svg

    def test_nothing_to_stroke(self):
        """Empty geometry adds no element."""
        page = SvgPage(200, 100)
        ctx = page.context()
        ctx.stroke()
        ctx.fill()
        assert "<path" not in page.tostring()

    def test_save_restore_style(self):
        """restore() brings back the style of the matching save()."""
        page = SvgPage(200, 100)
        ctx = SvgDrawingContext(page.drawing, page.main_layer)
        ctx.save()
        ctx.apply_style(PathStyle(fill_color="blue"))
        ctx.restore()
        ctx.rect(0, 0, 1, 1)
        ctx.fill()
        assert 'fill="#000000"' in page.tostring()


class TestSvgPage:
    """Drawing paths onto a page and saving it."""

    def test_draw_path(self):
        """A filled and stroked path gives two path elements."""
        page = SvgPage(200, 200)
        page.draw_path(square(PathStyle(stroke_color="black", fill_color="yellow")))
        svg = page.tostring()
        assert svg.count('d="M0 0 L100 0 L100 100 L0 100 L0 0 Z"') == 2
        assert svg.index('fill="yellow"') < svg.index('stroke="black"')

    def test_curved_path(self):
        """Curves are written as cubic commands."""
        page = SvgPage(200, 200)
        path = Path([Segment((0, 0), handle_out=(10, 0)), Segment((50, 50), handle_in=(0, -10))])
        path.style = PathStyle(stroke_color="black")
        page.draw_path(path)
        assert 'd="M0 0 C10 0 50 40 50 50"' in page.tostring()

    def test_debug_layer(self):
        """Debug output is only written on request."""
        page = SvgPage(200, 200)
        page.draw_path(square(PathStyle(fill_color="red")), add_to_debug_layer=True)
        assert 'fill="red"' not in page.tostring()
        assert 'fill="red"' in page.tostring(include_debug_layer=True)

    def test_clip(self):
        """Clipping adds a clip path and a group referring to it."""
        page = SvgPage(200, 200)
        ctx = page.context()
        square().draw(ctx, DrawParams(clip=True))
        square(PathStyle(fill_color="green")).draw(ctx)
        svg = page.tostring()
        assert "<clipPath" in svg
        assert 'clip-path="url(#clip' in svg
        assert svg.index("clip-path=") < svg.index('fill="green"')

    def test_selection(self):
        """Selection drawing uses the selection colour."""
        page = SvgPage(200, 200)
        page.draw_path(square(), DrawParams(selection=True))
        svg = page.tostring()
        assert 'stroke="#009dec"' in svg
        assert 'fill="#ffffff"' in svg

    def test_save_as(self, tmp_path):
        """Plain and compressed files contain the same document."""
        page = SvgPage(200, 200)
        page.draw_path(square(PathStyle(stroke_color="black")))
        plain = tmp_path / "page.svg"
        compressed = tmp_path / "page.svgz"
        page.save_as(str(plain), pretty=True)
        page.save_as(str(compressed), compressed=True)
        plain_text = plain.read_text(encoding="utf-8")
        compressed_text = gzip.decompress(compressed.read_bytes()).decode("utf-8")
        assert plain_text.startswith("<?xml")
        assert "L100 100" in plain_text
        assert "L100 100" in compressed_text

    def test_tostring_keeps_page_reusable(self):
        """Assembling for output does not change the page."""
        page = SvgPage(200, 200)
        page.draw_path(square(PathStyle(fill_color="red")))
        first = page.tostring()
        assert page.tostring() == first
