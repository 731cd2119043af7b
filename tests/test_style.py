"""Test module for vecpath.style

The tests are run using pytest.
"""

import pytest

from vecpath.common import StrokeCap, StrokeJoin
from vecpath.style import PathStyle


class TestPathStyle:
    """Validation, comparison and dictionary conversion."""

    def test_defaults(self):
        style = PathStyle()
        assert style.stroke_color is None and style.fill_color is None
        assert style.stroke_join is StrokeJoin.MITER
        assert style.stroke_cap is StrokeCap.BUTT
        assert not style.has_dash

    @pytest.mark.parametrize(
        "kwargs",
        [{"stroke_width": -1.0}, {"miter_limit": 0.5}, {"dash_array": (5.0, -1.0)}],
    )
    def test_invalid_values(self, kwargs):
        """Negative widths and dashes and miter limits below 1 are rejected."""
        with pytest.raises(ValueError):
            PathStyle(**kwargs)

    def test_dash_array_is_tuple(self):
        """Lists are stored as tuples so the style stays hashable."""
        style = PathStyle(dash_array=[4, 2])
        assert style.dash_array == (4.0, 2.0)
        assert style.has_dash
        assert hash(style) == hash(PathStyle(dash_array=(4.0, 2.0)))
        assert not PathStyle(dash_array=(0.0, 0.0)).has_dash

    def test_stroke_geometry_differs(self):
        """Only width, join, cap, miter limit and stroke presence affect stroke bounds."""
        style = PathStyle(stroke_color="black")
        assert not style.stroke_geometry_differs(PathStyle(stroke_color="black", fill_color="red", opacity=0.3))
        assert style.stroke_geometry_differs(PathStyle(stroke_color="black", stroke_width=2.0))
        assert style.stroke_geometry_differs(PathStyle(stroke_color="black", stroke_cap=StrokeCap.ROUND))
        assert style.stroke_geometry_differs(PathStyle())

    def test_dict_round_trip(self):
        """to_dict and from_dict are inverse, enums are written by name."""
        style = PathStyle(stroke_color="blue", stroke_join=StrokeJoin.BEVEL, dash_array=(3.0, 1.0), opacity=0.8)
        data = style.to_dict()
        assert data["stroke_join"] == "bevel"
        assert PathStyle.from_dict(data) == style

    def test_from_partial_dict(self):
        """Missing keys get the defaults."""
        assert PathStyle.from_dict({"fill_color": "red"}) == PathStyle(fill_color="red")
