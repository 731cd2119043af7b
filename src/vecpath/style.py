"""Stroke and fill style of a path."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from vecpath.common import StrokeCap, StrokeJoin
from vecpath.consts import DEFAULT_MITER_LIMIT, DEFAULT_STROKE_WIDTH


@dataclass(frozen=True)
class PathStyle:
    """Style settings used for drawing a path and for its stroke bounds.

    Colours are passed through to the drawing backend unchanged (e.g. SVG
    colour strings); None means no stroke or no fill.

    Attributes:
        stroke_color: Colour of the outline, None for no stroke.
        stroke_width: Width of the outline.
        stroke_join: Shape at interior corners.
        stroke_cap: Shape at the ends of open paths.
        miter_limit: Maximum miter length relative to the stroke width.
        fill_color: Colour of the interior, None for no fill.
        dash_array: Alternating dash and gap lengths, empty for a solid stroke.
        dash_offset: Arc length offset at which the dash pattern starts.
        opacity: Overall opacity in [0, 1].
    """

    stroke_color: Optional[str] = None
    stroke_width: float = DEFAULT_STROKE_WIDTH
    stroke_join: StrokeJoin = StrokeJoin.MITER
    stroke_cap: StrokeCap = StrokeCap.BUTT
    miter_limit: float = DEFAULT_MITER_LIMIT
    fill_color: Optional[str] = None
    dash_array: Tuple[float, ...] = field(default_factory=tuple)
    dash_offset: float = 0.0
    opacity: float = 1.0

    # Fields the stroke bounds depend on
    STROKE_GEOMETRY_FIELDS = ("stroke_color", "stroke_width", "stroke_join", "stroke_cap", "miter_limit")

    def __post_init__(self):
        if self.stroke_width < 0:
            raise ValueError(f"stroke_width must not be negative, got {self.stroke_width}")
        if self.miter_limit < 1:
            raise ValueError(f"miter_limit must be at least 1, got {self.miter_limit}")
        if any(d < 0 for d in self.dash_array):
            raise ValueError("dash_array must not contain negative lengths")
        # Accept lists for convenience, store as tuple to stay hashable
        object.__setattr__(self, "dash_array", tuple(float(d) for d in self.dash_array))

    @property
    def has_dash(self) -> bool:
        return bool(self.dash_array) and sum(self.dash_array) > 0

    def stroke_geometry_differs(self, other: PathStyle) -> bool:
        """Return True if _other_ differs in a field affecting the stroke bounds."""
        return any(getattr(self, name) != getattr(other, name) for name in self.STROKE_GEOMETRY_FIELDS)

    def to_dict(self) -> dict:
        """Convert the style to a dictionary."""
        return {
            "stroke_color": self.stroke_color,
            "stroke_width": self.stroke_width,
            "stroke_join": self.stroke_join.name.lower(),
            "stroke_cap": self.stroke_cap.name.lower(),
            "miter_limit": self.miter_limit,
            "fill_color": self.fill_color,
            "dash_array": list(self.dash_array),
            "dash_offset": self.dash_offset,
            "opacity": self.opacity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PathStyle:
        """Create a PathStyle from a dictionary."""
        return cls(
            stroke_color=data.get("stroke_color"),
            stroke_width=data.get("stroke_width", DEFAULT_STROKE_WIDTH),
            stroke_join=StrokeJoin[data.get("stroke_join", "miter").upper()],
            stroke_cap=StrokeCap[data.get("stroke_cap", "butt").upper()],
            miter_limit=data.get("miter_limit", DEFAULT_MITER_LIMIT),
            fill_color=data.get("fill_color"),
            dash_array=tuple(data.get("dash_array", ())),
            dash_offset=data.get("dash_offset", 0.0),
            opacity=data.get("opacity", 1.0),
        )
